"""Command-line entry point.

Run directly:
    raplmon
    python -m raplmon

Stop with Ctrl-C; the final max/min/average summary is printed on exit.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from raplmon import __version__
from raplmon.config import AppConfig, get_settings
from raplmon.errors import ConfigurationError, RaplmonError
from raplmon.monitor import LoopController, ShutdownFlag, install_interrupt_handler
from raplmon.sensors import PowercapSource, discover
from raplmon.telemetry import configure_logging
from raplmon.ui.report import Reporter

console = Console(highlight=False)
err_console = Console(stderr=True)
app = typer.Typer(
    help="Monitor RAPL energy counters and report power until interrupted.",
    add_completion=False,
)


def _load_settings() -> AppConfig:
    try:
        return get_settings()
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            problems.append(f"{field_path}: {error['msg']}")
        raise ConfigurationError(problems) from e


def run_monitor(
    config: AppConfig | None = None,
    out: Console | None = None,
    shutdown: ShutdownFlag | None = None,
) -> int:
    """Discover sensors and run the monitor loop.

    The interrupt handler is installed before settings are loaded. A Ctrl-C
    that arrives before the loop starts is honoured after the warm-up pass.

    Args:
        config: Settings to use; defaults to the settings singleton.
        out: Console for the power report; defaults to stdout.
        shutdown: Shutdown flag; a fresh one is created if omitted.

    Returns:
        Process exit code: 0 after a graceful shutdown, the error's code otherwise.
    """
    shutdown = shutdown or ShutdownFlag()
    restore_handlers = install_interrupt_handler(shutdown)

    try:
        config = config or _load_settings()
        configure_logging(
            log_level=config.log_level,
            log_format=config.log_format,
            log_dir=config.log_dir,
            log_file_enabled=config.log_file_enabled,
        )
        with PowercapSource(config.powercap_root, config.read_timeout_seconds) as source:
            registry = discover(source, config.sensor_prefix)
            controller = LoopController(
                registry, source, Reporter(registry, out or console), shutdown
            )
            controller.run()
    except RaplmonError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return e.exit_code
    finally:
        restore_handlers()

    return 0


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"raplmon {__version__}")
        raise typer.Exit()


@app.command()
def monitor(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Sample every second and print per-sensor power; Ctrl-C prints the summary."""
    raise typer.Exit(run_monitor())


if __name__ == "__main__":
    app()

"""Structured logging configuration using structlog.

This module configures structlog for structured logging with:
- Pretty-printed (or JSON) console output on stderr
- Optional JSON-lines file output with rotation
- UTC timestamps
- Component and event tracking
"""

import logging
import logging.handlers
import pathlib
import sys
from datetime import datetime, timezone
from typing import Any

import structlog


def _get_log_level() -> str:
    """Get log level from the environment.

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    # Bootstrap from environment to avoid circular imports during startup.
    # The CLI reconfigures from validated settings once they are loaded.
    from raplmon.config.bootstrap import get_bootstrap_log_level  # noqa: PLC0415

    return get_bootstrap_log_level()


def _get_log_format() -> str:
    """Get console log format from the environment.

    Returns:
        Log format string ("console" or "json").
    """
    from raplmon.config.bootstrap import get_bootstrap_log_format  # noqa: PLC0415

    return get_bootstrap_log_format()


def _add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add UTC timestamp to log event.

    Args:
        logger: The logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with timestamp added.
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_component(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name to a foreign (stdlib) log event.

    Args:
        logger: The logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with component added.
    """
    # Guard against None logger (can happen with third-party libraries during shutdown)
    if logger is None or not hasattr(logger, "name"):
        event_dict["component"] = "unknown"
        return event_dict

    event_dict["component"] = logger.name.split(".")[-1]
    return event_dict


def _add_component_from_event_dict(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name to log event from event_dict logger name.

    Works with structlog's event_dict, which contains the logger name
    after the add_logger_name processor runs.

    Args:
        logger: The structlog logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with component added.
    """
    logger_name = event_dict.get("logger", "")

    # raplmon.sensors.sampler -> sampler
    if "." in logger_name:
        component = logger_name.split(".")[-1]
    else:
        component = logger_name or "unknown"

    event_dict["component"] = component
    return event_dict


def _foreign_pre_chain() -> list[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        _add_component,
    ]


def _configure_file_handler(log_dir: pathlib.Path) -> logging.handlers.RotatingFileHandler:
    """Configure rotating file handler for JSON logs.

    Args:
        log_dir: Directory for log files.

    Returns:
        Configured RotatingFileHandler.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "current.jsonl"
    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_file),
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_foreign_pre_chain(),
        )
    )

    return handler


def _configure_console_handler(log_format: str) -> logging.StreamHandler[Any]:
    """Configure console handler on stderr.

    stdout is reserved for the power report, so log lines never interleave
    with it when the report is piped.

    Args:
        log_format: "console" for pretty output, "json" for JSON lines.

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler(sys.stderr)

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_foreign_pre_chain(),
        )
    )

    return handler


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
    log_dir: pathlib.Path | None = None,
    log_file_enabled: bool = False,
) -> None:
    """Configure structlog for structured logging.

    Safe to call more than once: root handlers are replaced on every call.
    Values left as None are bootstrapped from the environment.

    Args:
        log_level: Console log level.
        log_format: Console rendering, "console" or "json".
        log_dir: Directory for the JSON-lines log file.
        log_file_enabled: Whether to write the JSON-lines log file.
    """
    level_name = log_level or _get_log_level()
    console_format = log_format or _get_log_format()

    # Root logger accepts all levels; individual handlers gate output.
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    configured_level = getattr(logging, level_name, logging.INFO)

    console_handler = _configure_console_handler(console_format)
    console_handler.setLevel(configured_level)
    root_logger.addHandler(console_handler)

    if log_file_enabled and log_dir is not None:
        # File handler captures DEBUG+ so discovery details are kept on disk
        file_handler = _configure_file_handler(log_dir)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component_from_event_dict,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured structlog logger instance.

    Example:
        >>> from raplmon.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("sensor_reading", sensor_id="intel-rapl:0", power_w=12.5)
    """
    # Ensure logging is configured (idempotent)
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)

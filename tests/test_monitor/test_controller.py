"""Tests for the loop controller state machine."""

import errno
from pathlib import Path

import pytest

from raplmon.errors import ResourceReadError
from raplmon.monitor.aggregator import SensorSummary
from raplmon.monitor.controller import LoopController, MonitorState, MonitorStateError
from raplmon.monitor.shutdown import ShutdownFlag
from raplmon.sensors.discovery import discover
from raplmon.sensors.registry import Sensor


class RecordingReporter:
    """Reporter that keeps what it was asked to render."""

    def __init__(self) -> None:
        self.cycles: list[dict[str, float | None]] = []
        self.separators = 0
        self.summaries: list[SensorSummary] | None = None

    def readings(self, sensors: list[Sensor]) -> None:
        self.cycles.append({sensor.id: sensor.current_power for sensor in sensors})

    def separator(self) -> None:
        self.separators += 1

    def summary(self, summaries: list[SensorSummary]) -> None:
        self.summaries = summaries


def _controller(source, shutdown: ShutdownFlag) -> tuple[LoopController, RecordingReporter]:
    reporter = RecordingReporter()
    controller = LoopController(
        discover(source), source, reporter, shutdown=shutdown, period_seconds=0.0
    )
    return controller, reporter


def test_end_to_end_two_sensors(scripted_source) -> None:
    """Test the documented two-sensor scenario, interrupted after cycle 3."""
    shutdown = ShutdownFlag()

    def interrupt_on_last_read(entry: str, index: int) -> None:
        if entry == "B" and index == 2:
            shutdown.request()

    source = scripted_source(
        {
            "intel-rapl:A": (b"A\n", [1_000_000, 3_000_000, 6_000_000]),
            "intel-rapl:B": (b"B\n", [500_000, 500_000, 2_000_000]),
        },
        on_read=lambda entry, index: interrupt_on_last_read(entry[-1], index),
    )
    controller, reporter = _controller(source, shutdown)

    summaries = controller.run()

    # Cycle 1 is the baseline and reports nothing
    assert reporter.cycles == [
        {"intel-rapl:A": 2.0, "intel-rapl:B": 0.0},
        {"intel-rapl:A": 3.0, "intel-rapl:B": 1.5},
    ]
    assert reporter.separators == 2
    assert controller.stats.valid_sample_count == 2

    by_id = {item.sensor_id: item for item in summaries}
    assert by_id["intel-rapl:A"].max_power == pytest.approx(3.0)
    assert by_id["intel-rapl:A"].min_power == pytest.approx(2.0)
    assert by_id["intel-rapl:A"].average_power == pytest.approx(2.5)
    assert by_id["intel-rapl:B"].max_power == pytest.approx(1.5)
    assert by_id["intel-rapl:B"].min_power == pytest.approx(0.0)
    assert by_id["intel-rapl:B"].average_power == pytest.approx(0.75)
    assert reporter.summaries == summaries
    assert controller.state is MonitorState.TERMINATED


@pytest.mark.parametrize("interrupt_cycle", [1, 2, 5])
def test_graceful_drain_counts_whole_cycles(scripted_source, interrupt_cycle: int) -> None:
    """Test an interrupt mid-cycle N yields exactly N completed cycles."""
    shutdown = ShutdownFlag()
    counters = [i * 1_000_000 for i in range(20)]

    def interrupt_mid_cycle(entry: str, index: int) -> None:
        # Read index 0 is the warm-up; index N belongs to running cycle N.
        # Interrupt while reading the first of the two sensors.
        if entry == "intel-rapl:0" and index == interrupt_cycle:
            shutdown.request()

    source = scripted_source(
        {
            "intel-rapl:0": (b"package-0\n", counters),
            "intel-rapl:1": (b"core\n", counters),
        },
        on_read=interrupt_mid_cycle,
    )
    controller, reporter = _controller(source, shutdown)

    summaries = controller.run()

    assert controller.stats.cycle_count == interrupt_cycle
    assert controller.stats.valid_sample_count == interrupt_cycle
    assert len(reporter.cycles) == interrupt_cycle
    # The in-flight cycle finished: the second sensor was read too
    assert source.reads == {"intel-rapl:0": interrupt_cycle + 1, "intel-rapl:1": interrupt_cycle + 1}
    assert all(item.sample_count == interrupt_cycle for item in summaries)
    assert all(item.average_power == pytest.approx(1.0) for item in summaries)


def test_interrupt_during_warmup(scripted_source) -> None:
    """Test an interrupt before the first delta drains with no statistics."""
    shutdown = ShutdownFlag()
    source = scripted_source(
        {"intel-rapl:0": (b"package-0\n", [1_000_000])},
        on_read=lambda entry, index: shutdown.request(),
    )
    controller, reporter = _controller(source, shutdown)

    summaries = controller.run()

    assert reporter.cycles == []
    assert controller.stats.cycle_count == 0
    assert summaries[0].average_power is None
    assert summaries[0].max_power is None
    assert [t["to_state"] for t in controller.get_transition_history()] == [
        "DRAINING",
        "TERMINATED",
    ]


def test_state_transitions(scripted_source) -> None:
    """Test the full WARMUP -> RUNNING -> DRAINING -> TERMINATED path."""
    shutdown = ShutdownFlag()
    source = scripted_source(
        {"intel-rapl:0": (b"package-0\n", [0, 1_000_000])},
        on_read=lambda entry, index: shutdown.request() if index == 1 else None,
    )
    controller, _ = _controller(source, shutdown)
    assert controller.state is MonitorState.WARMUP

    controller.run()

    history = controller.get_transition_history()
    assert [(t["from_state"], t["to_state"]) for t in history] == [
        ("WARMUP", "RUNNING"),
        ("RUNNING", "DRAINING"),
        ("DRAINING", "TERMINATED"),
    ]
    assert history[1]["completed_cycles"] == 1


def test_regression_is_not_folded(scripted_source) -> None:
    """Test a counter reset is skipped and does not corrupt statistics."""
    shutdown = ShutdownFlag()
    source = scripted_source(
        {"intel-rapl:0": (b"package-0\n", [10_000_000, 12_000_000, 1_000_000, 4_000_000])},
        on_read=lambda entry, index: shutdown.request() if index == 3 else None,
    )
    controller, reporter = _controller(source, shutdown)

    summaries = controller.run()

    assert reporter.cycles == [{"intel-rapl:0": 2.0}, {}, {"intel-rapl:0": 3.0}]
    assert controller.stats.cycle_count == 3
    assert controller.stats.valid_sample_count == 2
    assert summaries[0].min_power == 2.0
    assert summaries[0].max_power == 3.0
    assert summaries[0].average_power == pytest.approx(2.5)
    assert summaries[0].regression_count == 1


def test_read_failure_is_fatal(scripted_source) -> None:
    """Test a read failure terminates the controller without a summary."""
    shutdown = ShutdownFlag()

    def fail_on_second_cycle(entry: str, index: int) -> None:
        if index == 2:
            raise ResourceReadError(f"/fake/{entry}/energy_uj", "read", "I/O error", errno.EIO)

    source = scripted_source(
        {"intel-rapl:0": (b"package-0\n", [0, 1_000_000, 2_000_000])},
        on_read=fail_on_second_cycle,
    )
    controller, reporter = _controller(source, shutdown)

    with pytest.raises(ResourceReadError) as exc_info:
        controller.run()

    assert exc_info.value.exit_code == errno.EIO
    assert controller.state is MonitorState.TERMINATED
    assert reporter.summaries is None
    # Only the first running cycle was reported; the failing one left nothing behind
    assert reporter.cycles == [{"intel-rapl:0": 1.0}]


def test_run_cycle_requires_running_state(scripted_source) -> None:
    """Test sampling outside RUNNING is rejected."""
    source = scripted_source({"intel-rapl:0": (b"package-0\n", [0])})
    controller, _ = _controller(source, ShutdownFlag())

    with pytest.raises(MonitorStateError):
        controller.run_cycle()


def test_uses_registry_order(scripted_source) -> None:
    """Test sensors are sampled and reported in id order."""
    shutdown = ShutdownFlag()
    order: list[str] = []

    def record(entry: str, index: int) -> None:
        order.append(entry)
        if index == 1 and entry == "intel-rapl:2":
            shutdown.request()

    source = scripted_source(
        {
            "intel-rapl:2": (b"c\n", [0, 1]),
            "intel-rapl:0": (b"a\n", [0, 1]),
            "intel-rapl:1": (b"b\n", [0, 1]),
        },
        on_read=record,
    )
    controller, reporter = _controller(source, shutdown)
    controller.run()

    assert order == ["intel-rapl:0", "intel-rapl:1", "intel-rapl:2"] * 2
    assert list(reporter.cycles[0]) == ["intel-rapl:0", "intel-rapl:1", "intel-rapl:2"]

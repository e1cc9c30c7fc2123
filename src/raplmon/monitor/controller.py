"""Loop controller for the sample → report → sleep cycle.

State machine:

    WARMUP ──► RUNNING ──► DRAINING ──► TERMINATED
       │                      ▲
       └──────────────────────┘   (interrupt during warm-up)

Any fatal read error moves the controller straight to TERMINATED and
propagates to the caller.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol

from raplmon.errors import RaplmonError
from raplmon.monitor.aggregator import SensorSummary, SessionStats, fold, summarize
from raplmon.monitor.shutdown import ShutdownFlag
from raplmon.sensors.registry import Sensor, SensorRegistry
from raplmon.sensors.sampler import sample
from raplmon.sensors.source import SensorSource
from raplmon.telemetry import (
    CYCLE_COMPLETED,
    MONITOR_FATAL_ERROR,
    MONITOR_STATE_TRANSITION,
    MONITOR_SUMMARY,
    SENSOR_READING,
    SHUTDOWN_REQUESTED,
    get_logger,
)

log = get_logger(__name__)

# Counter deltas are converted to watts assuming exactly this period.
SAMPLE_PERIOD_SECONDS = 1.0


class MonitorState(str, Enum):
    """Loop controller states."""

    WARMUP = "WARMUP"
    RUNNING = "RUNNING"
    DRAINING = "DRAINING"
    TERMINATED = "TERMINATED"


ALLOWED_TRANSITIONS: dict[MonitorState, set[MonitorState]] = {
    MonitorState.WARMUP: {MonitorState.RUNNING, MonitorState.DRAINING, MonitorState.TERMINATED},
    MonitorState.RUNNING: {MonitorState.DRAINING, MonitorState.TERMINATED},
    MonitorState.DRAINING: {MonitorState.TERMINATED},
    MonitorState.TERMINATED: set(),
}


class MonitorStateError(RaplmonError):
    """Raised on a transition the state machine does not allow."""


class CycleReporter(Protocol):
    """Human-readable output surface driven by the controller."""

    def readings(self, sensors: list[Sensor]) -> None: ...

    def separator(self) -> None: ...

    def summary(self, summaries: list[SensorSummary]) -> None: ...


class LoopController:
    """Drives periodic sampling until a shutdown request arrives.

    Attributes:
        state: Current state.
        stats: Session counters (completed and valid cycles).

    Usage:
        controller = LoopController(registry, source, reporter, shutdown_flag)
        summaries = controller.run()
    """

    def __init__(
        self,
        registry: SensorRegistry,
        source: SensorSource,
        reporter: CycleReporter,
        shutdown: ShutdownFlag | None = None,
        period_seconds: float = SAMPLE_PERIOD_SECONDS,
    ) -> None:
        self.registry = registry
        self.source = source
        self.reporter = reporter
        self.shutdown = shutdown or ShutdownFlag()
        self.period_seconds = period_seconds
        self.state = MonitorState.WARMUP
        self.stats = SessionStats()
        self._transition_history: list[dict[str, Any]] = []

    def run(self) -> list[SensorSummary]:
        """Run warm-up, steady cycles and the final drain.

        Returns:
            Final per-sensor summaries, also handed to the reporter.

        Raises:
            RaplmonError: On any fatal read failure.
        """
        try:
            self._warmup()
            if not self._shutdown_observed():
                self._transition_to(MonitorState.RUNNING, "baseline established")
                while True:
                    self.run_cycle()
                    self.shutdown.wait(self.period_seconds)
                    if self._shutdown_observed():
                        break
            self._transition_to(MonitorState.DRAINING, "shutdown requested")
            return self._drain()
        except RaplmonError as e:
            log.error(
                MONITOR_FATAL_ERROR,
                state=self.state.value,
                error=str(e),
                error_type=type(e).__name__,
                exit_code=e.exit_code,
            )
            if self.state is not MonitorState.TERMINATED:
                self._transition_to(MonitorState.TERMINATED, "fatal error")
            raise

    def run_cycle(self) -> list[Sensor]:
        """Sample every sensor once, fold and report the results.

        Lines are rendered only after every sensor has been read, so a read
        failure never leaves a partially reported cycle behind.

        Returns:
            Sensors that produced a power value this cycle.
        """
        if self.state is not MonitorState.RUNNING:
            raise MonitorStateError(f"cannot sample in state {self.state.value}")

        reported: list[Sensor] = []
        for sensor in self.registry:
            power = sample(sensor, self.source)
            if power is None:
                continue
            fold(sensor, power)
            reported.append(sensor)

        for sensor in reported:
            log.info(
                SENSOR_READING,
                sensor_id=sensor.id,
                label=sensor.label,
                power_w=sensor.current_power,
            )

        self.reporter.readings(reported)
        self.reporter.separator()
        self.stats.complete_cycle(len(reported))
        log.debug(
            CYCLE_COMPLETED,
            cycle=self.stats.cycle_count,
            valid_cycles=self.stats.valid_sample_count,
            sensors_reported=len(reported),
        )
        return reported

    def get_transition_history(self) -> list[dict[str, Any]]:
        """Get history of state transitions."""
        return list(self._transition_history)

    def _warmup(self) -> None:
        for sensor in self.registry:
            sample(sensor, self.source)
        self.shutdown.wait(self.period_seconds)

    def _shutdown_observed(self) -> bool:
        if not self.shutdown.requested:
            return False
        log.info(
            SHUTDOWN_REQUESTED,
            signal=self.shutdown.signal_number,
            completed_cycles=self.stats.cycle_count,
        )
        return True

    def _drain(self) -> list[SensorSummary]:
        summaries = summarize(self.registry, self.stats)
        for item in summaries:
            log.info(
                MONITOR_SUMMARY,
                sensor_id=item.sensor_id,
                label=item.label,
                max_w=item.max_power,
                min_w=item.min_power,
                avg_w=item.average_power,
                annual_kwh=item.annual_kwh,
                samples=item.sample_count,
                regressions=item.regression_count,
            )
        self.reporter.summary(summaries)
        self._transition_to(MonitorState.TERMINATED, "summary emitted")
        return summaries

    def _transition_to(self, target: MonitorState, reason: str) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise MonitorStateError(
                f"transition {self.state.value} -> {target.value} not allowed"
            )

        previous = self.state
        self.state = target
        self._transition_history.append(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "from_state": previous.value,
                "to_state": target.value,
                "reason": reason,
                "completed_cycles": self.stats.cycle_count,
            }
        )
        log.info(
            MONITOR_STATE_TRANSITION,
            from_state=previous.value,
            to_state=target.value,
            reason=reason,
        )

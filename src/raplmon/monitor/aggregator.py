"""Running power statistics.

Folds valid power samples into each sensor's max/min/total and tracks the
session-wide count of cycles that produced samples, which is the divisor
for average power.
"""

from __future__ import annotations

from dataclasses import dataclass

from raplmon.sensors.registry import Sensor, SensorRegistry

HOURS_PER_YEAR = 365 * 24


@dataclass
class SessionStats:
    """Counters shared by every sensor in a monitoring session.

    Attributes:
        cycle_count: Completed sampling cycles after warm-up.
        valid_sample_count: Completed cycles that folded at least one sample.
    """

    cycle_count: int = 0
    valid_sample_count: int = 0

    def complete_cycle(self, folded: int) -> None:
        """Record a finished cycle that folded ``folded`` samples."""
        self.cycle_count += 1
        if folded > 0:
            self.valid_sample_count += 1


@dataclass(frozen=True)
class SensorSummary:
    """Final statistics for one sensor. Power values are in watts."""

    sensor_id: str
    label: str
    max_power: float | None
    min_power: float | None
    average_power: float | None
    annual_kwh: float | None
    sample_count: int
    regression_count: int


def fold(sensor: Sensor, power: float) -> None:
    """Fold one valid power sample into the sensor's running statistics."""
    sensor.max_power = max(sensor.max_power, power)
    sensor.min_power = min(sensor.min_power, power)
    sensor.total_power += power
    sensor.current_power = power
    sensor.sample_count += 1


def average(sensor: Sensor, stats: SessionStats) -> float | None:
    """Average power of a sensor, or None before any valid cycle.

    Sensors are sampled in lockstep, so the session's valid cycle count is
    the divisor. A sensor that skipped samples because its counter went
    backwards is averaged over its own sample count instead.
    """
    divisor = sensor.sample_count if sensor.regression_count else stats.valid_sample_count
    if divisor == 0:
        return None
    return sensor.total_power / divisor


def annual_kwh(average_power: float | None) -> float | None:
    """Energy in kWh a constant draw of ``average_power`` watts uses in a year."""
    if average_power is None:
        return None
    return average_power * HOURS_PER_YEAR / 1000


def summarize(registry: SensorRegistry, stats: SessionStats) -> list[SensorSummary]:
    """Snapshot final statistics for every sensor in registry order."""
    summaries = []
    for sensor in registry:
        avg = average(sensor, stats)
        summaries.append(
            SensorSummary(
                sensor_id=sensor.id,
                label=sensor.label,
                max_power=sensor.max_power if sensor.has_samples else None,
                min_power=sensor.min_power if sensor.has_samples else None,
                average_power=avg,
                annual_kwh=annual_kwh(avg),
                sample_count=sensor.sample_count,
                regression_count=sensor.regression_count,
            )
        )
    return summaries

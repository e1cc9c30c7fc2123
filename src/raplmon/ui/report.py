"""Aligned, line-oriented power report on stdout."""

from __future__ import annotations

from rich.console import Console

from raplmon.monitor.aggregator import SensorSummary
from raplmon.sensors.registry import Sensor, SensorRegistry

SEPARATOR = "-" * 32
NOT_AVAILABLE = "n/a"


def format_watts(value: float | None) -> str:
    return NOT_AVAILABLE if value is None else f"{value:.4f}"


def _width(values: list[str]) -> int:
    return max((len(value) for value in values), default=0)


class Reporter:
    """Renders per-cycle readings and the final summary.

    Id and label columns are padded to the widest discovered sensor; value
    columns are right-aligned to the widest value in the block being printed.
    """

    def __init__(self, registry: SensorRegistry, console: Console | None = None) -> None:
        self.id_width = registry.id_width
        self.label_width = registry.label_width
        self.console = console or Console(highlight=False)

    def _prefix(self, sensor_id: str, label: str) -> str:
        return f"{sensor_id:<{self.id_width}} => {label:<{self.label_width}}"

    def _emit(self, line: str) -> None:
        self.console.print(line, markup=False, highlight=False, soft_wrap=True)

    def readings(self, sensors: list[Sensor]) -> None:
        values = [format_watts(sensor.current_power) for sensor in sensors]
        width = _width(values)
        for sensor, value in zip(sensors, values):
            self._emit(f"{self._prefix(sensor.id, sensor.label)} = Power: {value:>{width}}w")

    def separator(self) -> None:
        self._emit(SEPARATOR)

    def summary(self, summaries: list[SensorSummary]) -> None:
        max_values = [format_watts(item.max_power) for item in summaries]
        min_values = [format_watts(item.min_power) for item in summaries]
        avg_values = [format_watts(item.average_power) for item in summaries]
        kwh_values = [format_watts(item.annual_kwh) for item in summaries]
        max_w, min_w, avg_w, kwh_w = (
            _width(max_values),
            _width(min_values),
            _width(avg_values),
            _width(kwh_values),
        )

        for index, item in enumerate(summaries):
            self._emit(
                f"{self._prefix(item.sensor_id, item.label)} = "
                f"Max: {max_values[index]:>{max_w}}w, "
                f"Min: {min_values[index]:>{min_w}}w, "
                f"Avg: {avg_values[index]:>{avg_w}}w, "
                f"Year: {kwh_values[index]:>{kwh_w}}kWh"
            )

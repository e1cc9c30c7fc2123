"""Sensor data model and the ordered sensor registry."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Sensor:
    """One monitored power domain and its mutable sampling state.

    Attributes:
        id: Zone entry name (e.g. "intel-rapl:0"); sort and display key.
        label: Domain label read once at discovery (e.g. "package-0").
        counter_source: Path of the cumulative energy counter file.
        last_counter: Last raw counter value in microjoules.
        has_baseline: True once one counter value has been observed.
        current_power: Most recent power in watts, None before the first delta.
        max_power: Running maximum; -inf until a sample is folded.
        min_power: Running minimum; +inf until a sample is folded.
        total_power: Running sum of folded samples.
        sample_count: Number of folded samples.
        regression_count: Number of counter decreases observed.
    """

    id: str
    label: str
    counter_source: Path
    last_counter: int = 0
    has_baseline: bool = False
    current_power: float | None = None
    max_power: float = -math.inf
    min_power: float = math.inf
    total_power: float = 0.0
    sample_count: int = 0
    regression_count: int = 0

    @property
    def has_samples(self) -> bool:
        return self.sample_count > 0


@dataclass
class SensorRegistry:
    """Sensors ordered by id, fixed once built.

    Build with :meth:`from_sensors`; the order never changes afterwards and
    sensors are neither added nor removed for the life of the process.
    """

    sensors: tuple[Sensor, ...] = field(default_factory=tuple)

    @classmethod
    def from_sensors(cls, sensors: Iterable[Sensor]) -> SensorRegistry:
        """Sort sensors by id and build the registry.

        Raises:
            ValueError: If two sensors share an id.
        """
        ordered = tuple(sorted(sensors, key=lambda sensor: sensor.id))
        ids = [sensor.id for sensor in ordered]
        duplicates = sorted({sensor_id for sensor_id in ids if ids.count(sensor_id) > 1})
        if duplicates:
            raise ValueError(f"duplicate sensor ids: {duplicates}")
        return cls(sensors=ordered)

    def __iter__(self) -> Iterator[Sensor]:
        return iter(self.sensors)

    def __len__(self) -> int:
        return len(self.sensors)

    def __getitem__(self, sensor_id: str) -> Sensor:
        for sensor in self.sensors:
            if sensor.id == sensor_id:
                return sensor
        raise KeyError(sensor_id)

    @property
    def ids(self) -> list[str]:
        return [sensor.id for sensor in self.sensors]

    @property
    def id_width(self) -> int:
        """Longest sensor id, for column alignment."""
        return max((len(sensor.id) for sensor in self.sensors), default=0)

    @property
    def label_width(self) -> int:
        """Longest sensor label, for column alignment."""
        return max((len(sensor.label) for sensor in self.sensors), default=0)

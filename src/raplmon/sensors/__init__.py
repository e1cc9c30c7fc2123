"""Sensor discovery and sampling.

Structure:
- source.py: file-backed access to powercap zones
- registry.py: Sensor model and the ordered SensorRegistry
- discovery.py: one-shot startup discovery
- sampler.py: counter reads and delta-based power
"""

from raplmon.sensors.discovery import discover
from raplmon.sensors.registry import Sensor, SensorRegistry
from raplmon.sensors.sampler import sample
from raplmon.sensors.source import PowercapSource, SensorSource

__all__ = [
    "discover",
    "sample",
    "Sensor",
    "SensorRegistry",
    "SensorSource",
    "PowercapSource",
]

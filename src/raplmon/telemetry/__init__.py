"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from raplmon.telemetry.events import (
    COUNTER_REGRESSION,
    CYCLE_COMPLETED,
    DISCOVERY_COMPLETED,
    DISCOVERY_SKIPPED_ENTRY,
    MONITOR_FATAL_ERROR,
    MONITOR_STATE_TRANSITION,
    MONITOR_SUMMARY,
    SENSOR_BASELINE,
    SENSOR_DISCOVERED,
    SENSOR_READING,
    SHUTDOWN_REQUESTED,
)
from raplmon.telemetry.logger import configure_logging, get_logger

__all__ = [
    # Core exports
    "get_logger",
    "configure_logging",
    # Event constants
    "SENSOR_DISCOVERED",
    "DISCOVERY_COMPLETED",
    "DISCOVERY_SKIPPED_ENTRY",
    "SENSOR_BASELINE",
    "SENSOR_READING",
    "COUNTER_REGRESSION",
    "CYCLE_COMPLETED",
    "MONITOR_STATE_TRANSITION",
    "SHUTDOWN_REQUESTED",
    "MONITOR_SUMMARY",
    "MONITOR_FATAL_ERROR",
]

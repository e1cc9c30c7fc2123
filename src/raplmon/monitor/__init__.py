"""Sampling loop, running statistics and shutdown handling."""

from raplmon.monitor.aggregator import SensorSummary, SessionStats, average, fold, summarize
from raplmon.monitor.controller import SAMPLE_PERIOD_SECONDS, LoopController, MonitorState
from raplmon.monitor.shutdown import ShutdownFlag, install_interrupt_handler

__all__ = [
    "LoopController",
    "MonitorState",
    "SAMPLE_PERIOD_SECONDS",
    "SessionStats",
    "SensorSummary",
    "ShutdownFlag",
    "average",
    "fold",
    "install_interrupt_handler",
    "summarize",
]

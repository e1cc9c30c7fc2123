"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying of the JSON log file.
"""

# Discovery events
SENSOR_DISCOVERED = "sensor_discovered"
DISCOVERY_COMPLETED = "discovery_completed"
DISCOVERY_SKIPPED_ENTRY = "discovery_skipped_entry"

# Sampling events
SENSOR_BASELINE = "sensor_baseline"
SENSOR_READING = "sensor_reading"
COUNTER_REGRESSION = "counter_regression"
CYCLE_COMPLETED = "cycle_completed"

# Controller events
MONITOR_STATE_TRANSITION = "monitor_state_transition"
SHUTDOWN_REQUESTED = "shutdown_requested"
MONITOR_SUMMARY = "monitor_summary"
MONITOR_FATAL_ERROR = "monitor_fatal_error"

"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# SMC channel events
SMC_SERVICE_NOT_FOUND = "smc_service_not_found"
SMC_SERVICE_FALLBACK = "smc_service_fallback"
SMC_CONNECTION_OPENED = "smc_connection_opened"
SMC_CONNECTION_FAILED = "smc_connection_failed"
SMC_CONNECTION_CLOSED = "smc_connection_closed"
SMC_CALL_FAILED = "smc_call_failed"

# Sensor events
SENSOR_READ = "sensor_read"
SENSOR_READ_FAILED = "sensor_read_failed"
SENSOR_PROBE_COMPLETED = "sensor_probe_completed"

# Display events
SLOTS_RENDERED = "slots_rendered"
POLL_LOOP_STARTED = "poll_loop_started"
POLL_LOOP_STOPPED = "poll_loop_stopped"
POLL_TICK_FAILED = "poll_tick_failed"

# Preferences events
PREFERENCES_LOADED = "preferences_loaded"
PREFERENCES_SAVED = "preferences_saved"
PREFERENCES_CHANGED = "preferences_changed"
PREFERENCES_DEFAULTS_REGISTERED = "preferences_defaults_registered"
PREFERENCES_SUBSCRIBER_FAILED = "preferences_subscriber_failed"

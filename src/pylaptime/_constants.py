"""Internal constants shared across the library."""

DEFAULT_WS_URL = "ws://localhost:8080/ws"

# Reserved transponder code the decoder emits for a start-line impulse.
MARKER_CODE = "00000127"

DEBOUNCE_THRESHOLD_MS: float = 500.0

# ------------------------------------------------------------------
# Lap time display
# ------------------------------------------------------------------

FIRST_LAP_TIME = "0.00"
LAP_TIME_CEILING = "99.99"

# ------------------------------------------------------------------
# Timers (seconds)
# ------------------------------------------------------------------

RECONNECT_INTERVAL_S: float = 5.0
SWEEP_INTERVAL_S: float = 60.0
INACTIVITY_TIMEOUT_S: float = 10 * 60

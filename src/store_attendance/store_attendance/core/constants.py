"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Geofence policy (fixed, not configurable at runtime)
MAX_ALLOWED_DISTANCE_M = 200
EARTH_RADIUS_M = 6_371_000

# Single-shot GPS query requested from the browser
GEO_TIMEOUT_MS = 10_000
GEO_HIGH_ACCURACY = True
GEO_MAXIMUM_AGE_MS = 0

# Delay before the terminal screens move on
SUCCESS_ENTRY_DELAY_SECONDS = 6
SUCCESS_EXIT_DELAY_SECONDS = 5

DEFAULT_UNIFORM = "Buzo o campera negra"

LIVENESS_ADVISORY_MESSAGE = (
    "⚠️ AVISO: Usuario sin foto de referencia. Identidad no validada, solo presencia humana."
)
# Substrings that flag a verdict message as advisory even when verified
ADVISORY_MARKERS = ("AVISO", "sin foto", "Advertencia", "warning", "advisory")

MAX_AUDIT_PHOTO_BYTES = 5 * 1024 * 1024

# Live attendance flows kept in memory
FLOW_IDLE_SECONDS = 30 * 60
MAX_LIVE_FLOWS = 1000

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOLERANCE_MINUTES = 15
MIN_TOLERANCE_MINUTES = 0
MAX_TOLERANCE_MINUTES = 120

DEFAULT_REQUIRED_STAFF = 1
MIN_REQUIRED_STAFF = 1
MAX_REQUIRED_STAFF = 20

MAX_SHIFT_NAME_LENGTH = 50
MAX_NOTES_LENGTH = 500

# Auto-generation: a worker may hold the same shift at most this many days in a row.
MAX_CONSECUTIVE_SAME_SHIFT_DAYS = 2
ROTATION_ATTEMPTS_PER_WORKER = 3

EARTH_RADIUS_METERS = 6_371_000
MIN_GEOFENCE_RADIUS_METERS = 1
MAX_GEOFENCE_RADIUS_METERS = 1000
GEOFENCE_CONFIG_KEY = "geofence"
DEFAULT_GEOFENCE_CACHE_TTL_SECONDS = 300

DEFAULT_HISTORY_LIMIT = 10

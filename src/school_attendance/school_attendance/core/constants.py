"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# Recommended operating band for a campus-scale geofence. Not enforced.
RECOMMENDED_MIN_RADIUS_METERS = 50
RECOMMENDED_MAX_RADIUS_METERS = 200

DEFAULT_GEOLOCATION_TIMEOUT_MS = 10_000
DEFAULT_GEOLOCATION_MAX_AGE_MS = 60_000

DEFAULT_SCHOOL_START_TIME = "07:30"
DEFAULT_LATE_GRACE_MINUTES = 15
DEFAULT_FACE_MATCH_THRESHOLD = 0.6

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_STATS_DAYS = 30
DEFAULT_REPORT_DAYS = 7

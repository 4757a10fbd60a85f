import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

GEOLOCATION_TIMEOUT_MS = 10000
GEOLOCATION_MAX_AGE_MS = 60000
GEOLOCATION_HIGH_ACCURACY = True

SCHOOL_START_TIME = "07:30"
LATE_GRACE_MINUTES = 15

FACE_MATCH_THRESHOLD = 0.6
REQUIRE_FACE_MATCH = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

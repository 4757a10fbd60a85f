import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Passed through to navigator.geolocation.getCurrentPosition on the client.
GEOLOCATION_TIMEOUT_MS = int(os.getenv("GEOLOCATION_TIMEOUT_MS", "10000"))
GEOLOCATION_MAX_AGE_MS = int(os.getenv("GEOLOCATION_MAX_AGE_MS", "60000"))
GEOLOCATION_HIGH_ACCURACY = bool(int(os.getenv("GEOLOCATION_HIGH_ACCURACY", "1")))

# Check-ins after SCHOOL_START_TIME + LATE_GRACE_MINUTES are recorded as late.
SCHOOL_START_TIME = os.getenv("SCHOOL_START_TIME", "07:30")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "15"))

FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.6"))
REQUIRE_FACE_MATCH = bool(int(os.getenv("REQUIRE_FACE_MATCH", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

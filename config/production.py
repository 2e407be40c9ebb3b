import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "irshad_admin"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "America/Chicago")

# Teacher check-in geofence; (0, 0) means "not configured" and fails every location
CENTER_LAT = float(os.getenv("CENTER_LAT", "0"))
CENTER_LNG = float(os.getenv("CENTER_LNG", "0"))
GEOFENCE_RADIUS_METERS = float(os.getenv("GEOFENCE_RADIUS_METERS", "50"))

CHECKIN_TOKEN_MAX_AGE = int(os.getenv("CHECKIN_TOKEN_MAX_AGE", "60"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

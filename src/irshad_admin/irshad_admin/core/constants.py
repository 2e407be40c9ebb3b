"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

from .enums import Shift

DUPLICATE_ACTIVITY_WINDOW_DAYS = 30
MAX_BULK_STUDENTS = 100
DEFAULT_PAGE_SIZE = 50

GEOFENCE_RADIUS_METERS = 50
LATE_GRACE_PERIOD_MINUTES = 5
CHECKIN_WINDOW_MINUTES_BEFORE = 30
CHECKIN_WINDOW_MINUTES_AFTER = 60
MAX_SHIFT_HOURS = 6
MIN_ADMIN_REASON_LENGTH = 3

SHIFT_START_TIMES = {
    Shift.MORNING: time(8, 30),
    Shift.AFTERNOON: time(14, 0),
}

CHECKIN_TOKEN_SALT = "session-checkin"
DEFAULT_CHECKIN_TOKEN_MAX_AGE = 60

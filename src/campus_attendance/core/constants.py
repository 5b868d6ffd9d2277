"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus

ATTENDANCE_WEIGHTS = {
    AttendanceStatus.PRESENT: 1.0,
    AttendanceStatus.LATE: 0.8,
    AttendanceStatus.VERY_LATE: 0.6,
    AttendanceStatus.ABSENT: 0.0,
}

GOOD_ATTENDANCE_PERCENT = 80.0
WARNING_ATTENDANCE_PERCENT = 70.0

OTP_LENGTH = 6
DEFAULT_OTP_TTL_MINUTES = 10

DEFAULT_SESSION_REMEMBER_DAYS = 30
DEFAULT_SESSION_HOURS = 2

MIN_PASSWORD_LENGTH = 8

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status stored in the database."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class CheckInMethod(str, Enum):
    FACE = "face"
    MANUAL = "manual"


class FailureReason(str, Enum):
    """Why a validation outcome could not be computed.

    Never set when the student was merely too far away.
    """

    POSITION_PERMISSION_DENIED = "PositionPermissionDenied"
    POSITION_UNAVAILABLE = "PositionUnavailable"
    POSITION_TIMEOUT = "PositionTimeout"
    ZONE_NOT_CONFIGURED = "ZoneNotConfigured"

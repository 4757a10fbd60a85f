from datetime import datetime, time

from src.school_attendance.school_attendance.attendance.status_policy import CheckInStatusPolicy
from src.school_attendance.school_attendance.core.enums import AttendanceStatus


def test_within_grace_is_present():
    policy = CheckInStatusPolicy(start_time=time(7, 30), grace_minutes=15)

    assert policy.decide(datetime(2026, 2, 2, 7, 45, 0)).status == AttendanceStatus.PRESENT


def test_after_grace_is_late():
    policy = CheckInStatusPolicy(start_time=time(7, 30), grace_minutes=15)

    decision = policy.decide(datetime(2026, 2, 2, 7, 45, 1))

    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Late by 15 min"


def test_without_start_time_everyone_is_present():
    assert CheckInStatusPolicy().decide(datetime(2026, 2, 2, 23, 0)).status == AttendanceStatus.PRESENT

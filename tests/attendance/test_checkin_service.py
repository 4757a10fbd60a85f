from __future__ import annotations

from datetime import datetime, time

import pytest

from src.school_attendance.school_attendance.attendance.service import CheckInService
from src.school_attendance.school_attendance.attendance.status_policy import CheckInStatusPolicy
from src.school_attendance.school_attendance.biometrics.matcher import DescriptorDistanceMatcher
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, CheckInMethod, FailureReason, Role
from src.school_attendance.school_attendance.core.exceptions import ConfigurationError, NotFoundError, ValidationError
from src.school_attendance.school_attendance.geofence.model import Coordinate, ReferenceZone
from src.school_attendance.school_attendance.geofence.sources import ReportedPositionSource, StaticZoneSource
from tests.fakes import CAMPUS, JAKARTA, InMemoryAttendance, InMemoryUsers, make_user


def _service(*, zone=CAMPUS, users=None, **kwargs):
    users = users or InMemoryUsers([make_user(1), make_user(2, role=Role.ADMIN)])
    attendance = InMemoryAttendance(users)
    svc = CheckInService(attendance, users, StaticZoneSource(zone), **kwargs)
    return svc, attendance


def test_checkin_inside_zone_records_attendance(fixed_now):
    svc, attendance = _service()

    result = svc.check_in(1, ReportedPositionSource(Coordinate(-6.2090, 106.8456)), now=fixed_now)

    assert result.recorded
    assert result.outcome.admitted
    rec = attendance.get_for_student_and_date(1, fixed_now.date())
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.method == CheckInMethod.FACE
    assert rec.distance_meters == 22
    assert rec.latitude == -6.2090
    assert "22m away" in result.message


def test_checkin_outside_zone_is_not_recorded(fixed_now):
    svc, attendance = _service()

    result = svc.check_in(1, ReportedPositionSource(Coordinate(-6.2180, 106.8456)), now=fixed_now)

    assert not result.recorded
    assert result.outcome.failure_reason is None
    assert result.outcome.distance_meters > 100
    assert result.message.startswith("Outside school premises")
    assert attendance.records == {}


def test_checkin_with_denied_location(fixed_now):
    svc, attendance = _service()

    result = svc.check_in(1, ReportedPositionSource(error_code=1), now=fixed_now)

    assert not result.recorded
    assert result.outcome.failure_reason == FailureReason.POSITION_PERMISSION_DENIED
    assert result.message == "Location access denied by user"


def test_checkin_without_configured_zone(fixed_now):
    svc, _ = _service(zone=None)

    result = svc.check_in(1, ReportedPositionSource(JAKARTA), now=fixed_now)

    assert result.outcome.failure_reason == FailureReason.ZONE_NOT_CONFIGURED


def test_checkin_with_broken_zone_surfaces_configuration_error(fixed_now):
    svc, _ = _service(zone=ReferenceZone(center=JAKARTA, radius_meters=0))

    with pytest.raises(ConfigurationError):
        svc.check_in(1, ReportedPositionSource(JAKARTA), now=fixed_now)


def test_second_checkin_same_day_is_rejected(fixed_now):
    svc, _ = _service()
    svc.check_in(1, ReportedPositionSource(JAKARTA), now=fixed_now)

    with pytest.raises(ValidationError):
        svc.check_in(1, ReportedPositionSource(JAKARTA), now=fixed_now.replace(hour=9))


def test_unknown_or_admin_user_cannot_check_in(fixed_now):
    svc, _ = _service()

    with pytest.raises(NotFoundError):
        svc.check_in(42, ReportedPositionSource(JAKARTA), now=fixed_now)
    with pytest.raises(NotFoundError):
        svc.check_in(2, ReportedPositionSource(JAKARTA), now=fixed_now)


def test_inactive_student_cannot_check_in(fixed_now):
    svc, _ = _service(users=InMemoryUsers([make_user(1, is_active=False)]))

    with pytest.raises(ValidationError):
        svc.check_in(1, ReportedPositionSource(JAKARTA), now=fixed_now)


def test_checkin_after_grace_period_is_late():
    svc, attendance = _service(status_policy=CheckInStatusPolicy(start_time=time(7, 30), grace_minutes=15))
    now = datetime(2026, 2, 2, 7, 50, 0)

    result = svc.check_in(1, ReportedPositionSource(JAKARTA), now=now)

    assert result.record.status == AttendanceStatus.LATE
    assert result.record.notes == "Late by 20 min"


def test_face_mismatch_blocks_checkin(fixed_now):
    users = InMemoryUsers([make_user(1, face_descriptor=(0.0, 0.0, 0.0))])
    svc, attendance = _service(users=users, matcher=DescriptorDistanceMatcher(0.6))

    result = svc.check_in(1, ReportedPositionSource(JAKARTA), face_sample=[1.0, 1.0, 1.0], now=fixed_now)

    assert not result.recorded
    assert result.message == "Face not recognized"
    assert result.face_score == pytest.approx(3 ** 0.5)
    assert attendance.records == {}


def test_face_match_allows_checkin(fixed_now):
    users = InMemoryUsers([make_user(1, face_descriptor=(0.1, 0.2, 0.3))])
    svc, _ = _service(users=users, matcher=DescriptorDistanceMatcher(0.6), require_face_match=True)

    result = svc.check_in(1, ReportedPositionSource(JAKARTA), face_sample=[0.1, 0.2, 0.35], now=fixed_now)

    assert result.recorded
    assert result.face_score == pytest.approx(0.05)


def test_required_face_match_needs_a_sample(fixed_now):
    users = InMemoryUsers([make_user(1, face_descriptor=(0.1, 0.2))])
    svc, _ = _service(users=users, matcher=DescriptorDistanceMatcher(), require_face_match=True)

    with pytest.raises(ValidationError):
        svc.check_in(1, ReportedPositionSource(JAKARTA), now=fixed_now)


def test_manual_checkin_skips_geofence(fixed_now):
    svc, attendance = _service(zone=None)

    rec = svc.manual_check_in(1, status=AttendanceStatus.LATE, notes="Bus delay", now=fixed_now)

    assert rec.method == CheckInMethod.MANUAL
    assert attendance.get_by_id(rec.attendance_id).notes == "Bus delay"


def test_update_and_delete_record(fixed_now):
    svc, attendance = _service()
    rec = svc.manual_check_in(1, now=fixed_now)

    svc.update_record(rec.attendance_id, status=AttendanceStatus.ABSENT, notes="Left early")
    assert attendance.get_by_id(rec.attendance_id).status == AttendanceStatus.ABSENT

    svc.delete_record(rec.attendance_id)
    with pytest.raises(NotFoundError):
        svc.delete_record(rec.attendance_id)
    with pytest.raises(NotFoundError):
        svc.update_record(rec.attendance_id, status=AttendanceStatus.PRESENT)


def test_history_is_newest_first(fixed_now):
    svc, _ = _service()
    svc.manual_check_in(1, now=fixed_now.replace(day=2))
    svc.manual_check_in(1, now=fixed_now.replace(day=3))

    history = svc.history_for_student(1)

    assert [h["date"] for h in history] == ["2026-02-03", "2026-02-02"]

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional, Sequence

from ..biometrics.matcher import BiometricMatcher
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, CheckInMethod, FailureReason
from ..core.exceptions import NotFoundError, ValidationError
from ..geofence.model import Coordinate, ValidationOutcome
from ..geofence.sources import PositionSource, ZoneSource
from ..geofence.validator import GeofenceValidator
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceRecord, CheckInResult
from .repository import AttendanceRepository
from .status_policy import CheckInStatusPolicy

logger = logging.getLogger(__name__)

FAILURE_MESSAGES = {
    FailureReason.POSITION_PERMISSION_DENIED: "Location access denied by user",
    FailureReason.POSITION_UNAVAILABLE: "Location information unavailable",
    FailureReason.POSITION_TIMEOUT: "Location request timed out",
    FailureReason.ZONE_NOT_CONFIGURED: "School location has not been configured yet",
}


class _CapturingPositionSource:
    """Remembers the coordinate handed to the validator so it can be recorded."""

    def __init__(self, inner: PositionSource):
        self._inner = inner
        self.coordinate: Optional[Coordinate] = None

    async def get_position(self) -> Coordinate:
        self.coordinate = await self._inner.get_position()
        return self.coordinate


def describe_outcome(outcome: ValidationOutcome) -> str:
    if outcome.failure_reason is not None:
        return FAILURE_MESSAGES[outcome.failure_reason]
    if outcome.admitted:
        return f"Within school premises ({outcome.distance_meters}m away)"
    return f"Outside school premises ({outcome.distance_meters}m away)"


class CheckInService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        zone_source: ZoneSource,
        *,
        validator: Optional[GeofenceValidator] = None,
        status_policy: Optional[CheckInStatusPolicy] = None,
        matcher: Optional[BiometricMatcher] = None,
        require_face_match: bool = False,
    ):
        self._attendance = attendance
        self._users = users
        self._zone_source = zone_source
        self._validator = validator or GeofenceValidator()
        self._policy = status_policy or CheckInStatusPolicy()
        self._matcher = matcher
        self._require_face_match = bool(require_face_match)

    def _get_student(self, student_id: int) -> User:
        user = self._users.get_by_id(student_id)
        if not user or not user.is_student:
            raise NotFoundError("Student not found")
        if not user.is_active:
            raise ValidationError("Student account is inactive")
        return user

    def _ensure_not_checked_in(self, student_id: int, now: datetime) -> None:
        if self._attendance.get_for_student_and_date(student_id, now.date()):
            raise ValidationError("Attendance already recorded for today")

    def check_position(self, position_source: PositionSource) -> ValidationOutcome:
        """Single-shot geofence check without recording anything."""
        return asyncio.run(self._validator.validate_current_position(position_source, self._zone_source))

    def check_in(
        self,
        student_id: int,
        position_source: PositionSource,
        *,
        face_sample: Optional[Sequence[float]] = None,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        now = now or now_local()
        student = self._get_student(student_id)
        self._ensure_not_checked_in(student_id, now)

        capturing = _CapturingPositionSource(position_source)
        outcome = self.check_position(capturing)
        if not outcome.admitted:
            logger.info(
                "Check-in rejected for student_id=%s: distance=%sm reason=%s",
                student_id,
                outcome.distance_meters,
                outcome.failure_reason.value if outcome.failure_reason else "out_of_range",
            )
            return CheckInResult(outcome=outcome, message=describe_outcome(outcome))

        face_score = None
        if self._matcher is not None and (face_sample is not None or self._require_face_match):
            if face_sample is None:
                raise ValidationError("A face sample is required to check in")
            if not student.has_face_enrolled:
                raise ValidationError("No face enrolled for this student")
            match = self._matcher.match(face_sample, student.face_descriptor)
            face_score = match.score
            if not match.matched:
                logger.info("Check-in rejected for student_id=%s: face score %.3f > %.3f", student_id, match.score, match.threshold)
                return CheckInResult(outcome=outcome, face_score=face_score, message="Face not recognized")

        decision = self._policy.decide(now)
        coordinate = capturing.coordinate
        attendance_id = self._attendance.create(
            student_id=student_id,
            checked_at=now,
            status=decision.status,
            method=CheckInMethod.FACE,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            distance_meters=outcome.distance_meters,
            notes=decision.note,
        )
        record = AttendanceRecord(
            attendance_id=attendance_id,
            student_id=student_id,
            checked_at=now,
            status=decision.status,
            method=CheckInMethod.FACE,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            distance_meters=outcome.distance_meters,
            notes=decision.note,
        )
        logger.info(
            "Check-in recorded for student_id=%s: status=%s distance=%sm",
            student_id,
            decision.status.value,
            outcome.distance_meters,
        )
        return CheckInResult(outcome=outcome, record=record, face_score=face_score, message=describe_outcome(outcome))

    def manual_check_in(
        self,
        student_id: int,
        *,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Admin records attendance on a student's behalf; no geofence check."""

        now = now or now_local()
        self._get_student(student_id)
        self._ensure_not_checked_in(student_id, now)

        attendance_id = self._attendance.create(
            student_id=student_id,
            checked_at=now,
            status=status,
            method=CheckInMethod.MANUAL,
            notes=notes,
        )
        logger.info("Manual attendance recorded for student_id=%s: status=%s", student_id, status.value)
        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=student_id,
            checked_at=now,
            status=status,
            method=CheckInMethod.MANUAL,
            notes=notes,
        )

    def update_record(self, attendance_id: int, *, status: AttendanceStatus, notes: Optional[str] = None) -> None:
        if not self._attendance.get_by_id(attendance_id):
            raise NotFoundError("Attendance record not found")
        self._attendance.update(attendance_id=attendance_id, status=status, notes=notes)

    def delete_record(self, attendance_id: int) -> None:
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("Attendance record not found")

    def history_for_student(self, student_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        return [to_view(r) for r in self._attendance.get_recent_for_student(student_id, limit)]


def to_view(r: AttendanceRecord) -> dict:
    return {
        "attendance_id": r.attendance_id,
        "student_id": r.student_id,
        "date": r.checked_at.strftime("%Y-%m-%d"),
        "time": r.checked_at.strftime("%H:%M:%S"),
        "status": r.status.value,
        "method": r.method.value,
        "latitude": r.latitude,
        "longitude": r.longitude,
        "distance_meters": r.distance_meters,
        "notes": r.notes or "",
    }

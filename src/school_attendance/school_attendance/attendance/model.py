from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, CheckInMethod
from ..geofence.model import ValidationOutcome


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one day."""

    attendance_id: int
    student_id: int
    checked_at: datetime
    status: AttendanceStatus
    method: CheckInMethod
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_meters: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (joined with the student)."""

    attendance_id: int
    student_id: int
    student_code: Optional[str]
    full_name: str
    checked_at: datetime
    status: AttendanceStatus
    method: CheckInMethod
    distance_meters: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class CheckInResult:
    """What a check-in attempt produced.

    ``record`` is set only when attendance was written.
    """

    outcome: ValidationOutcome
    record: Optional[AttendanceRecord] = None
    face_score: Optional[float] = None
    message: str = ""

    @property
    def recorded(self) -> bool:
        return self.record is not None

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, CheckInMethod
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_student(self, student_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        checked_at: datetime,
        status: AttendanceStatus,
        method: CheckInMethod,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        distance_meters: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        """Admin-only correction of status/notes."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Rows with ``start <= checked_at < end``, oldest first."""

        raise NotImplementedError

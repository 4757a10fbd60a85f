from __future__ import annotations

import csv
import io
from dataclasses import asdict, dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_REPORT_DAYS, DEFAULT_STATS_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository

CSV_HEADERS = ["Date", "Time", "Student ID", "Student Name", "Status", "Method", "Distance", "Notes"]


@dataclass(frozen=True)
class AttendanceStats:
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    attendance_rate: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DailySummary:
    date: date
    total_students: int
    present_count: int
    late_count: int
    absent_count: int
    attendance_rate: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def _percent(part: int, whole: int) -> int:
    return int(round(part * 100 / whole)) if whole > 0 else 0


def _day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Half-open datetime range covering ``start`` through ``end`` inclusive."""
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class ReportService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def student_stats(self, student_id: int, *, days: int = DEFAULT_STATS_DAYS, today: Optional[date] = None) -> AttendanceStats:
        """Statistics over the last ``days`` days, today included.

        Days without a record count as absent.
        """

        if days <= 0:
            raise ValidationError("days must be greater than 0")
        today = today or date.today()
        start, end = _day_bounds(today - timedelta(days=days - 1), today)
        rows = self._attendance.get_report_rows(start=start, end=end, student_id=student_id)

        present = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
        late = sum(1 for r in rows if r.status == AttendanceStatus.LATE)
        return AttendanceStats(
            total_days=days,
            present_days=present,
            late_days=late,
            absent_days=max(0, days - present - late),
            attendance_rate=_percent(present, days),
        )

    def daily_summary(self, day: date) -> DailySummary:
        start, end = _day_bounds(day, day)
        rows = self._attendance.get_report_rows(start=start, end=end)
        total = len(self._users.list_students(active_only=True))

        present = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
        late = sum(1 for r in rows if r.status == AttendanceStatus.LATE)
        return DailySummary(
            date=day,
            total_students=total,
            present_count=present,
            late_count=late,
            absent_count=max(0, total - present - late),
            attendance_rate=_percent(present, total),
        )

    def weekly_summary(self, *, today: Optional[date] = None) -> list[DailySummary]:
        today = today or date.today()
        return [self.daily_summary(today - timedelta(days=i)) for i in range(DEFAULT_REPORT_DAYS - 1, -1, -1)]

    def export_csv(self, *, start: date, end: date, student_id: Optional[int] = None) -> str:
        if end < start:
            raise ValidationError("end date must not be before start date")

        lo, hi = _day_bounds(start, end)
        rows = self._attendance.get_report_rows(start=lo, end=hi, student_id=student_id)

        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for r in rows:
            writer.writerow(
                [
                    r.checked_at.strftime("%Y-%m-%d"),
                    r.checked_at.strftime("%H:%M:%S"),
                    r.student_code or r.student_id,
                    r.full_name,
                    r.status.value,
                    r.method.value,
                    "" if r.distance_meters is None else r.distance_meters,
                    r.notes or "",
                ]
            )
        return out.getvalue()

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, CheckInMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, checked_at, latitude, longitude, distance_meters, status, method, notes"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    distance = r.get("distance_meters")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        checked_at=r["checked_at"],
        status=AttendanceStatus(r["status"]),
        method=CheckInMethod(r["method"]),
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
        distance_meters=int(distance) if distance is not None else None,
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND work_date=%s
                """,
                (int(student_id), day),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_student(self, student_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s
                ORDER BY checked_at DESC
                LIMIT %s
                """,
                (int(student_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    student_id, checked_at, work_date, latitude, longitude, distance_meters, status, method, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    checked_at,
                    checked_at.date(),
                    latitude,
                    longitude,
                    distance_meters,
                    status.value,
                    method.value,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, notes=%s
                WHERE attendance_id=%s
                """,
                (status.value, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.checked_at >= %s", "ar.checked_at < %s"]
        params: list[object] = [start, end]
        if student_id is not None:
            clauses.append("ar.student_id=%s")
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.attendance_id, ar.student_id, u.student_code, u.full_name,
                       ar.checked_at, ar.status, ar.method, ar.distance_meters, ar.notes
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.student_id
                WHERE {" AND ".join(clauses)}
                ORDER BY ar.checked_at ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    student_code=r.get("student_code"),
                    full_name=r["full_name"],
                    checked_at=r["checked_at"],
                    status=AttendanceStatus(r["status"]),
                    method=CheckInMethod(r["method"]),
                    distance_meters=int(r["distance_meters"]) if r.get("distance_meters") is not None else None,
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import CheckInService
from .attendance.status_policy import CheckInStatusPolicy
from .biometrics.matcher import DescriptorDistanceMatcher
from .core.constants import DEFAULT_FACE_MATCH_THRESHOLD, DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .geofence.validator import GeofenceValidator
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, StudentService
from .zones.mysql_zone_repository import MySQLZoneRepository
from .zones.repository import ZoneRepository
from .zones.service import ZoneService


@dataclass(frozen=True)
class CheckInOptions:
    school_start_time: Optional[time] = None
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD
    require_face_match: bool = False


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    zones_repo: ZoneRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    student_service: StudentService
    zone_service: ZoneService
    checkin_service: CheckInService
    report_service: ReportService


def wire_services(
    *,
    users_repo: UserRepository,
    zones_repo: ZoneRepository,
    attendance_repo: AttendanceRepository,
    options: Optional[CheckInOptions] = None,
) -> Container:
    options = options or CheckInOptions()

    zone_service = ZoneService(zones_repo)
    checkin_service = CheckInService(
        attendance_repo,
        users_repo,
        zone_service.zone_source(),
        validator=GeofenceValidator(),
        status_policy=CheckInStatusPolicy(
            start_time=options.school_start_time,
            grace_minutes=options.late_grace_minutes,
        ),
        matcher=DescriptorDistanceMatcher(options.face_match_threshold),
        require_face_match=options.require_face_match,
    )

    return Container(
        users_repo=users_repo,
        zones_repo=zones_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        student_service=StudentService(users_repo),
        zone_service=zone_service,
        checkin_service=checkin_service,
        report_service=ReportService(attendance_repo, users_repo),
    )


def build_container(*, db_config: dict, options: Optional[CheckInOptions] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        zones_repo=MySQLZoneRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        options=options,
    )

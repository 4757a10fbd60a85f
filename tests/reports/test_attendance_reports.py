from __future__ import annotations

from datetime import date, datetime

import pytest

from src.school_attendance.school_attendance.core.enums import AttendanceStatus, CheckInMethod, Role
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.reports.service import CSV_HEADERS, ReportService
from tests.fakes import InMemoryAttendance, InMemoryUsers, make_user


@pytest.fixture
def repos():
    users = InMemoryUsers([make_user(1), make_user(2), make_user(3), make_user(4, is_active=False), make_user(9, role=Role.ADMIN)])
    attendance = InMemoryAttendance(users)

    def add(student_id, when, status, method=CheckInMethod.FACE, distance=12, notes=None):
        attendance.create(
            student_id=student_id,
            checked_at=when,
            status=status,
            method=method,
            distance_meters=distance,
            notes=notes,
        )

    add(1, datetime(2026, 2, 2, 7, 10), AttendanceStatus.PRESENT)
    add(2, datetime(2026, 2, 2, 7, 55), AttendanceStatus.LATE)
    add(1, datetime(2026, 2, 3, 7, 5), AttendanceStatus.PRESENT)
    add(1, datetime(2026, 1, 1, 7, 5), AttendanceStatus.PRESENT)
    add(3, datetime(2026, 2, 3, 8, 0), AttendanceStatus.PRESENT, method=CheckInMethod.MANUAL, distance=None, notes='Said "hi", left')
    return users, attendance


def test_student_stats_counts_window_only(repos):
    users, attendance = repos
    stats = ReportService(attendance, users).student_stats(1, days=10, today=date(2026, 2, 3))

    assert stats.total_days == 10
    assert stats.present_days == 2
    assert stats.late_days == 0
    assert stats.absent_days == 8
    assert stats.attendance_rate == 20


def test_student_stats_requires_positive_days(repos):
    users, attendance = repos

    with pytest.raises(ValidationError):
        ReportService(attendance, users).student_stats(1, days=0)


def test_daily_summary_uses_active_students(repos):
    users, attendance = repos
    summary = ReportService(attendance, users).daily_summary(date(2026, 2, 2))

    assert summary.total_students == 3
    assert summary.present_count == 1
    assert summary.late_count == 1
    assert summary.absent_count == 1
    assert summary.attendance_rate == 33
    assert summary.to_dict()["date"] == "2026-02-02"


def test_weekly_summary_is_oldest_first(repos):
    users, attendance = repos
    week = ReportService(attendance, users).weekly_summary(today=date(2026, 2, 3))

    assert [d.date for d in week][0] == date(2026, 1, 28)
    assert week[-1].date == date(2026, 2, 3)
    assert len(week) == 7
    assert week[-1].present_count == 2


def test_export_csv(repos):
    users, attendance = repos
    content = ReportService(attendance, users).export_csv(start=date(2026, 2, 3), end=date(2026, 2, 3))
    lines = content.strip().split("\n")

    assert lines[0] == ",".join(CSV_HEADERS)
    assert lines[1] == "2026-02-03,07:05:00,S-0001,User 1,present,face,12,"
    assert lines[2] == '2026-02-03,08:00:00,S-0003,User 3,present,manual,,"Said ""hi"", left"'


def test_export_csv_filters_student(repos):
    users, attendance = repos
    content = ReportService(attendance, users).export_csv(start=date(2026, 1, 1), end=date(2026, 2, 28), student_id=2)

    assert content.count("\n") == 2


def test_export_rejects_reversed_range(repos):
    users, attendance = repos

    with pytest.raises(ValidationError):
        ReportService(attendance, users).export_csv(start=date(2026, 2, 3), end=date(2026, 2, 1))

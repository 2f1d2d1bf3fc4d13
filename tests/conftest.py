from __future__ import annotations

import pytest

from src.student_attendance.student_attendance.attendance.service import AttendanceService
from src.student_attendance.student_attendance.container import build_services
from src.student_attendance.student_attendance.students.service import StudentService
from tests.fakes import InMemoryAttendance, InMemoryStore, InMemoryStudents


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def students_repo(store):
    return InMemoryStudents(store)


@pytest.fixture
def attendance_repo(store):
    return InMemoryAttendance(store)


@pytest.fixture
def student_service(students_repo):
    return StudentService(students_repo)


@pytest.fixture
def attendance_service(attendance_repo):
    return AttendanceService(attendance_repo)


@pytest.fixture
def container(students_repo, attendance_repo):
    return build_services(students_repo=students_repo, attendance_repo=attendance_repo)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.student_attendance.student_attendance.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()

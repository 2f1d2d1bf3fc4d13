from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceInput, AttendanceWithStudent


class AttendanceRepository(Protocol):
    def list_with_students(
        self,
        *,
        fecha: Optional[date] = None,
        curso: Optional[str] = None,
    ) -> Sequence[AttendanceWithStudent]:
        """Rows ordered by fecha DESC, created_at DESC."""
        raise NotImplementedError

    def list_courses(self) -> Sequence[str]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceWithStudent]:
        raise NotImplementedError

    def create(self, data: AttendanceInput) -> int:
        raise NotImplementedError

    def update(self, attendance_id: int, data: AttendanceInput) -> bool:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

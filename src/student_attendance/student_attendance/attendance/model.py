from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one attendance mark of a student in a course."""

    id: int
    student_id: int
    fecha: date
    estado: AttendanceStatus
    curso: str
    hora_entrada: Optional[time] = None
    observaciones: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceWithStudent:
    """Read-model for the list: entry joined with its owning student."""

    entry: AttendanceEntry
    student: Student

    @property
    def id(self) -> int:
        return self.entry.id


@dataclass(frozen=True)
class AttendanceInput:
    """Validated writable fields. fecha=None lets the store default to today."""

    student_id: int
    curso: str
    estado: AttendanceStatus = AttendanceStatus.PRESENT
    fecha: Optional[date] = None
    hora_entrada: Optional[time] = None
    observaciones: Optional[str] = None

from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Estado de asistencia tal como se guarda en la columna `attendance.estado`."""

    PRESENT = "presente"
    ABSENT = "ausente"
    LATE = "tardanza"
    EXCUSED = "justificado"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def css_class(self) -> str:
        return _STATUS_CSS[self]


_STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Presente",
    AttendanceStatus.ABSENT: "Ausente",
    AttendanceStatus.LATE: "Tardanza",
    AttendanceStatus.EXCUSED: "Justificado",
}

_STATUS_CSS = {
    AttendanceStatus.PRESENT: "bg-success",
    AttendanceStatus.ABSENT: "bg-danger",
    AttendanceStatus.LATE: "bg-warning text-dark",
    AttendanceStatus.EXCUSED: "bg-primary",
}


class View(str, Enum):
    """Pestañas principales de la aplicación."""

    STUDENTS = "students"
    ATTENDANCE = "attendance"

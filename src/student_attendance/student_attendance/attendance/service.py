from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import format_clock_time, format_date, parse_clock_time, parse_iso_date
from ..common.validators import FieldErrors, clean_text, optional_text, require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..students.model import Student
from .model import AttendanceEntry, AttendanceInput, AttendanceWithStudent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def validate_attendance(raw: Mapping[str, Any]) -> AttendanceInput:
    """Collect all field errors for an attendance submission, or build the input."""

    errors = FieldErrors()

    student_id: Optional[int] = None
    student_s = clean_text(raw.get("student_id"))
    if not student_s:
        errors.add("student_id", "Debe seleccionar un estudiante")
    else:
        try:
            student_id = int(student_s)
        except ValueError:
            errors.add("student_id", "Debe seleccionar un estudiante")

    fecha: Optional[date] = None
    fecha_s = clean_text(raw.get("fecha"))
    if not fecha_s:
        errors.add("fecha", "La fecha es requerida")
    else:
        try:
            fecha = parse_iso_date(fecha_s)
        except ValueError:
            errors.add("fecha", "La fecha no es válida")

    curso = require_non_empty(errors, raw.get("curso"), "curso", "El curso es requerido")

    estado = AttendanceStatus.PRESENT
    estado_s = clean_text(raw.get("estado"))
    if estado_s:
        try:
            estado = AttendanceStatus(estado_s)
        except ValueError:
            errors.add("estado", "El estado no es válido")

    hora_entrada = None
    hora_s = optional_text(raw.get("hora_entrada"))
    if hora_s:
        try:
            hora_entrada = parse_clock_time(hora_s)
        except ValueError:
            errors.add("hora_entrada", "La hora no es válida")

    errors.raise_if_any()

    return AttendanceInput(
        student_id=int(student_id),
        fecha=fecha,
        estado=estado,
        hora_entrada=hora_entrada,
        curso=curso,
        observaciones=optional_text(raw.get("observaciones")),
    )


def search_roster(students: Iterable[Student], term: Optional[str]) -> list[Student]:
    """Search-as-you-type over the roster: nombres, apellidos or codigo."""
    search = clean_text(term).lower()
    if not search:
        return list(students)
    return [
        s
        for s in students
        if search in s.nombres.lower() or search in s.apellidos.lower() or search in s.codigo.lower()
    ]


class AttendanceService:
    """Use cases: filtered attendance list, register/edit/delete entries."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_entries(
        self,
        *,
        fecha: Optional[date] = None,
        curso: Optional[str] = None,
    ) -> Sequence[AttendanceWithStudent]:
        return self._attendance.list_with_students(fecha=fecha, curso=curso or None)

    def list_courses(self) -> Sequence[str]:
        return self._attendance.list_courses()

    def get(self, attendance_id: int) -> AttendanceWithStudent:
        row = self._attendance.get_by_id(int(attendance_id))
        if not row:
            raise NotFoundError("El registro de asistencia no existe")
        return row

    def create(self, raw: Mapping[str, Any]) -> int:
        data = validate_attendance(raw)
        attendance_id = self._attendance.create(data)
        logger.info("attendance created id=%s student_id=%s", attendance_id, data.student_id)
        return attendance_id

    def update(self, attendance_id: int, raw: Mapping[str, Any]) -> None:
        data = validate_attendance(raw)
        if not self._attendance.update(int(attendance_id), data):
            raise NotFoundError("El registro de asistencia no existe")
        logger.info("attendance updated id=%s", attendance_id)

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete_by_id(int(attendance_id)):
            raise NotFoundError("El registro de asistencia no existe")
        logger.info("attendance deleted id=%s", attendance_id)

    def list_for_student(self, student_id: int) -> Sequence[AttendanceEntry]:
        return self._attendance.list_for_student(int(student_id))

    def to_ui(self, row: AttendanceWithStudent) -> dict:
        e, s = row.entry, row.student
        return {
            "id": e.id,
            "student_id": e.student_id,
            "fecha": e.fecha.isoformat(),
            "fecha_display": format_date(e.fecha),
            "student_name": s.full_name,
            "codigo": s.codigo,
            "curso": e.curso,
            "estado": e.estado.value,
            "estado_label": e.estado.label,
            "css_class": e.estado.css_class,
            "hora_entrada": format_clock_time(e.hora_entrada),
            "observaciones": e.observaciones or "-",
        }

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import (
    FieldErrors,
    clean_text,
    optional_text,
    parse_bool,
    require_int_between,
    require_non_empty,
    require_pattern,
)
from ..core.constants import CARRERAS, DNI_PATTERN, EMAIL_PATTERN, SEMESTRE_MAX, SEMESTRE_MIN
from ..core.exceptions import NotFoundError
from .model import Student, StudentInput
from .repository import StudentRepository

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGES = {
    "codigo": "Este código ya está registrado",
    "dni": "Este DNI ya está registrado",
    "email": "Este email ya está registrado",
}


def validate_student(raw: Mapping[str, Any]) -> StudentInput:
    """Check every field rule, then build the normalized input.

    Raises ValidationError with one message per failing field.
    """

    errors = FieldErrors()

    codigo = require_non_empty(errors, raw.get("codigo"), "codigo", "El código es requerido")
    nombres = require_non_empty(errors, raw.get("nombres"), "nombres", "Los nombres son requeridos")
    apellidos = require_non_empty(errors, raw.get("apellidos"), "apellidos", "Los apellidos son requeridos")

    dni = require_non_empty(errors, raw.get("dni"), "dni", "El DNI es requerido")
    require_pattern(errors, dni, "dni", DNI_PATTERN, "El DNI debe tener 8 dígitos")

    carrera = require_non_empty(errors, raw.get("carrera"), "carrera", "La carrera es requerida")
    if carrera and carrera not in CARRERAS:
        errors.add("carrera", "La carrera no es válida")

    semestre = require_int_between(
        errors,
        raw.get("semestre"),
        "semestre",
        low=SEMESTRE_MIN,
        high=SEMESTRE_MAX,
        message=f"El semestre debe estar entre {SEMESTRE_MIN} y {SEMESTRE_MAX}",
    )

    email = optional_text(raw.get("email"))
    if email:
        require_pattern(errors, email, "email", EMAIL_PATTERN, "Email inválido")

    errors.raise_if_any()

    return StudentInput(
        codigo=codigo,
        nombres=nombres,
        apellidos=apellidos,
        dni=dni,
        carrera=carrera,
        semestre=int(semestre),
        email=email,
        telefono=optional_text(raw.get("telefono")),
        activo=parse_bool(raw.get("activo", True)),
    )


def filter_students(students: Iterable[Student], term: Optional[str]) -> list[Student]:
    """Case-insensitive substring match on nombres, apellidos, codigo and dni."""
    search = clean_text(term).lower()
    if not search:
        return list(students)
    return [
        s
        for s in students
        if search in s.nombres.lower()
        or search in s.apellidos.lower()
        or search in s.codigo.lower()
        or search in s.dni
    ]


class StudentService:
    """Use cases: list, create, edit and delete students."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def list_active(self) -> Sequence[Student]:
        return self._students.list_active()

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("El estudiante no existe")
        return student

    def create(self, raw: Mapping[str, Any]) -> int:
        data = validate_student(raw)
        student_id = self._students.create(data)
        logger.info("student created id=%s codigo=%s", student_id, data.codigo)
        return student_id

    def update(self, student_id: int, raw: Mapping[str, Any]) -> None:
        data = validate_student(raw)
        if not self._students.update(int(student_id), data):
            raise NotFoundError("El estudiante no existe")
        logger.info("student updated id=%s", student_id)

    def delete(self, student_id: int) -> None:
        if not self._students.delete_by_id(int(student_id)):
            raise NotFoundError("El estudiante no existe")
        logger.info("student deleted id=%s (attendance cascaded)", student_id)

    def find_by_codigo(self, codigo: str) -> Optional[Student]:
        return self._students.get_by_codigo(clean_text(codigo))

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.form_view import FormView
from ..common.list_view import SequencedListView
from ..core.constants import (
    CARRERAS,
    GENERIC_DELETE_ERROR_STUDENT,
    GENERIC_SAVE_ERROR_STUDENT,
    SEMESTRE_MAX,
    SEMESTRE_MIN,
)
from ..core.exceptions import DuplicateValueError, StoreError
from .model import Student
from .service import DUPLICATE_MESSAGES, StudentService, filter_students


class StudentListView(SequencedListView[Student]):
    """All students by apellidos, filtered client-side by a search term."""

    delete_error_message = GENERIC_DELETE_ERROR_STUDENT

    def __init__(self, service: StudentService):
        super().__init__()
        self._service = service
        self.search_term = ""

    def _fetch(self) -> Sequence[Student]:
        return self._service.list_students()

    def _delete(self, row_id: int) -> None:
        self._service.delete(row_id)

    def set_search(self, term: Optional[str]) -> None:
        self.search_term = (term or "").strip()

    @property
    def visible(self) -> list[Student]:
        return filter_students(self.rows, self.search_term)


def _initial_from(student: Optional[Student]) -> dict[str, Any]:
    if not student:
        return {
            "codigo": "",
            "nombres": "",
            "apellidos": "",
            "dni": "",
            "carrera": "",
            "semestre": SEMESTRE_MIN,
            "email": "",
            "telefono": "",
            "activo": True,
        }
    return {
        "codigo": student.codigo,
        "nombres": student.nombres,
        "apellidos": student.apellidos,
        "dni": student.dni,
        "carrera": student.carrera,
        "semestre": student.semestre,
        "email": student.email or "",
        "telefono": student.telefono or "",
        "activo": student.activo,
    }


class StudentFormView(FormView):
    generic_error_message = GENERIC_SAVE_ERROR_STUDENT
    carreras = CARRERAS
    semestres = tuple(range(SEMESTRE_MIN, SEMESTRE_MAX + 1))

    def __init__(self, service: StudentService, student: Optional[Student] = None):
        super().__init__(_initial_from(student))
        self._service = service
        self.student = student

    @property
    def is_edit(self) -> bool:
        return self.student is not None

    def store_error_message(self, error: StoreError) -> Optional[str]:
        if isinstance(error, DuplicateValueError):
            return DUPLICATE_MESSAGES.get(error.field or "")
        return None

    def _persist(self, data: Mapping[str, Any]) -> Optional[int]:
        if self.student is not None:
            self._service.update(self.student.id, data)
            return self.student.id
        return self._service.create(data)

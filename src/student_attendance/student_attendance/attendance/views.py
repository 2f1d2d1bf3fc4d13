from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import format_clock_time, today
from ..common.form_view import FormView
from ..common.list_view import SequencedListView
from ..core.constants import GENERIC_DELETE_ERROR_ATTENDANCE, GENERIC_SAVE_ERROR_ATTENDANCE
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, ReferenceNotFoundError, StoreError
from ..students.model import Student
from ..students.service import StudentService
from .model import AttendanceWithStudent
from .service import AttendanceService, search_roster

logger = logging.getLogger(__name__)


class AttendanceListView(SequencedListView[AttendanceWithStudent]):
    """Attendance joined with students, filtered at the store by fecha and curso.

    Course options come from every course in the store, so they don't shrink
    when a date or a course is picked.
    """

    delete_error_message = GENERIC_DELETE_ERROR_ATTENDANCE

    def __init__(self, service: AttendanceService, *, fecha: Optional[date] = None, curso: str = ""):
        super().__init__()
        self._service = service
        self.fecha: Optional[date] = fecha if fecha is not None else today()
        self.curso = curso or ""
        self.courses: list[str] = []

    def _fetch(self) -> Sequence[AttendanceWithStudent]:
        return self._service.list_entries(fecha=self.fecha, curso=self.curso or None)

    def _after_load(self) -> None:
        try:
            self.courses = list(self._service.list_courses())
        except DomainError:
            logger.exception("could not load course options")
            self.courses = sorted({r.entry.curso for r in self.rows})

    def _delete(self, row_id: int) -> None:
        self._service.delete(row_id)

    def set_filters(self, *, fecha: Optional[date], curso: Optional[str]) -> bool:
        """Every filter change triggers its own fetch."""
        self.fecha = fecha
        self.curso = (curso or "").strip()
        return self.load()

    @property
    def ui_rows(self) -> list[dict]:
        return [self._service.to_ui(r) for r in self.rows]


def _initial_from(row: Optional[AttendanceWithStudent]) -> dict[str, Any]:
    if not row:
        return {
            "student_id": "",
            "fecha": today().isoformat(),
            "estado": AttendanceStatus.PRESENT.value,
            "hora_entrada": "",
            "curso": "",
            "observaciones": "",
        }
    e = row.entry
    return {
        "student_id": str(e.student_id),
        "fecha": e.fecha.isoformat(),
        "estado": e.estado.value,
        "hora_entrada": format_clock_time(e.hora_entrada) if e.hora_entrada else "",
        "curso": e.curso,
        "observaciones": e.observaciones or "",
    }


class AttendanceFormView(FormView):
    generic_error_message = GENERIC_SAVE_ERROR_ATTENDANCE
    statuses = tuple(AttendanceStatus)

    def __init__(
        self,
        service: AttendanceService,
        students: StudentService,
        row: Optional[AttendanceWithStudent] = None,
    ):
        super().__init__(_initial_from(row))
        self._service = service
        self._students = students
        self.row = row
        self.roster: list[Student] = []
        self.search_term = ""
        self.show_roster = False
        self.selected: Optional[Student] = row.student if row else None

    @property
    def is_edit(self) -> bool:
        return self.row is not None

    def load_roster(self) -> None:
        """Active students by apellidos. A failure leaves the roster empty."""
        try:
            self.roster = list(self._students.list_active())
        except DomainError:
            logger.exception("could not load active students")
            self.roster = []

    def search(self, term: Optional[str]) -> None:
        self.search_term = (term or "").strip()
        self.show_roster = True

    @property
    def matches(self) -> list[Student]:
        return search_roster(self.roster, self.search_term)

    @property
    def roster_visible(self) -> bool:
        return self.selected is None

    def select(self, student_id: Any) -> bool:
        try:
            wanted = int(student_id)
        except (TypeError, ValueError):
            return False
        if self.row is not None and wanted != self.row.entry.student_id:
            return False
        student = next((s for s in self.roster if s.id == wanted), None)
        if student is None:
            return False
        self.selected = student
        self.data["student_id"] = str(student.id)
        self.show_roster = False
        self.search_term = ""
        self.errors.pop("student_id", None)
        return True

    def change_selection(self) -> bool:
        # only offered while registering; an edited entry keeps its student
        if self.is_edit:
            return False
        self.selected = None
        self.data["student_id"] = ""
        return True

    def store_error_message(self, error: StoreError) -> Optional[str]:
        if isinstance(error, ReferenceNotFoundError):
            return "El estudiante seleccionado no existe"
        return None

    def _persist(self, data: Mapping[str, Any]) -> Optional[int]:
        if self.row is not None:
            # an edited entry keeps its student whatever the form posts
            data = {**data, "student_id": str(self.row.entry.student_id)}
            self._service.update(self.row.id, data)
            return self.row.id
        return self._service.create(data)

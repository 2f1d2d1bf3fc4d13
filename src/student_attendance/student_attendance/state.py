from __future__ import annotations

from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from .core.enums import View

_SESSION_KEY = "app_state"


@dataclass
class AppState:
    """Top-level owner of view state, passed to the controllers explicitly.

    Holds the current tab, which form is open and for which record, and one
    refresh counter per list. A list re-fetches when its counter moves.
    """

    current_view: View = View.STUDENTS
    student_form_open: bool = False
    attendance_form_open: bool = False
    editing_student_id: Optional[int] = None
    editing_attendance_id: Optional[int] = None
    refresh_students: int = 0
    refresh_attendance: int = 0

    def switch_view(self, view: View) -> None:
        self.current_view = View(view)

    def open_student_form(self, student_id: Optional[int] = None) -> None:
        self.current_view = View.STUDENTS
        self.editing_student_id = student_id
        self.student_form_open = True

    def close_student_form(self) -> None:
        self.student_form_open = False
        self.editing_student_id = None

    def student_saved(self) -> None:
        self.close_student_form()
        self.refresh_students += 1

    def open_attendance_form(self, attendance_id: Optional[int] = None) -> None:
        self.current_view = View.ATTENDANCE
        self.editing_attendance_id = attendance_id
        self.attendance_form_open = True

    def close_attendance_form(self) -> None:
        self.attendance_form_open = False
        self.editing_attendance_id = None

    def attendance_saved(self) -> None:
        self.close_attendance_form()
        self.attendance_changed()

    def attendance_changed(self) -> None:
        self.refresh_attendance += 1

    def students_changed(self) -> None:
        # student deletes cascade into attendance, so both lists are stale
        self.refresh_students += 1
        self.refresh_attendance += 1

    def to_session(self, session: MutableMapping[str, Any]) -> None:
        session[_SESSION_KEY] = {
            "current_view": self.current_view.value,
            "student_form_open": self.student_form_open,
            "attendance_form_open": self.attendance_form_open,
            "editing_student_id": self.editing_student_id,
            "editing_attendance_id": self.editing_attendance_id,
            "refresh_students": self.refresh_students,
            "refresh_attendance": self.refresh_attendance,
        }

    @classmethod
    def from_session(cls, session: MutableMapping[str, Any]) -> "AppState":
        raw = session.get(_SESSION_KEY) or {}
        try:
            view = View(raw.get("current_view", View.STUDENTS.value))
        except ValueError:
            view = View.STUDENTS
        return cls(
            current_view=view,
            student_form_open=bool(raw.get("student_form_open", False)),
            attendance_form_open=bool(raw.get("attendance_form_open", False)),
            editing_student_id=raw.get("editing_student_id"),
            editing_attendance_id=raw.get("editing_attendance_id"),
            refresh_students=int(raw.get("refresh_students", 0)),
            refresh_attendance=int(raw.get("refresh_attendance", 0)),
        )

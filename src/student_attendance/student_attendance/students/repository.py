from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, StudentInput


class StudentRepository(Protocol):
    """Repository interface for Student.

    The service layer depends on this interface, not on a concrete DB.
    """

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_codigo(self, codigo: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, data: StudentInput) -> int:
        raise NotImplementedError

    def update(self, student_id: int, data: StudentInput) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError

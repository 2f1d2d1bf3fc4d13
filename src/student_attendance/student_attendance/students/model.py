from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered student.

    Plain data object; no DB access here.
    """

    id: int
    codigo: str
    nombres: str
    apellidos: str
    dni: str
    carrera: str
    semestre: int
    email: Optional[str] = None
    telefono: Optional[str] = None
    activo: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.apellidos}, {self.nombres}"


@dataclass(frozen=True)
class StudentInput:
    """Validated writable fields; optional values are already None, never ''."""

    codigo: str
    nombres: str
    apellidos: str
    dni: str
    carrera: str
    semestre: int
    email: Optional[str] = None
    telefono: Optional[str] = None
    activo: bool = True

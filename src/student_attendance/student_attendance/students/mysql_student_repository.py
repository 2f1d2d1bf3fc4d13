from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, StudentInput
from .repository import StudentRepository

_COLUMNS = """
    id, codigo, nombres, apellidos, dni, carrera, semestre,
    email, telefono, activo, created_at, updated_at
"""


def row_to_student(r: Dict[str, Any], *, prefix: str = "") -> Student:
    return Student(
        id=int(r[f"{prefix}id"]),
        codigo=r[f"{prefix}codigo"],
        nombres=r[f"{prefix}nombres"],
        apellidos=r[f"{prefix}apellidos"],
        dni=r[f"{prefix}dni"],
        carrera=r[f"{prefix}carrera"],
        semestre=int(r[f"{prefix}semestre"]),
        email=r.get(f"{prefix}email"),
        telefono=r.get(f"{prefix}telefono"),
        activo=bool(r.get(f"{prefix}activo", True)),
        created_at=r.get(f"{prefix}created_at"),
        updated_at=r.get(f"{prefix}updated_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY apellidos ASC, nombres ASC")
            return [row_to_student(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE activo=1 ORDER BY apellidos ASC, nombres ASC"
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            row = fetchone(cur)
            return row_to_student(row) if row else None

    def get_by_codigo(self, codigo: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE codigo=%s", (codigo,))
            row = fetchone(cur)
            return row_to_student(row) if row else None

    def create(self, data: StudentInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(codigo, nombres, apellidos, dni, carrera, semestre, email, telefono, activo)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.codigo,
                    data.nombres,
                    data.apellidos,
                    data.dni,
                    data.carrera,
                    int(data.semestre),
                    data.email,
                    data.telefono,
                    1 if data.activo else 0,
                ),
            )
            return int(cur.lastrowid)

    def update(self, student_id: int, data: StudentInput) -> bool:
        # updated_at is maintained by trg_students_updated_at
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET codigo=%s, nombres=%s, apellidos=%s, dni=%s, carrera=%s,
                    semestre=%s, email=%s, telefono=%s, activo=%s
                WHERE id=%s
                """,
                (
                    data.codigo,
                    data.nombres,
                    data.apellidos,
                    data.dni,
                    data.carrera,
                    int(data.semestre),
                    data.email,
                    data.telefono,
                    1 if data.activo else 0,
                    int(student_id),
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        # attendance rows go with it (fk_attendance_student ON DELETE CASCADE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            return cur.rowcount > 0

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from ..students.mysql_student_repository import row_to_student
from .model import AttendanceEntry, AttendanceInput, AttendanceWithStudent
from .repository import AttendanceRepository

_JOINED_SELECT = """
    SELECT
        a.id, a.student_id, a.fecha, a.estado, a.hora_entrada, a.curso, a.observaciones, a.created_at,
        s.id AS s_id, s.codigo AS s_codigo, s.nombres AS s_nombres, s.apellidos AS s_apellidos,
        s.dni AS s_dni, s.carrera AS s_carrera, s.semestre AS s_semestre, s.email AS s_email,
        s.telefono AS s_telefono, s.activo AS s_activo,
        s.created_at AS s_created_at, s.updated_at AS s_updated_at
    FROM attendance a
    JOIN students s ON s.id = a.student_id
"""


def _row_to_entry(r: Dict[str, Any]) -> AttendanceEntry:
    return AttendanceEntry(
        id=int(r["id"]),
        student_id=int(r["student_id"]),
        fecha=r["fecha"],
        estado=AttendanceStatus(r["estado"]),
        curso=r["curso"],
        hora_entrada=normalize_mysql_time(r.get("hora_entrada")),
        observaciones=r.get("observaciones"),
        created_at=r.get("created_at"),
    )


def _row_to_joined(r: Dict[str, Any]) -> AttendanceWithStudent:
    return AttendanceWithStudent(entry=_row_to_entry(r), student=row_to_student(r, prefix="s_"))


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_with_students(
        self,
        *,
        fecha: Optional[date] = None,
        curso: Optional[str] = None,
    ) -> Sequence[AttendanceWithStudent]:
        clauses: list[str] = []
        params: list[object] = []

        if fecha is not None:
            clauses.append("a.fecha=%s")
            params.append(fecha)
        if curso:
            clauses.append("a.curso=%s")
            params.append(curso)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_JOINED_SELECT}
                {where}
                ORDER BY a.fecha DESC, a.created_at DESC, a.id DESC
                """,
                tuple(params),
            )
            return [_row_to_joined(r) for r in fetchall(cur)]

    def list_courses(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT curso FROM attendance ORDER BY curso ASC")
            return [r["curso"] for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, fecha, estado, hora_entrada, curso, observaciones, created_at
                FROM attendance
                WHERE student_id=%s
                ORDER BY fecha DESC, created_at DESC, id DESC
                """,
                (int(student_id),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceWithStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_JOINED_SELECT} WHERE a.id=%s", (int(attendance_id),))
            row = fetchone(cur)
            return _row_to_joined(row) if row else None

    def create(self, data: AttendanceInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, fecha, estado, hora_entrada, curso, observaciones)
                VALUES(%s, COALESCE(%s, CURRENT_DATE), %s, %s, %s, %s)
                """,
                (
                    int(data.student_id),
                    data.fecha,
                    data.estado.value,
                    data.hora_entrada,
                    data.curso,
                    data.observaciones,
                ),
            )
            return int(cur.lastrowid)

    def update(self, attendance_id: int, data: AttendanceInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET student_id=%s, fecha=COALESCE(%s, fecha), estado=%s,
                    hora_entrada=%s, curso=%s, observaciones=%s
                WHERE id=%s
                """,
                (
                    int(data.student_id),
                    data.fecha,
                    data.estado.value,
                    data.hora_entrada,
                    data.curso,
                    data.observaciones,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (int(attendance_id),))
            return cur.rowcount > 0

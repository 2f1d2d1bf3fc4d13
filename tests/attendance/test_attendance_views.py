from __future__ import annotations

from datetime import date

import pytest

from src.student_attendance.student_attendance.attendance.views import AttendanceFormView, AttendanceListView
from tests.fakes import student_form, unavailable


@pytest.fixture
def roster(student_service):
    ids = [
        student_service.create(student_form()),
        student_service.create(student_form(codigo="SEN002", dni="87654321", nombres="María", apellidos="García")),
        student_service.create(
            student_form(codigo="SEN003", dni="11223344", nombres="Luis", apellidos="Torres", activo=False)
        ),
    ]
    return ids


def _form(attendance_service, student_service, row=None):
    form = AttendanceFormView(attendance_service, student_service, row)
    form.load_roster()
    return form


def test_roster_lists_only_active_students(attendance_service, student_service, roster):
    form = _form(attendance_service, student_service)

    assert [s.codigo for s in form.roster] == ["SEN002", "SEN001"]


def test_search_filters_by_name_or_code(attendance_service, student_service, roster):
    form = _form(attendance_service, student_service)

    form.search("garc")
    assert [s.codigo for s in form.matches] == ["SEN002"]
    assert form.show_roster

    form.search("sen001")
    assert [s.nombres for s in form.matches] == ["Juan"]


def test_selecting_a_student_hides_the_roster(attendance_service, student_service, roster):
    form = _form(attendance_service, student_service)
    form.search("juan")

    assert form.select(roster[0])
    assert form.selected.codigo == "SEN001"
    assert form.data["student_id"] == str(roster[0])
    assert not form.show_roster
    assert not form.roster_visible

    assert form.change_selection()
    assert form.selected is None
    assert form.roster_visible


def test_inactive_or_unknown_student_cannot_be_selected(attendance_service, student_service, roster):
    form = _form(attendance_service, student_service)

    assert not form.select(roster[2])
    assert not form.select("999")
    assert not form.select("x")
    assert form.selected is None


def test_submit_without_student_shows_error_and_skips_store(attendance_service, student_service, store, roster):
    form = _form(attendance_service, student_service)
    store.calls.clear()

    assert not form.submit({"curso": "Matemáticas I"})
    assert form.errors == {"student_id": "Debe seleccionar un estudiante"}
    assert store.mutations() == []


def test_create_defaults_to_today_and_present(attendance_service, student_service, roster, monkeypatch):
    monkeypatch.setattr(
        "src.student_attendance.student_attendance.attendance.views.today", lambda: date(2025, 1, 15)
    )
    form = _form(attendance_service, student_service)

    assert form.data["fecha"] == "2025-01-15"
    assert form.data["estado"] == "presente"

    form.select(roster[1])
    assert form.submit({"curso": "Matemáticas I"})

    row = attendance_service.get(form.saved_id)
    assert row.entry.fecha == date(2025, 1, 15)
    assert row.student.codigo == "SEN002"


def test_edit_keeps_student_and_refuses_change(attendance_service, student_service, roster):
    aid = attendance_service.create({"student_id": str(roster[0]), "fecha": "2025-01-15", "curso": "Física I"})
    form = _form(attendance_service, student_service, attendance_service.get(aid))

    assert form.is_edit
    assert form.selected.codigo == "SEN001"
    assert not form.change_selection()
    assert form.data["student_id"] == str(roster[0])

    assert form.submit({"estado": "ausente"})
    assert attendance_service.get(aid).entry.estado.value == "ausente"


def test_deleted_student_maps_to_field_error(attendance_service, student_service, roster):
    form = _form(attendance_service, student_service)
    form.select(roster[0])
    student_service.delete(roster[0])

    assert not form.submit({"curso": "Física I"})
    assert form.errors == {"student_id": "El estudiante seleccionado no existe"}


def test_store_failure_shows_generic_notice(attendance_service, student_service, store, roster):
    form = _form(attendance_service, student_service)
    form.select(roster[0])
    store.fail_with = unavailable()

    assert not form.submit({"curso": "Física I"})
    assert form.notice == "Error al guardar el registro de asistencia"
    assert not form.submitting


def test_roster_failure_leaves_it_empty(attendance_service, student_service, store, roster):
    store.fail_with = unavailable()
    form = _form(attendance_service, student_service)

    assert form.roster == []


def test_list_filters_and_global_course_options(attendance_service, roster):
    for fecha, curso in [("2025-01-15", "Matemáticas I"), ("2025-01-15", "Física I"), ("2025-01-10", "Química")]:
        attendance_service.create({"student_id": str(roster[0]), "fecha": fecha, "curso": curso})

    view = AttendanceListView(attendance_service, fecha=date(2025, 1, 15))
    view.load()
    assert len(view.rows) == 2
    assert view.courses == ["Física I", "Matemáticas I", "Química"]

    view.set_filters(fecha=date(2025, 1, 15), curso="Matemáticas I")
    assert [r["curso"] for r in view.ui_rows] == ["Matemáticas I"]
    assert view.courses == ["Física I", "Matemáticas I", "Química"]

    view.set_filters(fecha=None, curso="")
    assert len(view.rows) == 3


def test_stale_fetch_does_not_overwrite_newer_filter(attendance_service, roster):
    attendance_service.create({"student_id": str(roster[0]), "fecha": "2025-01-15", "curso": "Física I"})
    view = AttendanceListView(attendance_service, fecha=date(2025, 1, 15))

    slow = view.begin_load()
    fast = view.begin_load()
    assert view.finish_load(fast, attendance_service.list_entries(fecha=date(2025, 1, 15)))
    assert not view.finish_load(slow, [])
    assert not view.fail_load(slow, "boom")

    assert len(view.rows) == 1
    assert view.error is None
    assert not view.loading


def test_list_load_failure_shows_error(attendance_service, store):
    store.fail_with = unavailable()
    view = AttendanceListView(attendance_service, fecha=date(2025, 1, 15))

    assert not view.load()
    assert view.error == "Error al cargar los datos"
    assert view.rows == []


def test_edit_ignores_a_posted_student(attendance_service, student_service, roster):
    aid = attendance_service.create({"student_id": str(roster[0]), "fecha": "2025-01-15", "curso": "Física I"})
    form = _form(attendance_service, student_service, attendance_service.get(aid))

    assert not form.select(roster[1])
    assert form.submit({"student_id": str(roster[1]), "curso": "Física II"})

    row = attendance_service.get(aid)
    assert row.entry.student_id == roster[0]
    assert row.entry.curso == "Física II"

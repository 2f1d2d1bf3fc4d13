from __future__ import annotations

from src.student_attendance.student_attendance.core.exceptions import StoreUnavailableError
from src.student_attendance.student_attendance.students.views import StudentFormView, StudentListView
from tests.fakes import student_form, unavailable


def test_form_maps_duplicate_dni_back_to_its_field(student_service):
    student_service.create(student_form())
    form = StudentFormView(student_service)

    ok = form.submit(student_form(codigo="SEN002"))

    assert ok is False
    assert form.errors == {"dni": "Este DNI ya está registrado"}
    assert form.notice is None


def test_form_reports_every_validation_error_without_calling_store(student_service, store):
    form = StudentFormView(student_service)

    ok = form.submit(student_form(codigo="", dni="123", semestre="8"))

    assert ok is False
    assert set(form.errors) == {"codigo", "dni", "semestre"}
    assert store.calls == []


def test_transport_failure_gives_generic_notice(student_service, store):
    store.fail_with = unavailable()
    form = StudentFormView(student_service)

    assert form.submit(student_form()) is False
    assert form.errors == {}
    assert form.notice == "Error al guardar el estudiante"
    assert form.submitting is False


def test_edit_form_prefills_and_updates(student_service, students_repo):
    student_id = student_service.create(student_form(email="juan@senati.pe"))
    student = students_repo.get_by_id(student_id)

    form = StudentFormView(student_service, student)
    assert form.is_edit
    assert form.data["email"] == "juan@senati.pe"
    assert form.data["telefono"] == ""

    form.change("apellidos", "Perez Rojas")
    assert form.submit() is True
    assert students_repo.get_by_id(student_id).apellidos == "Perez Rojas"
    assert form.saved_id == student_id


def test_change_clears_error_of_that_field(student_service):
    form = StudentFormView(student_service)
    form.submit(student_form(dni="1"))
    assert "dni" in form.errors

    form.change("dni", "12345678")

    assert "dni" not in form.errors


def test_second_submit_while_in_flight_is_refused(student_service, students_repo):
    form = StudentFormView(student_service)
    nested_results = []

    original_create = students_repo.create

    def create_and_resubmit(data):
        nested_results.append(form.submit(student_form(codigo="SEN002", dni="87654321")))
        return original_create(data)

    students_repo.create = create_and_resubmit

    assert form.submit(student_form()) is True
    assert nested_results == [False]
    assert [s.codigo for s in students_repo.list_all()] == ["SEN001"]


def test_list_orders_by_apellidos_and_filters_by_search(student_service):
    student_service.create(student_form(codigo="SEN001", dni="11111111", apellidos="Zapata"))
    student_service.create(student_form(codigo="SEN002", dni="22222222", apellidos="Alvarez"))
    view = StudentListView(student_service)

    assert view.sync(0) is True
    assert [s.apellidos for s in view.rows] == ["Alvarez", "Zapata"]

    view.set_search("zap")
    assert [s.codigo for s in view.visible] == ["SEN001"]


def test_list_refetches_only_when_refresh_counter_moves(student_service, store):
    view = StudentListView(student_service)
    view.sync(0)
    view.sync(0)
    assert store.calls.count("students.list_all") == 1

    view.sync(1)
    assert store.calls.count("students.list_all") == 2


def test_failed_delete_keeps_rows_and_sets_error(student_service, store):
    student_id = student_service.create(student_form())
    view = StudentListView(student_service)
    view.load()

    store.fail_with = StoreUnavailableError("gone")
    assert view.delete(student_id) is False

    assert [s.id for s in view.rows] == [student_id]
    assert view.error == "Error al eliminar el estudiante"


def test_successful_delete_refetches(student_service):
    keep = student_service.create(student_form())
    gone = student_service.create(student_form(codigo="SEN002", dni="87654321"))
    view = StudentListView(student_service)
    view.load()

    assert view.delete(gone) is True
    assert [s.id for s in view.rows] == [keep]


def test_load_failure_is_reported(student_service, store):
    store.fail_with = unavailable()
    view = StudentListView(student_service)

    assert view.load() is False
    assert view.error == "Error al cargar los datos"
    assert view.loading is False

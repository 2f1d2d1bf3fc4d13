from __future__ import annotations

from tests.fakes import student_form, unavailable


def _post_student(client, **overrides):
    data = {k: str(v) for k, v in student_form(**overrides).items() if k != "activo"}
    data["activo"] = "on"
    return client.post("/students/new", data=data)


def test_home_redirects_to_students(client):
    resp = client.get("/")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/students")


def test_invalid_student_is_rejected_with_field_message(client, store):
    resp = _post_student(client, dni="1234")

    assert resp.status_code == 400
    assert "El DNI debe tener 8 dígitos" in resp.get_data(as_text=True)
    assert store.mutations() == []


def test_student_create_then_listed(client):
    resp = _post_student(client)
    assert resp.status_code == 302

    page = client.get("/students").get_data(as_text=True)
    assert "Estudiante guardado correctamente" in page
    assert "SEN001" in page


def test_duplicate_dni_shows_field_message(client):
    _post_student(client)
    resp = _post_student(client, codigo="SEN002")

    assert resp.status_code == 400
    assert "Este DNI ya está registrado" in resp.get_data(as_text=True)


def test_unchecked_activo_stores_inactive(client, student_service):
    data = {k: str(v) for k, v in student_form().items() if k != "activo"}
    client.post("/students/new", data=data)

    assert [s.activo for s in student_service.list_students()] == [False]


def test_edit_unknown_student_redirects(client):
    resp = client.get("/students/99/edit")

    assert resp.status_code == 302


def test_attendance_without_student_is_blocked(client, store):
    resp = client.post(
        "/attendance/new",
        data={"student_id": "", "fecha": "2025-01-15", "estado": "presente", "curso": "Matemáticas I"},
    )

    assert resp.status_code == 400
    assert "Debe seleccionar un estudiante" in resp.get_data(as_text=True)
    assert "attendance.create" not in store.calls


def test_attendance_create_and_api_listing(client, student_service):
    sid = student_service.create(student_form())

    resp = client.post(
        "/attendance/new",
        data={"student_id": str(sid), "fecha": "2025-01-15", "estado": "tardanza",
              "hora_entrada": "08:20", "curso": "Matemáticas I"},
    )
    assert resp.status_code == 302
    assert "fecha=2025-01-15" in resp.headers["Location"]

    body = client.get("/api/attendance?fecha=2025-01-15&curso=Matem%C3%A1ticas%20I&seq=7").get_json()
    assert body["success"] is True
    assert body["seq"] == 7
    assert body["count"] == 1
    assert body["rows"][0]["estado"] == "tardanza"
    assert body["courses"] == ["Matemáticas I"]

    other_day = client.get("/api/attendance?fecha=2025-01-14").get_json()
    assert other_day["count"] == 0
    assert other_day["seq"] is None

    every_day = client.get("/api/attendance?fecha=").get_json()
    assert every_day["fecha"] is None
    assert every_day["count"] == 1


def test_attendance_roster_search_and_select(client, student_service):
    sid = student_service.create(student_form())

    page = client.get("/attendance/new?q=juan").get_data(as_text=True)
    assert f"student_id={sid}" in page

    page = client.get(f"/attendance/new?student_id={sid}").get_data(as_text=True)
    assert "Perez, Juan" in page
    assert "Cambiar" in page


def test_malformed_fecha_filter_warns(client):
    page = client.get("/attendance?fecha=15-01-2025").get_data(as_text=True)

    assert "Fecha de filtro inválida" in page


def test_student_delete_cascades_to_attendance(client, student_service, attendance_service):
    sid = student_service.create(student_form())
    attendance_service.create({"student_id": str(sid), "fecha": "2025-01-15", "curso": "Física I"})

    resp = client.post(f"/students/{sid}/delete")
    assert resp.status_code == 302

    assert student_service.list_students() == []
    assert list(attendance_service.list_entries()) == []


def test_attendance_delete_keeps_filters(client, student_service, attendance_service):
    sid = student_service.create(student_form())
    aid = attendance_service.create({"student_id": str(sid), "fecha": "2025-01-15", "curso": "Física I"})

    resp = client.post(f"/attendance/{aid}/delete", data={"fecha": "2025-01-15", "curso": "Física I"})

    assert resp.status_code == 302
    assert "fecha=2025-01-15" in resp.headers["Location"]
    assert list(attendance_service.list_entries()) == []
    with client.session_transaction() as sess:
        assert sess["app_state"]["refresh_attendance"] == 1
        assert sess["app_state"]["refresh_students"] == 0


def test_api_reports_store_failure(client, store):
    store.fail_with = unavailable()

    resp = client.get("/api/students?seq=3")

    assert resp.status_code == 503
    assert resp.get_json() == {"success": False, "seq": 3, "message": "Error al cargar los datos"}


def test_student_lookup_by_codigo(client, student_service):
    student_service.create(student_form())

    found = client.get("/api/students/by-codigo/SEN001")
    assert found.status_code == 200
    assert found.get_json()["student"]["dni"] == "12345678"

    assert client.get("/api/students/by-codigo/SEN999").status_code == 404


def test_student_attendance_history(client, student_service, attendance_service):
    sid = student_service.create(student_form())
    for fecha in ("2025-01-10", "2025-01-15"):
        attendance_service.create({"student_id": str(sid), "fecha": fecha, "curso": "Física I"})

    body = client.get(f"/api/students/{sid}/attendance").get_json()

    assert body["count"] == 2
    assert [r["fecha"] for r in body["rows"]] == ["2025-01-15", "2025-01-10"]
    assert client.get("/api/students/999/attendance").status_code == 404


def test_attendance_edit_keeps_its_student(client, student_service, attendance_service):
    sid = student_service.create(student_form())
    other = student_service.create(student_form(codigo="SEN002", dni="87654321", nombres="María"))
    aid = attendance_service.create({"student_id": str(sid), "fecha": "2025-01-15", "curso": "Física I"})

    resp = client.post(
        f"/attendance/{aid}/edit",
        data={"student_id": str(other), "fecha": "2025-01-15", "estado": "ausente", "curso": "Física I"},
    )

    assert resp.status_code == 302
    entry = attendance_service.get(aid).entry
    assert entry.student_id == sid
    assert entry.estado.value == "ausente"


def test_every_list_request_fetches_and_echoes_seq(client, store):
    client.get("/api/students?seq=1")
    second = client.get("/api/students?seq=2").get_json()
    client.get("/students")

    assert second["seq"] == 2
    assert store.calls.count("students.list_all") == 3

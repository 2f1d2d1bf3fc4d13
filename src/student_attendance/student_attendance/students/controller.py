from __future__ import annotations

from typing import Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.constants import GENERIC_LOAD_ERROR
from ..core.enums import View
from ..core.exceptions import NotFoundError, StoreError
from ..state import AppState
from .model import Student
from .views import StudentFormView, StudentListView


def student_to_json(s: Student) -> dict:
    return {
        "id": s.id,
        "codigo": s.codigo,
        "nombres": s.nombres,
        "apellidos": s.apellidos,
        "dni": s.dni,
        "carrera": s.carrera,
        "semestre": s.semestre,
        "email": s.email,
        "telefono": s.telefono,
        "activo": s.activo,
        "created_at": s.created_at.isoformat() if s.created_at else None,
        "updated_at": s.updated_at.isoformat() if s.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="home")
    def home():
        state = AppState.from_session(session)
        if state.current_view == View.ATTENDANCE:
            return redirect(url_for("attendance_list"))
        return redirect(url_for("students_list"))

    @app.route("/students", endpoint="students_list")
    def students_list():
        state = AppState.from_session(session)
        state.switch_view(View.STUDENTS)
        state.close_student_form()

        view = StudentListView(container.student_service)
        view.set_search(request.args.get("q"))
        view.sync(state.refresh_students)
        if view.error:
            flash(view.error, "danger")

        state.to_session(session)
        return render_template("students/list.html", view=view, active_page="students")

    def _render_form(student: Optional[Student]):
        state = AppState.from_session(session)
        state.open_student_form(student.id if student else None)

        form = StudentFormView(container.student_service, student)
        status = 200

        if request.method == "POST":
            raw = request.form.to_dict()
            raw["activo"] = "activo" in request.form
            if form.submit(raw):
                state.student_saved()
                state.to_session(session)
                flash("Estudiante guardado correctamente", "success")
                return redirect(url_for("students_list"))
            if form.notice:
                flash(form.notice, "danger")
            status = 400

        state.to_session(session)
        return render_template("students/form.html", form=form, active_page="students"), status

    @app.route("/students/new", methods=["GET", "POST"], endpoint="student_new")
    def student_new():
        return _render_form(None)

    @app.route("/students/<int:student_id>/edit", methods=["GET", "POST"], endpoint="student_edit")
    def student_edit(student_id: int):
        try:
            student = container.student_service.get(student_id)
        except NotFoundError as e:
            flash(str(e), "warning")
            return redirect(url_for("students_list"))
        except StoreError:
            app.logger.exception("error loading student id=%s", student_id)
            flash(GENERIC_LOAD_ERROR, "danger")
            return redirect(url_for("students_list"))
        return _render_form(student)

    @app.route("/students/<int:student_id>/delete", methods=["POST"], endpoint="student_delete")
    def student_delete(student_id: int):
        state = AppState.from_session(session)
        view = StudentListView(container.student_service)

        # the redirect re-fetches the list
        if view.delete(student_id, reload=False):
            state.students_changed()
            flash("Estudiante eliminado.", "success")
        else:
            flash(view.error, "danger")

        state.to_session(session)
        return redirect(url_for("students_list", q=request.form.get("q") or None))

    @app.route("/api/students", methods=["GET"], endpoint="api_students")
    def api_students():
        view = StudentListView(container.student_service)
        view.set_search(request.args.get("q"))
        seq = request.args.get("seq", type=int)

        if not view.load():
            return jsonify({"success": False, "seq": seq, "message": view.error}), 503

        return jsonify(
            {
                "success": True,
                "seq": seq,
                "count": len(view.visible),
                "students": [student_to_json(s) for s in view.visible],
            }
        )

    @app.route("/api/students/by-codigo/<codigo>", methods=["GET"], endpoint="api_student_by_codigo")
    def api_student_by_codigo(codigo: str):
        try:
            student = container.student_service.find_by_codigo(codigo)
        except StoreError:
            app.logger.exception("error looking up codigo=%s", codigo)
            return jsonify({"success": False, "message": GENERIC_LOAD_ERROR}), 503

        if student is None:
            return jsonify({"success": False, "message": "El estudiante no existe"}), 404
        return jsonify({"success": True, "student": student_to_json(student)})

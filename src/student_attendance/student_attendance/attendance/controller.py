from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.datetime_utils import parse_iso_date, today
from ..container import Container
from ..core.constants import GENERIC_LOAD_ERROR
from ..core.enums import View
from ..core.exceptions import NotFoundError, StoreError
from ..state import AppState
from .model import AttendanceWithStudent
from .views import AttendanceFormView, AttendanceListView


def register(app: Flask, container: Container) -> None:
    def _fecha_filter() -> Optional[date]:
        """Missing -> today; empty -> every date; malformed -> today with a warning."""
        if "fecha" not in request.args:
            return today()
        value = request.args.get("fecha", "").strip()
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            flash("Fecha de filtro inválida, se muestra la de hoy", "warning")
            return today()

    def _list_view() -> AttendanceListView:
        view = AttendanceListView(container.attendance_service, curso=request.args.get("curso", ""))
        # None here means every date, not the default of today
        view.fecha = _fecha_filter()
        return view

    @app.route("/attendance", endpoint="attendance_list")
    def attendance_list():
        state = AppState.from_session(session)
        state.switch_view(View.ATTENDANCE)
        state.close_attendance_form()

        view = _list_view()
        view.sync(state.refresh_attendance)
        if view.error:
            flash(view.error, "danger")

        state.to_session(session)
        return render_template("attendance/list.html", view=view, active_page="attendance")

    def _render_form(row: Optional[AttendanceWithStudent]):
        state = AppState.from_session(session)
        state.open_attendance_form(row.id if row else None)

        form = AttendanceFormView(container.attendance_service, container.student_service, row)
        form.load_roster()
        status = 200

        if request.method == "POST":
            raw = request.form.to_dict()
            if raw.get("student_id"):
                form.select(raw["student_id"])
            if form.submit(raw):
                state.attendance_saved()
                state.to_session(session)
                flash("Asistencia guardada correctamente", "success")
                return redirect(url_for("attendance_list", fecha=form.data.get("fecha") or ""))
            if form.notice:
                flash(form.notice, "danger")
            status = 400
        else:
            if request.args.get("change") and form.change_selection():
                form.show_roster = True
            if request.args.get("student_id"):
                form.select(request.args["student_id"])
            if "q" in request.args:
                form.search(request.args.get("q"))

        state.to_session(session)
        return render_template("attendance/form.html", form=form, active_page="attendance"), status

    @app.route("/attendance/new", methods=["GET", "POST"], endpoint="attendance_new")
    def attendance_new():
        return _render_form(None)

    @app.route("/attendance/<int:attendance_id>/edit", methods=["GET", "POST"], endpoint="attendance_edit")
    def attendance_edit(attendance_id: int):
        try:
            row = container.attendance_service.get(attendance_id)
        except NotFoundError as e:
            flash(str(e), "warning")
            return redirect(url_for("attendance_list"))
        except StoreError:
            app.logger.exception("error loading attendance id=%s", attendance_id)
            flash(GENERIC_LOAD_ERROR, "danger")
            return redirect(url_for("attendance_list"))
        return _render_form(row)

    @app.route("/attendance/<int:attendance_id>/delete", methods=["POST"], endpoint="attendance_delete")
    def attendance_delete(attendance_id: int):
        state = AppState.from_session(session)
        view = AttendanceListView(container.attendance_service)

        if view.delete(attendance_id, reload=False):
            state.attendance_changed()
            flash("Registro de asistencia eliminado.", "success")
        else:
            flash(view.error, "danger")

        state.to_session(session)
        return redirect(
            url_for(
                "attendance_list",
                fecha=request.form.get("fecha", ""),
                curso=request.form.get("curso") or None,
            )
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    def api_attendance():
        """JSON list for clients that poll with their own request sequence.

        `seq` is echoed back untouched so the caller can drop stale responses.
        """

        view = _list_view()
        seq = request.args.get("seq", type=int)

        if not view.load():
            return jsonify({"success": False, "seq": seq, "message": view.error}), 503

        return jsonify(
            {
                "success": True,
                "seq": seq,
                "fecha": view.fecha.isoformat() if view.fecha else None,
                "curso": view.curso or None,
                "courses": view.courses,
                "count": len(view.rows),
                "rows": view.ui_rows,
            }
        )

    @app.route("/api/students/<int:student_id>/attendance", methods=["GET"], endpoint="api_student_attendance")
    def api_student_attendance(student_id: int):
        try:
            student = container.student_service.get(student_id)
            entries = container.attendance_service.list_for_student(student_id)
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except StoreError:
            app.logger.exception("error loading attendance of student id=%s", student_id)
            return jsonify({"success": False, "message": GENERIC_LOAD_ERROR}), 503

        rows = [container.attendance_service.to_ui(AttendanceWithStudent(entry=e, student=student)) for e in entries]
        return jsonify({"success": True, "student_id": student.id, "count": len(rows), "rows": rows})

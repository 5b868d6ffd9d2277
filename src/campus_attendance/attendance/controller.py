from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.http import json_body, json_errors, login_required, session_user_id
from ..common.validators import parse_optional_id
from ..container import Container

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student/me/dashboard", methods=["GET"], endpoint="api_student_dashboard")
    @login_required
    @json_errors("Server error")
    def student_dashboard():
        data = container.dashboard_service.student_dashboard(session_user_id())
        return jsonify(data), 200

    @app.route("/api/teacher/me/dashboard", methods=["GET"], endpoint="api_teacher_dashboard")
    @login_required
    @json_errors("Server error")
    def teacher_dashboard():
        teacher_id = None
        # ?teacherId= is a development helper only
        if app.config.get("DEBUG"):
            teacher_id = parse_optional_id(request.args.get("teacherId"), "teacherId")
        data = container.dashboard_service.teacher_dashboard(user_id=session_user_id(), teacher_id=teacher_id)
        return jsonify(data), 200

    @app.route(
        "/api/admin/subjects/<int:subject_id>/attendance-sheet",
        methods=["GET", "POST"],
        endpoint="api_attendance_sheet",
    )
    @login_required
    @json_errors("Something went wrong while loading the attendance sheet.")
    def attendance_sheet(subject_id: int):
        viewer_id = session_user_id()
        if request.method == "POST":
            updates = json_body().get("updates")
            sheet = container.sheet_service.update_marks(viewer_id, subject_id, updates)
            return jsonify({"message": "Attendance updated successfully.", **sheet.to_dict()}), 200

        sheet = container.sheet_service.get_sheet(viewer_id, subject_id, request.args.get("q"))
        return jsonify(sheet.to_dict()), 200

    @app.route(
        "/api/admin/subjects/<int:subject_id>/attendance-sheet.xlsx",
        methods=["GET"],
        endpoint="api_attendance_sheet_export",
    )
    @login_required
    @json_errors("Something went wrong while exporting the attendance sheet.")
    def attendance_sheet_export(subject_id: int):
        output = container.sheet_service.export_xlsx(session_user_id(), subject_id, request.args.get("q"))
        return send_file(
            output,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"attendance_subject_{subject_id}.xlsx",
        )

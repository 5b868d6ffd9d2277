from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, json_errors, session_user_id
from ..common.validators import parse_optional_id
from ..container import Container


def _profile_payload() -> dict:
    # The logged-in user always wins over a userId sent in the body.
    data = dict(json_body())
    uid = session_user_id()
    if uid is not None:
        data["userId"] = uid
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/complete-profile/student", methods=["POST"], endpoint="api_complete_student_profile")
    @json_errors("Something went wrong while completing student profile.")
    def complete_student_profile():
        student = container.profile_service.complete_student_profile(_profile_payload())
        return jsonify(
            {
                "message": "Student profile completed successfully.",
                "studentId": student.student_id,
                "redirectTo": "/dashboard/student",
            }
        ), 201

    @app.route("/api/complete-profile/teacher", methods=["POST"], endpoint="api_complete_teacher_profile")
    @json_errors("Something went wrong while completing teacher profile.")
    def complete_teacher_profile():
        teacher = container.profile_service.complete_teacher_profile(_profile_payload())
        return jsonify(
            {
                "message": "Teacher profile completed successfully.",
                "teacherId": teacher.teacher_id,
                "redirectTo": "/dashboard/teacher",
            }
        ), 201

    @app.route("/api/complete-profile/options", methods=["GET"], endpoint="api_profile_options")
    @json_errors("Something went wrong while loading profile options.")
    def profile_options():
        branch_id = parse_optional_id(request.args.get("branchId"), "branchId")
        return jsonify(container.profile_service.form_options(branch_id)), 200

from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/email-verify", methods=["POST"], endpoint="api_email_verify")
    @json_errors("Internal Server error")
    def email_verify():
        data = json_body()
        container.verification_service.verify(str(data.get("email") or ""), str(data.get("otp") or ""))
        return jsonify({"message": "Email verified successfully", "redirectTo": "/login"}), 200

    @app.route("/api/resend-verification", methods=["POST"], endpoint="api_resend_verification")
    @json_errors("Internal server error")
    def resend_verification():
        data = json_body()
        container.verification_service.resend(str(data.get("email") or ""))
        return jsonify({"message": "New verification code sent to your email"}), 200

from __future__ import annotations

from flask import Flask, jsonify, redirect, session

from ..common.http import SESSION_USER_KEY, json_body, json_errors, session_user_id
from ..container import Container
from .service import landing_path


def register(app: Flask, container: Container) -> None:
    @app.route("/api/signup", methods=["POST"], endpoint="api_signup")
    @json_errors("Internal server error")
    def signup():
        data = json_body()
        result = container.auth_service.signup(
            email=data.get("email"),
            phone=data.get("phone"),
            password=data.get("password"),
            role=data.get("role"),
        )
        body = {"message": result.message, "redirectTo": result.redirect_to}
        if not result.created:
            return jsonify(body), 200

        body["user"] = result.user.to_public_dict()
        return jsonify(body), 201

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    @json_errors("Something went wrong while logging in.")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email"), data.get("password"))

        remember = bool(data.get("rememberMe"))
        app.session_interface.start(app, session, remember=remember)
        session[SESSION_USER_KEY] = user.user_id

        app.logger.info("Login user_id=%s remember=%s", user.user_id, remember)
        return jsonify({"message": "Login successful.", "redirectTo": landing_path(user)}), 200

    @app.route("/api/logout", methods=["GET", "POST"], endpoint="api_logout")
    @json_errors("Something went wrong")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out successfully"}), 200

    @app.route("/dashboard", endpoint="dashboard")
    @json_errors("Something went wrong")
    def dashboard():
        return redirect(container.auth_service.dashboard_redirect(session_user_id()))

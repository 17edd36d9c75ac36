from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import current_user, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        role_s = data.get("role") or None
        try:
            expected_role = Role(role_s) if role_s else None
        except ValueError:
            raise ValidationError("Unknown role") from None

        user = container.auth_service.authenticate(
            data.get("email", ""),
            data.get("password", ""),
            expected_role=expected_role,
        )

        session.clear()
        session.permanent = bool(data.get("remember"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = user.user_id
        session["role"] = user.role.value
        session["name"] = user.display_name

        return jsonify({"user_id": user.user_id, "role": user.role.value, "name": user.display_name})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        user = current_user()
        return jsonify({"user_id": user.user_id, "role": user.role.value, "name": user.display_name})

from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import current_user, json_body, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/faculty", endpoint="admin_faculty")
    @role_required(Role.ADMIN)
    def admin_faculty():
        return jsonify([asdict(f) for f in container.faculty_service.list_faculty(current_user())])

    @app.route("/api/admin/faculty", methods=["POST"], endpoint="add_faculty")
    @role_required(Role.ADMIN)
    def add_faculty():
        data = json_body()
        faculty_id = container.faculty_service.create_faculty(
            current_user(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            department=data.get("department", ""),
        )
        return jsonify({"faculty_id": faculty_id}), 201

    @app.route("/api/admin/faculty/<faculty_id>", methods=["PUT"], endpoint="update_faculty")
    @role_required(Role.ADMIN)
    def update_faculty(faculty_id: str):
        data = json_body()
        container.faculty_service.update_faculty(
            current_user(),
            faculty_id,
            name=data.get("name", ""),
            department=data.get("department", ""),
        )
        return jsonify({"ok": True})

    @app.route("/api/admin/faculty/<faculty_id>", methods=["DELETE"], endpoint="delete_faculty")
    @role_required(Role.ADMIN)
    def delete_faculty(faculty_id: str):
        container.faculty_service.delete_faculty(current_user(), faculty_id)
        return jsonify({"ok": True})

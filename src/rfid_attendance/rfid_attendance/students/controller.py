from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import current_user, json_body, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student/profile", endpoint="student_profile")
    @role_required(Role.STUDENT)
    def student_profile():
        student = container.student_service.get_profile(current_user())
        return jsonify(asdict(student))

    @app.route("/api/student/credentials", methods=["PUT", "POST"], endpoint="student_credentials")
    @role_required(Role.STUDENT)
    def student_credentials():
        data = json_body()
        student = container.student_service.update_credentials(
            current_user(),
            rfid=data.get("rfid"),
            mac_address=data.get("mac_address") or data.get("macAddress"),
        )
        return jsonify(asdict(student))

    @app.route("/api/admin/students", endpoint="admin_students")
    @role_required(Role.ADMIN)
    def admin_students():
        return jsonify(container.student_service.list_admin_view(current_user()))

    @app.route("/api/admin/students/<student_id>", methods=["PUT"], endpoint="update_student")
    @role_required(Role.ADMIN)
    def update_student(student_id: str):
        data = json_body()
        container.student_service.update_student(
            current_user(),
            student_id,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            address=data.get("address"),
            section_id=data.get("section_id") or None,
        )
        return jsonify({"ok": True})

    @app.route("/api/admin/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @role_required(Role.ADMIN)
    def delete_student(student_id: str):
        container.student_service.delete_student(current_user(), student_id)
        return jsonify({"ok": True})

    @app.route("/api/admin/rfid-registrations", endpoint="rfid_registrations")
    @role_required(Role.ADMIN)
    def rfid_registrations():
        return jsonify(container.student_service.list_rfid_registrations(current_user()))

    @app.route("/api/faculty/students", endpoint="faculty_students")
    @role_required(Role.FACULTY)
    def faculty_students():
        return jsonify(container.student_service.list_for_faculty(current_user()))

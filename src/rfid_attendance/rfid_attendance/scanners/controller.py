from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, json_body, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/scanners", endpoint="admin_scanners")
    @role_required(Role.ADMIN)
    def admin_scanners():
        return jsonify(container.scanner_service.list_scanners(current_user()))

    @app.route("/api/admin/scanners", methods=["POST"], endpoint="add_scanner")
    @app.route("/api/admin/scanners/<scanner_id>", methods=["PUT"], endpoint="update_scanner")
    @role_required(Role.ADMIN)
    def save_scanner(scanner_id=None):
        data = json_body()
        saved_id = container.scanner_service.save_scanner(
            current_user(),
            device_id=data.get("device_id", ""),
            section_id=data.get("section_id", ""),
            scanner_id=scanner_id,
        )
        return jsonify({"scanner_id": saved_id}), 201 if scanner_id is None else 200

    @app.route("/api/admin/scanners/<scanner_id>", methods=["DELETE"], endpoint="delete_scanner")
    @role_required(Role.ADMIN)
    def delete_scanner(scanner_id: str):
        container.scanner_service.delete_scanner(current_user(), scanner_id)
        return jsonify({"ok": True})

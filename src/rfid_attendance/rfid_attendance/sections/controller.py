from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_hhmm
from ..common.web import current_user, json_body, role_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..schedule_parser.client import parse_output


def _period_json(period) -> dict:
    return {
        "id": period.period_id,
        "subject": period.subject,
        "start_time": format_hhmm(period.start_time),
        "end_time": format_hhmm(period.end_time),
        "faculty_id": period.faculty_id,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sections", endpoint="sections")
    @role_required(Role.ADMIN, Role.FACULTY)
    def sections():
        return jsonify([asdict(s) for s in container.section_service.list_sections(current_user())])

    @app.route("/api/admin/sections", methods=["POST"], endpoint="add_section")
    @app.route("/api/admin/sections/<section_id>", methods=["PUT"], endpoint="update_section")
    @role_required(Role.ADMIN)
    def save_section(section_id=None):
        data = json_body()
        saved_id = container.section_service.save_section(
            current_user(),
            name=data.get("name", ""),
            adviser_id=data.get("adviser_id", ""),
            section_id=section_id,
        )
        return jsonify({"section_id": saved_id}), 201 if section_id is None else 200

    @app.route("/api/admin/sections/<section_id>", methods=["DELETE"], endpoint="delete_section")
    @role_required(Role.ADMIN)
    def delete_section(section_id: str):
        container.section_service.delete_section(current_user(), section_id)
        return jsonify({"ok": True})

    @app.route("/api/sections/<section_id>/schedules", endpoint="section_schedules")
    @role_required(Role.ADMIN, Role.FACULTY)
    def section_schedules(section_id: str):
        return jsonify(container.section_service.list_schedules(current_user(), section_id))

    @app.route("/api/faculty/sections/<section_id>/schedules", endpoint="faculty_schedules")
    @role_required(Role.ADMIN, Role.FACULTY)
    def faculty_schedules(section_id: str):
        periods = container.section_service.faculty_schedules(current_user(), section_id)
        return jsonify([_period_json(p) for p in periods])

    @app.route("/api/admin/sections/<section_id>/schedules", methods=["POST"], endpoint="add_schedules")
    @role_required(Role.ADMIN)
    def add_schedules(section_id: str):
        data = request.get_json(silent=True)
        rows = data.get("schedules") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise ValidationError("Expected a list of schedules")
        ids = container.section_service.add_schedules(current_user(), section_id, rows)
        return jsonify({"ids": list(ids)}), 201

    @app.route("/api/admin/schedules/<schedule_id>", methods=["PUT"], endpoint="update_schedule")
    @role_required(Role.ADMIN)
    def update_schedule(schedule_id: str):
        data = json_body()
        container.section_service.update_schedule(
            current_user(),
            schedule_id,
            subject=data.get("subject", ""),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            faculty_id=data.get("facultyId") or None,
        )
        return jsonify({"ok": True})

    @app.route("/api/admin/schedules/<schedule_id>", methods=["DELETE"], endpoint="delete_schedule")
    @role_required(Role.ADMIN)
    def delete_schedule(schedule_id: str):
        container.section_service.delete_schedule(current_user(), schedule_id)
        return jsonify({"ok": True})

    @app.route("/api/admin/schedule-image", methods=["POST"], endpoint="scan_schedule_image")
    @role_required(Role.ADMIN)
    def scan_schedule_image():
        upload = request.files.get("image")
        image_bytes = upload.read() if upload else b""
        parsed = container.section_service.scan_schedule_image(current_user(), image_bytes)
        return jsonify(
            {
                "dayOfWeek": parsed.day_of_week,
                "schedules": [
                    {"subject": e.subject, "startTime": e.start_time, "endTime": e.end_time}
                    for e in parsed.entries
                ],
            }
        )

    @app.route("/api/admin/sections/<section_id>/schedule-import", methods=["POST"], endpoint="import_schedules")
    @role_required(Role.ADMIN)
    def import_schedules(section_id: str):
        data = json_body()
        if not isinstance(data.get("schedules"), list):
            raise ValidationError("Expected a list of schedules")
        parsed = parse_output(dict(data))
        ids = container.section_service.import_parsed_schedules(
            current_user(),
            section_id,
            parsed,
            faculty_ids=data.get("facultyIds") or None,
        )
        return jsonify({"ids": list(ids)}), 201

from __future__ import annotations

import csv
import io
from datetime import date
from urllib.parse import quote

from flask import Flask, jsonify, request
from werkzeug.datastructures import Headers

from ..common.datetime_utils import format_hhmm, parse_iso_date, parse_month
from ..common.web import current_user, json_body, login_required, role_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import AttendanceOutcome, DailyAttendance
from .service import SectionGrid


def _arg_date(name: str, default: date) -> date:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: expected YYYY-MM-DD") from None


def _arg_month(default: date) -> date:
    value = request.args.get("month")
    if not value:
        return default.replace(day=1)
    try:
        return parse_month(value)
    except ValueError:
        raise ValidationError("Invalid month: expected YYYY-MM") from None


def _outcome_json(outcome: AttendanceOutcome) -> dict:
    return {
        "schedule_id": outcome.period.period_id,
        "subject": outcome.period.subject,
        "start_time": format_hhmm(outcome.period.start_time),
        "end_time": format_hhmm(outcome.period.end_time),
        "status": outcome.status.value,
        "scanned_at": outcome.matched_scan_time.strftime("%H:%M:%S") if outcome.matched_scan_time else None,
    }


def _daily_json(record: DailyAttendance) -> dict:
    return {
        "date": record.day.strftime("%Y-%m-%d"),
        "time_in": record.time_in.strftime("%H:%M:%S") if record.time_in else None,
        "time_out": record.time_out.strftime("%H:%M:%S") if record.time_out else None,
        "status": record.status.value,
    }


def _attachment_headers(filename: str) -> Headers:
    # ASCII fallback plus an RFC 5987 filename* carrying the full name.
    headers = Headers()
    fallback = filename.encode("ascii", "ignore").decode("ascii") or "attendance.csv"
    headers.set("Content-Disposition", "attachment", filename=fallback, **{"filename*": f"UTF-8''{quote(filename)}"})
    return headers


def register(app: Flask, container: Container) -> None:
    def _write_grid_csv(*, grid: SectionGrid, filename: str):
        """Students as rows, days of the month as columns."""

        day_keys = [d.strftime("%Y-%m-%d") for d in grid.days]
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["student_name", *day_keys])
        writer.writeheader()
        for row in grid.rows:
            writer.writerow({"student_name": row["student_name"], **row["attendance"]})

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers=_attachment_headers(filename),
        )

    def _grid(section_id: str) -> SectionGrid:
        period_id = request.args.get("period_id") or ""
        if not period_id:
            raise ValidationError("Please select a subject.")
        month = _arg_month(container.clock().date())
        return container.attendance_service.section_month_grid(current_user(), section_id, period_id, month)

    @app.route("/api/student/dashboard", endpoint="student_dashboard")
    @role_required(Role.STUDENT)
    def student_dashboard():
        user = current_user()
        day = _arg_date("date", container.clock().date())
        outcomes = container.attendance_service.student_day_report(user, user.user_id, day)
        logs = container.attendance_service.student_daily_logs(user, user.user_id)
        return jsonify(
            {
                "date": day.strftime("%Y-%m-%d"),
                "periods": [_outcome_json(o) for o in outcomes],
                "history": [_daily_json(r) for r in logs],
            }
        )

    @app.route("/api/students/<student_id>/day-report", endpoint="student_day_report")
    @login_required
    def student_day_report(student_id: str):
        day = _arg_date("date", container.clock().date())
        outcomes = container.attendance_service.student_day_report(current_user(), student_id, day)
        return jsonify([_outcome_json(o) for o in outcomes])

    @app.route("/api/student/calendar", endpoint="student_calendar")
    @role_required(Role.STUDENT)
    def student_calendar():
        user = current_user()
        days = container.attendance_service.attended_days(user, user.user_id)
        return jsonify([d.strftime("%Y-%m-%d") for d in days])

    @app.route("/api/faculty/dashboard", endpoint="faculty_dashboard")
    @role_required(Role.FACULTY, Role.ADMIN)
    def faculty_dashboard():
        return jsonify(container.attendance_service.faculty_today(current_user(), container.clock()))

    @app.route("/api/sections/<section_id>/attendance", endpoint="section_grid")
    @role_required(Role.ADMIN, Role.FACULTY)
    def section_grid(section_id: str):
        grid = _grid(section_id)
        return jsonify(
            {
                "section_id": grid.section_id,
                "schedule_id": grid.period.period_id,
                "subject": grid.period.subject,
                "days": [d.strftime("%Y-%m-%d") for d in grid.days],
                "rows": grid.rows,
            }
        )

    @app.route("/api/sections/<section_id>/attendance.csv", endpoint="section_grid_csv")
    @role_required(Role.ADMIN, Role.FACULTY)
    def section_grid_csv(section_id: str):
        grid = _grid(section_id)
        month = grid.days[0].strftime("%Y%m") if grid.days else "month"
        filename = f"attendance_{grid.period.subject.replace(' ', '_')}_{month}.csv"
        return _write_grid_csv(grid=grid, filename=filename)

    @app.route("/api/admin/scanner-simulator", methods=["POST"], endpoint="scanner_simulator")
    @role_required(Role.ADMIN)
    def scanner_simulator():
        data = json_body()
        result = container.scan_service.record_rfid_scan(
            current_user(),
            data.get("rfid", ""),
            now=container.clock(),
            schedule_ref=data.get("schedule_ref") or None,
        )
        return jsonify(
            {
                "student_id": result.student_id,
                "student_name": result.student_name,
                "rfid": result.rfid,
                "log_type": result.log_type.value,
                "scanned_at": result.scanned_at.strftime("%Y-%m-%d %H:%M:%S"),
                "schedule_ref": result.schedule_ref,
            }
        ), 201

    @app.route("/api/admin/ping-history", endpoint="ping_history")
    @role_required(Role.ADMIN)
    def ping_history():
        page = request.args.get("page", 1, type=int)
        result = container.scan_service.ping_history(current_user(), page=page)
        return jsonify({"rows": result.rows, "page": result.page, "total_pages": result.total_pages})

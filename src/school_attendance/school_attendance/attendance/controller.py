from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import (
    admin_required,
    current_user_id,
    error_response,
    json_error,
    login_required,
    student_required,
)
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..geofence.sources import ReportedPositionSource
from .service import describe_outcome, to_view


def _parse_status(value, default: AttendanceStatus | None = None) -> AttendanceStatus:
    if value in (None, "") and default is not None:
        return default
    try:
        return AttendanceStatus(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown status {value!r}") from None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/location/check", methods=["POST"], endpoint="location_check")
    @login_required
    def location_check():
        """Dry-run geofence check used by the location status panel."""
        data = request.get_json(silent=True) or {}
        try:
            source = ReportedPositionSource.from_payload(data)
            outcome = container.checkin_service.check_position(source)
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "outcome": outcome.to_dict(), "message": describe_outcome(outcome)})

    @app.route("/api/checkin", methods=["POST"], endpoint="checkin")
    @student_required
    def checkin():
        data = request.get_json(silent=True) or {}
        try:
            source = ReportedPositionSource.from_payload(data)
            result = container.checkin_service.check_in(
                current_user_id(),
                source,
                face_sample=data.get("face_descriptor"),
            )
        except Exception as e:
            return error_response(e)

        body = {
            "success": result.recorded,
            "message": result.message,
            "outcome": result.outcome.to_dict(),
            "face_score": result.face_score,
            "record": to_view(result.record) if result.record else None,
        }
        return jsonify(body), (201 if result.recorded else 200)

    @app.route("/api/me/history", methods=["GET"], endpoint="my_history")
    @login_required
    def my_history():
        limit = request.args.get("limit", default=DEFAULT_HISTORY_LIMIT, type=int)
        try:
            data = container.checkin_service.history_for_student(current_user_id(), limit=max(1, min(limit, 365)))
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "records": data})

    @app.route("/api/admin/checkin/manual", methods=["POST"], endpoint="admin_manual_checkin")
    @admin_required
    def admin_manual_checkin():
        data = request.get_json(silent=True) or {}
        try:
            status = _parse_status(data.get("status"), AttendanceStatus.PRESENT)
        except ValueError as e:
            return json_error(str(e), 400)
        if data.get("student_id") is None:
            return json_error("student_id is required", 400)
        try:
            student_id = int(data["student_id"])
        except (TypeError, ValueError):
            return json_error("student_id must be an integer", 400)

        try:
            record = container.checkin_service.manual_check_in(
                student_id,
                status=status,
                notes=(data.get("notes") or "").strip() or None,
            )
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "record": to_view(record)}), 201

    @app.route("/api/admin/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="admin_update_attendance")
    @admin_required
    def admin_update_attendance(attendance_id: int):
        data = request.get_json(silent=True) or {}
        try:
            status = _parse_status(data.get("status"))
        except ValueError as e:
            return json_error(str(e), 400)

        try:
            container.checkin_service.update_record(attendance_id, status=status, notes=data.get("notes"))
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/admin/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="admin_delete_attendance")
    @admin_required
    def admin_delete_attendance(attendance_id: int):
        try:
            container.checkin_service.delete_record(attendance_id)
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True})

from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_user_id, error_response, json_error, login_required
from ..container import Container
from ..core.constants import DEFAULT_STATS_DAYS


def register(app: Flask, container: Container) -> None:
    def _date_arg(name: str, default: date) -> date:
        value = request.args.get(name)
        return parse_iso_date(value) if value else default

    @app.route("/api/me/stats", methods=["GET"], endpoint="my_stats")
    @login_required
    def my_stats():
        days = request.args.get("days", default=DEFAULT_STATS_DAYS, type=int)
        try:
            stats = container.report_service.student_stats(current_user_id(), days=days)
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "stats": stats.to_dict()})

    @app.route("/api/admin/reports/daily", methods=["GET"], endpoint="admin_daily_report")
    @admin_required
    def admin_daily_report():
        try:
            day = _date_arg("date", date.today())
        except ValueError:
            return json_error("date must be YYYY-MM-DD", 400)
        try:
            summary = container.report_service.daily_summary(day)
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "summary": summary.to_dict()})

    @app.route("/api/admin/reports/weekly", methods=["GET"], endpoint="admin_weekly_report")
    @admin_required
    def admin_weekly_report():
        try:
            summaries = container.report_service.weekly_summary()
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "days": [s.to_dict() for s in summaries]})

    @app.route("/api/admin/reports/export", methods=["GET"], endpoint="admin_export_report")
    @admin_required
    def admin_export_report():
        today = date.today()
        try:
            start = _date_arg("start", today - timedelta(days=DEFAULT_STATS_DAYS - 1))
            end = _date_arg("end", today)
        except ValueError:
            return json_error("start/end must be YYYY-MM-DD", 400)
        student_id = request.args.get("student_id", type=int)

        try:
            content = container.report_service.export_csv(start=start, end=end, student_id=student_id)
        except Exception as e:
            return error_response(e)

        filename = f"attendance-{start.isoformat()}-to-{end.isoformat()}.csv"
        return app.response_class(
            content.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

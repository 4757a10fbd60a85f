from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import (
    admin_required,
    current_user_id,
    error_response,
    json_error,
    student_required,
)
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except Exception as e:
            return error_response(e)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        return jsonify(
            {
                "success": True,
                "user": {
                    "user_id": s_user.user_id,
                    "full_name": s_user.full_name,
                    "role": s_user.role.value,
                    "student_code": s_user.student_code,
                },
            }
        )

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me/face", methods=["POST"], endpoint="enroll_face")
    @student_required
    def enroll_face():
        data = request.get_json(silent=True) or {}
        try:
            container.student_service.enroll_face(current_user_id(), data.get("descriptor") or [])
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "message": "Face enrolled"})

    @app.route("/api/admin/students", methods=["GET"], endpoint="admin_list_students")
    @admin_required
    def admin_list_students():
        active_only = request.args.get("active_only") in {"1", "true", "yes"}
        try:
            students = container.student_service.list_students(active_only=active_only)
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "students": [container.student_service.to_view(s) for s in students]})

    @app.route("/api/admin/students", methods=["POST"], endpoint="admin_create_student")
    @admin_required
    def admin_create_student():
        data = request.get_json(silent=True) or {}
        try:
            user_id = container.student_service.create_student(
                full_name=data.get("full_name", ""),
                username=data.get("username", ""),
                password=data.get("password", ""),
                student_code=data.get("student_code", ""),
            )
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/admin/students/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_student")
    @admin_required
    def admin_delete_student(user_id: int):
        try:
            container.student_service.delete_student(user_id)
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/admin/students/<int:user_id>/active", methods=["POST"], endpoint="admin_set_student_active")
    @admin_required
    def admin_set_student_active(user_id: int):
        data = request.get_json(silent=True) or {}
        if "is_active" not in data:
            return json_error("is_active is required", 400)
        try:
            container.student_service.set_active(user_id, is_active=bool(data["is_active"]))
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True})

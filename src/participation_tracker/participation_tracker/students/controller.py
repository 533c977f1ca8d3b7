from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import (
    current_role,
    current_user_id,
    domain_error_response,
    json_error,
    login_required,
    role_required,
    unexpected_error_response,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", methods=["GET"], endpoint="list_students")
    @role_required(Role.MENTOR)
    def list_students():
        try:
            return jsonify({"success": True, "students": container.student_service.list_active()}), 200
        except Exception:
            return unexpected_error_response("listing students")

    @app.route("/api/users/me", methods=["GET"], endpoint="my_profile")
    @app.route("/api/users/<int:student_id>", methods=["GET"], endpoint="student_profile")
    @login_required
    def student_profile(student_id: int | None = None):
        student_id = student_id if student_id is not None else current_user_id()
        if student_id != current_user_id() and not current_role().at_least(Role.MENTOR):
            return json_error("You do not have permission for this action", 403)
        try:
            return jsonify({"success": True, **container.student_service.get_profile(student_id)}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("loading the profile")

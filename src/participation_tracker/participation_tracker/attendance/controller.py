from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import (
    current_role,
    current_user_id,
    domain_error_response,
    json_body,
    json_error,
    login_required,
    role_required,
    unexpected_error_response,
)
from ..container import Container
from ..core.enums import AttendanceKind, Role
from ..core.exceptions import DomainError

# URL segment -> attendance category, matching the presence/presenceSmall/presenceBonus accessors.
ACCESSOR_KINDS = {
    "presence": AttendanceKind.REGULAR,
    "presenceSmall": AttendanceKind.SMALL_GROUP,
    "presenceBonus": AttendanceKind.BONUS,
}


def register(app: Flask, container: Container) -> None:
    def _can_view(student_id: int) -> bool:
        return current_user_id() == student_id or current_role().at_least(Role.MENTOR)

    @app.route(
        "/api/users/<int:student_id>/<any(presence, presenceSmall, presenceBonus):accessor>",
        methods=["GET"],
        endpoint="get_presence",
    )
    @login_required
    def get_presence(student_id: int, accessor: str):
        if not _can_view(student_id):
            return json_error("You do not have permission for this action", 403)
        try:
            status = container.attendance_service.presence(student_id, kind=ACCESSOR_KINDS[accessor])
            return jsonify({"success": True, accessor: status.value}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("reading attendance")

    @app.route(
        "/api/users/<int:student_id>/<any(presence, presenceSmall, presenceBonus):accessor>",
        methods=["PUT"],
        endpoint="set_presence",
    )
    @role_required(Role.MENTOR)
    def set_presence(student_id: int, accessor: str):
        status = json_body().get("status")
        if not status:
            return json_error("Missing attendance status", 400)
        try:
            result = container.attendance_service.set_presence(
                current_role=current_role(),
                student_id=student_id,
                status=status,
                kind=ACCESSOR_KINDS[accessor],
            )
            return jsonify({"success": True, accessor: result.value}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("updating attendance")

    @app.route("/api/users/presence", methods=["GET"], endpoint="list_presence")
    @role_required(Role.MENTOR)
    def list_presence():
        try:
            kind = AttendanceKind(request.args.get("kind") or AttendanceKind.REGULAR.value)
        except ValueError:
            return json_error("Unknown attendance kind", 400)
        try:
            return jsonify({"success": True, "students": container.attendance_service.list_presence(kind=kind)}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("listing attendance")

    @app.route("/api/users/me/attend", methods=["POST"], endpoint="attend_with_daycode")
    @login_required
    def attend_with_daycode():
        code = json_body().get("dayCode") or ""
        try:
            status = container.attendance_service.submit_daycode(current_user_id(), code)
            return jsonify({"success": True, "presence": status.value}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("submitting the day code")

    @app.route("/api/users/me/attendance", methods=["GET"], endpoint="my_attendance")
    @app.route("/api/users/<int:student_id>/attendance", methods=["GET"], endpoint="student_attendance")
    @login_required
    def student_attendance(student_id: int | None = None):
        student_id = student_id if student_id is not None else current_user_id()
        if not _can_view(student_id):
            return json_error("You do not have permission for this action", 403)
        try:
            report = container.attendance_service.get_current_attendance(student_id)
            return jsonify({"success": True, **report.to_dict()}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("building the attendance report")

    @app.route("/api/users/<int:student_id>/attendance/migrate", methods=["POST"], endpoint="migrate_attendance")
    @role_required(Role.ADMIN)
    def migrate_attendance(student_id: int):
        try:
            added = container.attendance_service.migrate_legacy_attendance(
                current_role=current_role(),
                student_id=student_id,
            )
            return jsonify({"success": True, "added": added}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("migrating legacy attendance")

from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_day
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
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    service = container.smallgroup_service

    @app.route("/api/smallgroup", methods=["GET"], endpoint="list_smallgroups")
    @role_required(Role.MENTOR)
    def list_smallgroups():
        try:
            groups = [service.as_dict(g) for g in service.list_current()]
            return jsonify({"success": True, "smallgroups": groups}), 200
        except Exception:
            return unexpected_error_response("listing small groups")

    @app.route("/api/smallgroup", methods=["POST"], endpoint="create_smallgroup")
    @role_required(Role.MENTOR)
    def create_smallgroup():
        try:
            smallgroup_id = service.create(current_role=current_role(), name=json_body().get("name") or "")
            return jsonify({"success": True, "smallgroup_id": smallgroup_id}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("creating the small group")

    @app.route("/api/smallgroup/<int:smallgroup_id>", methods=["PUT"], endpoint="modify_smallgroup")
    @app.route("/api/smallgroup/<int:smallgroup_id>/name", methods=["PUT"], endpoint="rename_smallgroup")
    @role_required(Role.MENTOR)
    def rename_smallgroup(smallgroup_id: int):
        try:
            service.rename(
                current_role=current_role(),
                smallgroup_id=smallgroup_id,
                name=json_body().get("name") or "",
            )
            return jsonify({"success": True}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("renaming the small group")

    @app.route("/api/smallgroup/<int:smallgroup_id>", methods=["DELETE"], endpoint="delete_smallgroup")
    @role_required(Role.MENTOR)
    def delete_smallgroup(smallgroup_id: int):
        try:
            service.delete(current_role=current_role(), smallgroup_id=smallgroup_id)
            return jsonify({"success": True}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("deleting the small group")

    @app.route("/api/smallgroup/<int:smallgroup_id>", methods=["GET"], endpoint="get_smallgroup")
    @login_required
    def get_smallgroup(smallgroup_id: int):
        try:
            group = service.get(smallgroup_id)
            include_codes = current_role().at_least(Role.MENTOR)
            return jsonify({"success": True, **service.as_dict(group, include_daycodes=include_codes)}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("loading the small group")

    @app.route("/api/smallgroup/<int:smallgroup_id>/daycode", methods=["POST"], endpoint="smallgroup_daycode")
    @role_required(Role.MENTOR)
    def smallgroup_daycode(smallgroup_id: int):
        try:
            daycode = service.daycode(current_role=current_role(), smallgroup_id=smallgroup_id)
            return jsonify({"success": True, "code": daycode.code, "date": format_day(daycode.day)}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("generating the day code")

    @app.route("/api/smallgroup/<int:smallgroup_id>/members", methods=["GET"], endpoint="smallgroup_members")
    @login_required
    def smallgroup_members(smallgroup_id: int):
        try:
            members = service.members(smallgroup_id)
            if not current_role().at_least(Role.MENTOR) and current_user_id() not in {m.student_id for m in members}:
                return json_error("You do not have permission for this action", 403)
            return jsonify(
                {"success": True, "members": [{"student_id": m.student_id, "name": m.name} for m in members]}
            ), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("listing small group members")

    @app.route("/api/smallgroup/<int:smallgroup_id>/member", methods=["PUT"], endpoint="add_smallgroup_member")
    @role_required(Role.MENTOR)
    def add_smallgroup_member(smallgroup_id: int):
        member_id = json_body().get("memberId")
        if member_id is None:
            return json_error("Missing memberId", 400)
        try:
            service.add_member(current_role=current_role(), smallgroup_id=smallgroup_id, student_id=int(member_id))
            return jsonify({"success": True}), 200
        except (TypeError, ValueError):
            return json_error("memberId must be a number", 400)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("adding the member")

    @app.route(
        "/api/smallgroup/<int:smallgroup_id>/member/<int:member_id>",
        methods=["DELETE"],
        endpoint="delete_smallgroup_member",
    )
    @role_required(Role.MENTOR)
    def delete_smallgroup_member(smallgroup_id: int, member_id: int):
        try:
            service.remove_member(current_role=current_role(), smallgroup_id=smallgroup_id, student_id=member_id)
            return jsonify({"success": True}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("removing the member")

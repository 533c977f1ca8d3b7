from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_day, parse_iso_date
from ..common.http import (
    current_role,
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
    service = container.class_year_service

    def _parse_dates(values) -> list:
        return [parse_iso_date(v) for v in (values or [])]

    def _truthy(value) -> bool:
        return str(value).lower() in {"1", "true", "yes", "on"}

    @app.route("/api/classyear", methods=["GET"], endpoint="current_class_year")
    @login_required
    def current_class_year():
        try:
            class_year = service.require_current()
            include_codes = current_role().at_least(Role.MENTOR)
            return jsonify({"success": True, **service.as_dict(class_year, include_daycodes=include_codes)}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("loading the class year")

    @app.route("/api/classyear/all", methods=["GET"], endpoint="list_class_years")
    @role_required(Role.MENTOR)
    def list_class_years():
        try:
            return jsonify({"success": True, "classYears": [service.as_dict(c) for c in service.list_all()]}), 200
        except Exception:
            return unexpected_error_response("listing class years")

    @app.route("/api/classyear", methods=["POST"], endpoint="create_class_year")
    @role_required(Role.ADMIN)
    def create_class_year():
        data = json_body()
        try:
            dates = _parse_dates(data.get("dates"))
            bonus_dates = _parse_dates(data.get("bonusDates"))
        except (TypeError, ValueError):
            return json_error("Dates must be YYYY-MM-DD", 400)
        try:
            class_year_id = service.create(
                current_role=current_role(),
                semester=data.get("semester") or "",
                dates=dates,
                bonus_dates=bonus_dates,
                make_current=_truthy(data.get("current", False)),
            )
            return jsonify({"success": True, "class_year_id": class_year_id}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("creating the class year")

    @app.route("/api/classyear/<int:class_year_id>/current", methods=["PUT"], endpoint="set_current_class_year")
    @role_required(Role.ADMIN)
    def set_current_class_year(class_year_id: int):
        try:
            service.set_current(current_role=current_role(), class_year_id=class_year_id)
            return jsonify({"success": True}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("changing the current class year")

    @app.route("/api/classyear/<int:class_year_id>/dates", methods=["POST"], endpoint="add_class_year_date")
    @role_required(Role.MENTOR)
    def add_class_year_date(class_year_id: int):
        data = json_body()
        try:
            day = parse_iso_date(data.get("date") or "")
        except ValueError:
            return json_error("Date must be YYYY-MM-DD", 400)
        try:
            added = service.add_date(
                current_role=current_role(),
                class_year_id=class_year_id,
                day=day,
                bonus=_truthy(data.get("bonusDay", False)),
            )
            return jsonify({"success": True, "added": added}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("adding the date")

    @app.route(
        "/api/classyear/<int:class_year_id>/dates/<day>",
        methods=["DELETE"],
        endpoint="remove_class_year_date",
    )
    @role_required(Role.MENTOR)
    def remove_class_year_date(class_year_id: int, day: str):
        try:
            parsed = parse_iso_date(day)
        except ValueError:
            return json_error("Date must be YYYY-MM-DD", 400)
        try:
            service.remove_date(
                current_role=current_role(),
                class_year_id=class_year_id,
                day=parsed,
                bonus=_truthy(request.args.get("bonusDay", False)),
            )
            return jsonify({"success": True}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("removing the date")

    @app.route("/api/classyear/daycode", methods=["POST"], endpoint="class_year_daycode")
    @role_required(Role.MENTOR)
    def class_year_daycode():
        try:
            daycode = service.daycode(current_role=current_role(), bonus=_truthy(json_body().get("bonusDay", False)))
            return jsonify(
                {
                    "success": True,
                    "code": daycode.code,
                    "date": format_day(daycode.day),
                    "bonusDay": daycode.bonus_day,
                }
            ), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return unexpected_error_response("generating the day code")

from __future__ import annotations

from flask import Flask, request

from ..common.http import field_bool, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.shift_template_service

    @app.route("/api/admin/shift-templates", methods=["GET"], endpoint="shift_templates_list")
    def shift_templates_list():
        templates = service.list_templates(
            job_category=request.args.get("job_category") or None,
            is_active=field_bool(request.args, "is_active"),
        )
        return ok(templates)

    @app.route("/api/admin/shift-templates", methods=["POST"], endpoint="shift_templates_create")
    def shift_templates_create():
        data = json_body()
        optional = {
            k: data[k] for k in ("tolerance_minutes", "required_staff_count") if data.get(k) is not None
        }
        template = service.create_template(
            job_category=data.get("job_category"),
            shift_name=data.get("shift_name", ""),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            **optional,
        )
        return ok(template, status=201, message="Shift template created")

    @app.route("/api/admin/shift-templates/<int:template_id>", methods=["GET"], endpoint="shift_templates_get")
    def shift_templates_get(template_id: int):
        return ok(service.get_template(template_id))

    @app.route("/api/admin/shift-templates/<int:template_id>", methods=["PUT"], endpoint="shift_templates_update")
    def shift_templates_update(template_id: int):
        data = json_body()
        template = service.update_template(
            template_id,
            shift_name=data.get("shift_name"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            tolerance_minutes=data.get("tolerance_minutes"),
            required_staff_count=data.get("required_staff_count"),
            is_active=field_bool(data, "is_active"),
        )
        return ok(template, message="Shift template updated")

    @app.route("/api/admin/shift-templates/<int:template_id>", methods=["DELETE"], endpoint="shift_templates_retire")
    def shift_templates_retire(template_id: int):
        template = service.retire_template(template_id)
        return ok(template, message="Shift template deactivated")

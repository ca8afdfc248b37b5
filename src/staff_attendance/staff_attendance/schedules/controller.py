from __future__ import annotations

from flask import Flask, request

from ..common.http import field_bool, field_date, field_int, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service
    templates = container.shift_template_service

    @app.route("/api/admin/schedules", methods=["GET"], endpoint="schedules_list")
    def schedules_list():
        args = request.args
        schedules = service.list_schedules(
            staff_id=field_int(args, "staff_id", required=False),
            shift_template_id=field_int(args, "shift_template_id", required=False),
            start_date=field_date(args, "start_date", required=False),
            end_date=field_date(args, "end_date", required=False),
        )
        return ok(schedules)

    @app.route("/api/admin/schedules", methods=["POST"], endpoint="schedules_create")
    def schedules_create():
        data = json_body()
        if field_bool(data, "is_bulk"):
            result = service.bulk_create_schedules(
                staff_id=field_int(data, "staff_id"),
                shift_template_id=field_int(data, "shift_template_id"),
                start_date=field_date(data, "start_date"),
                end_date=field_date(data, "end_date"),
                created_by=field_int(data, "created_by"),
                notes=data.get("notes"),
            )
            return ok(
                result,
                status=201,
                message=f"Created {result.created} schedule(s), skipped {result.skipped} existing",
            )

        schedule = service.create_schedule(
            staff_id=field_int(data, "staff_id"),
            shift_template_id=field_int(data, "shift_template_id"),
            work_date=field_date(data, "date"),
            created_by=field_int(data, "created_by"),
            notes=data.get("notes"),
        )
        return ok(schedule, status=201, message="Schedule created")

    @app.route("/api/admin/schedules/<int:schedule_id>", methods=["PUT"], endpoint="schedules_update")
    def schedules_update(schedule_id: int):
        data = json_body()
        schedule = service.update_schedule(
            schedule_id,
            shift_template_id=field_int(data, "shift_template_id", required=False),
            notes=data.get("notes"),
        )
        return ok(schedule, message="Schedule updated")

    @app.route("/api/admin/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    def schedules_delete(schedule_id: int):
        service.delete_schedule(schedule_id)
        return ok(message="Schedule deleted")

    @app.route("/api/admin/schedules/bulk-delete", methods=["POST"], endpoint="schedules_bulk_delete")
    def schedules_bulk_delete():
        data = json_body()
        ids = data.get("ids") or []
        if not isinstance(ids, list):
            ids = [ids]
        result = service.bulk_delete_schedules(field_int({"id": i}, "id") for i in ids)
        return ok(result, message=f"Deleted {result.deleted} schedule(s)")

    @app.route("/api/admin/schedules/auto-generate", methods=["POST"], endpoint="schedules_auto_generate")
    def schedules_auto_generate():
        data = json_body()
        report = service.auto_generate_schedules(
            job_category=data.get("job_category"),
            start_date=field_date(data, "start_date"),
            end_date=field_date(data, "end_date"),
            created_by=field_int(data, "created_by"),
        )
        return ok(report, status=201, message=f"Generated {report.created} schedule(s)")

    @app.route("/api/staff/schedule/today", methods=["GET"], endpoint="staff_schedule_today")
    def staff_schedule_today():
        args = request.args
        day = field_date(args, "date", required=False) or container.civil_offset.today()
        schedule = service.get_schedule_for_staff_on_date(field_int(args, "staff_id"), day)
        template = templates.get_template(schedule.shift_template_id) if schedule else None
        return ok({"schedule": schedule, "shift_template": template})

    @app.route("/api/staff/schedule", methods=["GET"], endpoint="staff_schedule_list")
    def staff_schedule_list():
        args = request.args
        schedules = service.list_schedules(
            staff_id=field_int(args, "staff_id"),
            start_date=field_date(args, "start_date", required=False),
            end_date=field_date(args, "end_date", required=False),
        )
        return ok(schedules)

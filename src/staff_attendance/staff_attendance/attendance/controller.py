from __future__ import annotations

from flask import Flask, request

from ..common.http import field_date, field_int, json_body, ok
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    def attendance_clock_in():
        data = json_body()
        record = service.clock_in(
            staff_id=field_int(data, "staff_id"),
            shift_start_time=data.get("shift_start_time", ""),
            lat=data.get("latitude"),
            lon=data.get("longitude"),
            photo_ref=data.get("photo_url", ""),
            schedule_id=field_int(data, "schedule_id", required=False),
        )
        return ok(record, status=201, message="Clocked in")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    def attendance_clock_out():
        data = json_body()
        record = service.clock_out(
            staff_id=field_int(data, "staff_id"),
            lat=data.get("latitude"),
            lon=data.get("longitude"),
            photo_ref=data.get("photo_url", ""),
        )
        return ok(record, message="Clocked out")

    @app.route("/api/attendance/active/<int:staff_id>", methods=["GET"], endpoint="attendance_active")
    def attendance_active(staff_id: int):
        return ok(service.get_active_shift(staff_id))

    @app.route("/api/attendance/history/<int:staff_id>", methods=["GET"], endpoint="attendance_history")
    def attendance_history(staff_id: int):
        limit = field_int(request.args, "limit", required=False) or DEFAULT_HISTORY_LIMIT
        return ok(service.get_history(staff_id, limit=limit))

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        args = request.args
        records = service.list_attendance(
            staff_id=field_int(args, "staff_id", required=False),
            start_date=field_date(args, "start_date", required=False),
            end_date=field_date(args, "end_date", required=False),
        )
        return ok(records)

    @app.route("/api/attendance/on-duty", methods=["GET"], endpoint="attendance_on_duty")
    def attendance_on_duty():
        return ok(service.get_on_duty(request.args.get("job_category")))

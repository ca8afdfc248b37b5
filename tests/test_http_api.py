from __future__ import annotations

from datetime import datetime

import pytest
from flask import Flask

from src.staff_attendance.staff_attendance.attendance.controller import register as register_attendance
from src.staff_attendance.staff_attendance.container import Container
from src.staff_attendance.staff_attendance.geofence.controller import register as register_geofence
from src.staff_attendance.staff_attendance.main import _register_error_handlers
from src.staff_attendance.staff_attendance.schedules.controller import register as register_schedules
from src.staff_attendance.staff_attendance.shifts.controller import register as register_shifts

from conftest import ADMIN_ID, CIVIL, staff


@pytest.fixture
def client(
    users,
    shifts,
    schedules,
    attendance,
    system_config,
    geofence_service,
    shift_service,
    schedule_service,
    attendance_service,
):
    container = Container(
        conn=None,
        civil_offset=CIVIL,
        users_repo=users,
        shifts_repo=shifts,
        schedules_repo=schedules,
        attendance_repo=attendance,
        system_config_repo=system_config,
        geofence_service=geofence_service,
        shift_template_service=shift_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
    )
    app = Flask(__name__)
    app.config["TESTING"] = True
    _register_error_handlers(app)
    register_geofence(app, container)
    register_shifts(app, container)
    register_schedules(app, container)
    register_attendance(app, container)

    users.add(staff(10, "Ani"))
    users.add(staff(11, "Budi"))
    return app.test_client()


def create_morning(client, **overrides):
    payload = {"job_category": "SECURITY", "shift_name": "Morning", "start_time": "06:00", "end_time": "14:00"}
    payload.update(overrides)
    return client.post("/api/admin/shift-templates", json=payload)


def test_shift_template_crud(client):
    created = create_morning(client)
    assert created.status_code == 201
    body = created.get_json()["data"]
    assert body["start_time"] == "06:00"
    assert body["is_active"] is True

    duplicate = create_morning(client)
    assert duplicate.status_code == 409
    assert duplicate.get_json()["success"] is False

    bad = create_morning(client, shift_name="Night", tolerance_minutes=500)
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "validation_error"

    template_id = body["template_id"]
    updated = client.put(f"/api/admin/shift-templates/{template_id}", json={"required_staff_count": 2})
    assert updated.get_json()["data"]["required_staff_count"] == 2

    retired = client.delete(f"/api/admin/shift-templates/{template_id}")
    assert retired.get_json()["data"]["state"] == "RETIRED"
    assert client.get("/api/admin/shift-templates/999").status_code == 404


def test_rejected_template_update_keeps_template_active(client, shifts):
    template_id = create_morning(client).get_json()["data"]["template_id"]

    rejected = client.put(
        f"/api/admin/shift-templates/{template_id}",
        json={"is_active": False, "tolerance_minutes": 500},
    )

    assert rejected.status_code == 400
    assert shifts.get_by_id(template_id).is_active
    assert shifts.get_by_id(template_id).tolerance_minutes == 15

    retired = client.put(f"/api/admin/shift-templates/{template_id}", json={"is_active": False, "tolerance_minutes": 10})
    assert retired.status_code == 200
    assert retired.get_json()["data"]["is_active"] is False
    assert retired.get_json()["data"]["tolerance_minutes"] == 10



def test_schedules_and_auto_generate(client):
    template_id = create_morning(client).get_json()["data"]["template_id"]

    single = client.post(
        "/api/admin/schedules",
        json={"staff_id": 10, "shift_template_id": template_id, "date": "2024-05-01", "created_by": ADMIN_ID},
    )
    assert single.status_code == 201
    assert single.get_json()["data"]["work_date"] == "2024-05-01"

    bulk = client.post(
        "/api/admin/schedules",
        json={
            "is_bulk": True,
            "staff_id": 10,
            "shift_template_id": template_id,
            "start_date": "2024-05-01",
            "end_date": "2024-05-03",
            "created_by": ADMIN_ID,
        },
    )
    assert bulk.get_json()["data"] == {
        "created": 2,
        "skipped": 1,
        "total": 3,
        "skipped_dates": ["2024-05-01"],
    }

    report = client.post(
        "/api/admin/schedules/auto-generate",
        json={"job_category": "SECURITY", "start_date": "2024-05-01", "end_date": "2024-05-04", "created_by": ADMIN_ID},
    ).get_json()["data"]
    assert report["dates"] == 4
    assert report["staff_count"] == 2

    listed = client.get("/api/admin/schedules?staff_id=11").get_json()["data"]
    assert all(s["staff_id"] == 11 for s in listed)

    capacity = client.put(f"/api/admin/shift-templates/{template_id}", json={"required_staff_count": 3})
    assert capacity.status_code == 200
    rejected = client.post(
        "/api/admin/schedules/auto-generate",
        json={"job_category": "SECURITY", "start_date": "2024-05-05", "end_date": "2024-05-06", "created_by": ADMIN_ID},
    )
    assert rejected.status_code == 422


def test_staff_schedule_endpoints(client):
    template_id = create_morning(client).get_json()["data"]["template_id"]
    for day in ("2024-05-01", "2024-05-02"):
        client.post(
            "/api/admin/schedules",
            json={"staff_id": 10, "shift_template_id": template_id, "date": day, "created_by": ADMIN_ID},
        )

    today = client.get("/api/staff/schedule/today?staff_id=10&date=2024-05-02").get_json()["data"]
    assert today["schedule"]["work_date"] == "2024-05-02"
    assert today["shift_template"]["start_time"] == "06:00"

    nothing = client.get("/api/staff/schedule/today?staff_id=11&date=2024-05-02").get_json()["data"]
    assert nothing == {"schedule": None, "shift_template": None}
    assert client.get("/api/staff/schedule/today").status_code == 400

    listed = client.get("/api/staff/schedule?staff_id=10&start_date=2024-05-02&end_date=2024-05-31").get_json()["data"]
    assert [s["work_date"] for s in listed] == ["2024-05-02"]
    assert len(client.get("/api/staff/schedule?staff_id=10").get_json()["data"]) == 2



def test_clock_in_and_out(client):
    payload = {"staff_id": 10, "latitude": -6.2003, "longitude": 106.8168, "photo_url": "photos/a.jpg"}

    far = client.post("/api/attendance/clock-in", json={**payload, "latitude": -6.21, "shift_start_time": "06:00"})
    assert far.status_code == 403
    assert far.get_json()["radius_meters"] == 100
    assert far.get_json()["distance_meters"] > 1000

    opened = client.post("/api/attendance/clock-in", json={**payload, "shift_start_time": "06:00"})
    assert opened.status_code == 201
    record = opened.get_json()["data"]
    assert record["is_open"] is True
    assert datetime.fromisoformat(record["clock_in_at"]).tzinfo is not None

    again = client.post("/api/attendance/clock-in", json={**payload, "shift_start_time": "06:00"})
    assert again.status_code == 409

    active = client.get("/api/attendance/active/10").get_json()["data"]
    assert active["attendance_id"] == record["attendance_id"]

    closed = client.post("/api/attendance/clock-out", json=payload)
    assert closed.get_json()["data"]["is_open"] is False
    assert client.post("/api/attendance/clock-out", json=payload).status_code == 409
    assert len(client.get("/api/attendance/history/10").get_json()["data"]) == 1


def test_clock_in_with_non_text_photo_is_a_validation_error(client):
    response = client.post(
        "/api/attendance/clock-in",
        json={"staff_id": 10, "latitude": -6.2003, "longitude": 106.8168, "photo_url": 123, "shift_start_time": "06:00"},
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "validation_error"
    assert client.get("/api/attendance/active/10").get_json()["data"] is None



def test_geofence_config_endpoint(client):
    assert client.get("/api/system-config/geofence").get_json()["data"]["radius_meters"] == 100

    updated = client.post(
        "/api/system-config/geofence",
        json={"center_lat": 1.5, "center_lon": 2.5, "radius_meters": 300, "updated_by": ADMIN_ID},
    )
    assert updated.status_code == 200
    assert client.get("/api/system-config/geofence").get_json()["data"] == {
        "center_lat": 1.5,
        "center_lon": 2.5,
        "radius_meters": 300,
    }
    assert client.post("/api/system-config/geofence", json={"center_lat": 1, "center_lon": 2, "radius_meters": 5000}).status_code == 400

from datetime import date, datetime, time

import pytest

from src.kindergarten_payroll.kindergarten_payroll.core.enums import PayrollStatus, Role
from src.kindergarten_payroll.kindergarten_payroll.geo.geofence import GeoPoint
from src.kindergarten_payroll.kindergarten_payroll.main import create_app
from src.kindergarten_payroll.kindergarten_payroll.schedules.model import ShiftSchedule
from src.kindergarten_payroll.kindergarten_payroll.settings.model import AppSettings, GeofenceSettings
from src.kindergarten_payroll.kindergarten_payroll.staff.model import StaffMember
from tests.fakes import build_world

SITE = GeoPoint(21.0285, 105.8542)
TEACHER_HEADERS = {"X-Actor-Id": "1", "X-Actor-Role": "teacher", "X-Actor-Name": "Lan"}
ADMIN_HEADERS = {"X-Actor-Id": "99", "X-Actor-Role": "admin", "X-Actor-Name": "Head"}


@pytest.fixture()
def world(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    w = build_world(AppSettings(geofence=GeofenceSettings(enabled=True, center=SITE, radius_meters=100)))
    w.staff.add(StaffMember(staff_id=1, full_name="Lan", role=Role.TEACHER, base_salary=5_000_000))
    # Whole-day shift so the live clock always falls inside it.
    today = datetime.now().date()
    w.schedules.add(ShiftSchedule(schedule_id=1, staff_id=1, work_date=today, start_time=time(0, 0), end_time=time(0, 0)))
    return w


@pytest.fixture()
def client(world):
    app = create_app(world.container)
    return app.test_client()


def test_missing_actor_is_unauthorized(client):
    resp = client.post("/api/attendance/clock-in", json={})
    assert resp.status_code == 401


def test_unknown_role_is_unauthorized(client):
    resp = client.post("/api/attendance/clock-in", json={}, headers={"X-Actor-Id": "1", "X-Actor-Role": "janitor"})
    assert resp.status_code == 401


def test_clock_in_and_out_at_site(client, world):
    body = {"latitude": SITE.latitude, "longitude": SITE.longitude}

    resp = client.post("/api/attendance/clock-in", json=body, headers=TEACHER_HEADERS)
    assert resp.status_code == 200
    assert resp.get_json()["record"]["status"] == "in_progress"

    resp = client.post("/api/attendance/clock-in", json=body, headers=TEACHER_HEADERS)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "AlreadyClockedIn"

    resp = client.post("/api/attendance/clock-out", json=body, headers=TEACHER_HEADERS)
    assert resp.status_code == 200
    assert resp.get_json()["record"]["status"] == "completed"


def test_clock_in_far_away_is_forbidden(client, world):
    resp = client.post(
        "/api/attendance/clock-in",
        json={"latitude": SITE.latitude + 0.01, "longitude": SITE.longitude},
        headers=TEACHER_HEADERS,
    )
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "LocationNotAllowed"
    assert world.attendance.records == {}


def test_invalid_coordinate_is_bad_request(client):
    resp = client.post("/api/attendance/clock-in", json={"latitude": 95, "longitude": 0}, headers=TEACHER_HEADERS)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidCoordinate"


def test_cancel_requires_admin(client, world):
    client.post(
        "/api/attendance/clock-in",
        json={"latitude": SITE.latitude, "longitude": SITE.longitude},
        headers=TEACHER_HEADERS,
    )
    assert client.post("/api/attendance/1/cancel", json={}, headers=TEACHER_HEADERS).status_code == 403

    resp = client.post("/api/attendance/1/cancel", json={"note": "sent home"}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.get_json()["record"]["status"] == "cancelled"


def test_sweep_marks_no_shows(client):
    resp = client.post("/api/attendance/sweep", json={"date": date.today().isoformat()}, headers=ADMIN_HEADERS)
    assert resp.get_json()["marked"] == 1


def test_payroll_lifecycle_over_http(client, world):
    assert client.post("/api/payroll/generate", json={"month": "2025-03"}, headers=TEACHER_HEADERS).status_code == 403

    resp = client.post("/api/payroll/generate", json={"month": "2025-03"}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.get_json()["createdCount"] == 1

    payroll_id = world.payrolls.get_for_staff_and_month(staff_id=1, period="2025-03").payroll_id

    resp = client.post(f"/api/payroll/{payroll_id}/fines", json={"amount": 1000, "comment": "lost keys"},
                       headers=ADMIN_HEADERS)
    assert resp.get_json()["payroll"]["total"] == 4_999_000

    assert client.post(f"/api/payroll/{payroll_id}/approve", headers=ADMIN_HEADERS).status_code == 200
    assert client.post(f"/api/payroll/{payroll_id}/approve", headers=ADMIN_HEADERS).status_code == 409
    assert client.post(f"/api/payroll/{payroll_id}/pay", headers=ADMIN_HEADERS).status_code == 200
    assert world.payrolls.get_by_id(payroll_id).status == PayrollStatus.PAID

    report = client.get("/api/payroll/report?month=2025-03", headers=ADMIN_HEADERS).get_json()
    assert report["summary"]["count"] == 1
    assert report["rows"][0]["status"] == "paid"


def test_non_numeric_staff_id_is_bad_request(client, world):
    body = {"staff_id": "abc", "latitude": SITE.latitude, "longitude": SITE.longitude}
    for route in ("/api/attendance/clock-in", "/api/attendance/clock-out"):
        resp = client.post(route, json=body, headers=ADMIN_HEADERS)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "ValidationError"
    assert world.attendance.records == {}


def test_generated_payroll_is_audited_as_the_caller(client, world):
    client.post("/api/payroll/generate", json={"month": "2025-03"}, headers=ADMIN_HEADERS)

    created = [e for e in world.audit.events if e.action == "created"]
    assert [(e.entity_type, e.actor_id) for e in created] == [("payroll", 99)]


def test_unknown_payroll_is_not_found(client):
    assert client.post("/api/payroll/777/approve", headers=ADMIN_HEADERS).status_code == 404


def test_bad_month_is_bad_request(client):
    resp = client.post("/api/payroll/generate", json={"month": "March"}, headers=ADMIN_HEADERS)
    assert resp.status_code == 400


def test_unknown_route_stays_404(client):
    assert client.get("/api/nothing-here", headers=ADMIN_HEADERS).status_code == 404


def test_generate_payroll_command(world):
    app = create_app(world.container)
    result = app.test_cli_runner().invoke(args=["generate-payroll", "--month", "2025-03"])

    assert result.exit_code == 0
    assert "'createdCount': 1" in result.output
    assert world.payrolls.get_for_staff_and_month(staff_id=1, period="2025-03") is not None


def test_generate_child_payments_endpoint(client):
    resp = client.post("/api/child-payments/generate", json={"month": "2025-03"}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.get_json()["createdCount"] == 0

from __future__ import annotations

from datetime import datetime
from typing import Optional

import click
from flask import Flask, g, jsonify

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import actor_required, json_body
from ..common.validators import require_id
from ..core.exceptions import ValidationError
from ..container import Container
from ..geo.geofence import GeoPoint
from .model import AttendanceRecord


def _location(data: dict) -> Optional[GeoPoint]:
    lat, lon = data.get("latitude"), data.get("longitude")
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise ValidationError("Both latitude and longitude are required")
    try:
        return GeoPoint(float(lat), float(lon))
    except (TypeError, ValueError):
        raise ValidationError("Coordinates must be numbers")


def _staff_id(data: dict) -> int:
    raw = data.get("staff_id")
    if raw in (None, ""):
        return g.actor.actor_id
    return require_id(raw, "staff_id")


def _parse_dt(value) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid datetime {value!r}")


def to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "subject_type": r.subject_type.value,
        "subject_id": r.subject_id,
        "date": r.work_date.isoformat(),
        "scheduled_start": r.scheduled_start.strftime("%H:%M"),
        "scheduled_end": r.scheduled_end.strftime("%H:%M"),
        "actual_start": r.actual_start.isoformat() if r.actual_start else None,
        "actual_end": r.actual_end.isoformat() if r.actual_end else None,
        "status": r.status.value,
        "late_minutes": r.late_minutes,
        "early_leave_minutes": r.early_leave_minutes,
        "overtime_minutes": r.overtime_minutes,
        "worked_minutes": r.worked_minutes,
        "notes": r.notes,
    }


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @actor_required
    def clock_in():
        data = json_body()
        staff_id = _staff_id(data)
        record = svc.clock_in(g.actor, staff_id, location=_location(data))
        grace = container.settings_provider.load().late_grace_minutes
        return jsonify({"success": True, "record": to_dict(record), "late": record.is_late(grace)}), 200

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @actor_required
    def clock_out():
        data = json_body()
        staff_id = _staff_id(data)
        record = svc.clock_out(g.actor, staff_id, location=_location(data))
        return jsonify({"success": True, "record": to_dict(record)}), 200

    @app.route("/api/attendance/<int:record_id>/cancel", methods=["POST"], endpoint="attendance_cancel")
    @actor_required
    def cancel(record_id: int):
        record = svc.cancel(g.actor, record_id, note=json_body().get("note"))
        return jsonify({"success": True, "record": to_dict(record)}), 200

    @app.route("/api/attendance/<int:record_id>/correct", methods=["POST"], endpoint="attendance_correct")
    @actor_required
    def correct(record_id: int):
        data = json_body()
        record = svc.correct(
            g.actor,
            record_id,
            actual_start=_parse_dt(data.get("actual_start")),
            actual_end=_parse_dt(data.get("actual_end")),
            note=data.get("note"),
        )
        return jsonify({"success": True, "record": to_dict(record)}), 200

    @app.route("/api/attendance/sweep", methods=["POST"], endpoint="attendance_sweep")
    @actor_required
    def sweep():
        raw = json_body().get("date")
        work_date = parse_iso_date(raw) if raw else now_local().date()
        marked = svc.sweep_no_shows(work_date, actor=g.actor)
        return jsonify({"success": True, "date": work_date.isoformat(), "marked": marked}), 200

    @app.cli.command("sweep-no-shows")
    @click.option("--date", "day", default=None, help="Work date YYYY-MM-DD (default: today)")
    def sweep_command(day):
        work_date = parse_iso_date(day) if day else now_local().date()
        click.echo(f"{svc.sweep_no_shows(work_date)} shift(s) marked no_show on {work_date.isoformat()}")

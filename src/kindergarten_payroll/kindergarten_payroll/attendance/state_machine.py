from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, SubjectType
from ..core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    InvalidTransition,
    NotClockedIn,
    ValidationError,
)
from ..geo.geofence import GeoPoint
from ..schedules.model import ShiftSchedule
from . import time_math
from .model import AttendanceRecord


def _ensure_end_after_start(actual_start: datetime, actual_end: datetime) -> None:
    if actual_end <= actual_start:
        raise ValidationError("Clock-out time must be after clock-in time")


class AttendanceStateMachine:
    """Valid transitions of an AttendanceRecord.

    scheduled -> in_progress -> completed
    scheduled -> no_show
    scheduled | in_progress -> cancelled

    Every method returns a new record; the input is never mutated.
    """

    def new_record(
        self,
        schedule: ShiftSchedule,
        *,
        subject_type: SubjectType = SubjectType.STAFF,
        recorded_by: Optional[int] = None,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=None,
            subject_type=subject_type,
            subject_id=schedule.staff_id,
            work_date=schedule.work_date,
            scheduled_start=schedule.start_time,
            scheduled_end=schedule.end_time,
            break_minutes=int(schedule.break_minutes or 0),
            status=AttendanceStatus.SCHEDULED,
            notes=schedule.note,
            recorded_by=recorded_by,
        )

    def clock_in(
        self,
        record: AttendanceRecord,
        *,
        at: datetime,
        location: Optional[GeoPoint] = None,
    ) -> AttendanceRecord:
        if record.actual_start is not None or record.status in {
            AttendanceStatus.IN_PROGRESS,
            AttendanceStatus.COMPLETED,
        }:
            raise AlreadyClockedIn("Already clocked in for this shift")
        if record.status != AttendanceStatus.SCHEDULED:
            raise InvalidTransition(f"Cannot clock in a {record.status.value} shift")

        return replace(
            record,
            actual_start=at,
            status=AttendanceStatus.IN_PROGRESS,
            late_minutes=time_math.late_minutes(record.scheduled_start_at, at),
            clock_in_location=location,
        )

    def clock_out(
        self,
        record: AttendanceRecord,
        *,
        at: datetime,
        location: Optional[GeoPoint] = None,
    ) -> AttendanceRecord:
        if record.status in {AttendanceStatus.CANCELLED, AttendanceStatus.NO_SHOW}:
            raise InvalidTransition(f"Cannot clock out of a {record.status.value} shift")
        if record.actual_start is None:
            raise NotClockedIn("Not clocked in for this shift")
        if record.actual_end is not None or record.status == AttendanceStatus.COMPLETED:
            raise AlreadyClockedOut("Already clocked out of this shift")

        actual_end = time_math.normalize_actual_end(record.actual_start, at)
        _ensure_end_after_start(record.actual_start, actual_end)
        early, overtime = time_math.departure_minutes(record.scheduled_end_at, actual_end)
        return replace(
            record,
            actual_end=actual_end,
            status=AttendanceStatus.COMPLETED,
            early_leave_minutes=early,
            overtime_minutes=overtime,
            clock_out_location=location,
        )

    def cancel(self, record: AttendanceRecord, *, note: Optional[str] = None) -> AttendanceRecord:
        if record.status.is_terminal:
            raise InvalidTransition(f"Cannot cancel a {record.status.value} shift")
        return replace(record, status=AttendanceStatus.CANCELLED, notes=note or record.notes)

    def mark_no_show(self, record: AttendanceRecord) -> AttendanceRecord:
        if record.status != AttendanceStatus.SCHEDULED or record.actual_start is not None:
            raise InvalidTransition(f"Cannot mark a {record.status.value} shift as no-show")
        return replace(record, status=AttendanceStatus.NO_SHOW)

    def correct(
        self,
        record: AttendanceRecord,
        *,
        actual_start: Optional[datetime],
        actual_end: Optional[datetime],
        note: Optional[str] = None,
        corrected_by: Optional[int] = None,
    ) -> AttendanceRecord:
        """Administrative correction of the clock times; derived minutes are recomputed."""
        if record.status == AttendanceStatus.CANCELLED:
            raise InvalidTransition("Cancelled shifts cannot be corrected")
        if actual_end is not None and actual_start is None:
            raise ValidationError("Clock-out time requires a clock-in time")

        late = early = overtime = 0
        status = AttendanceStatus.SCHEDULED
        if actual_start is not None:
            late = time_math.late_minutes(record.scheduled_start_at, actual_start)
            status = AttendanceStatus.IN_PROGRESS
        if actual_end is not None:
            actual_end = time_math.normalize_actual_end(actual_start, actual_end)
            _ensure_end_after_start(actual_start, actual_end)
            early, overtime = time_math.departure_minutes(record.scheduled_end_at, actual_end)
            status = AttendanceStatus.COMPLETED
        if status == AttendanceStatus.SCHEDULED and record.status == AttendanceStatus.NO_SHOW:
            status = AttendanceStatus.NO_SHOW

        return replace(
            record,
            actual_start=actual_start,
            actual_end=actual_end,
            status=status,
            late_minutes=late,
            early_leave_minutes=early,
            overtime_minutes=overtime,
            notes=note if note is not None else record.notes,
            recorded_by=corrected_by if corrected_by is not None else record.recorded_by,
        )


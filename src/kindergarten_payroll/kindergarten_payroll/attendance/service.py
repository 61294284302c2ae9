from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..audit.service import AuditTrail
from ..common.datetime_utils import month_bounds, month_label, now_local
from ..common.logger import get_logger
from ..core.actor import SYSTEM_ACTOR, Actor, require_admin
from ..core.enums import AttendanceStatus, PayrollStatus, SubjectType
from ..core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    AuthorizationError,
    LocationNotAllowed,
    NotClockedIn,
    NotFound,
    PeriodLocked,
    StateConflict,
)
from ..geo.geofence import GeofenceValidator, GeoPoint
from ..payroll.repository import PayrollRepository
from ..schedules.repository import ScheduleRepository
from ..settings.model import AppSettings
from ..settings.provider import SettingsProvider
from ..staff.model import StaffMember
from ..staff.repository import StaffRepository
from . import time_math
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .state_machine import AttendanceStateMachine

logger = get_logger(__name__)

_LOCKED = {PayrollStatus.APPROVED, PayrollStatus.PAID}


class AttendanceService:
    """Clock-in/out, cancellation, correction and the day-end no-show sweep.

    The geofence runs before anything is read for writing, so a rejected clock
    event leaves no trace. Attendance of a month whose payroll is approved or
    paid is frozen.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        schedules: ScheduleRepository,
        payrolls: PayrollRepository,
        settings: SettingsProvider,
        audit: AuditTrail,
        *,
        geofence: Optional[GeofenceValidator] = None,
        state_machine: Optional[AttendanceStateMachine] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._staff = staff
        self._schedules = schedules
        self._payrolls = payrolls
        self._settings = settings
        self._audit = audit
        self._geofence = geofence or GeofenceValidator()
        self._machine = state_machine or AttendanceStateMachine()
        self._clock = clock

    def _get_staff(self, staff_id: int) -> StaffMember:
        staff = self._staff.get_by_id(int(staff_id))
        if not staff or not staff.active:
            raise NotFound(f"Staff member {staff_id} not found")
        return staff

    def _check_location(self, settings: AppSettings, location: Optional[GeoPoint]) -> None:
        fence = settings.geofence
        if not fence.active:
            return
        if location is None:
            raise LocationNotAllowed("Location is required to clock in or out")
        self._geofence.ensure_within(center=fence.center, reported=location, radius_meters=fence.radius_meters)

    def _ensure_unlocked(self, record: AttendanceRecord) -> None:
        if record.subject_type != SubjectType.STAFF:
            return
        payroll = self._payrolls.get_for_staff_and_month(
            staff_id=record.subject_id, period=month_label(record.work_date)
        )
        if payroll and payroll.status in _LOCKED:
            raise PeriodLocked(
                f"Payroll for {payroll.period} is {payroll.status.value}; attendance can no longer change"
            )

    def _ensure_self_or_admin(self, actor: Actor, staff_id: int) -> None:
        if not actor.is_admin and int(actor.actor_id) != int(staff_id):
            raise AuthorizationError("You can only clock in or out for yourself")

    def _get_record(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFound(f"Attendance record {record_id} not found")
        return record

    def _emit(self, actor: Actor, action: str, record: AttendanceRecord, staff_name: str = "", changes=None) -> None:
        self._audit.emit(
            actor,
            action=action,
            entity_type="attendance",
            entity_id=record.record_id,
            entity_name=staff_name or f"{record.subject_id}/{record.work_date.isoformat()}",
            changes=changes,
        )

    def clock_in(
        self,
        actor: Actor,
        staff_id: int,
        *,
        location: Optional[GeoPoint] = None,
        at: Optional[datetime] = None,
        work_date: Optional[date] = None,
    ) -> AttendanceRecord:
        self._ensure_self_or_admin(actor, staff_id)
        staff = self._get_staff(staff_id)
        self._check_location(self._settings.load(), location)

        at = at or self._clock()
        work_date = work_date or self._resolve_work_date(staff.staff_id, at)

        existing = self._attendance.get_for_subject_and_date(
            subject_type=SubjectType.STAFF, subject_id=staff.staff_id, work_date=work_date
        )
        if existing is None:
            schedule = self._schedules.get_for_staff_and_date(staff_id=staff.staff_id, work_date=work_date)
            if not schedule:
                raise NotFound(f"No shift scheduled for {work_date.isoformat()}")
            record = self._machine.new_record(schedule, recorded_by=actor.actor_id)
        else:
            record = existing

        self._ensure_unlocked(record)
        updated = self._machine.clock_in(record, at=at, location=location)

        if existing is None:
            record_id = self._attendance.insert(updated)
            updated = replace(updated, record_id=record_id)
        elif not self._attendance.update(updated, expected_status=existing.status):
            raise AlreadyClockedIn("Already clocked in for this shift")

        self._emit(actor, "clock_in", updated, staff.full_name, {"late_minutes": updated.late_minutes})
        return updated

    def _resolve_work_date(self, staff_id: int, at: datetime) -> date:
        """A late start after midnight still belongs to yesterday's overnight shift."""
        previous = at.date() - timedelta(days=1)
        schedule = self._schedules.get_for_staff_and_date(staff_id=staff_id, work_date=previous)
        if schedule is not None:
            start_at, end_at = time_math.scheduled_window(previous, schedule.start_time, schedule.end_time)
            if start_at <= at < end_at:
                record = self._attendance.get_for_subject_and_date(
                    subject_type=SubjectType.STAFF, subject_id=staff_id, work_date=previous
                )
                if record is None or record.status == AttendanceStatus.SCHEDULED:
                    return previous
        return at.date()

    def _find_open_record(self, staff_id: int, at: datetime, work_date: Optional[date]) -> AttendanceRecord:
        if work_date is not None:
            candidates = [work_date]
        else:
            # An overnight shift is closed the morning after it started.
            candidates = [at.date(), at.date() - timedelta(days=1)]

        found: Optional[AttendanceRecord] = None
        for day in candidates:
            record = self._attendance.get_for_subject_and_date(
                subject_type=SubjectType.STAFF, subject_id=staff_id, work_date=day
            )
            if record is None:
                continue
            if record.status == AttendanceStatus.IN_PROGRESS:
                return record
            found = found or record

        if found is None:
            raise NotClockedIn("Not clocked in for this shift")
        return found

    def clock_out(
        self,
        actor: Actor,
        staff_id: int,
        *,
        location: Optional[GeoPoint] = None,
        at: Optional[datetime] = None,
        work_date: Optional[date] = None,
    ) -> AttendanceRecord:
        self._ensure_self_or_admin(actor, staff_id)
        staff = self._get_staff(staff_id)
        self._check_location(self._settings.load(), location)

        at = at or self._clock()
        record = self._find_open_record(staff.staff_id, at, work_date)
        self._ensure_unlocked(record)

        updated = self._machine.clock_out(record, at=at, location=location)
        if not self._attendance.update(updated, expected_status=record.status):
            raise AlreadyClockedOut("Already clocked out of this shift")

        self._emit(
            actor,
            "clock_out",
            updated,
            staff.full_name,
            {"early_leave_minutes": updated.early_leave_minutes, "overtime_minutes": updated.overtime_minutes},
        )
        return updated

    def cancel(self, actor: Actor, record_id: int, *, note: Optional[str] = None) -> AttendanceRecord:
        require_admin(actor)
        record = self._get_record(record_id)
        self._ensure_unlocked(record)

        updated = self._machine.cancel(record, note=note)
        if not self._attendance.update(updated, expected_status=record.status):
            raise StateConflict("Attendance record changed concurrently, reload and retry")

        self._emit(actor, "cancel", updated, changes={"status": [record.status.value, updated.status.value]})
        return updated

    def correct(
        self,
        actor: Actor,
        record_id: int,
        *,
        actual_start: Optional[datetime],
        actual_end: Optional[datetime],
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        require_admin(actor)
        record = self._get_record(record_id)
        self._ensure_unlocked(record)

        updated = self._machine.correct(
            record,
            actual_start=actual_start,
            actual_end=actual_end,
            note=note,
            corrected_by=actor.actor_id,
        )
        if not self._attendance.update(updated, expected_status=record.status):
            raise StateConflict("Attendance record changed concurrently, reload and retry")

        self._emit(
            actor,
            "correct",
            updated,
            changes={
                "actual_start": [record.actual_start, updated.actual_start],
                "actual_end": [record.actual_end, updated.actual_end],
            },
        )
        return updated

    def sweep_no_shows(self, work_date: date, *, actor: Actor = SYSTEM_ACTOR) -> int:
        """Mark every scheduled shift of the day without a clock-in as no_show."""
        require_admin(actor)
        marked = 0
        for schedule in self._schedules.list_for_date(work_date=work_date):
            record = self._attendance.get_for_subject_and_date(
                subject_type=SubjectType.STAFF, subject_id=schedule.staff_id, work_date=work_date
            )
            try:
                if record is None:
                    fresh = self._machine.new_record(schedule, recorded_by=actor.actor_id)
                    self._ensure_unlocked(fresh)
                    no_show = self._machine.mark_no_show(fresh)
                    self._attendance.insert(no_show)
                elif record.status == AttendanceStatus.SCHEDULED and record.actual_start is None:
                    self._ensure_unlocked(record)
                    no_show = self._machine.mark_no_show(record)
                    if not self._attendance.update(no_show, expected_status=record.status):
                        continue
                else:
                    continue
            except StateConflict as exc:
                # Clocked in meanwhile, or the month is locked.
                logger.info("No-show sweep skipped staff %s on %s: %s", schedule.staff_id, work_date, exc)
                continue
            marked += 1

        logger.info("No-show sweep for %s marked %d shift(s)", work_date.isoformat(), marked)
        return marked

    def list_month(self, staff_id: int, period: str) -> Sequence[AttendanceRecord]:
        start, end = month_bounds(period)
        return self._attendance.list_for_subject_in_range(
            subject_type=SubjectType.STAFF, subject_id=int(staff_id), start=start, end=end
        )

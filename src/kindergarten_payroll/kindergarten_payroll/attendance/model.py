from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus, SubjectType
from ..geo.geofence import GeoPoint
from .time_math import scheduled_window, worked_minutes


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: attendance of one subject (staff or child) on one day.

    At most one record exists per (subject_type, subject_id, work_date).
    Derived minute fields are produced by AttendanceStateMachine only.
    """

    record_id: Optional[int]
    subject_type: SubjectType
    subject_id: int
    work_date: date
    scheduled_start: time
    scheduled_end: time
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    break_minutes: int = 0
    status: AttendanceStatus = AttendanceStatus.SCHEDULED
    late_minutes: int = 0
    early_leave_minutes: int = 0
    overtime_minutes: int = 0
    clock_in_location: Optional[GeoPoint] = None
    clock_out_location: Optional[GeoPoint] = None
    notes: Optional[str] = None
    recorded_by: Optional[int] = None

    @property
    def scheduled_start_at(self) -> datetime:
        return scheduled_window(self.work_date, self.scheduled_start, self.scheduled_end)[0]

    @property
    def scheduled_end_at(self) -> datetime:
        return scheduled_window(self.work_date, self.scheduled_start, self.scheduled_end)[1]

    @property
    def worked_minutes(self) -> int:
        """(out - in) - break_minutes, not below 0."""
        if self.actual_start is None or self.actual_end is None:
            return 0
        return worked_minutes(self.actual_start, self.actual_end, self.break_minutes)

    def is_late(self, grace_minutes: int) -> bool:
        """Lateness flag; independent of status."""
        return self.late_minutes > int(grace_minutes)

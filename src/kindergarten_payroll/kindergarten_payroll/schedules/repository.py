from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ShiftSchedule


class ScheduleRepository(Protocol):
    def get_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[ShiftSchedule]:
        raise NotImplementedError

    def list_for_date(self, *, work_date: date) -> Sequence[ShiftSchedule]:
        """All planned shifts of the day (used by the no-show sweep)."""

        raise NotImplementedError

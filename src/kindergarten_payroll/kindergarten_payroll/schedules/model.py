from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import ShiftCategory


@dataclass(frozen=True)
class ShiftSchedule:
    """Planned shift of one staff member on one calendar day.

    An end time at or before the start time means the shift ends the next day.
    """

    schedule_id: int
    staff_id: int
    work_date: date
    start_time: time
    end_time: time
    category: ShiftCategory = ShiftCategory.FULL
    break_minutes: int = 0
    note: Optional[str] = None

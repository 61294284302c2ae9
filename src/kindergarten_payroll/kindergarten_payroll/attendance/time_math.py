from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Tuple

from ..common.datetime_utils import minutes_between
from ..core.constants import MINUTES_PER_DAY

_ONE_DAY = timedelta(days=1)


def scheduled_window(work_date: date, start: time, end: time) -> Tuple[datetime, datetime]:
    """Scheduled start/end as datetimes; an end at or before the start rolls to the next day."""
    start_at = datetime.combine(work_date, start)
    end_at = datetime.combine(work_date, end)
    if end_at <= start_at:
        end_at += _ONE_DAY
    return start_at, end_at


def normalize_actual_end(actual_start: datetime, actual_end: datetime) -> datetime:
    """Treat an end earlier than the start as an overnight shift."""
    if actual_end < actual_start:
        actual_end += _ONE_DAY
    return actual_end


def clamp_day(minutes: int) -> int:
    return max(0, min(int(minutes), MINUTES_PER_DAY))


def late_minutes(scheduled_start_at: datetime, actual_start: datetime) -> int:
    return clamp_day(minutes_between(scheduled_start_at, actual_start))


def departure_minutes(scheduled_end_at: datetime, actual_end: datetime) -> Tuple[int, int]:
    """(early_leave_minutes, overtime_minutes); at most one is non-zero."""
    delta = minutes_between(scheduled_end_at, actual_end)
    if delta < 0:
        return clamp_day(-delta), 0
    return 0, clamp_day(delta)


def worked_minutes(actual_start: datetime, actual_end: datetime, break_minutes: int = 0) -> int:
    actual_end = normalize_actual_end(actual_start, actual_end)
    minutes = clamp_day(minutes_between(actual_start, actual_end))
    return max(minutes - int(break_minutes or 0), 0)

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta

from ..core.constants import MONTH_LABEL_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()


def parse_month_label(label: str) -> tuple[int, int]:
    """Split a YYYY-MM period label into (year, month)."""
    try:
        parsed = datetime.strptime((label or "").strip(), MONTH_LABEL_FORMAT)
    except ValueError:
        raise ValidationError(f"Invalid month {label!r}, expected YYYY-MM")
    return parsed.year, parsed.month


def month_label(value: date) -> str:
    return value.strftime(MONTH_LABEL_FORMAT)


def month_bounds(label: str) -> tuple[date, date]:
    """First and last calendar day of the month."""
    year, month = parse_month_label(label)
    _, last_day = monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


def previous_month(label: str) -> str:
    first, _ = month_bounds(label)
    return month_label(first - timedelta(days=1))


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end (negative when end is earlier)."""
    return int((end - start).total_seconds() // 60)

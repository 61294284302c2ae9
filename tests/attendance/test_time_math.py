from datetime import date, datetime, time

from src.kindergarten_payroll.kindergarten_payroll.attendance.time_math import (
    departure_minutes,
    late_minutes,
    scheduled_window,
    worked_minutes,
)


def test_worked_minutes_subtracts_break():
    assert worked_minutes(datetime(2025, 1, 1, 8, 0), datetime(2025, 1, 1, 17, 0), 60) == 8 * 60


def test_worked_minutes_never_negative():
    assert worked_minutes(datetime(2025, 1, 1, 8, 0), datetime(2025, 1, 1, 8, 30), 60) == 0


def test_overnight_end_rolls_to_next_day():
    start, end = scheduled_window(date(2025, 1, 1), time(22, 0), time(6, 0))
    assert end == datetime(2025, 1, 2, 6, 0)
    assert worked_minutes(datetime(2025, 1, 1, 22, 0), datetime(2025, 1, 1, 6, 0)) == 8 * 60


def test_late_minutes_clamped_to_a_day():
    assert late_minutes(datetime(2025, 1, 1, 9, 0), datetime(2025, 1, 1, 8, 45)) == 0
    assert late_minutes(datetime(2025, 1, 1, 9, 0), datetime(2025, 1, 3, 9, 0)) == 24 * 60


def test_departure_is_either_early_or_overtime():
    end = datetime(2025, 1, 1, 18, 0)
    assert departure_minutes(end, datetime(2025, 1, 1, 17, 30)) == (30, 0)
    assert departure_minutes(end, datetime(2025, 1, 1, 18, 45)) == (0, 45)
    assert departure_minutes(end, end) == (0, 0)

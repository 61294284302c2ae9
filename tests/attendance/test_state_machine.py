from datetime import date, datetime, time

import pytest

from src.kindergarten_payroll.kindergarten_payroll.attendance.state_machine import AttendanceStateMachine
from src.kindergarten_payroll.kindergarten_payroll.core.enums import AttendanceStatus
from src.kindergarten_payroll.kindergarten_payroll.core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    InvalidTransition,
    NotClockedIn,
    ValidationError,
)
from src.kindergarten_payroll.kindergarten_payroll.schedules.model import ShiftSchedule

DAY = date(2025, 3, 3)
machine = AttendanceStateMachine()


def day_shift(start=time(9, 0), end=time(18, 0), work_date=DAY):
    return machine.new_record(
        ShiftSchedule(schedule_id=1, staff_id=7, work_date=work_date, start_time=start, end_time=end)
    )


def test_clock_in_twenty_minutes_late():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 20))

    assert record.status == AttendanceStatus.IN_PROGRESS
    assert record.late_minutes == 20
    assert record.is_late(15)
    assert not record.is_late(20)


def test_clock_in_early_is_not_late():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 8, 50))
    assert record.late_minutes == 0
    assert record.status == AttendanceStatus.IN_PROGRESS


def test_transitions_return_new_records():
    scheduled = day_shift()
    machine.clock_in(scheduled, at=datetime(2025, 3, 3, 9, 0))
    assert scheduled.status == AttendanceStatus.SCHEDULED
    assert scheduled.actual_start is None


def test_clock_in_twice_rejected():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(AlreadyClockedIn):
        machine.clock_in(record, at=datetime(2025, 3, 3, 9, 5))


def test_clock_out_without_clock_in():
    with pytest.raises(NotClockedIn):
        machine.clock_out(day_shift(), at=datetime(2025, 3, 3, 18, 0))


def test_clock_out_with_overtime():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    done = machine.clock_out(record, at=datetime(2025, 3, 3, 18, 45))

    assert done.status == AttendanceStatus.COMPLETED
    assert done.overtime_minutes == 45
    assert done.early_leave_minutes == 0
    assert done.worked_minutes == 9 * 60 + 45


def test_clock_out_early():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    done = machine.clock_out(record, at=datetime(2025, 3, 3, 17, 30))
    assert (done.early_leave_minutes, done.overtime_minutes) == (30, 0)


def test_clock_out_twice_rejected():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    done = machine.clock_out(record, at=datetime(2025, 3, 3, 18, 0))
    with pytest.raises(AlreadyClockedOut):
        machine.clock_out(done, at=datetime(2025, 3, 3, 18, 5))


def test_overnight_shift_closes_next_morning():
    record = machine.clock_in(day_shift(time(22, 0), time(6, 0)), at=datetime(2025, 3, 3, 22, 10))
    done = machine.clock_out(record, at=datetime(2025, 3, 4, 6, 30))

    assert done.late_minutes == 10
    assert done.overtime_minutes == 30
    assert done.early_leave_minutes == 0


def test_cancel_only_from_open_states():
    assert machine.cancel(day_shift()).status == AttendanceStatus.CANCELLED

    in_progress = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    assert machine.cancel(in_progress, note="sick").notes == "sick"

    completed = machine.clock_out(in_progress, at=datetime(2025, 3, 3, 18, 0))
    with pytest.raises(InvalidTransition):
        machine.cancel(completed)


def test_no_show_only_from_scheduled():
    assert machine.mark_no_show(day_shift()).status == AttendanceStatus.NO_SHOW

    in_progress = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(InvalidTransition):
        machine.mark_no_show(in_progress)


def test_cancelled_or_no_show_cannot_clock_in():
    with pytest.raises(InvalidTransition):
        machine.clock_in(machine.cancel(day_shift()), at=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(InvalidTransition):
        machine.clock_in(machine.mark_no_show(day_shift()), at=datetime(2025, 3, 3, 9, 0))


def test_correction_recomputes_minutes():
    record = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 40))
    record = machine.clock_out(record, at=datetime(2025, 3, 3, 17, 0))

    fixed = machine.correct(
        record,
        actual_start=datetime(2025, 3, 3, 9, 0),
        actual_end=datetime(2025, 3, 3, 18, 30),
        note="badge reader down",
        corrected_by=1,
    )

    assert fixed.status == AttendanceStatus.COMPLETED
    assert (fixed.late_minutes, fixed.early_leave_minutes, fixed.overtime_minutes) == (0, 0, 30)
    assert fixed.notes == "badge reader down"
    assert fixed.recorded_by == 1


def test_correcting_a_no_show_into_a_worked_day():
    fixed = machine.correct(
        machine.mark_no_show(day_shift()),
        actual_start=datetime(2025, 3, 3, 9, 0),
        actual_end=datetime(2025, 3, 3, 18, 0),
    )
    assert fixed.status == AttendanceStatus.COMPLETED


def test_correction_requires_start_with_end():
    with pytest.raises(ValidationError):
        machine.correct(day_shift(), actual_start=None, actual_end=datetime(2025, 3, 3, 18, 0))


def test_clock_out_at_the_clock_in_instant_rejected():
    started = machine.clock_in(day_shift(), at=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(ValidationError):
        machine.clock_out(started, at=datetime(2025, 3, 3, 9, 0))


def test_correction_with_end_more_than_a_day_before_start_rejected():
    with pytest.raises(ValidationError):
        machine.correct(
            day_shift(),
            actual_start=datetime(2025, 3, 3, 9, 0),
            actual_end=datetime(2025, 3, 1, 10, 0),
        )


def test_correction_with_end_equal_to_start_rejected():
    with pytest.raises(ValidationError):
        machine.correct(
            day_shift(),
            actual_start=datetime(2025, 3, 3, 9, 0),
            actual_end=datetime(2025, 3, 3, 9, 0),
        )

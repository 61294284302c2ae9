from datetime import date, time

import pytest

from src.kindergarten_payroll.kindergarten_payroll.attendance.model import AttendanceRecord
from src.kindergarten_payroll.kindergarten_payroll.core.enums import AttendanceStatus, PenaltyType, SubjectType
from src.kindergarten_payroll.kindergarten_payroll.payroll.calculator.factory import LatePenaltyStrategyFactory
from src.kindergarten_payroll.kindergarten_payroll.payroll.calculator.standard_calculator import (
    StandardPenaltyBonusCalculator,
)
from src.kindergarten_payroll.kindergarten_payroll.payroll.calculator.strategies.block_strategy import PerBlockStrategy
from src.kindergarten_payroll.kindergarten_payroll.payroll.calculator.strategies.fixed_strategy import FixedStrategy
from src.kindergarten_payroll.kindergarten_payroll.payroll.calculator.strategies.per_minute_strategy import (
    PerMinuteStrategy,
)
from src.kindergarten_payroll.kindergarten_payroll.settings.model import RateTable


def record(status=AttendanceStatus.COMPLETED, late=0, early=0, overtime=0):
    return AttendanceRecord(
        record_id=1,
        subject_type=SubjectType.STAFF,
        subject_id=1,
        work_date=date(2025, 3, 3),
        scheduled_start=time(9, 0),
        scheduled_end=time(18, 0),
        status=status,
        late_minutes=late,
        early_leave_minutes=early,
        overtime_minutes=overtime,
    )


calc = StandardPenaltyBonusCalculator()


def test_late_twenty_minutes_per_minute_rate():
    result = calc.calculate(record(late=20), RateTable())
    assert result.penalty_amount == 10000
    assert result.bonus_amount == 0
    assert result.breakdown.late_penalty == 10000


def test_overtime_forty_five_minutes():
    result = calc.calculate(record(overtime=45), RateTable())
    assert result.bonus_amount == 33750
    assert result.penalty_amount == 0


def test_early_leave_uses_its_own_rate():
    result = calc.calculate(record(early=10), RateTable(early_leave_penalty_per_minute=300))
    assert result.penalty_amount == 3000
    assert result.breakdown.early_leave_penalty == 3000


def test_no_show_costs_flat_penalty():
    assert calc.calculate(record(AttendanceStatus.NO_SHOW), RateTable()).penalty_amount == 0
    result = calc.calculate(record(AttendanceStatus.NO_SHOW), RateTable(no_show_penalty=2000))
    assert result.penalty_amount == 2000
    assert result.breakdown.no_show_penalty == 2000


@pytest.mark.parametrize("status", [AttendanceStatus.CANCELLED, AttendanceStatus.SCHEDULED])
def test_cancelled_and_scheduled_cost_nothing(status):
    result = calc.calculate(record(status, late=30, overtime=30), RateTable())
    assert (result.penalty_amount, result.bonus_amount) == (0, 0)


@pytest.mark.parametrize(
    "penalty_type,late,expected",
    [
        (PenaltyType.PER_MINUTE, 12, 6000),
        (PenaltyType.PER_5_MINUTES, 12, 1500),
        (PenaltyType.PER_10_MINUTES, 12, 1000),
        (PenaltyType.FIXED, 12, 500),
        (PenaltyType.FIXED, 0, 0),
    ],
)
def test_late_penalty_types(penalty_type, late, expected):
    result = calc.calculate(record(late=late), RateTable(penalty_type=penalty_type))
    assert result.penalty_amount == expected


def test_same_input_same_result():
    rates = RateTable(penalty_type=PenaltyType.PER_5_MINUTES)
    assert calc.calculate(record(late=7, overtime=13), rates) == calc.calculate(record(late=7, overtime=13), rates)


def test_amounts_never_negative():
    for late in range(0, 120, 7):
        for overtime in range(0, 120, 11):
            result = calc.calculate(record(late=late, overtime=overtime), RateTable())
            assert result.penalty_amount >= 0
            assert result.bonus_amount >= 0


def test_factory_picks_strategy():
    factory = LatePenaltyStrategyFactory()
    assert isinstance(factory.for_type(PenaltyType.PER_MINUTE), PerMinuteStrategy)
    assert isinstance(factory.for_type(PenaltyType.FIXED), FixedStrategy)
    block = factory.for_type(PenaltyType.PER_10_MINUTES)
    assert isinstance(block, PerBlockStrategy)
    assert block.block_minutes == 10

from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.enums import AttendanceStatus
from ...settings.model import RateTable
from .base import PenaltyBonusCalculator, PenaltyBonusResult, PenaltyBreakdown
from .factory import LatePenaltyStrategyFactory

_ZERO = PenaltyBonusResult(penalty_amount=0.0, bonus_amount=0.0, breakdown=PenaltyBreakdown())


class StandardPenaltyBonusCalculator(PenaltyBonusCalculator):
    """Standard rule: late per the penalty type, early leave and overtime per minute.

    Cancelled and still-scheduled shifts cost nothing; a no-show costs the flat
    no-show penalty.
    """

    def __init__(self, *, strategy_factory: Optional[LatePenaltyStrategyFactory] = None):
        self._factory = strategy_factory or LatePenaltyStrategyFactory()

    def calculate(self, record: AttendanceRecord, rates: RateTable) -> PenaltyBonusResult:
        if record.status == AttendanceStatus.NO_SHOW:
            amount = round(float(rates.no_show_penalty), 2)
            return PenaltyBonusResult(
                penalty_amount=amount,
                bonus_amount=0.0,
                breakdown=PenaltyBreakdown(no_show_penalty=amount),
            )
        if record.status in {AttendanceStatus.CANCELLED, AttendanceStatus.SCHEDULED}:
            return _ZERO

        strategy = self._factory.for_type(rates.penalty_type)
        late = round(strategy.amount(late_minutes=record.late_minutes, rate=rates.late_penalty_per_minute), 2)
        early = round(record.early_leave_minutes * float(rates.early_leave_penalty_per_minute), 2)
        overtime = round(record.overtime_minutes * float(rates.overtime_bonus_per_minute), 2)

        return PenaltyBonusResult(
            penalty_amount=round(late + early, 2),
            bonus_amount=overtime,
            breakdown=PenaltyBreakdown(
                late_minutes=record.late_minutes,
                late_penalty=late,
                early_leave_minutes=record.early_leave_minutes,
                early_leave_penalty=early,
                overtime_minutes=record.overtime_minutes,
                overtime_bonus=overtime,
            ),
        )

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...attendance.model import AttendanceRecord
from ...settings.model import RateTable


@dataclass(frozen=True)
class PenaltyBreakdown:
    late_minutes: int = 0
    late_penalty: float = 0.0
    early_leave_minutes: int = 0
    early_leave_penalty: float = 0.0
    overtime_minutes: int = 0
    overtime_bonus: float = 0.0
    no_show_penalty: float = 0.0


@dataclass(frozen=True)
class PenaltyBonusResult:
    penalty_amount: float
    bonus_amount: float
    breakdown: PenaltyBreakdown


class PenaltyBonusCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Implementations must be pure: same record and rate table, same result.
    """

    @abstractmethod
    def calculate(self, record: AttendanceRecord, rates: RateTable) -> PenaltyBonusResult:
        raise NotImplementedError

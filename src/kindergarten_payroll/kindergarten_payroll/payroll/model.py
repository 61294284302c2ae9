from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import ChildPaymentStatus, PayrollStatus, SubjectType


@dataclass(frozen=True)
class PayrollHistoryEntry:
    timestamp: datetime
    action: str
    amount: float = 0.0
    comment: Optional[str] = None


@dataclass(frozen=True)
class PayrollBreakdown:
    """Value object produced by PayrollAggregator; never persisted by it."""

    staff_id: int
    period: str
    base_accrual: float
    bonuses: float
    attendance_penalties: float
    late_penalties: float
    early_leave_penalties: float
    no_show_penalties: float
    fines_total: float
    completed_shifts: int
    no_show_shifts: int
    worked_minutes: int

    @property
    def penalties(self) -> float:
        return round(self.attendance_penalties + self.fines_total, 2)

    @property
    def total(self) -> float:
        return round(self.base_accrual + self.bonuses - self.penalties, 2)


@dataclass(frozen=True)
class Payroll:
    """One payroll per (staff_id, period); status only moves forward."""

    payroll_id: Optional[int]
    staff_id: int
    period: str
    base_accrual: float
    bonuses: float
    penalties: float
    total: float
    status: PayrollStatus = PayrollStatus.DRAFT
    late_penalties: float = 0.0
    early_leave_penalties: float = 0.0
    no_show_penalties: float = 0.0
    fines_total: float = 0.0
    manual_adjustments: float = 0.0
    history: Tuple[PayrollHistoryEntry, ...] = field(default_factory=tuple)
    payment_date: Optional[datetime] = None

    @classmethod
    def from_breakdown(cls, breakdown: PayrollBreakdown, *, created_at: datetime) -> "Payroll":
        return cls(
            payroll_id=None,
            staff_id=breakdown.staff_id,
            period=breakdown.period,
            base_accrual=breakdown.base_accrual,
            bonuses=breakdown.bonuses,
            penalties=breakdown.penalties,
            total=breakdown.total,
            late_penalties=breakdown.late_penalties,
            early_leave_penalties=breakdown.early_leave_penalties,
            no_show_penalties=breakdown.no_show_penalties,
            fines_total=breakdown.fines_total,
            history=(PayrollHistoryEntry(timestamp=created_at, action="created", amount=breakdown.total),),
        )

    def with_entry(self, entry: PayrollHistoryEntry, **changes) -> "Payroll":
        return replace(self, history=self.history + (entry,), **changes)


@dataclass(frozen=True)
class ChildPayment:
    """One payment per (subject, month_period)."""

    payment_id: Optional[int]
    subject_type: SubjectType
    subject_id: int
    period_start: date
    period_end: date
    month_period: str
    amount: float
    total: float
    status: ChildPaymentStatus = ChildPaymentStatus.ACTIVE
    comments: Optional[str] = None

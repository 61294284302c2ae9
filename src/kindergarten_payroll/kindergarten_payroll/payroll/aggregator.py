from __future__ import annotations

from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceStatus, SubjectType
from ..settings.model import RateTable
from ..staff.model import StaffMember
from .calculator.base import PenaltyBonusCalculator
from .calculator.standard_calculator import StandardPenaltyBonusCalculator
from .model import PayrollBreakdown


class PayrollAggregator:
    """Sums one staff member's month into a PayrollBreakdown.

    Accrual is the configured salary (zero when unset); bonuses and penalties come
    from completed attendance records; no-show penalties from no-show records;
    fines are the approved manual fines dated inside the month.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PenaltyBonusCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardPenaltyBonusCalculator()

    def aggregate(self, staff: StaffMember, period: str, rates: RateTable) -> PayrollBreakdown:
        start, end = month_bounds(period)
        records = self._attendance.list_for_subject_in_range(
            subject_type=SubjectType.STAFF,
            subject_id=staff.staff_id,
            start=start,
            end=end,
        )

        bonuses = late = early = no_show = 0.0
        completed = no_shows = worked = 0
        for record in records:
            if record.status == AttendanceStatus.COMPLETED:
                result = self._calculator.calculate(record, rates)
                bonuses += result.bonus_amount
                late += result.breakdown.late_penalty
                early += result.breakdown.early_leave_penalty
                completed += 1
                worked += record.worked_minutes
            elif record.status == AttendanceStatus.NO_SHOW:
                no_show += self._calculator.calculate(record, rates).penalty_amount
                no_shows += 1

        fines = sum(float(f.amount) for f in staff.approved_fines_between(start, end))

        return PayrollBreakdown(
            staff_id=staff.staff_id,
            period=period,
            base_accrual=round(float(staff.base_salary or 0), 2),
            bonuses=round(bonuses, 2),
            attendance_penalties=round(late + early + no_show, 2),
            late_penalties=round(late, 2),
            early_leave_penalties=round(early, 2),
            no_show_penalties=round(no_show, 2),
            fines_total=round(fines, 2),
            completed_shifts=completed,
            no_show_shifts=no_shows,
            worked_minutes=worked,
        )

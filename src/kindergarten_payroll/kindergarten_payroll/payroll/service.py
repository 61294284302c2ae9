from __future__ import annotations

from datetime import datetime
from typing import Callable

from ..audit.service import AuditTrail
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_non_negative
from ..core.actor import Actor, require_admin
from ..core.enums import PayrollStatus
from ..core.exceptions import InvalidTransition, NotFound
from ..settings.provider import SettingsProvider
from ..staff.repository import StaffRepository
from .aggregator import PayrollAggregator
from .model import Payroll, PayrollHistoryEntry
from .repository import PayrollRepository

_NEXT_STATUS = {
    PayrollStatus.DRAFT: PayrollStatus.APPROVED,
    PayrollStatus.APPROVED: PayrollStatus.PAID,
}


class PayrollService:
    """Use cases on an existing payroll: approve, pay, recalculate, fine."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        staff: StaffRepository,
        aggregator: PayrollAggregator,
        settings: SettingsProvider,
        audit: AuditTrail,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._staff = staff
        self._aggregator = aggregator
        self._settings = settings
        self._audit = audit
        self._clock = clock

    def _get(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if not payroll:
            raise NotFound(f"Payroll {payroll_id} not found")
        return payroll

    def _save(self, before: Payroll, after: Payroll) -> Payroll:
        if not self._payrolls.update(after, expected_status=before.status):
            raise InvalidTransition(f"Payroll {before.payroll_id} was changed concurrently, reload and retry")
        return after

    def _advance(self, actor: Actor, payroll_id: int, target: PayrollStatus, action: str) -> Payroll:
        require_admin(actor)
        payroll = self._get(payroll_id)
        if _NEXT_STATUS.get(payroll.status) != target:
            raise InvalidTransition(f"Payroll is {payroll.status.value}, cannot move to {target.value}")

        now = self._clock()
        changes = {"status": target}
        if target == PayrollStatus.PAID:
            changes["payment_date"] = now
        updated = payroll.with_entry(
            PayrollHistoryEntry(timestamp=now, action=action, amount=payroll.total), **changes
        )
        self._save(payroll, updated)
        self._audit.emit(
            actor,
            action=action,
            entity_type="payroll",
            entity_id=payroll.payroll_id,
            entity_name=f"{payroll.staff_id}/{payroll.period}",
            changes={"status": [payroll.status.value, target.value]},
        )
        return updated

    def approve(self, actor: Actor, payroll_id: int) -> Payroll:
        return self._advance(actor, payroll_id, PayrollStatus.APPROVED, "approved")

    def mark_paid(self, actor: Actor, payroll_id: int) -> Payroll:
        return self._advance(actor, payroll_id, PayrollStatus.PAID, "paid")

    def _require_draft(self, payroll: Payroll) -> None:
        if payroll.status != PayrollStatus.DRAFT:
            raise InvalidTransition(f"Payroll is {payroll.status.value}; only drafts can change")

    def recalculate(self, actor: Actor, payroll_id: int) -> Payroll:
        """Re-run the aggregator over the draft; manual fines added later are kept."""
        require_admin(actor)
        payroll = self._get(payroll_id)
        self._require_draft(payroll)

        staff = self._staff.get_by_id(payroll.staff_id)
        if not staff:
            raise NotFound(f"Staff member {payroll.staff_id} not found")

        breakdown = self._aggregator.aggregate(staff, payroll.period, self._settings.load().rates)
        penalties = round(breakdown.penalties + payroll.manual_adjustments, 2)
        total = round(breakdown.base_accrual + breakdown.bonuses - penalties, 2)
        updated = payroll.with_entry(
            PayrollHistoryEntry(timestamp=self._clock(), action="recalculated", amount=total),
            base_accrual=breakdown.base_accrual,
            bonuses=breakdown.bonuses,
            penalties=penalties,
            total=total,
            late_penalties=breakdown.late_penalties,
            early_leave_penalties=breakdown.early_leave_penalties,
            no_show_penalties=breakdown.no_show_penalties,
            fines_total=breakdown.fines_total,
        )
        self._save(payroll, updated)
        self._audit.emit(
            actor,
            action="recalculated",
            entity_type="payroll",
            entity_id=payroll.payroll_id,
            entity_name=f"{payroll.staff_id}/{payroll.period}",
            changes={"total": [payroll.total, total]},
        )
        return updated

    def apply_fine(self, actor: Actor, payroll_id: int, *, amount: float, comment: str) -> Payroll:
        require_admin(actor)
        amount = require_non_negative(amount, "Amount")
        comment = require_non_empty(comment, "Comment")
        payroll = self._get(payroll_id)
        self._require_draft(payroll)

        penalties = round(payroll.penalties + amount, 2)
        updated = payroll.with_entry(
            PayrollHistoryEntry(timestamp=self._clock(), action="fine_added", amount=amount, comment=comment),
            penalties=penalties,
            manual_adjustments=round(payroll.manual_adjustments + amount, 2),
            total=round(payroll.total - amount, 2),
        )
        self._save(payroll, updated)
        self._audit.emit(
            actor,
            action="fine_added",
            entity_type="payroll",
            entity_id=payroll.payroll_id,
            entity_name=f"{payroll.staff_id}/{payroll.period}",
            changes={"penalties": [payroll.penalties, penalties], "comment": comment},
        )
        return updated

    def get(self, payroll_id: int) -> Payroll:
        return self._get(payroll_id)

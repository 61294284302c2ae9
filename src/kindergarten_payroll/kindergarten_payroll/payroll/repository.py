from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus, SubjectType
from .model import ChildPayment, Payroll


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def get_for_staff_and_month(self, *, staff_id: int, period: str) -> Optional[Payroll]:
        raise NotImplementedError

    def list_for_month(self, *, period: str) -> Sequence[Payroll]:
        raise NotImplementedError

    def insert(self, payroll: Payroll) -> int:
        """Raises DuplicatePeriod when (staff_id, period) is already covered."""

        raise NotImplementedError

    def update(self, payroll: Payroll, *, expected_status: PayrollStatus) -> bool:
        """Overwrite amounts/status/history only if the stored status still matches."""

        raise NotImplementedError


class ChildPaymentRepository(Protocol):
    def get_for_subject_and_month(
        self, *, subject_type: SubjectType, subject_id: int, month_period: str
    ) -> Optional[ChildPayment]:
        raise NotImplementedError

    def list_for_month(self, *, month_period: str) -> Sequence[ChildPayment]:
        raise NotImplementedError

    def insert(self, payment: ChildPayment) -> int:
        """Raises DuplicatePeriod when (subject, month_period) is already covered."""

        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from ..core.enums import FineCategory, Role


@dataclass(frozen=True)
class Fine:
    """Manual fine appended by an administrator."""

    amount: float
    reason: str
    category: FineCategory
    fine_date: date
    approved_by: Optional[int] = None
    approved: bool = False


@dataclass(frozen=True)
class StaffMember:
    """Domain entity: staff member (read-only to the payroll core)."""

    staff_id: int
    full_name: str
    role: Role
    base_salary: Optional[float] = None
    active: bool = True
    fines: Tuple[Fine, ...] = field(default_factory=tuple)

    def approved_fines_between(self, start: date, end: date) -> Tuple[Fine, ...]:
        return tuple(f for f in self.fines if f.approved and start <= f.fine_date <= end)

from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import SubjectType


@dataclass(frozen=True)
class Child:
    """Domain entity: a billed subject (a child, or an adult guardian)."""

    child_id: int
    full_name: str
    active: bool = True
    subject_type: SubjectType = SubjectType.CHILD

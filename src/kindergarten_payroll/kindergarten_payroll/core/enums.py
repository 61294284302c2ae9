from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Actor roles used for authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    TEACHER = "teacher"
    ASSISTANT = "assistant"
    NURSE = "nurse"
    COOK = "cook"
    STAFF = "staff"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.MANAGER})


class SubjectType(str, Enum):
    """Who an attendance record or a payment belongs to."""

    STAFF = "staff"
    CHILD = "child"
    ADULT = "adult"


class AttendanceStatus(str, Enum):
    """Attendance states stored in the database.

    Lateness is an attribute of the record (late_minutes), not a status.
    """

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in {AttendanceStatus.COMPLETED, AttendanceStatus.NO_SHOW, AttendanceStatus.CANCELLED}


class ShiftCategory(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    FULL = "full"
    OVERTIME = "overtime"


class PayrollStatus(str, Enum):
    """One-directional: draft -> approved -> paid."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class ChildPaymentStatus(str, Enum):
    ACTIVE = "active"
    OVERDUE = "overdue"
    PAID = "paid"
    DRAFT = "draft"


class FineCategory(str, Enum):
    LATE = "late"
    OTHER = "other"


class PenaltyType(str, Enum):
    """How lateness minutes are turned into money."""

    PER_MINUTE = "per_minute"
    PER_5_MINUTES = "per_5_minutes"
    PER_10_MINUTES = "per_10_minutes"
    FIXED = "fixed"

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import (
    DEFAULT_CHILD_PAYMENT_AMOUNT,
    DEFAULT_EARLY_LEAVE_PENALTY_PER_MINUTE,
    DEFAULT_GENERATOR_MAX_WORKERS,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_LATE_PENALTY_PER_MINUTE,
    DEFAULT_NO_SHOW_PENALTY,
    DEFAULT_OVERTIME_BONUS_PER_MINUTE,
)
from ..core.enums import PenaltyType
from ..geo.geofence import GeoPoint


@dataclass(frozen=True)
class RateTable:
    """Money per minute of lateness / early leave / overtime."""

    late_penalty_per_minute: float = DEFAULT_LATE_PENALTY_PER_MINUTE
    early_leave_penalty_per_minute: float = DEFAULT_EARLY_LEAVE_PENALTY_PER_MINUTE
    overtime_bonus_per_minute: float = DEFAULT_OVERTIME_BONUS_PER_MINUTE
    penalty_type: PenaltyType = PenaltyType.PER_MINUTE
    no_show_penalty: float = DEFAULT_NO_SHOW_PENALTY


@dataclass(frozen=True)
class GeofenceSettings:
    enabled: bool = False
    center: Optional[GeoPoint] = None
    radius_meters: float = DEFAULT_GEOFENCE_RADIUS_METERS

    @property
    def active(self) -> bool:
        return self.enabled and self.center is not None


@dataclass(frozen=True)
class AppSettings:
    """Snapshot read at the start of an operation; never mutated afterwards."""

    geofence: GeofenceSettings = field(default_factory=GeofenceSettings)
    rates: RateTable = field(default_factory=RateTable)
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    child_payment_default_amount: float = DEFAULT_CHILD_PAYMENT_AMOUNT
    generator_max_workers: int = DEFAULT_GENERATOR_MAX_WORKERS

from __future__ import annotations

from .base import LatePenaltyStrategy


class FixedStrategy(LatePenaltyStrategy):
    """A flat rate once per late shift, whatever the minutes."""

    def amount(self, *, late_minutes: int, rate: float) -> float:
        return float(rate) if late_minutes > 0 else 0.0

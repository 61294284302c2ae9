from __future__ import annotations

from .base import LatePenaltyStrategy


class PerMinuteStrategy(LatePenaltyStrategy):
    """rate x every late minute."""

    def amount(self, *, late_minutes: int, rate: float) -> float:
        return max(int(late_minutes), 0) * float(rate)

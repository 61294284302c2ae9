from __future__ import annotations

import math

from .base import LatePenaltyStrategy


class PerBlockStrategy(LatePenaltyStrategy):
    """rate x every started block of minutes (5 or 10 in practice)."""

    def __init__(self, block_minutes: int):
        if block_minutes <= 0:
            raise ValueError("block_minutes must be positive")
        self.block_minutes = int(block_minutes)

    def amount(self, *, late_minutes: int, rate: float) -> float:
        if late_minutes <= 0:
            return 0.0
        return math.ceil(late_minutes / self.block_minutes) * float(rate)

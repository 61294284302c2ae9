from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import PenaltyType
from .strategies.base import LatePenaltyStrategy
from .strategies.block_strategy import PerBlockStrategy
from .strategies.fixed_strategy import FixedStrategy
from .strategies.per_minute_strategy import PerMinuteStrategy


@dataclass
class LatePenaltyStrategyFactory:
    """Factory Pattern: choose the lateness strategy from the rate table."""

    def for_type(self, penalty_type: PenaltyType) -> LatePenaltyStrategy:
        if penalty_type == PenaltyType.PER_5_MINUTES:
            return PerBlockStrategy(5)
        if penalty_type == PenaltyType.PER_10_MINUTES:
            return PerBlockStrategy(10)
        if penalty_type == PenaltyType.FIXED:
            return FixedStrategy()
        return PerMinuteStrategy()

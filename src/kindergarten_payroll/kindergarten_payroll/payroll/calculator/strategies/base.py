from __future__ import annotations

from abc import ABC, abstractmethod


class LatePenaltyStrategy(ABC):
    """Strategy Pattern: encapsulate how lateness minutes become money."""

    @abstractmethod
    def amount(self, *, late_minutes: int, rate: float) -> float:
        raise NotImplementedError

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Child


class ChildRepository(Protocol):
    def get_by_id(self, child_id: int) -> Optional[Child]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Child]:
        raise NotImplementedError

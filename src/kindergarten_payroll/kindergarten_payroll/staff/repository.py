from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StaffMember


class StaffRepository(Protocol):
    """Port for staff records.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        raise NotImplementedError

    def list_active(self) -> Sequence[StaffMember]:
        """Active staff members, each with its fines loaded."""

        raise NotImplementedError

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, SubjectType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_subject_and_date(
        self, *, subject_type: SubjectType, subject_id: int, work_date: date
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_subject_in_range(
        self, *, subject_type: SubjectType, subject_id: int, start: date, end: date
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> int:
        """Persist a new record and return its id.

        Raises AlreadyClockedIn when a record for the same subject and day exists.
        """

        raise NotImplementedError

    def update(self, record: AttendanceRecord, *, expected_status: AttendanceStatus) -> bool:
        """Overwrite the record only if its stored status still equals expected_status."""

        raise NotImplementedError

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ShiftCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftSchedule
from .repository import ScheduleRepository


def _to_schedule(r: dict) -> ShiftSchedule:
    return ShiftSchedule(
        schedule_id=int(r["schedule_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        category=ShiftCategory(r.get("category") or ShiftCategory.FULL.value),
        break_minutes=int(r.get("break_minutes") or 0),
        note=r.get("note"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[ShiftSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, staff_id, work_date, start_time, end_time, category, break_minutes, note
                FROM shift_schedules
                WHERE staff_id=%s AND work_date=%s
                """,
                (int(staff_id), work_date),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_for_date(self, *, work_date: date) -> Sequence[ShiftSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, staff_id, work_date, start_time, end_time, category, break_minutes, note
                FROM shift_schedules
                WHERE work_date=%s
                ORDER BY staff_id
                """,
                (work_date,),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

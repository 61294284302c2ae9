from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SubjectType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Child
from .repository import ChildRepository


def _to_child(r: dict) -> Child:
    return Child(
        child_id=int(r["child_id"]),
        full_name=r["full_name"],
        active=bool(r.get("active", True)),
        subject_type=SubjectType(r.get("subject_type") or SubjectType.CHILD.value),
    )


class MySQLChildRepository(ChildRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, child_id: int) -> Optional[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT child_id, full_name, active, subject_type FROM children WHERE child_id=%s",
                (child_id,),
            )
            row = fetchone(cur)
            return _to_child(row) if row else None

    def list_active(self) -> Sequence[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT child_id, full_name, active, subject_type
                FROM children
                WHERE active=1
                ORDER BY child_id
                """
            )
            return [_to_child(r) for r in fetchall(cur)]

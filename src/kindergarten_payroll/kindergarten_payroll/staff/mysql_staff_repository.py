from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..core.enums import FineCategory, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Fine, StaffMember
from .repository import StaffRepository

_FINE_COLUMNS = "staff_id, amount, reason, category, fine_date, approved_by, approved"


def _to_fine(r: dict) -> Fine:
    return Fine(
        amount=float(r["amount"]),
        reason=r.get("reason") or "",
        category=FineCategory(r.get("category") or FineCategory.OTHER.value),
        fine_date=r["fine_date"],
        approved_by=r.get("approved_by"),
        approved=bool(r.get("approved")),
    )


def _to_staff(r: dict, fines: Sequence[Fine]) -> StaffMember:
    salary = r.get("base_salary")
    return StaffMember(
        staff_id=int(r["staff_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        base_salary=float(salary) if salary is not None else None,
        active=bool(r.get("active", True)),
        fines=tuple(fines),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, full_name, role, base_salary, active
                FROM staff
                WHERE staff_id=%s
                """,
                (staff_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                f"SELECT {_FINE_COLUMNS} FROM staff_fines WHERE staff_id=%s ORDER BY fine_date, fine_id",
                (staff_id,),
            )
            return _to_staff(row, [_to_fine(f) for f in fetchall(cur)])

    def list_active(self) -> Sequence[StaffMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Administrators are not on the payroll.
            cur.execute(
                """
                SELECT staff_id, full_name, role, base_salary, active
                FROM staff
                WHERE active=1 AND role <> %s
                ORDER BY staff_id
                """,
                (Role.ADMIN.value,),
            )
            rows = fetchall(cur)
            cur.execute(
                f"""
                SELECT {_FINE_COLUMNS}
                FROM staff_fines
                WHERE staff_id IN (SELECT staff_id FROM staff WHERE active=1)
                ORDER BY fine_date, fine_id
                """
            )
            fines_by_staff: dict[int, list[Fine]] = defaultdict(list)
            for f in fetchall(cur):
                fines_by_staff[int(f["staff_id"])].append(_to_fine(f))

            return [_to_staff(r, fines_by_staff.get(int(r["staff_id"]), [])) for r in rows]

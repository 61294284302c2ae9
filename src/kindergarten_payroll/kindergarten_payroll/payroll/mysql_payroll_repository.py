from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ChildPaymentStatus, PayrollStatus, SubjectType
from ..core.exceptions import DuplicatePeriod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, is_duplicate_key, load_json
from .model import ChildPayment, Payroll, PayrollHistoryEntry
from .repository import ChildPaymentRepository, PayrollRepository

_PAYROLL_COLUMNS = """
    payroll_id, staff_id, period, base_accrual, bonuses, penalties, total, status,
    late_penalties, early_leave_penalties, no_show_penalties, fines_total, manual_adjustments,
    history, payment_date
"""

_CHILD_PAYMENT_COLUMNS = """
    payment_id, subject_type, subject_id, period_start, period_end, month_period,
    amount, total, status, comments
"""


def _history_to_json(history) -> str:
    return dump_json(
        [
            {
                "timestamp": e.timestamp.isoformat(),
                "action": e.action,
                "amount": e.amount,
                "comment": e.comment,
            }
            for e in history
        ]
    )


def _history_from_json(value) -> tuple:
    return tuple(
        PayrollHistoryEntry(
            timestamp=datetime.fromisoformat(e["timestamp"]),
            action=e["action"],
            amount=float(e.get("amount") or 0),
            comment=e.get("comment"),
        )
        for e in load_json(value, [])
    )


def _to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        staff_id=int(r["staff_id"]),
        period=r["period"],
        base_accrual=float(r["base_accrual"]),
        bonuses=float(r["bonuses"]),
        penalties=float(r["penalties"]),
        total=float(r["total"]),
        status=PayrollStatus(r["status"]),
        late_penalties=float(r.get("late_penalties") or 0),
        early_leave_penalties=float(r.get("early_leave_penalties") or 0),
        no_show_penalties=float(r.get("no_show_penalties") or 0),
        fines_total=float(r.get("fines_total") or 0),
        manual_adjustments=float(r.get("manual_adjustments") or 0),
        history=_history_from_json(r.get("history")),
        payment_date=r.get("payment_date"),
    )


def _to_child_payment(r: dict) -> ChildPayment:
    return ChildPayment(
        payment_id=int(r["payment_id"]),
        subject_type=SubjectType(r["subject_type"]),
        subject_id=int(r["subject_id"]),
        period_start=r["period_start"],
        period_end=r["period_end"],
        month_period=r["month_period"],
        amount=float(r["amount"]),
        total=float(r["total"]),
        status=ChildPaymentStatus(r["status"]),
        comments=r.get("comments"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYROLL_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def get_for_staff_and_month(self, *, staff_id: int, period: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYROLL_COLUMNS} FROM payrolls WHERE staff_id=%s AND period=%s",
                (int(staff_id), period),
            )
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def list_for_month(self, *, period: str) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYROLL_COLUMNS} FROM payrolls WHERE period=%s ORDER BY staff_id",
                (period,),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def insert(self, payroll: Payroll) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payrolls(
                        staff_id, period, base_accrual, bonuses, penalties, total, status,
                        late_penalties, early_leave_penalties, no_show_penalties, fines_total,
                        manual_adjustments, history, payment_date
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(payroll.staff_id),
                        payroll.period,
                        payroll.base_accrual,
                        payroll.bonuses,
                        payroll.penalties,
                        payroll.total,
                        payroll.status.value,
                        payroll.late_penalties,
                        payroll.early_leave_penalties,
                        payroll.no_show_penalties,
                        payroll.fines_total,
                        payroll.manual_adjustments,
                        _history_to_json(payroll.history),
                        payroll.payment_date,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise DuplicatePeriod(
                    f"Payroll for staff {payroll.staff_id} and {payroll.period} already exists"
                ) from exc
            raise

    def update(self, payroll: Payroll, *, expected_status: PayrollStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET base_accrual=%s, bonuses=%s, penalties=%s, total=%s, status=%s,
                    late_penalties=%s, early_leave_penalties=%s, no_show_penalties=%s,
                    fines_total=%s, manual_adjustments=%s, history=%s, payment_date=%s
                WHERE payroll_id=%s AND status=%s
                """,
                (
                    payroll.base_accrual,
                    payroll.bonuses,
                    payroll.penalties,
                    payroll.total,
                    payroll.status.value,
                    payroll.late_penalties,
                    payroll.early_leave_penalties,
                    payroll.no_show_penalties,
                    payroll.fines_total,
                    payroll.manual_adjustments,
                    _history_to_json(payroll.history),
                    payroll.payment_date,
                    int(payroll.payroll_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount > 0


class MySQLChildPaymentRepository(ChildPaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_subject_and_month(
        self, *, subject_type: SubjectType, subject_id: int, month_period: str
    ) -> Optional[ChildPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHILD_PAYMENT_COLUMNS}
                FROM child_payments
                WHERE subject_type=%s AND subject_id=%s AND month_period=%s
                """,
                (subject_type.value, int(subject_id), month_period),
            )
            r = fetchone(cur)
            return _to_child_payment(r) if r else None

    def list_for_month(self, *, month_period: str) -> Sequence[ChildPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_CHILD_PAYMENT_COLUMNS} FROM child_payments WHERE month_period=%s ORDER BY subject_id",
                (month_period,),
            )
            return [_to_child_payment(r) for r in fetchall(cur)]

    def insert(self, payment: ChildPayment) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO child_payments(
                        subject_type, subject_id, period_start, period_end, month_period,
                        amount, total, status, comments
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        payment.subject_type.value,
                        int(payment.subject_id),
                        payment.period_start,
                        payment.period_end,
                        payment.month_period,
                        payment.amount,
                        payment.total,
                        payment.status.value,
                        payment.comments,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise DuplicatePeriod(
                    f"Payment for {payment.subject_type.value} {payment.subject_id} "
                    f"and {payment.month_period} already exists"
                ) from exc
            raise

from __future__ import annotations

from dataclasses import dataclass

from ..common.datetime_utils import parse_month_label
from ..staff.repository import StaffRepository
from .repository import PayrollRepository


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class PayrollReportService:
    """Read-only monthly overview over persisted payrolls."""

    def __init__(self, payrolls: PayrollRepository, staff: StaffRepository):
        self._payrolls = payrolls
        self._staff = staff

    def build_month_report(self, *, period: str) -> ReportData:
        parse_month_label(period)

        rows: list[dict] = []
        summary = {"period": period, "count": 0, "accrual": 0.0, "bonuses": 0.0, "penalties": 0.0, "total": 0.0}

        for p in self._payrolls.list_for_month(period=period):
            staff = self._staff.get_by_id(p.staff_id)
            rows.append(
                {
                    "payroll_id": p.payroll_id,
                    "staff_id": p.staff_id,
                    "full_name": staff.full_name if staff else "-",
                    "accrual": p.base_accrual,
                    "bonuses": p.bonuses,
                    "penalties": p.penalties,
                    "total": p.total,
                    "status": p.status.value,
                }
            )
            summary["count"] += 1
            summary["accrual"] += p.base_accrual
            summary["bonuses"] += p.bonuses
            summary["penalties"] += p.penalties
            summary["total"] += p.total

        for key in ("accrual", "bonuses", "penalties", "total"):
            summary[key] = round(summary[key], 2)

        rows.sort(key=lambda x: x["full_name"])
        return ReportData(rows=rows, summary=summary)

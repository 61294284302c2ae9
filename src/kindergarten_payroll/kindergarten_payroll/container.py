from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .audit.service import AuditTrail
from .children.mysql_child_repository import MySQLChildRepository
from .children.repository import ChildRepository
from .database.connection import DBConfig, DatabaseConnection
from .geo.geofence import GeofenceValidator
from .payroll.aggregator import PayrollAggregator
from .payroll.generator import ChildPaymentGenerator, MonthlyPayrollGenerator
from .payroll.mysql_payroll_repository import MySQLChildPaymentRepository, MySQLPayrollRepository
from .payroll.report import PayrollReportService
from .payroll.repository import ChildPaymentRepository, PayrollRepository
from .payroll.service import PayrollService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .settings.model import AppSettings
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.provider import SettingsProvider
from .settings.repository import SettingsRepository
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository


@dataclass(frozen=True)
class Container:
    staff_repo: StaffRepository
    children_repo: ChildRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    payrolls_repo: PayrollRepository
    child_payments_repo: ChildPaymentRepository

    settings_provider: SettingsProvider
    audit: AuditTrail
    attendance_service: AttendanceService
    payroll_service: PayrollService
    payroll_report_service: PayrollReportService
    payroll_generator: MonthlyPayrollGenerator
    child_payment_generator: ChildPaymentGenerator


def wire(
    *,
    staff_repo: StaffRepository,
    children_repo: ChildRepository,
    schedules_repo: ScheduleRepository,
    attendance_repo: AttendanceRepository,
    payrolls_repo: PayrollRepository,
    child_payments_repo: ChildPaymentRepository,
    settings_repo: Optional[SettingsRepository] = None,
    audit_repo: Optional[AuditLogRepository] = None,
    defaults: Optional[AppSettings] = None,
) -> Container:
    """Build services on top of any set of repository adapters."""
    defaults = defaults or AppSettings()
    settings_provider = SettingsProvider(settings_repo, defaults=defaults)
    audit = AuditTrail(audit_repo)
    aggregator = PayrollAggregator(attendance_repo)

    attendance_service = AttendanceService(
        attendance_repo,
        staff_repo,
        schedules_repo,
        payrolls_repo,
        settings_provider,
        audit,
        geofence=GeofenceValidator(default_radius_meters=defaults.geofence.radius_meters),
    )
    payroll_service = PayrollService(payrolls_repo, staff_repo, aggregator, settings_provider, audit)

    return Container(
        staff_repo=staff_repo,
        children_repo=children_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        payrolls_repo=payrolls_repo,
        child_payments_repo=child_payments_repo,
        settings_provider=settings_provider,
        audit=audit,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        payroll_report_service=PayrollReportService(payrolls_repo, staff_repo),
        payroll_generator=MonthlyPayrollGenerator(
            staff_repo, payrolls_repo, aggregator, settings_provider, audit=audit
        ),
        child_payment_generator=ChildPaymentGenerator(
            children_repo, child_payments_repo, settings_provider, audit=audit
        ),
    )


def build_container(*, db_config: dict, defaults: Optional[AppSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        staff_repo=MySQLStaffRepository(conn),
        children_repo=MySQLChildRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payrolls_repo=MySQLPayrollRepository(conn),
        child_payments_repo=MySQLChildPaymentRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        audit_repo=MySQLAuditLogRepository(conn),
        defaults=defaults,
    )

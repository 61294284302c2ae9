from datetime import date, datetime, time

import pytest

from src.kindergarten_payroll.kindergarten_payroll.attendance.state_machine import AttendanceStateMachine
from src.kindergarten_payroll.kindergarten_payroll.audit.service import AuditTrail
from src.kindergarten_payroll.kindergarten_payroll.core.actor import Actor
from src.kindergarten_payroll.kindergarten_payroll.core.enums import PayrollStatus, Role
from src.kindergarten_payroll.kindergarten_payroll.core.exceptions import (
    AuthorizationError,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from src.kindergarten_payroll.kindergarten_payroll.payroll.aggregator import PayrollAggregator
from src.kindergarten_payroll.kindergarten_payroll.payroll.model import Payroll
from src.kindergarten_payroll.kindergarten_payroll.payroll.service import PayrollService
from src.kindergarten_payroll.kindergarten_payroll.schedules.model import ShiftSchedule
from src.kindergarten_payroll.kindergarten_payroll.settings.provider import SettingsProvider
from src.kindergarten_payroll.kindergarten_payroll.staff.model import StaffMember
from tests.fakes import FixedClock, InMemoryAttendance, InMemoryAudit, InMemoryPayrolls, InMemoryStaff

ADMIN = Actor(actor_id=99, role=Role.MANAGER, name="Head")
TEACHER = Actor(actor_id=1, role=Role.TEACHER, name="Lan")
NOW = datetime(2025, 4, 5, 10, 0)


class Setup:
    def __init__(self, payrolls=None):
        self.staff = InMemoryStaff()
        self.staff.add(StaffMember(staff_id=1, full_name="Lan", role=Role.TEACHER, base_salary=5_000_000))
        self.attendance = InMemoryAttendance()
        self.payrolls = payrolls or InMemoryPayrolls()
        self.audit = InMemoryAudit()
        self.svc = PayrollService(
            self.payrolls,
            self.staff,
            PayrollAggregator(self.attendance),
            SettingsProvider(None),
            AuditTrail(self.audit),
            clock=FixedClock(NOW),
        )

    def draft(self, total=5_000_000.0) -> Payroll:
        return self.payrolls.put(
            Payroll(payroll_id=None, staff_id=1, period="2025-03", base_accrual=total, bonuses=0, penalties=0,
                    total=total)
        )


def test_status_moves_forward_only():
    s = Setup()
    p = s.draft()

    approved = s.svc.approve(ADMIN, p.payroll_id)
    assert approved.status == PayrollStatus.APPROVED
    assert approved.payment_date is None
    assert approved.history[-1].action == "approved"

    with pytest.raises(InvalidTransition):
        s.svc.approve(ADMIN, p.payroll_id)

    paid = s.svc.mark_paid(ADMIN, p.payroll_id)
    assert paid.status == PayrollStatus.PAID
    assert paid.payment_date == NOW
    assert s.payrolls.get_by_id(p.payroll_id).status == PayrollStatus.PAID

    with pytest.raises(InvalidTransition):
        s.svc.approve(ADMIN, p.payroll_id)
    assert [e.action for e in s.audit.events] == ["approved", "paid"]


def test_draft_cannot_be_paid_directly():
    s = Setup()
    with pytest.raises(InvalidTransition):
        s.svc.mark_paid(ADMIN, s.draft().payroll_id)


def test_only_admins_change_payrolls():
    s = Setup()
    p = s.draft()
    with pytest.raises(AuthorizationError):
        s.svc.approve(TEACHER, p.payroll_id)
    with pytest.raises(AuthorizationError):
        s.svc.apply_fine(TEACHER, p.payroll_id, amount=100, comment="x")


def test_unknown_payroll():
    with pytest.raises(NotFound):
        Setup().svc.get(12345)


def test_fine_reduces_total_and_is_logged():
    s = Setup()
    p = s.draft(1000)

    fined = s.svc.apply_fine(ADMIN, p.payroll_id, amount=250, comment="  late report ")

    assert (fined.penalties, fined.total, fined.manual_adjustments) == (250, 750, 250)
    assert fined.history[-1].action == "fine_added"
    assert fined.history[-1].comment == "late report"


@pytest.mark.parametrize("amount,comment", [(-1, "x"), ("abc", "x"), (10, "   ")])
def test_fine_validation(amount, comment):
    s = Setup()
    with pytest.raises(ValidationError):
        s.svc.apply_fine(ADMIN, s.draft().payroll_id, amount=amount, comment=comment)


def test_approved_payroll_is_frozen():
    s = Setup()
    p = s.draft()
    s.svc.approve(ADMIN, p.payroll_id)
    with pytest.raises(InvalidTransition):
        s.svc.apply_fine(ADMIN, p.payroll_id, amount=10, comment="x")
    with pytest.raises(InvalidTransition):
        s.svc.recalculate(ADMIN, p.payroll_id)


def test_recalculate_picks_up_new_attendance_and_keeps_fines():
    s = Setup()
    p = s.draft()
    s.svc.apply_fine(ADMIN, p.payroll_id, amount=1000, comment="damaged book")

    machine = AttendanceStateMachine()
    day = date(2025, 3, 3)
    record = machine.new_record(
        ShiftSchedule(schedule_id=1, staff_id=1, work_date=day, start_time=time(9, 0), end_time=time(18, 0))
    )
    record = machine.clock_in(record, at=datetime.combine(day, time(9, 20)))
    s.attendance.put(machine.clock_out(record, at=datetime.combine(day, time(18, 45))))

    updated = s.svc.recalculate(ADMIN, p.payroll_id)

    assert updated.bonuses == 33750
    assert updated.late_penalties == 10000
    assert updated.penalties == 11000
    assert updated.total == 5_000_000 + 33750 - 11000
    assert [h.action for h in updated.history] == ["fine_added", "recalculated"]


def test_concurrent_change_is_reported():
    class StaleWrites(InMemoryPayrolls):
        def update(self, payroll, *, expected_status):
            return False

    s = Setup(StaleWrites())
    p = s.draft()
    with pytest.raises(InvalidTransition):
        s.svc.approve(ADMIN, p.payroll_id)

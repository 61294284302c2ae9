from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from ..audit.service import AuditTrail
from ..children.model import Child
from ..children.repository import ChildRepository
from ..common.datetime_utils import month_bounds, now_local, parse_month_label, previous_month
from ..common.logger import get_logger
from ..core.actor import SYSTEM_ACTOR, Actor
from ..core.constants import AUTO_GENERATED_COMMENT
from ..core.enums import ChildPaymentStatus
from ..core.exceptions import DuplicatePeriod
from ..settings.model import AppSettings
from ..settings.provider import SettingsProvider
from ..staff.model import StaffMember
from ..staff.repository import StaffRepository
from .aggregator import PayrollAggregator
from .model import ChildPayment, Payroll
from .repository import ChildPaymentRepository, PayrollRepository

logger = get_logger(__name__)

E = TypeVar("E")

_CREATED = "created"
_SKIPPED = "skipped"


@dataclass(frozen=True)
class GenerationError:
    entity_id: int
    message: str


@dataclass(frozen=True)
class GenerationResult:
    period: str
    created_count: int = 0
    skipped_count: int = 0
    errors: List[GenerationError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "createdCount": self.created_count,
            "skippedCount": self.skipped_count,
            "errors": [{"entityId": e.entity_id, "message": e.message} for e in self.errors],
        }


class MonthlyGenerator(ABC, Generic[E]):
    """Idempotent batch: one record per active entity per month, never overwritten.

    Re-running after a partial failure is the recovery path. The existence check
    uses the same key as the storage uniqueness constraint; a duplicate-key race
    on insert counts as skipped. One entity's failure is collected, not raised.
    Every created record is reported to the audit trail.
    """

    entity_label = "entity"
    entity_type = "entity"

    def __init__(
        self,
        settings: SettingsProvider,
        *,
        clock: Callable[[], datetime] = now_local,
        max_workers: Optional[int] = None,
        audit: Optional[AuditTrail] = None,
    ):
        self._settings = settings
        self._clock = clock
        self._max_workers = max_workers
        self._audit = audit

    def generate(self, target_month: str, *, actor: Actor = SYSTEM_ACTOR) -> GenerationResult:
        parse_month_label(target_month)
        settings = self._settings.load()
        entities = list(self._list_entities())
        workers = max(1, int(self._max_workers or settings.generator_max_workers or 1))

        def run(entity: E) -> tuple[int, str]:
            entity_id = self._entity_id(entity)
            try:
                if self._exists(entity, target_month):
                    return entity_id, _SKIPPED
                record = self._create(entity, target_month, settings)
            except DuplicatePeriod:
                return entity_id, _SKIPPED
            except Exception as exc:
                logger.warning("%s %s: generation for %s failed: %s", self.entity_label, entity_id, target_month, exc)
                return entity_id, str(exc) or exc.__class__.__name__
            self._emit_created(actor, record)
            return entity_id, _CREATED

        if workers > 1 and len(entities) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(pool.map(run, entities))
        else:
            outcomes = [run(e) for e in entities]

        created = sum(1 for _, o in outcomes if o == _CREATED)
        skipped = sum(1 for _, o in outcomes if o == _SKIPPED)
        errors = [GenerationError(entity_id=i, message=o) for i, o in outcomes if o not in (_CREATED, _SKIPPED)]

        logger.info(
            "%s generation for %s: created=%d skipped=%d failed=%d",
            self.entity_label,
            target_month,
            created,
            skipped,
            len(errors),
        )
        return GenerationResult(period=target_month, created_count=created, skipped_count=skipped, errors=errors)

    def _emit_created(self, actor: Actor, record) -> None:
        if self._audit is None:
            return
        entity_id, entity_name = self._describe(record)
        self._audit.emit(
            actor,
            action="created",
            entity_type=self.entity_type,
            entity_id=entity_id,
            entity_name=entity_name,
            changes={"total": record.total},
        )

    @abstractmethod
    def _list_entities(self) -> Sequence[E]:
        raise NotImplementedError

    @abstractmethod
    def _entity_id(self, entity: E) -> int:
        raise NotImplementedError

    @abstractmethod
    def _exists(self, entity: E, period: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def _create(self, entity: E, period: str, settings: AppSettings) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _describe(self, record) -> tuple[Any, str]:
        """(entity id, display name) of a created record for the audit trail."""
        raise NotImplementedError


class MonthlyPayrollGenerator(MonthlyGenerator[StaffMember]):
    entity_label = "payroll"
    entity_type = "payroll"

    def __init__(
        self,
        staff: StaffRepository,
        payrolls: PayrollRepository,
        aggregator: PayrollAggregator,
        settings: SettingsProvider,
        **kwargs,
    ):
        super().__init__(settings, **kwargs)
        self._staff = staff
        self._payrolls = payrolls
        self._aggregator = aggregator

    def _list_entities(self) -> Sequence[StaffMember]:
        return self._staff.list_active()

    def _entity_id(self, entity: StaffMember) -> int:
        return entity.staff_id

    def _exists(self, entity: StaffMember, period: str) -> bool:
        return self._payrolls.get_for_staff_and_month(staff_id=entity.staff_id, period=period) is not None

    def _create(self, entity: StaffMember, period: str, settings: AppSettings) -> Payroll:
        breakdown = self._aggregator.aggregate(entity, period, settings.rates)
        payroll = Payroll.from_breakdown(breakdown, created_at=self._clock())
        payroll_id = self._payrolls.insert(payroll)
        return replace(payroll, payroll_id=payroll_id)

    def _describe(self, record: Payroll) -> tuple[Any, str]:
        return record.payroll_id, f"{record.staff_id}/{record.period}"


class ChildPaymentGenerator(MonthlyGenerator[Child]):
    """Same contract as MonthlyPayrollGenerator, over children.

    A new period inherits amount/total from the previous period's payment of the
    same subject; without one, the configured default amount applies.
    """

    entity_label = "child payment"
    entity_type = "child_payment"

    def __init__(
        self,
        children: ChildRepository,
        payments: ChildPaymentRepository,
        settings: SettingsProvider,
        **kwargs,
    ):
        super().__init__(settings, **kwargs)
        self._children = children
        self._payments = payments

    def _list_entities(self) -> Sequence[Child]:
        return self._children.list_active()

    def _entity_id(self, entity: Child) -> int:
        return entity.child_id

    def _exists(self, entity: Child, period: str) -> bool:
        return (
            self._payments.get_for_subject_and_month(
                subject_type=entity.subject_type, subject_id=entity.child_id, month_period=period
            )
            is not None
        )

    def _create(self, entity: Child, period: str, settings: AppSettings) -> ChildPayment:
        previous = self._payments.get_for_subject_and_month(
            subject_type=entity.subject_type,
            subject_id=entity.child_id,
            month_period=previous_month(period),
        )
        if previous is not None:
            amount, total = previous.amount, previous.total
        else:
            amount = total = float(settings.child_payment_default_amount)

        start, end = month_bounds(period)
        payment = ChildPayment(
            payment_id=None,
            subject_type=entity.subject_type,
            subject_id=entity.child_id,
            period_start=start,
            period_end=end,
            month_period=period,
            amount=amount,
            total=total,
            status=ChildPaymentStatus.ACTIVE,
            comments=AUTO_GENERATED_COMMENT,
        )
        payment_id = self._payments.insert(payment)
        return replace(payment, payment_id=payment_id)

    def _describe(self, record: ChildPayment) -> tuple[Any, str]:
        return record.payment_id, f"{record.subject_type.value}/{record.subject_id}/{record.month_period}"

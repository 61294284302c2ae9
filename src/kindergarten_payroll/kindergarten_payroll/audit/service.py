from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.logger import get_logger
from ..core.actor import Actor
from .model import AuditEvent
from .repository import AuditLogRepository

logger = get_logger(__name__)


class AuditTrail:
    """Fire-and-forget audit emitter.

    A failing audit write is logged and never rolls back the business operation.
    """

    def __init__(self, repository: Optional[AuditLogRepository]):
        self._repository = repository

    def emit(
        self,
        actor: Actor,
        *,
        action: str,
        entity_type: str,
        entity_id: Any,
        entity_name: str = "",
        changes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if self._repository is None:
            return
        event = AuditEvent(
            actor_id=actor.actor_id,
            actor_role=actor.role.value,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            entity_name=entity_name or "",
            changes=changes,
        )
        try:
            self._repository.write(event)
        except Exception as exc:
            logger.warning("Audit write failed for %s %s/%s: %s", action, entity_type, entity_id, exc)

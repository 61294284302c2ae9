from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class AuditEvent:
    actor_id: int
    actor_role: str
    action: str
    entity_type: str
    entity_id: str
    entity_name: str = ""
    changes: Optional[Mapping[str, Any]] = None
    created_at: datetime = field(default_factory=datetime.now)

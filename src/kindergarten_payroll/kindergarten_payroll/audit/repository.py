from __future__ import annotations

from typing import Protocol

from .model import AuditEvent


class AuditLogRepository(Protocol):
    def write(self, event: AuditEvent) -> None:
        raise NotImplementedError

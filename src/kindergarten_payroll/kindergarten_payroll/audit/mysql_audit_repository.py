from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json
from .model import AuditEvent
from .repository import AuditLogRepository


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def write(self, event: AuditEvent) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(actor_id, actor_role, action, entity_type, entity_id, entity_name, changes, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.actor_id,
                    event.actor_role,
                    event.action,
                    event.entity_type,
                    event.entity_id,
                    event.entity_name,
                    dump_json(dict(event.changes)) if event.changes is not None else None,
                    event.created_at,
                ),
            )

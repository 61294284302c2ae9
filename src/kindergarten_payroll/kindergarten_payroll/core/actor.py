from __future__ import annotations

from dataclasses import dataclass

from .enums import ADMIN_ROLES, Role
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as supplied by the identity collaborator (trusted)."""

    actor_id: int
    role: Role
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


SYSTEM_ACTOR = Actor(actor_id=0, role=Role.ADMIN, name="system")


def require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Administrator role required")

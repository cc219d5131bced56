"""Authenticated actor passed explicitly into every service call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from app.models.user import User, UserRole
from app.services.errors import ForbiddenError, UnauthorizedError


@dataclass(frozen=True)
class ActorContext:
    id: UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "ActorContext":
        return cls(id=user.id, role=user.role)


def require_actor(actor: Optional[ActorContext], *roles: UserRole) -> ActorContext:
    """Return the actor, raising when absent or when its role is not among ``roles``."""

    if actor is None:
        raise UnauthorizedError("Authentication required")
    if roles and actor.role not in roles:
        allowed = ", ".join(role.value for role in roles)
        raise ForbiddenError(f"Operation requires role: {allowed}")
    return actor

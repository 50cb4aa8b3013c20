# auth/access.py
from dataclasses import dataclass
from typing import Optional

from ..errors import AuthorizationError
from ..models.user import ADMIN


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""
    id: str
    display_name: str
    role: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    """
    Explicit session handed to every registry operation.

    Capabilities are derived from the actor's role and nothing else:
    ``can_delete`` and ``can_manage_users`` are both exactly ``is_admin``.
    An actor without a role has no capabilities beyond being signed in.
    """
    actor: Optional[Actor] = None

    @property
    def is_authenticated(self) -> bool:
        return self.actor is not None

    @property
    def is_admin(self) -> bool:
        return self.actor is not None and self.actor.role == ADMIN

    @property
    def can_delete(self) -> bool:
        return self.is_admin

    @property
    def can_manage_users(self) -> bool:
        return self.is_admin

    def capabilities(self) -> dict:
        return {
            'isAuthenticated': self.is_authenticated,
            'isAdmin': self.is_admin,
            'canDelete': self.can_delete,
            'canManageUsers': self.can_manage_users,
        }

    def require_actor(self) -> Actor:
        if self.actor is None:
            raise AuthorizationError("You must be signed in", unauthenticated=True)
        return self.actor

    def require_delete(self, action="delete") -> Actor:
        actor = self.require_actor()
        if not self.can_delete:
            raise AuthorizationError(f"Only administrators can {action}")
        return actor

    def require_manage_users(self) -> Actor:
        actor = self.require_actor()
        if not self.can_manage_users:
            raise AuthorizationError("Only administrators can manage users")
        return actor


ANONYMOUS = AuthSession()

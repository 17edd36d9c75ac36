from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class Account:
    """Login identity. Role is derived from which profile table holds the id."""

    account_id: str
    email: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class CurrentUser:
    """Resolved identity of the caller, passed explicitly into services."""

    user_id: str
    role: Role
    display_name: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def require_role(user: CurrentUser, *roles: Role) -> None:
    if user.role not in roles:
        raise AuthorizationError("You do not have permission to perform this action")

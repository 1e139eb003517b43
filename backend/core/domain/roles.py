"""
core.domain.roles — Principals and role capability predicates.

A ``Principal`` is the authenticated caller as the moderation core sees
it: an id and exactly one ``Role``.  All predicates here are pure and
total; an unknown or missing role is treated as the least-privileged
``Role.USER``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.constants import Role

if TYPE_CHECKING:
    from core.domain.kinds import KindDescriptor

# Numeric role codes used by older user exports.
_LEGACY_ROLE_CODES: dict[int, Role] = {
    1: Role.ADMIN,
    2: Role.OFFICER,
    3: Role.USER,
}


def coerce_role(value: Any) -> Role:
    """Resolve a stored role value to a ``Role``, defaulting to ``USER``."""
    if isinstance(value, Role):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return _LEGACY_ROLE_CODES.get(value, Role.USER)
    if isinstance(value, str) and value.isdigit():
        return _LEGACY_ROLE_CODES.get(int(value), Role.USER)
    try:
        return Role(value)
    except ValueError:
        return Role.USER


@dataclass(frozen=True)
class Principal:
    id: int
    role: Role

    @classmethod
    def from_user(cls, user: Any) -> Principal | None:
        """
        Build a principal from a Django user.

        Returns ``None`` for anonymous users so callers can fail with
        ``Unauthenticated``.  Superusers always act as Admin.
        """
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        if getattr(user, "is_superuser", False):
            return cls(id=user.pk, role=Role.ADMIN)
        return cls(id=user.pk, role=coerce_role(getattr(user, "role", None)))

    @property
    def is_admin(self) -> bool:
        return role_of(self) is Role.ADMIN


def role_of(principal: Principal | None) -> Role:
    if principal is None:
        return Role.USER
    return coerce_role(principal.role)


def can_create(role: Role, kind: KindDescriptor) -> bool:
    return coerce_role(role) in kind.creator_roles


def can_moderate(role: Role, kind: KindDescriptor) -> bool:
    """Moderation is Admin-exclusive, and only for moderated kinds."""
    return kind.moderated and coerce_role(role) is Role.ADMIN


def can_view_all(role: Role, kind: KindDescriptor) -> bool:
    from core.domain.kinds import Scope

    return Scope.ALL in kind.scope_for(coerce_role(role))

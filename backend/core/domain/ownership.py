"""
core.domain.ownership — Mutation guard for moderated records.

``can_mutate`` answers whether a principal may edit, delete or moderate a
specific record and, when it may not, which ``ErrorKind`` explains why.
The guard never touches storage; callers pass the record they loaded.

Rules
-----
* ``moderate`` is Admin-exclusive.
* Admins may edit or delete any record in any state.
* Everyone else may only act on records they own.
* Owners of unmoderated kinds (checklists) act unconditionally.
* Owners may edit while the record's status is in the kind's
  ``owner_edit_statuses``, except that approved records of kinds with
  ``forbid_edit_when_approved`` are immutable to them.
* Owners may delete while the status is in ``owner_delete_statuses``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.constants import RecordStatus, Role
from core.domain.exceptions import ErrorKind, exception_for
from core.domain.kinds import KindDescriptor
from core.domain.roles import Principal, role_of


class Action(str, Enum):
    EDIT = "edit"
    DELETE = "delete"
    MODERATE = "moderate"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: ErrorKind | None = None
    message: str = ""

    @classmethod
    def allow(cls) -> Decision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str, reason: ErrorKind = ErrorKind.FORBIDDEN) -> Decision:
        return cls(allowed=False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self) -> None:
        """Raise the exception matching ``reason`` when not allowed."""
        if not self.allowed:
            raise exception_for(self.reason or ErrorKind.FORBIDDEN, self.message)


def is_owner(principal: Principal, record: Any, kind: KindDescriptor) -> bool:
    return getattr(record, kind.owner_field, None) == principal.id


def can_mutate(
    principal: Principal | None,
    record: Any,
    action: Action,
    kind: KindDescriptor,
) -> Decision:
    if principal is None:
        return Decision.deny(
            "Authentication credentials were not provided.",
            reason=ErrorKind.UNAUTHENTICATED,
        )

    role = role_of(principal)

    if action is Action.MODERATE:
        if not kind.moderated:
            return Decision.deny(f"{kind.verbose_name_plural.capitalize()} are not moderated.")
        if role is not Role.ADMIN:
            return Decision.deny(f"Only administrators can moderate {kind.verbose_name_plural}.")
        return Decision.allow()

    if role is Role.ADMIN:
        return Decision.allow()

    if not is_owner(principal, record, kind):
        return Decision.deny(f"You can only {action.value} your own {kind.verbose_name_plural}.")

    if not kind.moderated:
        return Decision.allow()

    current = getattr(record, kind.status_field)

    if action is Action.EDIT:
        if current == RecordStatus.APPROVED and kind.forbid_edit_when_approved:
            return Decision.deny(
                f"Approved {kind.verbose_name_plural} can only be edited by an administrator."
            )
        if current not in kind.owner_edit_statuses:
            return Decision.deny(
                f"{kind.verbose_name_plural.capitalize()} that are {current} cannot be edited."
            )
        return Decision.allow()

    if current not in kind.owner_delete_statuses:
        allowed = ", ".join(sorted(kind.owner_delete_statuses))
        return Decision.deny(
            f"You can only delete a {kind.verbose_name} while it is {allowed}."
        )
    return Decision.allow()

"""
core.domain.ledger — Moderator identity and rejection notes.

The ledger owns the ``moderator_id`` / ``moderator_notes`` pair.  Only the
approve and reject transitions write it (and re-edit resets clear it); it
is readable by Admins and by the record's owner, who needs the notes to
learn why a submission was rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.domain.exceptions import DomainError, PermissionDenied
from core.domain.kinds import KindDescriptor
from core.domain.ownership import is_owner
from core.domain.roles import Principal


@dataclass(frozen=True)
class ModerationEntry:
    status: str
    moderator_id: int | None
    moderator_notes: str | None


class ModerationLedger:
    moderator_field = "moderator_id"
    notes_field = "moderator_notes"

    def approval(self, moderator: Principal) -> dict[str, Any]:
        return {self.moderator_field: moderator.id, self.notes_field: None}

    def rejection(self, moderator: Principal, notes: str | None) -> dict[str, Any]:
        trimmed = (notes or "").strip()
        if not trimmed:
            raise DomainError("Rejection notes are required.")
        return {self.moderator_field: moderator.id, self.notes_field: trimmed}

    def cleared(self) -> dict[str, Any]:
        return {self.moderator_field: None, self.notes_field: None}

    def is_visible_to(self, principal: Principal | None, record: Any, kind: KindDescriptor) -> bool:
        if principal is None:
            return False
        return principal.is_admin or is_owner(principal, record, kind)

    def read(self, principal: Principal | None, record: Any, kind: KindDescriptor) -> ModerationEntry:
        if not self.is_visible_to(principal, record, kind):
            raise PermissionDenied(
                f"Moderation details of this {kind.verbose_name} are only visible to its owner."
            )
        return ModerationEntry(
            status=getattr(record, kind.status_field),
            moderator_id=getattr(record, self.moderator_field, None),
            moderator_notes=getattr(record, self.notes_field, None),
        )

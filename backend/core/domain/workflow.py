"""
core.domain.workflow — The moderation state machine.

One ``WorkflowEngine`` is built per kind from its ``KindDescriptor`` and
``Repository``.  It owns every status transition:

    create ──► pending ──approve──► approved
                  │  ▲                 │
               reject └──── re-edit ───┤
                  ▼                    │
               rejected ◄───reject─────┘

* Creation by a role in ``auto_approve_roles`` lands directly in
  ``approved`` with the creator recorded as moderator.
* A non-Admin owner editing an approved or rejected record sends it back
  to ``pending`` (and clears the ledger) for kinds with
  ``re_edit_resets_status``; kinds with ``forbid_edit_when_approved``
  refuse the edit instead.
* ``closed`` is reserved: nothing produces it and nothing leaves it.

All writes are compare-and-set on the status the engine read, so a
concurrent writer that got there first turns the second write into
``Conflict``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from core.constants import RecordStatus, Role
from core.domain.cascade import CascadeManager
from core.domain.exceptions import DomainError, NotFound, PermissionDenied
from core.domain.kinds import KindDescriptor
from core.domain.ledger import ModerationLedger
from core.domain.ownership import Action, can_mutate
from core.domain.repositories import Repository
from core.domain.roles import Principal, can_create, role_of
from core.domain.transactions import transition_status

logger = logging.getLogger(__name__)

# notifier(kind, event_type, record, actor)
Notifier = Callable[[KindDescriptor, str, Any, Principal], None]


class WorkflowEngine:
    def __init__(
        self,
        kind: KindDescriptor,
        repository: Repository,
        *,
        ledger: ModerationLedger | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.kind = kind
        self.repository = repository
        self.ledger = ledger or ModerationLedger()
        self.notifier = notifier
        self.cascade = CascadeManager(repository)

    # ── Payload checks ───────────────────────────────────────────────

    def _clean(self, payload: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
        unknown = sorted(set(payload) - set(allowed))
        if unknown:
            raise DomainError(
                f"Unknown or read-only {self.kind.verbose_name} field(s): {', '.join(unknown)}."
            )
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in payload.items()
        }

    def _check_required(self, values: Mapping[str, Any], fields: Iterable[str]) -> None:
        missing = [
            name for name in fields
            if values.get(name) is None or (isinstance(values[name], str) and not values[name])
        ]
        if missing:
            raise DomainError(f"Missing required field(s): {', '.join(missing)}.")

    def _check_limits(self, values: Mapping[str, Any]) -> None:
        for name, limit in self.kind.max_lengths.items():
            value = values.get(name)
            if isinstance(value, str) and len(value) > limit:
                raise DomainError(f"{name.capitalize()} must be {limit} characters or less.")

    def _check_unique(self, values: Mapping[str, Any], exclude_pk: Any = None) -> None:
        for name in self.kind.unique_fields:
            if name in values and self.repository.exists(exclude_pk=exclude_pk, **{name: values[name]}):
                raise DomainError(
                    f"A {self.kind.verbose_name} with this {name.replace('_', ' ')} already exists."
                )

    def _notify(self, event: str, record: Any, actor: Principal) -> None:
        if self.notifier is not None:
            self.notifier(self.kind, event, record, actor)

    # ── Transitions ──────────────────────────────────────────────────

    def create(self, principal: Principal, payload: Mapping[str, Any]) -> Any:
        kind = self.kind
        role = role_of(principal)
        if not can_create(role, kind):
            raise PermissionDenied(
                f"{role.label} accounts cannot create {kind.verbose_name_plural}."
            )

        values = self._clean(payload, kind.create_fields)
        if kind.defaults_factory is not None:
            for key, value in kind.defaults_factory().items():
                if values.get(key) in (None, ""):
                    values[key] = value
        self._check_required(values, kind.required_fields)
        self._check_limits(values)

        if kind.parent is not None:
            parent_pk = values.get(kind.parent.field)
            if parent_pk is None or not self.repository.parent_exists(kind.parent, parent_pk):
                raise NotFound(f"The referenced {kind.parent.name} does not exist.")

        self._check_unique(values)

        if kind.one_pending_per_owner and self.repository.exists(
            **{kind.owner_field: principal.id, kind.status_field: RecordStatus.PENDING.value}
        ):
            raise DomainError(f"You already have a pending {kind.verbose_name}.")

        values[kind.owner_field] = principal.id
        auto_approved = False
        if kind.moderated:
            values.setdefault("is_active", True)
            if role in kind.auto_approve_roles:
                auto_approved = True
                values[kind.status_field] = RecordStatus.APPROVED.value
                values.update(self.ledger.approval(principal))
            else:
                values[kind.status_field] = RecordStatus.PENDING.value
                values.update(self.ledger.cleared())

        with self.repository.atomic():
            record = self.repository.create(values)
            if auto_approved and kind.on_approved is not None:
                kind.on_approved(record, principal)

        logger.info(
            "%s pk=%s created by principal=%s (%s)%s",
            kind.name,
            record.pk,
            principal.id,
            role.value,
            " and auto-approved" if auto_approved else "",
        )
        return record

    def edit(self, principal: Principal, record: Any, patch: Mapping[str, Any]) -> Any:
        kind = self.kind
        can_mutate(principal, record, Action.EDIT, kind).enforce()

        changes = self._clean(patch, kind.editable_fields)
        if not changes:
            raise DomainError(f"No editable {kind.verbose_name} fields were supplied.")
        self._check_required(changes, [name for name in kind.required_fields if name in changes])
        self._check_limits(changes)
        self._check_unique(changes, exclude_pk=record.pk)

        expected = None
        if kind.moderated:
            current = getattr(record, kind.status_field)
            expected = {kind.status_field: current}
            resets = (
                kind.re_edit_resets_status
                and role_of(principal) is not Role.ADMIN
                and current in (RecordStatus.APPROVED, RecordStatus.REJECTED)
            )
            if resets:
                changes[kind.status_field] = RecordStatus.PENDING.value
                changes.update(self.ledger.cleared())
                logger.info(
                    "%s pk=%s re-edited by owner %s; status %s -> pending",
                    kind.name,
                    record.pk,
                    principal.id,
                    current,
                )

        return self.repository.compare_and_set(record.pk, changes, expected=expected)

    def approve(self, principal: Principal, record: Any, notes: str | None = None) -> Any:
        kind = self.kind
        can_mutate(principal, record, Action.MODERATE, kind).enforce()

        previous = getattr(record, kind.status_field)
        if notes and notes.strip():
            # Approval clears the ledger notes; the approver's remark is only logged.
            logger.info("Approval remark on %s pk=%s: %s", kind.name, record.pk, notes.strip())

        with self.repository.atomic():
            updated = transition_status(
                self.repository,
                record,
                target_status=RecordStatus.APPROVED.value,
                allowed_sources=kind.approve_sources,
                status_field=kind.status_field,
                changes=self.ledger.approval(principal),
            )
            if previous != RecordStatus.APPROVED:
                if kind.on_approved is not None:
                    kind.on_approved(updated, principal)
                self._notify("approved", updated, principal)

        logger.info(
            "%s pk=%s approved by admin=%s (was %s)",
            kind.name,
            record.pk,
            principal.id,
            previous,
        )
        return updated

    def reject(self, principal: Principal, record: Any, notes: str | None) -> Any:
        kind = self.kind
        can_mutate(principal, record, Action.MODERATE, kind).enforce()
        changes = self.ledger.rejection(principal, notes)

        with self.repository.atomic():
            updated = transition_status(
                self.repository,
                record,
                target_status=RecordStatus.REJECTED.value,
                allowed_sources=kind.reject_sources,
                status_field=kind.status_field,
                changes=changes,
            )
            self._notify("rejected", updated, principal)

        logger.info("%s pk=%s rejected by admin=%s", kind.name, record.pk, principal.id)
        return updated

    def toggle_active(self, principal: Principal, record: Any, is_active: bool | None = None) -> Any:
        """Set ``is_active`` (flip it when ``None``) without touching status."""
        kind = self.kind
        can_mutate(principal, record, Action.MODERATE, kind).enforce()

        current = bool(getattr(record, "is_active"))
        target = (not current) if is_active is None else bool(is_active)
        if target == current:
            return record

        updated = self.repository.compare_and_set(
            record.pk,
            {"is_active": target},
            expected={"is_active": current},
        )
        logger.info(
            "%s pk=%s is_active %s -> %s by admin=%s",
            kind.name,
            record.pk,
            current,
            target,
            principal.id,
        )
        return updated

    def delete(self, principal: Principal, record: Any) -> dict[str, int]:
        kind = self.kind
        can_mutate(principal, record, Action.DELETE, kind).enforce()

        expected = None
        if kind.moderated:
            expected = {kind.status_field: getattr(record, kind.status_field)}
        return self.cascade.delete_with_children(kind, record, expected=expected)

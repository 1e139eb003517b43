"""
core.domain.policies — Single entry point into the moderation core.

``ModerationPolicy`` binds a ``KindDescriptor`` to its repository and
exposes the eight operations the request layer needs.  The typed methods
raise domain exceptions; ``execute`` wraps them and returns a ``Result``
so the caller never has to catch anything.

Usage::

    from core.domain.policies import ModerationPolicy, Operation
    from core.domain.roles import Principal

    result = REPORT_POLICY.execute(
        Principal.from_user(request.user),
        Operation.REJECT,
        pk=42,
        payload={"notes": "insufficient evidence"},
    )
    if not result.ok:
        return error_response(result.error, result.message)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping

from core.constants import RecordStatus
from core.domain.exceptions import DomainError, NotFound, PermissionDenied, Unauthenticated
from core.domain.kinds import KindDescriptor
from core.domain.ledger import ModerationEntry, ModerationLedger
from core.domain.repositories import Repository
from core.domain.results import Result
from core.domain.roles import Principal
from core.domain.visibility import build_filter
from core.domain.workflow import Notifier, WorkflowEngine

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    REJECT = "reject"
    TOGGLE_ACTIVE = "toggle_active"
    INCREMENT = "increment"


# kind name → policy, filled by ``ModerationPolicy.register``
_REGISTRY: dict[str, "ModerationPolicy"] = {}


def registered_policies() -> list["ModerationPolicy"]:
    return [_REGISTRY[name] for name in sorted(_REGISTRY)]


class ModerationPolicy:
    def __init__(
        self,
        kind: KindDescriptor,
        repository: Repository,
        *,
        ledger: ModerationLedger | None = None,
        notifier: Notifier | None = None,
        parent_policy: "ModerationPolicy | None" = None,
    ) -> None:
        self.kind = kind
        self.repository = repository
        self.ledger = ledger or ModerationLedger()
        self.parent_policy = parent_policy
        self.engine = WorkflowEngine(kind, repository, ledger=self.ledger, notifier=notifier)

    def register(self) -> "ModerationPolicy":
        _REGISTRY[self.kind.name] = self
        return self

    @staticmethod
    def _require(principal: Principal | None) -> Principal:
        if principal is None:
            raise Unauthenticated()
        return principal

    def _reader(self, principal: Principal | None) -> Principal | None:
        if self.kind.public_read:
            return principal
        return self._require(principal)

    # ── Reads ────────────────────────────────────────────────────────

    def list(
        self,
        principal: Principal | None,
        filters: Mapping[str, Any] | None = None,
        *,
        search: str | None = None,
    ) -> Iterable[Any]:
        visibility = build_filter(self._reader(principal), self.kind, filters)
        return self.repository.list(
            visibility,
            search=search,
            search_fields=self.kind.search_fields,
            ordering=self.kind.ordering,
        )

    def get(self, principal: Principal | None, pk: Any) -> Any:
        principal = self._reader(principal)
        record = self.repository.get(pk)
        if not build_filter(principal, self.kind).matches(record):
            raise PermissionDenied(f"You do not have access to this {self.kind.verbose_name}.")
        return record

    def increment(self, principal: Principal | None, pk: Any, field_name: str) -> Any:
        """Bump a counter on a record the principal can read."""
        if field_name not in self.kind.counter_fields:
            raise DomainError(f"'{field_name}' is not a counter of {self.kind.verbose_name_plural}.")
        record = self.get(principal, pk)
        return self.repository.increment(record.pk, field_name)

    def moderation_entry(self, principal: Principal | None, pk: Any) -> ModerationEntry:
        principal = self._require(principal)
        return self.ledger.read(principal, self.repository.get(pk), self.kind)

    def status_summary(self, principal: Principal | None) -> dict[str, int]:
        """Counts per status within the principal's visibility ceiling."""
        visibility = build_filter(self._require(principal), self.kind)
        counts = self.repository.count_by_status(visibility, self.kind.status_field)
        summary = {status.value: counts.get(status.value, 0) for status in RecordStatus}
        summary["total"] = sum(summary.values())
        return summary

    # ── Writes ───────────────────────────────────────────────────────

    def create(self, principal: Principal | None, payload: Mapping[str, Any]) -> Any:
        principal = self._require(principal)
        if self.parent_policy is not None:
            self._check_parent_visible(principal, payload)
        return self.engine.create(principal, payload)

    def _check_parent_visible(self, principal: Principal, payload: Mapping[str, Any]) -> None:
        """
        Children may only be attached to a parent the principal can read.

        A parent outside the principal's visibility is reported exactly
        like a missing one, so the response never reveals that it exists.
        """
        parent = self.kind.parent
        parent_pk = payload.get(parent.field) if parent is not None else None
        if parent_pk is None:
            return
        try:
            self.parent_policy.get(principal, parent_pk)
        except PermissionDenied:
            raise NotFound(f"The referenced {parent.name} does not exist.") from None

    def update(self, principal: Principal | None, pk: Any, patch: Mapping[str, Any]) -> Any:
        principal = self._require(principal)
        return self.engine.edit(principal, self.repository.get(pk), patch)

    def delete(self, principal: Principal | None, pk: Any) -> None:
        principal = self._require(principal)
        self.engine.delete(principal, self.repository.get(pk))

    def approve(self, principal: Principal | None, pk: Any, notes: str | None = None) -> Any:
        principal = self._require(principal)
        return self.engine.approve(principal, self.repository.get(pk), notes)

    def reject(self, principal: Principal | None, pk: Any, notes: str | None) -> Any:
        principal = self._require(principal)
        return self.engine.reject(principal, self.repository.get(pk), notes)

    def toggle_active(self, principal: Principal | None, pk: Any, is_active: bool | None = None) -> Any:
        principal = self._require(principal)
        return self.engine.toggle_active(principal, self.repository.get(pk), is_active)

    # ── Facade ───────────────────────────────────────────────────────

    def execute(
        self,
        principal: Principal | None,
        operation: Operation | str,
        pk: Any = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Result:
        """
        Run ``operation`` and return a ``Result`` instead of raising.

        ``payload`` carries the filters (plus an optional ``search`` key)
        for ``list``, the fields for ``create``/``update``, ``notes`` for
        ``approve``/``reject``, ``is_active`` for ``toggle_active`` and
        ``field`` for ``increment``.
        ``delete`` succeeds with a ``None`` value.
        """
        operation = Operation(operation)
        data = dict(payload or {})
        try:
            if operation is Operation.LIST:
                search = data.pop("search", None)
                value = self.list(principal, data, search=search)
            elif operation is Operation.GET:
                value = self.get(principal, pk)
            elif operation is Operation.CREATE:
                value = self.create(principal, data)
            elif operation is Operation.UPDATE:
                value = self.update(principal, pk, data)
            elif operation is Operation.DELETE:
                self.delete(principal, pk)
                value = None
            elif operation is Operation.APPROVE:
                value = self.approve(principal, pk, data.get("notes"))
            elif operation is Operation.REJECT:
                value = self.reject(principal, pk, data.get("notes"))
            elif operation is Operation.TOGGLE_ACTIVE:
                value = self.toggle_active(principal, pk, data.get("is_active"))
            else:
                value = self.increment(principal, pk, data.get("field", ""))
        except DomainError as exc:
            logger.info(
                "%s %s pk=%s refused [%s]: %s",
                self.kind.name,
                operation.value,
                pk,
                exc.kind.value,
                exc.message,
            )
            return Result.failure(exc)
        return Result.success(value)

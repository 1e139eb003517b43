"""
core.domain.visibility — Role-scoped visibility predicates.

``build_filter`` turns a principal, a kind and the caller's own filters
into a ``Visibility``: an OR of clauses, each clause an AND of equality
conditions plus an optional "not yet expired" condition.  The same value
is evaluated in Python (``matches``) by the in-memory repository and
compiled to a ``Q`` object (``to_q``) by the ORM repository, so both
storage backends enforce one definition of who can see what.

Caller filters are ANDed into every clause of the role ceiling.  A clause
that contradicts a caller filter is dropped; when every clause is dropped
the caller asked for records strictly outside its ceiling and the request
is refused with ``PermissionDenied`` rather than silently answered with
an empty page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from django.db.models import Q
from django.utils import timezone

from core.constants import STATUS_ALL, RecordStatus
from core.domain.exceptions import DomainError, PermissionDenied, Unauthenticated
from core.domain.kinds import KindDescriptor, Scope
from core.domain.roles import Principal, can_view_all, role_of

_MISSING = object()


@dataclass(frozen=True)
class Clause:
    equals: Mapping[str, Any] = field(default_factory=dict)
    unexpired: bool = False

    @property
    def unrestricted(self) -> bool:
        return not self.equals and not self.unexpired

    def merge(self, filters: Mapping[str, Any]) -> Clause | None:
        """AND ``filters`` into this clause; ``None`` if they contradict it."""
        combined = dict(self.equals)
        for key, value in filters.items():
            if key in combined and combined[key] != value:
                return None
            combined[key] = value
        return Clause(equals=combined, unexpired=self.unexpired)

    def matches(self, record: Any, now: datetime) -> bool:
        for key, value in self.equals.items():
            if getattr(record, key, _MISSING) != value:
                return False
        if self.unexpired:
            expires_at = getattr(record, "expires_at", None)
            if expires_at is not None and expires_at <= now:
                return False
        return True

    def to_q(self, now: datetime) -> Q:
        q = Q(**self.equals)
        if self.unexpired:
            q &= Q(expires_at__isnull=True) | Q(expires_at__gt=now)
        return q


@dataclass(frozen=True)
class Visibility:
    clauses: tuple[Clause, ...]

    def matches(self, record: Any, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        return any(clause.matches(record, now) for clause in self.clauses)

    def to_q(self, now: datetime | None = None) -> Q:
        now = now or timezone.now()
        # Q() | Q(x) collapses to Q(x), so an unrestricted clause must win outright.
        if any(clause.unrestricted for clause in self.clauses):
            return Q()
        combined = Q()
        for clause in self.clauses:
            combined |= clause.to_q(now)
        return combined


def _published(kind: KindDescriptor, *, unexpired: bool) -> Clause:
    return Clause(
        equals={
            kind.status_field: RecordStatus.APPROVED.value,
            "is_active": True,
        },
        unexpired=unexpired,
    )


def ceiling_clauses(principal: Principal | None, kind: KindDescriptor) -> list[Clause]:
    """
    The unfiltered clauses a principal's role may see for ``kind``.

    Anonymous callers only reach this for ``public_read`` kinds and see
    published records, expiring ones hidden like they are for Users.
    """
    if principal is None:
        return [_published(kind, unexpired=bool(kind.expiry_hidden_for))]
    role = role_of(principal)
    if can_view_all(role, kind):
        return [Clause()]
    clauses: list[Clause] = []
    for scope in kind.scope_for(role):
        if scope is Scope.OWN:
            clauses.append(Clause(equals={kind.owner_field: principal.id}))
        elif scope is Scope.PUBLISHED:
            clauses.append(_published(kind, unexpired=role in kind.expiry_hidden_for))
    return clauses


def build_filter(
    principal: Principal | None,
    kind: KindDescriptor,
    caller_filters: Mapping[str, Any] | None = None,
) -> Visibility:
    """
    Compose the role ceiling for ``kind`` with the caller's filters.

    Raises:
        Unauthenticated:  No principal was supplied and the kind is not
                          readable anonymously.
        DomainError:      A filter key is not filterable for this kind.
        PermissionDenied: The filters fall entirely outside the ceiling.
    """
    if principal is None and not kind.public_read:
        raise Unauthenticated()

    filters = {
        key: value
        for key, value in (caller_filters or {}).items()
        if value is not None
    }
    if filters.get(kind.status_field) == STATUS_ALL:
        filters.pop(kind.status_field)

    unknown = sorted(set(filters) - set(kind.filter_fields))
    if unknown:
        raise DomainError(
            f"Cannot filter {kind.verbose_name_plural} by: {', '.join(unknown)}."
        )

    merged = [clause.merge(filters) for clause in ceiling_clauses(principal, kind)]
    survivors = tuple(clause for clause in merged if clause is not None)
    if not survivors:
        raise PermissionDenied(
            f"You are not allowed to list {kind.verbose_name_plural} matching these filters."
        )
    return Visibility(clauses=survivors)

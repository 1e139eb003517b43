"""
core.domain.kinds — Per-kind policy descriptors.

Every moderated entity (reports, alerts, cases, comments, role-change
requests) and the personal checklists is described by one
``KindDescriptor``.  The workflow engine, visibility filter and ownership
guard read the descriptor instead of branching on the entity type, so a
new kind is added by declaring a descriptor in its app's ``services.py``.

Example::

    REPORT_KIND = KindDescriptor(
        name="report",
        verbose_name="scam report",
        creator_roles=frozenset(Role),
        scopes={
            Role.ADMIN: (Scope.ALL,),
            Role.OFFICER: (Scope.ALL,),
            Role.USER: (Scope.OWN,),
        },
        create_fields=("title", "description"),
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from django.core.exceptions import ImproperlyConfigured

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, RecordStatus, Role


class Scope(str, Enum):
    """Building blocks of a role's visibility ceiling."""

    ALL = "all"
    OWN = "own"
    PUBLISHED = "published"


@dataclass(frozen=True)
class ChildCascade:
    """
    Rows that must be removed together with their parent record.

    ``fk_field`` is the lookup on the child that points at the parent's
    primary key, e.g. ``"case"`` for ``evidence.Evidence``.
    """

    name: str
    model_label: str
    fk_field: str


@dataclass(frozen=True)
class ParentRef:
    """A record that must exist before a child record can be created."""

    name: str
    model_label: str
    field: str


_ALL_STATUSES = frozenset(RecordStatus)


@dataclass(frozen=True)
class KindDescriptor:
    name: str
    verbose_name: str
    scopes: Mapping[Role, tuple[Scope, ...]]
    creator_roles: frozenset[Role] = frozenset(Role)
    moderated: bool = True
    public_read: bool = False
    owner_field: str = "owner_id"
    status_field: str = "status"

    # Creation
    auto_approve_roles: frozenset[Role] = frozenset()
    create_fields: tuple[str, ...] = ()
    required_fields: tuple[str, ...] = ()
    max_lengths: Mapping[str, int] = field(
        default_factory=lambda: {
            "title": TITLE_MAX_LENGTH,
            "description": DESCRIPTION_MAX_LENGTH,
        }
    )
    unique_fields: tuple[str, ...] = ()
    one_pending_per_owner: bool = False
    parent: ParentRef | None = None
    defaults_factory: Callable[[], dict[str, Any]] | None = None

    # Editing and deletion by non-Admin owners
    editable_fields: tuple[str, ...] = ()
    re_edit_resets_status: bool = False
    forbid_edit_when_approved: bool = False
    owner_edit_statuses: frozenset[str] = frozenset({RecordStatus.PENDING})
    owner_delete_statuses: frozenset[str] = frozenset({RecordStatus.PENDING})
    child_cascades: tuple[ChildCascade, ...] = ()

    # Moderation
    approve_sources: frozenset[str] = frozenset(
        {RecordStatus.PENDING, RecordStatus.APPROVED, RecordStatus.REJECTED}
    )
    reject_sources: frozenset[str] = frozenset(
        {RecordStatus.PENDING, RecordStatus.APPROVED, RecordStatus.REJECTED}
    )
    on_approved: Callable[[Any, Any], None] | None = None

    # Listing
    filter_fields: tuple[str, ...] = ("status",)
    search_fields: tuple[str, ...] = ("title", "description")
    ordering: tuple[str, ...] = ("-created_at",)
    expiry_hidden_for: frozenset[Role] = frozenset()

    # Counters any reader may bump (e.g. views, "helpful" votes)
    counter_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        missing = [role.value for role in Role if not self.scopes.get(role)]
        if missing:
            raise ImproperlyConfigured(
                f"Kind '{self.name}' declares no visibility scope for role(s): "
                f"{', '.join(missing)}."
            )
        if not self.moderated:
            for role, scopes in self.scopes.items():
                if Scope.PUBLISHED in scopes:
                    raise ImproperlyConfigured(
                        f"Kind '{self.name}' is not moderated but grants "
                        f"{role.value} a published scope."
                    )
        if self.public_read and not self.moderated:
            raise ImproperlyConfigured(
                f"Kind '{self.name}' allows anonymous reads of published records "
                f"but is not moderated."
            )
        unknown = (self.approve_sources | self.reject_sources) - _ALL_STATUSES
        if unknown:
            raise ImproperlyConfigured(
                f"Kind '{self.name}' references unknown statuses: {sorted(unknown)}."
            )

    @property
    def verbose_name_plural(self) -> str:
        return f"{self.verbose_name}s"

    def scope_for(self, role: Role) -> tuple[Scope, ...]:
        return tuple(self.scopes[role])

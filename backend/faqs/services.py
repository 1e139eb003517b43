"""
FAQs Service Layer.

FAQs are the one kind readable without an account:

* Anonymous callers, Users and Officers see published (approved,
  active) entries only.
* Only Admins write FAQs.  A new FAQ starts as a draft (``pending``);
  approving it publishes it and rejecting it sends it back with notes.
* Reading an entry counts a view; readers may mark it helpful.
"""

from __future__ import annotations

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, RecordStatus, Role
from core.domain.kinds import KindDescriptor, Scope
from core.domain.policies import ModerationPolicy
from core.domain.repositories import DjangoRepository

from .models import FAQ

_FAQ_FIELDS = ("title", "content", "category", "tags", "is_pinned")

FAQ_KIND = KindDescriptor(
    name="faq",
    verbose_name="FAQ",
    creator_roles=frozenset({Role.ADMIN}),
    public_read=True,
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.PUBLISHED,),
        Role.USER: (Scope.PUBLISHED,),
    },
    create_fields=_FAQ_FIELDS,
    required_fields=("title", "content"),
    editable_fields=_FAQ_FIELDS,
    max_lengths={
        "title": TITLE_MAX_LENGTH,
        "content": DESCRIPTION_MAX_LENGTH,
        "category": 100,
        "tags": 500,
    },
    owner_edit_statuses=frozenset(
        {RecordStatus.PENDING, RecordStatus.APPROVED, RecordStatus.REJECTED}
    ),
    filter_fields=("status", "is_active", "category", "is_pinned"),
    search_fields=("title", "content", "tags"),
    ordering=("-is_pinned", "-updated_at"),
    counter_fields=("views", "helpful"),
)

FAQ_POLICY = ModerationPolicy(
    FAQ_KIND,
    DjangoRepository(FAQ, select_related=("owner",)),
).register()

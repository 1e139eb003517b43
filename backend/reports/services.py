"""
Reports Service Layer.

Scam reports are moderated like every other kind, with two differences
that match how reports are used:

* Officers see every report (they investigate them); Users see only
  their own.
* Editing a report never resets its status.  An owner may keep
  correcting a report after moderation; the Admin decides whether a
  new review is needed.
"""

from __future__ import annotations

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, RecordStatus, Role
from core.domain.kinds import KindDescriptor, Scope
from core.domain.notifications import NotificationService
from core.domain.policies import ModerationPolicy
from core.domain.repositories import DjangoRepository

from .models import ScamReport

_REPORT_FIELDS = ("title", "description", "scammer_info", "platform")

REPORT_KIND = KindDescriptor(
    name="report",
    verbose_name="scam report",
    creator_roles=frozenset(Role),
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.ALL,),
        Role.USER: (Scope.OWN,),
    },
    create_fields=_REPORT_FIELDS,
    required_fields=_REPORT_FIELDS,
    editable_fields=_REPORT_FIELDS,
    max_lengths={
        "title": TITLE_MAX_LENGTH,
        "description": DESCRIPTION_MAX_LENGTH,
        "scammer_info": DESCRIPTION_MAX_LENGTH,
        "platform": 100,
    },
    re_edit_resets_status=False,
    owner_edit_statuses=frozenset(
        {RecordStatus.PENDING, RecordStatus.APPROVED, RecordStatus.REJECTED}
    ),
    filter_fields=("status", "is_active", "platform"),
    search_fields=("title", "description", "scammer_info", "platform"),
)

REPORT_POLICY = ModerationPolicy(
    REPORT_KIND,
    DjangoRepository(ScamReport, select_related=("owner",)),
    notifier=NotificationService.notify_owner,
).register()

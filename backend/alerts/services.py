"""
Alerts Service Layer.

Descriptors and policies for scam alerts and their comments.

Alerts
------
* Written by Legal Officers and Admins; an Admin's alert is approved on
  creation.
* An Officer re-editing their rejected alert sends it back to pending;
  an approved alert can no longer be edited by its Officer author.
* Users only see approved, active alerts that have not expired.
* Deleting an alert deletes its comments in the same transaction.

Comments
--------
* Any user may comment on an alert they can see; comments start pending.
  An alert outside the commenter's visibility is reported as missing.
* Non-Admins see approved comments plus their own.
"""

from __future__ import annotations

from core.constants import DESCRIPTION_MAX_LENGTH, RecordStatus, Role
from core.domain.kinds import ChildCascade, KindDescriptor, ParentRef, Scope
from core.domain.notifications import NotificationService
from core.domain.policies import ModerationPolicy
from core.domain.repositories import DjangoRepository

from .models import Comment, ScamAlert

_ALERT_FIELDS = ("title", "description", "severity", "target_audience", "expires_at")

ALERT_KIND = KindDescriptor(
    name="alert",
    verbose_name="scam alert",
    creator_roles=frozenset({Role.ADMIN, Role.OFFICER}),
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.OWN, Scope.PUBLISHED),
        Role.USER: (Scope.PUBLISHED,),
    },
    auto_approve_roles=frozenset({Role.ADMIN}),
    create_fields=_ALERT_FIELDS,
    required_fields=("title", "description"),
    editable_fields=_ALERT_FIELDS,
    re_edit_resets_status=True,
    forbid_edit_when_approved=True,
    owner_edit_statuses=frozenset({RecordStatus.PENDING, RecordStatus.REJECTED}),
    child_cascades=(
        ChildCascade(name="comments", model_label="alerts.Comment", fk_field="alert"),
    ),
    filter_fields=("status", "is_active", "severity"),
    search_fields=("title", "description"),
    expiry_hidden_for=frozenset({Role.USER}),
)

COMMENT_KIND = KindDescriptor(
    name="comment",
    verbose_name="comment",
    creator_roles=frozenset(Role),
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.OWN, Scope.PUBLISHED),
        Role.USER: (Scope.OWN, Scope.PUBLISHED),
    },
    parent=ParentRef(name="scam alert", model_label="alerts.ScamAlert", field="alert_id"),
    create_fields=("alert_id", "content"),
    required_fields=("alert_id", "content"),
    editable_fields=("content",),
    max_lengths={"content": DESCRIPTION_MAX_LENGTH},
    re_edit_resets_status=False,
    owner_edit_statuses=frozenset(
        {RecordStatus.PENDING, RecordStatus.APPROVED, RecordStatus.REJECTED}
    ),
    filter_fields=("status", "is_active", "alert_id"),
    search_fields=("content",),
    ordering=("created_at",),
)

ALERT_POLICY = ModerationPolicy(
    ALERT_KIND,
    DjangoRepository(ScamAlert, select_related=("owner",)),
    notifier=NotificationService.notify_owner,
).register()

COMMENT_POLICY = ModerationPolicy(
    COMMENT_KIND,
    DjangoRepository(Comment, select_related=("owner",)),
    notifier=NotificationService.notify_owner,
    parent_policy=ALERT_POLICY,
).register()

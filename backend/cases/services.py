"""
Cases Service Layer.

Descriptor and policy for legal cases.

* Opened by Legal Officers and Admins; an Admin's case is approved on
  creation.
* Officers see their own cases plus every approved, active case; Users
  only the approved, active ones.
* An Officer may edit their case while it is pending or rejected (editing
  a rejected case resubmits it as pending).  Approved cases are
  immutable to their Officer owner.
* Deleting a case removes its documents and evidence in the same
  transaction; if either fails nothing is deleted.
"""

from __future__ import annotations

import logging
import string
import time
from typing import Any

from django.utils.crypto import get_random_string

from core.constants import (
    CASE_NUMBER_PREFIX,
    CASE_NUMBER_SUFFIX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    RecordStatus,
    Role,
)
from core.domain.kinds import ChildCascade, KindDescriptor, Scope
from core.domain.notifications import NotificationService
from core.domain.policies import ModerationPolicy
from core.domain.repositories import DjangoRepository

from .models import LegalCase

logger = logging.getLogger(__name__)


def generate_case_number() -> str:
    """Return a new ``LC-<epoch millis>-<suffix>`` case number."""
    suffix = get_random_string(
        CASE_NUMBER_SUFFIX_LENGTH,
        allowed_chars=string.ascii_uppercase + string.digits,
    )
    return f"{CASE_NUMBER_PREFIX}-{int(time.time() * 1000)}-{suffix}"


def case_defaults() -> dict[str, Any]:
    return {"case_number": generate_case_number()}


_CASE_FIELDS = ("title", "description", "priority")

CASE_KIND = KindDescriptor(
    name="case",
    verbose_name="legal case",
    creator_roles=frozenset({Role.ADMIN, Role.OFFICER}),
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.OWN, Scope.PUBLISHED),
        Role.USER: (Scope.PUBLISHED,),
    },
    auto_approve_roles=frozenset({Role.ADMIN}),
    create_fields=_CASE_FIELDS + ("case_number",),
    required_fields=("title", "description", "case_number"),
    editable_fields=_CASE_FIELDS,
    max_lengths={
        "title": TITLE_MAX_LENGTH,
        "description": DESCRIPTION_MAX_LENGTH,
        "case_number": 50,
    },
    unique_fields=("case_number",),
    defaults_factory=case_defaults,
    re_edit_resets_status=True,
    forbid_edit_when_approved=True,
    owner_edit_statuses=frozenset({RecordStatus.PENDING, RecordStatus.REJECTED}),
    child_cascades=(
        ChildCascade(name="documents", model_label="evidence.CaseDocument", fk_field="case"),
        ChildCascade(name="evidence", model_label="evidence.Evidence", fk_field="case"),
    ),
    filter_fields=("status", "is_active", "priority"),
    search_fields=("title", "description", "case_number"),
)

CASE_POLICY = ModerationPolicy(
    CASE_KIND,
    DjangoRepository(LegalCase, select_related=("owner",)),
    notifier=NotificationService.notify_owner,
).register()

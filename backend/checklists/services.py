"""
Checklists Service Layer.

``CHECKLIST_KIND`` is the one unmoderated kind: owners edit and delete
their checklists unconditionally, Admins see every checklist, and the
checklist's items are removed with it inside one transaction.

``ChecklistItemService`` manages the items of a checklist the caller can
see; only the checklist owner (or an Admin) may change them.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet

from core.constants import Role
from core.domain.exceptions import DomainError, NotFound
from core.domain.kinds import ChildCascade, KindDescriptor, Scope
from core.domain.ownership import Action, can_mutate
from core.domain.policies import ModerationPolicy
from core.domain.repositories import DjangoRepository
from core.domain.roles import Principal

from .models import Checklist, ChecklistItem

logger = logging.getLogger(__name__)

CHECKLIST_KIND = KindDescriptor(
    name="checklist",
    verbose_name="checklist",
    moderated=False,
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.OWN,),
        Role.USER: (Scope.OWN,),
    },
    create_fields=("title", "description"),
    required_fields=("title",),
    editable_fields=("title", "description", "is_completed"),
    child_cascades=(
        ChildCascade("items", "checklists.ChecklistItem", "checklist"),
    ),
    filter_fields=("is_completed",),
)

CHECKLIST_POLICY = ModerationPolicy(
    CHECKLIST_KIND,
    DjangoRepository(Checklist, select_related=("owner",)),
).register()


class ChecklistItemService:

    @staticmethod
    def list_items(principal: Principal | None, checklist_pk: int) -> QuerySet[ChecklistItem]:
        checklist = CHECKLIST_POLICY.get(principal, checklist_pk)
        return checklist.items.all()

    @staticmethod
    @transaction.atomic
    def add_item(principal: Principal | None, checklist_pk: int, data: dict[str, Any]) -> ChecklistItem:
        checklist = CHECKLIST_POLICY.get(principal, checklist_pk)
        can_mutate(principal, checklist, Action.EDIT, CHECKLIST_KIND).enforce()

        text = (data.get("text") or "").strip()
        if not text:
            raise DomainError("Checklist item text is required.")
        if "order_index" not in data:
            data = {**data, "order_index": checklist.items.count()}

        item = ChecklistItem.objects.create(checklist=checklist, **{**data, "text": text})
        logger.info(
            "Item #%d added to checklist #%d by principal=%s",
            item.pk,
            checklist.pk,
            principal.id,
        )
        return item

    @staticmethod
    def _get_item(principal: Principal | None, checklist_pk: int, item_pk: int) -> ChecklistItem:
        checklist = CHECKLIST_POLICY.get(principal, checklist_pk)
        can_mutate(principal, checklist, Action.EDIT, CHECKLIST_KIND).enforce()
        try:
            return checklist.items.get(pk=item_pk)
        except ChecklistItem.DoesNotExist:
            raise NotFound(f"Checklist item with id {item_pk} not found.")

    @staticmethod
    def update_item(
        principal: Principal | None,
        checklist_pk: int,
        item_pk: int,
        data: dict[str, Any],
    ) -> ChecklistItem:
        item = ChecklistItemService._get_item(principal, checklist_pk, item_pk)
        for field, value in data.items():
            setattr(item, field, value)
        item.save(update_fields=[*data.keys(), "updated_at"])
        return item

    @staticmethod
    def remove_item(principal: Principal | None, checklist_pk: int, item_pk: int) -> None:
        item = ChecklistItemService._get_item(principal, checklist_pk, item_pk)
        item.delete()

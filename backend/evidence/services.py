"""
Evidence Service Layer.

``CaseAttachmentService`` manages the documents and evidence attached to
a legal case.  Attachments are metadata only and are not moderated on
their own; access follows the parent case:

* Reading: anyone who can see the case (``CASE_POLICY.get``).  The
  cross-case listing only returns attachments of visible cases.
* Adding and updating: Admins, and the Legal Officer who owns the case
  while the owner may still edit it (pending or rejected).  Once a case
  is approved its attachments are frozen for the owner like the case.
* Removing: Admins, and the case owner while the case is still pending.

Deleting the case itself removes every attachment through the case's
cascade (see ``cases.services.CASE_KIND``).
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import Q, QuerySet

from cases.services import CASE_KIND, CASE_POLICY
from core.constants import RecordStatus, Role
from core.domain.exceptions import DomainError, NotFound, PermissionDenied, Unauthenticated
from core.domain.ownership import Action, can_mutate, is_owner
from core.domain.roles import Principal, role_of

from .models import CaseDocument, Evidence

logger = logging.getLogger(__name__)

_ATTACHMENT_MODELS: dict[str, type] = {
    "documents": CaseDocument,
    "evidence": Evidence,
}

_SEARCH_FIELDS: dict[str, tuple[str, ...]] = {
    "documents": ("file_name", "file_type"),
    "evidence": ("title", "description"),
}


class CaseAttachmentService:
    """
    Stateless helper — every method takes the acting ``Principal``.

    ``kind`` is ``"documents"`` or ``"evidence"``.
    """

    @staticmethod
    def _model(kind: str) -> type:
        try:
            return _ATTACHMENT_MODELS[kind]
        except KeyError:
            raise NotFound(f"Unknown attachment type '{kind}'.")

    @staticmethod
    def _require_case_writer(principal: Principal | None, case: Any) -> Principal:
        if principal is None:
            raise Unauthenticated()
        role = role_of(principal)
        if role is Role.ADMIN:
            return principal
        if role is Role.OFFICER and is_owner(principal, case, CASE_KIND):
            can_mutate(principal, case, Action.EDIT, CASE_KIND).enforce()
            return principal
        raise PermissionDenied("Only the case owner or an administrator can manage its attachments.")

    @staticmethod
    def list_for_case(principal: Principal | None, case_pk: int, kind: str) -> QuerySet:
        model = CaseAttachmentService._model(kind)
        case = CASE_POLICY.get(principal, case_pk)
        return model.objects.filter(case_id=case.pk).order_by("-created_at")

    @staticmethod
    @transaction.atomic
    def add(principal: Principal | None, case_pk: int, kind: str, data: dict[str, Any]) -> Any:
        model = CaseAttachmentService._model(kind)
        case = CASE_POLICY.repository.get(case_pk)
        principal = CaseAttachmentService._require_case_writer(principal, case)

        author_field = "uploaded_by_id" if model is CaseDocument else "added_by_id"
        attachment = model.objects.create(
            case_id=case.pk,
            **{author_field: principal.id},
            **data,
        )
        logger.info(
            "%s #%d attached to case #%d by principal=%s",
            model.__name__,
            attachment.pk,
            case.pk,
            principal.id,
        )
        return attachment

    @staticmethod
    def list_all(
        principal: Principal | None,
        kind: str,
        *,
        case_pk: int | None = None,
        search: str | None = None,
    ) -> QuerySet:
        """Attachments of every case the principal can see, newest first."""
        model = CaseAttachmentService._model(kind)
        visible_cases = CASE_POLICY.list(principal)
        qs = model.objects.filter(case__in=visible_cases.values("pk"))
        if case_pk is not None:
            qs = qs.filter(case_id=case_pk)
        if search:
            search_q = Q()
            for field_name in _SEARCH_FIELDS[kind]:
                search_q |= Q(**{f"{field_name}__icontains": search})
            qs = qs.filter(search_q)
        return qs.order_by("-created_at")

    @staticmethod
    def get(principal: Principal | None, kind: str, pk: int) -> Any:
        model = CaseAttachmentService._model(kind)
        try:
            attachment = model.objects.select_related("case").get(pk=pk)
        except model.DoesNotExist:
            raise NotFound(f"{model._meta.verbose_name.capitalize()} with id {pk} not found.")
        # Visibility of the attachment is the visibility of its case.
        CASE_POLICY.get(principal, attachment.case_id)
        return attachment

    @staticmethod
    @transaction.atomic
    def update(principal: Principal | None, kind: str, pk: int, data: dict[str, Any]) -> Any:
        attachment = CaseAttachmentService.get(principal, kind, pk)
        principal = CaseAttachmentService._require_case_writer(principal, attachment.case)
        if not data:
            raise DomainError("No attachment fields were supplied.")

        for field_name, value in data.items():
            setattr(attachment, field_name, value)
        attachment.save(update_fields=[*data, "updated_at"])
        logger.info(
            "%s #%d on case #%d updated by principal=%s (%s)",
            type(attachment).__name__,
            pk,
            attachment.case_id,
            principal.id,
            ", ".join(sorted(data)),
        )
        return attachment

    @staticmethod
    @transaction.atomic
    def remove(principal: Principal | None, kind: str, pk: int) -> None:
        attachment = CaseAttachmentService.get(principal, kind, pk)
        case = attachment.case
        principal = CaseAttachmentService._require_case_writer(principal, case)
        if role_of(principal) is not Role.ADMIN and case.status != RecordStatus.PENDING:
            raise PermissionDenied("Attachments can only be removed while the case is pending.")

        attachment.delete()
        logger.info(
            "%s #%d removed from case #%d by principal=%s",
            type(attachment).__name__,
            pk,
            case.pk,
            principal.id,
        )

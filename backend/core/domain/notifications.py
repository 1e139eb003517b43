"""
core.domain.notifications — Synchronous notification creation helper.

Centralises notification creation so every app uses one consistent
entry-point rather than directly constructing ``Notification`` objects.

Design decisions
----------------
* **Synchronous** — notifications are written in the calling thread and
  inside the caller's transaction, so a moderation that rolls back also
  rolls back its notification.
* **Owner-facing** — the workflow engine calls ``notify_owner`` after an
  approve or reject; the owner is not notified about their own actions.
* **Generic relation** — ``related_object`` is optional; if provided
  its ``ContentType`` and PK are stored via the ``Notification`` model's
  ``GenericForeignKey``.

Usage::

    from core.domain.notifications import NotificationService

    REPORT_POLICY = ModerationPolicy(
        REPORT_KIND,
        DjangoRepository(ScamReport),
        notifier=NotificationService.notify_owner,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.db import models

if TYPE_CHECKING:
    from core.domain.kinds import KindDescriptor
    from core.domain.roles import Principal
    from core.models import Notification

logger = logging.getLogger(__name__)

# ── Event-type → human-readable templates ───────────────────────────
_EVENT_TEMPLATES: dict[str, tuple[str, str]] = {
    # event_type: (title, message)
    "report_approved":     ("Report Approved",             "Your scam report has been approved."),
    "report_rejected":     ("Report Rejected",             "Your scam report has been rejected. See the moderator notes for details."),
    "alert_approved":      ("Alert Approved",              "Your scam alert has been approved and is now published."),
    "alert_rejected":      ("Alert Rejected",              "Your scam alert has been rejected. See the moderator notes for details."),
    "case_approved":       ("Case Approved",               "Your legal case has been approved."),
    "case_rejected":       ("Case Rejected",               "Your legal case has been rejected. See the moderator notes for details."),
    "comment_approved":    ("Comment Approved",            "Your comment has been approved."),
    "comment_rejected":    ("Comment Rejected",            "Your comment has been rejected."),
    "role_change_approved": ("Role Change Approved",       "Your role change request has been approved."),
    "role_change_rejected": ("Role Change Rejected",       "Your role change request has been rejected."),
}


class NotificationService:
    """
    Stateless helper for creating ``Notification`` records.

    All methods are classmethods — no instance state is needed.
    """

    @classmethod
    def create(
        cls,
        *,
        actor_id: int | None,
        recipients: Any | Iterable[Any],
        event_type: str,
        related_object: models.Model | None = None,
        title: str | None = None,
        message: str | None = None,
    ) -> list[Notification]:
        """
        Create one ``Notification`` per recipient.

        Args:
            actor_id:       PK of the principal who performed the action
                            (logged, not stored).
            recipients:     A single ``User`` or iterable of ``User``
                            instances.
            event_type:     Key into ``_EVENT_TEMPLATES``.  If unknown
                            the raw event_type is used as title.
            related_object: Optional model instance linked via
                            ``GenericForeignKey``.
            title, message: Explicit text; overrides the template of
                            ``event_type`` (used for announcements).

        Returns:
            List of created ``Notification`` instances.
        """
        from core.models import Notification  # lazy import; app registry may not be ready at module load

        # Normalise recipients to a list
        if isinstance(recipients, models.Model):
            recipients = [recipients]
        else:
            recipients = list(recipients)

        if not recipients:
            logger.warning(
                "NotificationService.create called with empty recipients "
                "for event_type=%s by actor=%s",
                event_type,
                actor_id,
            )
            return []

        default_title, default_message = _EVENT_TEMPLATES.get(
            event_type,
            (event_type.replace("_", " ").title(), f"Event: {event_type}"),
        )
        title = title or default_title
        message = message or default_message

        # Resolve GenericFK fields
        content_type = None
        object_id = None
        if related_object is not None:
            content_type = ContentType.objects.get_for_model(related_object)
            object_id = related_object.pk

        notifications = Notification.objects.bulk_create(
            [
                Notification(
                    recipient=recipient,
                    title=title,
                    message=message,
                    content_type=content_type,
                    object_id=object_id,
                )
                for recipient in recipients
            ]
        )

        logger.info(
            "Created %d notification(s) [%s] by actor=%s",
            len(notifications),
            event_type,
            actor_id,
        )
        return notifications

    @classmethod
    def notify_owner(
        cls,
        kind: KindDescriptor,
        event: str,
        record: Any,
        actor: Principal,
    ) -> list[Notification]:
        """Tell the owner of ``record`` that ``actor`` moderated it."""
        owner_id = getattr(record, kind.owner_field, None)
        if owner_id is None or owner_id == actor.id:
            return []
        owner = get_user_model().objects.filter(pk=owner_id).first()
        if owner is None:
            return []
        related = record if isinstance(record, models.Model) else None
        return cls.create(
            actor_id=actor.id,
            recipients=owner,
            event_type=f"{kind.name}_{event}",
            related_object=related,
        )

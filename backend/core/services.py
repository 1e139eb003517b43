"""
Core app services — **Service Layer**.

Contains the cross-app aggregation logic.  Views delegate all business
logic to the service classes defined here, keeping views thin and
ensuring testability.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  The core app never imports models from other apps at module       ║
║  level.  Each app registers its ``ModerationPolicy`` from its own  ║
║  ``services.py``; core discovers them through                      ║
║  ``django.utils.module_loading.autodiscover_modules("services")``  ║
║  and reads them from ``core.domain.policies.registered_policies``. ║
║                                                                    ║
║  Choice/enum classes that other apps define (e.g. ``Severity``)    ║
║  are imported lazily inside the method that needs them.            ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet
from django.utils.module_loading import autodiscover_modules

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, RecordStatus, Role
from core.domain.exceptions import DomainError, NotFound, PermissionDenied, Unauthenticated
from core.domain.notifications import NotificationService
from core.domain.policies import registered_policies
from core.domain.roles import Principal

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
#  Moderation Statistics
# ════════════════════════════════════════════════════════════════════

class ModerationStatsService:
    """
    Produces per-kind record counts grouped by workflow status.

    The statistics are **role-aware**: every kind is counted through its
    own visibility ceiling, so a User sees counts of their own reports and
    of published alerts, never of records they could not list.
    """

    def __init__(self, principal: Principal) -> None:
        self.principal = principal

    def get_stats(self) -> dict[str, Any]:
        """Return ``{kind_name: {status: count, ..., "total": n}}``."""
        autodiscover_modules("services")
        return {
            policy.kind.name: policy.status_summary(self.principal)
            for policy in registered_policies()
            if policy.kind.moderated
        }


# ════════════════════════════════════════════════════════════════════
#  System Constants
# ════════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations into a single dict for
    the frontend.

    This service is **stateless** — it does not depend on the requesting
    user.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from alerts.models import Severity
        from cases.models import Priority

        to_list = SystemConstantsService._choices_to_list

        return {
            "roles": to_list(Role),
            "record_statuses": to_list(RecordStatus),
            "alert_severities": to_list(Severity),
            "case_priorities": to_list(Priority),
            "limits": {
                "title_max_length": TITLE_MAX_LENGTH,
                "description_max_length": DESCRIPTION_MAX_LENGTH,
            },
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` or ``IntegerChoices`` class to
        a list of ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]


# ═══════════════════════════════════════════════════════════════════
#  Notification Inbox
# ═══════════════════════════════════════════════════════════════════

class NotificationInboxService:
    """
    Handles listing and marking notifications as read for a given user.
    """

    def __init__(self, user: Any) -> None:
        self.user = user

    def list_notifications(self, *, unread_only: bool = False, search: str | None = None) -> Any:
        """Return the notifications for ``self.user``, most recent first."""
        from core.models import Notification

        qs = (
            Notification.objects
            .filter(recipient=self.user)
            .select_related("content_type")
            .order_by("-created_at")
        )
        if unread_only:
            qs = qs.filter(is_read=False)
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(message__icontains=search))
        return qs

    def mark_as_read(self, notification_id: int) -> Any:
        """Mark a single notification as read."""
        from core.models import Notification

        try:
            notification = Notification.objects.get(
                pk=notification_id,
                recipient=self.user,
            )
        except Notification.DoesNotExist:
            raise NotFound(f"Notification with pk={notification_id} does not exist.")
        notification.is_read = True
        notification.save(update_fields=["is_read", "updated_at"])
        return notification

    def mark_all_as_read(self) -> int:
        from core.models import Notification

        return Notification.objects.filter(recipient=self.user, is_read=False).update(is_read=True)

    def delete(self, notification_id: int) -> None:
        """Remove one of ``self.user``'s own notifications."""
        from core.models import Notification

        deleted, _ = Notification.objects.filter(pk=notification_id, recipient=self.user).delete()
        if not deleted:
            raise NotFound(f"Notification with pk={notification_id} does not exist.")


# ═══════════════════════════════════════════════════════════════════
#  Notification Management (Admin)
# ═══════════════════════════════════════════════════════════════════

class NotificationAdminService:
    """
    Admin-only management of every user's notifications.

    Announcements fan out into one ``Notification`` per recipient: either
    a single user, or every active user holding the audience role
    (``all`` targets everyone).
    """

    AUDIENCE_ALL = "all"

    def __init__(self, principal: Principal | None) -> None:
        if principal is None:
            raise Unauthenticated()
        if not principal.is_admin:
            raise PermissionDenied("Only administrators can manage notifications.")
        self.principal = principal

    def announce(
        self,
        *,
        title: str,
        message: str,
        audience: str = AUDIENCE_ALL,
        recipient_id: int | None = None,
    ) -> int:
        """Create the announcement and return how many users received it."""
        User = get_user_model()
        if recipient_id is not None:
            recipients = list(User.objects.filter(pk=recipient_id, is_active=True))
            if not recipients:
                raise NotFound(f"User with pk={recipient_id} does not exist.")
        else:
            qs = User.objects.filter(is_active=True)
            if audience == Role.ADMIN:
                qs = qs.filter(Q(role=Role.ADMIN) | Q(is_superuser=True))
            elif audience != self.AUDIENCE_ALL:
                qs = qs.filter(role=audience, is_superuser=False)
            recipients = list(qs)

        created = NotificationService.create(
            actor_id=self.principal.id,
            recipients=recipients,
            event_type="announcement",
            title=title,
            message=message,
        )
        logger.info(
            "Announcement %r sent to %d user(s) (audience=%s) by admin=%s",
            title,
            len(created),
            audience if recipient_id is None else f"user {recipient_id}",
            self.principal.id,
        )
        return len(created)

    def list_all(
        self,
        *,
        recipient_id: int | None = None,
        is_read: bool | None = None,
        search: str | None = None,
    ) -> QuerySet:
        from core.models import Notification

        qs = Notification.objects.select_related("recipient", "content_type").order_by("-created_at")
        if recipient_id is not None:
            qs = qs.filter(recipient_id=recipient_id)
        if is_read is not None:
            qs = qs.filter(is_read=is_read)
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(message__icontains=search))
        return qs

    def _get(self, notification_id: int) -> Any:
        from core.models import Notification

        try:
            return Notification.objects.get(pk=notification_id)
        except Notification.DoesNotExist:
            raise NotFound(f"Notification with pk={notification_id} does not exist.")

    def update(self, notification_id: int, data: dict[str, Any]) -> Any:
        if not data:
            raise DomainError("No notification fields were supplied.")
        notification = self._get(notification_id)
        for field_name, value in data.items():
            setattr(notification, field_name, value)
        notification.save(update_fields=[*data, "updated_at"])
        logger.info(
            "Notification #%d updated by admin=%s (%s)",
            notification_id,
            self.principal.id,
            ", ".join(sorted(data)),
        )
        return notification

    def delete(self, notification_id: int) -> None:
        self._get(notification_id).delete()
        logger.info("Notification #%d deleted by admin=%s", notification_id, self.principal.id)

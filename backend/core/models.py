"""
Core app models.

Provides the abstract base models shared by every moderated kind and the
user-facing ``Notification`` model.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models

from core.constants import RecordStatus


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class ModeratedModel(TimeStampedModel):
    """
    Abstract base for every record that goes through the approval workflow.

    The moderator / notes pair is written only by approve and reject (see
    ``core.domain.ledger``).  The check constraint keeps a rejected row
    from ever being stored without a rejection reason, whatever code path
    writes it.

    Concrete models that declare their own ``Meta`` must inherit
    ``ModeratedModel.Meta`` to keep the constraint.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        verbose_name="Owner",
    )
    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.PENDING,
        db_index=True,
        verbose_name="Status",
    )
    moderator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Moderated By",
    )
    moderator_notes = models.TextField(
        null=True,
        blank=True,
        verbose_name="Moderator Notes",
        help_text="Required when the record is rejected; cleared on approval.",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        verbose_name="Active",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    ~models.Q(status=RecordStatus.REJECTED)
                    | (
                        models.Q(moderator_notes__isnull=False)
                        & ~models.Q(moderator_notes="")
                    )
                ),
                name="%(app_label)s_%(class)s_rejected_has_notes",
            ),
        ]


class Notification(TimeStampedModel):
    """
    System notification sent to a user when one of their records is
    approved or rejected.

    Uses a GenericForeignKey so any model instance can be the *source* of a
    notification (e.g. a rejected scam report notifies its author).
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Recipient",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    is_read = models.BooleanField(default=False, verbose_name="Read")

    # Generic relation to the object that triggered the notification
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        verbose_name="Related Content Type",
    )
    object_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name="Related Object ID",
    )
    content_object = GenericForeignKey("content_type", "object_id")

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"]),
        ]

    def __str__(self):
        return f"[{self.recipient}] {self.title}"

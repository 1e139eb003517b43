"""
Alerts app models.

``ScamAlert`` is a public warning written by a Legal Officer or an Admin.
Once approved and active it is shown to every user until it expires.
``Comment`` is a user's reply on an alert and is moderated the same way.
"""

from django.db import models

from core.constants import TITLE_MAX_LENGTH
from core.models import ModeratedModel


class Severity(models.TextChoices):
    LOW = "LOW", "Low"
    MEDIUM = "MEDIUM", "Medium"
    HIGH = "HIGH", "High"
    CRITICAL = "CRITICAL", "Critical"


class ScamAlert(ModeratedModel):
    title = models.CharField(
        max_length=TITLE_MAX_LENGTH,
        verbose_name="Title",
    )
    description = models.TextField(
        verbose_name="Description",
    )
    severity = models.CharField(
        max_length=10,
        choices=Severity.choices,
        default=Severity.MEDIUM,
        db_index=True,
        verbose_name="Severity",
    )
    target_audience = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Target Audience",
    )
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name="Expires At",
        help_text="Users stop seeing the alert after this moment. Empty = never expires.",
    )

    class Meta(ModeratedModel.Meta):
        verbose_name = "Scam Alert"
        verbose_name_plural = "Scam Alerts"

    def __str__(self):
        return f"[{self.severity}] {self.title}"


class Comment(ModeratedModel):
    """
    A comment on a ``ScamAlert``.

    ``on_delete=PROTECT`` keeps the database from removing comments
    behind the workflow's back; deleting an alert goes through
    ``CascadeManager``, which removes them in the same transaction.
    """

    alert = models.ForeignKey(
        ScamAlert,
        on_delete=models.PROTECT,
        related_name="comments",
        verbose_name="Alert",
    )
    content = models.TextField(
        verbose_name="Content",
    )

    class Meta(ModeratedModel.Meta):
        verbose_name = "Comment"
        verbose_name_plural = "Comments"

    def __str__(self):
        return f"Comment {self.pk} on alert {self.alert_id}"

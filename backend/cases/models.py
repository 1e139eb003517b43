"""
Cases app models.

A ``LegalCase`` is opened by a Legal Officer (or an Admin) to pursue a
scam through legal channels.  It goes through the shared moderation
workflow and owns its documents and evidence (``evidence`` app), which
are deleted together with it.
"""

from django.db import models

from core.constants import TITLE_MAX_LENGTH
from core.models import ModeratedModel


class Priority(models.TextChoices):
    LOW = "LOW", "Low"
    MEDIUM = "MEDIUM", "Medium"
    HIGH = "HIGH", "High"
    URGENT = "URGENT", "Urgent"


class LegalCase(ModeratedModel):
    """
    Central entity of the legal workflow.

    ``case_number`` is unique; when the creator omits it the service layer
    generates one (``LC-<epoch millis>-<5 random chars>``).
    """

    case_number = models.CharField(
        max_length=50,
        unique=True,
        verbose_name="Case Number",
    )
    title = models.CharField(
        max_length=TITLE_MAX_LENGTH,
        verbose_name="Case Title",
    )
    description = models.TextField(
        verbose_name="Description",
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        db_index=True,
        verbose_name="Priority",
    )

    class Meta(ModeratedModel.Meta):
        verbose_name = "Legal Case"
        verbose_name_plural = "Legal Cases"

    def __str__(self):
        return f"{self.case_number} — {self.title}"

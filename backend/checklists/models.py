"""
Checklists app models.

Personal checklists are owner-scoped working notes.  They are not
moderated: there is no status and no moderator, only the owner.
"""

from django.conf import settings
from django.db import models

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from core.models import TimeStampedModel


class Checklist(TimeStampedModel):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="checklists",
        verbose_name="Owner",
    )
    title = models.CharField(max_length=TITLE_MAX_LENGTH, verbose_name="Title")
    description = models.TextField(
        blank=True,
        default="",
        max_length=DESCRIPTION_MAX_LENGTH,
        verbose_name="Description",
    )
    is_completed = models.BooleanField(default=False, verbose_name="Completed")

    class Meta:
        verbose_name = "Checklist"
        verbose_name_plural = "Checklists"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class ChecklistItem(TimeStampedModel):
    """
    One line of a checklist.  Removed together with its checklist by the
    checklist's cascade, never by the database.
    """

    checklist = models.ForeignKey(
        Checklist,
        on_delete=models.PROTECT,
        related_name="items",
        verbose_name="Checklist",
    )
    text = models.CharField(max_length=500, verbose_name="Text")
    category = models.CharField(max_length=100, blank=True, default="", verbose_name="Category")
    order_index = models.PositiveIntegerField(default=0, verbose_name="Order")
    is_checked = models.BooleanField(default=False, verbose_name="Checked")

    class Meta:
        verbose_name = "Checklist Item"
        verbose_name_plural = "Checklist Items"
        ordering = ["order_index", "id"]

    def __str__(self):
        return self.text

"""
FAQs app models.

A ``FAQ`` is help content written by Admins.  It is moderated like every
other kind: a new entry is a draft (``pending``) until an Admin publishes
it (``approve``).  Published, active entries are readable without an
account.
"""

from django.db import models

from core.constants import TITLE_MAX_LENGTH
from core.models import ModeratedModel


class FAQ(ModeratedModel):
    title = models.CharField(
        max_length=TITLE_MAX_LENGTH,
        verbose_name="Title",
    )
    content = models.TextField(
        verbose_name="Content",
    )
    category = models.CharField(
        max_length=100,
        default="General",
        db_index=True,
        verbose_name="Category",
    )
    tags = models.CharField(
        max_length=500,
        blank=True,
        default="",
        verbose_name="Tags",
        help_text="Comma-separated keywords used by search.",
    )
    is_pinned = models.BooleanField(
        default=False,
        verbose_name="Pinned",
    )
    views = models.PositiveIntegerField(
        default=0,
        verbose_name="Views",
    )
    helpful = models.PositiveIntegerField(
        default=0,
        verbose_name="Helpful Votes",
    )

    class Meta(ModeratedModel.Meta):
        verbose_name = "FAQ"
        verbose_name_plural = "FAQs"
        ordering = ["-is_pinned", "-updated_at"]

    def __str__(self):
        return self.title

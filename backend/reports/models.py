"""
Reports app models.

A ``ScamReport`` is filed by any authenticated user describing a scam
they encountered.  Reports are investigative material: Legal Officers
and Admins see all of them, Users only their own.
"""

from django.db import models

from core.constants import TITLE_MAX_LENGTH
from core.models import ModeratedModel


class ScamReport(ModeratedModel):
    title = models.CharField(
        max_length=TITLE_MAX_LENGTH,
        verbose_name="Title",
    )
    description = models.TextField(
        verbose_name="Description",
    )
    scammer_info = models.TextField(
        verbose_name="Scammer Information",
        help_text="Names, phone numbers, accounts or URLs used by the scammer.",
    )
    platform = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name="Platform",
        help_text="Where the scam took place (e.g. WhatsApp, Instagram, phone call).",
    )

    class Meta(ModeratedModel.Meta):
        verbose_name = "Scam Report"
        verbose_name_plural = "Scam Reports"

    def __str__(self):
        return f"{self.title} ({self.status})"

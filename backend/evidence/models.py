"""
Evidence app models.

Metadata attached to a ``cases.LegalCase``.  File bytes live in external
storage; only the reference URI, name, size and MIME type are kept here.

Both foreign keys to the case use ``on_delete=PROTECT``: removing a case
goes through ``CascadeManager``, which deletes documents and evidence
first inside the same transaction.
"""

from django.conf import settings
from django.db import models

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from core.models import TimeStampedModel


class CaseDocument(TimeStampedModel):
    case = models.ForeignKey(
        "cases.LegalCase",
        on_delete=models.PROTECT,
        related_name="documents",
        verbose_name="Case",
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="uploaded_case_documents",
        verbose_name="Uploaded By",
    )
    file_name = models.CharField(
        max_length=255,
        verbose_name="File Name",
    )
    file_type = models.CharField(
        max_length=100,
        verbose_name="MIME Type",
    )
    file_size = models.PositiveBigIntegerField(
        verbose_name="File Size (bytes)",
    )
    file_url = models.URLField(
        max_length=500,
        verbose_name="File URL",
    )

    class Meta:
        verbose_name = "Case Document"
        verbose_name_plural = "Case Documents"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.file_name} (case {self.case_id})"


class Evidence(TimeStampedModel):
    case = models.ForeignKey(
        "cases.LegalCase",
        on_delete=models.PROTECT,
        related_name="evidence",
        verbose_name="Case",
    )
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="added_evidence",
        verbose_name="Added By",
    )
    title = models.CharField(
        max_length=TITLE_MAX_LENGTH,
        verbose_name="Title",
    )
    description = models.TextField(
        blank=True,
        default="",
        max_length=DESCRIPTION_MAX_LENGTH,
        verbose_name="Description",
    )
    file_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        verbose_name="File URL",
    )

    class Meta:
        verbose_name = "Evidence"
        verbose_name_plural = "Evidence"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} (case {self.case_id})"

"""
Cases app serializers.

Field definitions and shape validation only.  Case-number uniqueness,
visibility and workflow rules live in ``CASE_POLICY`` (``services.py``).
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from core.serializers import (
    MODERATED_READ_FIELDS,
    ModeratedRecordFilterSerializer,
    ModeratedRecordSerializer,
)

from .models import LegalCase, Priority


class LegalCaseFilterSerializer(ModeratedRecordFilterSerializer):
    """
    Query Parameters
    ----------------
    ``status``     : str  — workflow status, or ``all``
    ``is_active``  : bool
    ``priority``   : str  — one of ``Priority`` values
    ``search``     : str  — title, description or case number
    """

    priority = serializers.ChoiceField(choices=Priority.choices, required=False)


class LegalCaseSerializer(ModeratedRecordSerializer):
    priority_display = serializers.CharField(source="get_priority_display", read_only=True)
    document_count = serializers.SerializerMethodField()
    evidence_count = serializers.SerializerMethodField()

    class Meta(ModeratedRecordSerializer.Meta):
        model = LegalCase
        fields = MODERATED_READ_FIELDS + [
            "case_number",
            "title",
            "description",
            "priority",
            "priority_display",
            "document_count",
            "evidence_count",
        ]
        read_only_fields = fields

    def get_document_count(self, obj: LegalCase) -> int:
        return obj.documents.count()

    def get_evidence_count(self, obj: LegalCase) -> int:
        return obj.evidence.count()


class LegalCaseCreateSerializer(serializers.Serializer):
    case_number = serializers.CharField(
        max_length=50,
        required=False,
        help_text="Leave empty to have one generated (LC-<timestamp>-<suffix>).",
    )
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    priority = serializers.ChoiceField(choices=Priority.choices, required=False)


class LegalCaseUpdateSerializer(serializers.Serializer):
    """The case number is fixed once the case exists."""

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    priority = serializers.ChoiceField(choices=Priority.choices)

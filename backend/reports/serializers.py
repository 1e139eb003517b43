"""
Reports app serializers.

Field definitions and shape validation only; ownership, visibility and
workflow rules belong to ``REPORT_POLICY`` in ``services.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from core.serializers import (
    MODERATED_READ_FIELDS,
    ModeratedRecordFilterSerializer,
    ModeratedRecordSerializer,
)

from .models import ScamReport


class ScamReportFilterSerializer(ModeratedRecordFilterSerializer):
    platform = serializers.CharField(required=False, max_length=100)


class ScamReportSerializer(ModeratedRecordSerializer):
    class Meta(ModeratedRecordSerializer.Meta):
        model = ScamReport
        fields = MODERATED_READ_FIELDS + [
            "title",
            "description",
            "scammer_info",
            "platform",
        ]
        read_only_fields = fields


class ScamReportWriteSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/reports/`` and ``PATCH /api/reports/{id}/``.

    Used with ``partial=True`` for updates.
    """

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    scammer_info = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    platform = serializers.CharField(max_length=100)

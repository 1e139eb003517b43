"""
Alerts app serializers.

Field definitions and shape validation only; visibility and workflow
rules belong to ``ALERT_POLICY`` / ``COMMENT_POLICY`` in ``services.py``.
"""

from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from core.serializers import (
    MODERATED_READ_FIELDS,
    ModeratedRecordFilterSerializer,
    ModeratedRecordSerializer,
)

from .models import Comment, ScamAlert, Severity


# ═══════════════════════════════════════════════════════════════════
#  Scam Alerts
# ═══════════════════════════════════════════════════════════════════


class ScamAlertFilterSerializer(ModeratedRecordFilterSerializer):
    severity = serializers.ChoiceField(choices=Severity.choices, required=False)


class ScamAlertSerializer(ModeratedRecordSerializer):
    severity_display = serializers.CharField(source="get_severity_display", read_only=True)
    comment_count = serializers.SerializerMethodField()

    class Meta(ModeratedRecordSerializer.Meta):
        model = ScamAlert
        fields = MODERATED_READ_FIELDS + [
            "title",
            "description",
            "severity",
            "severity_display",
            "target_audience",
            "expires_at",
            "comment_count",
        ]
        read_only_fields = fields

    def get_comment_count(self, obj: ScamAlert) -> int:
        return obj.comments.count()


class ScamAlertWriteSerializer(serializers.Serializer):
    """
    Request body for creating (``POST``) and editing (``PATCH``) an alert.
    """

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    severity = serializers.ChoiceField(choices=Severity.choices, required=False)
    target_audience = serializers.CharField(max_length=255, required=False, allow_blank=True)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)

    def validate_expires_at(self, value):
        if value is not None and value <= timezone.now():
            raise serializers.ValidationError("Expiry must be in the future.")
        return value


# ═══════════════════════════════════════════════════════════════════
#  Comments
# ═══════════════════════════════════════════════════════════════════


class CommentFilterSerializer(ModeratedRecordFilterSerializer):
    alert = serializers.IntegerField(source="alert_id", required=False, min_value=1)


class CommentSerializer(ModeratedRecordSerializer):
    class Meta(ModeratedRecordSerializer.Meta):
        model = Comment
        fields = MODERATED_READ_FIELDS + ["alert", "content"]
        read_only_fields = fields


class CommentCreateSerializer(serializers.Serializer):
    alert = serializers.IntegerField(source="alert_id", min_value=1)
    content = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)


class CommentUpdateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)

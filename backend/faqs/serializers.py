"""
FAQs app serializers.
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from core.serializers import (
    MODERATED_READ_FIELDS,
    ModeratedRecordFilterSerializer,
    ModeratedRecordSerializer,
)

from .models import FAQ


class FAQFilterSerializer(ModeratedRecordFilterSerializer):
    category = serializers.CharField(required=False, max_length=100)
    is_pinned = serializers.BooleanField(required=False, allow_null=True, default=None)


class FAQSerializer(ModeratedRecordSerializer):
    class Meta(ModeratedRecordSerializer.Meta):
        model = FAQ
        fields = MODERATED_READ_FIELDS + [
            "title",
            "content",
            "category",
            "tags",
            "is_pinned",
            "views",
            "helpful",
        ]
        read_only_fields = fields


class FAQWriteSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/faqs/`` and ``PATCH /api/faqs/{id}/``.

    ``tags`` accepts either a comma-separated string or a list of strings.
    """

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    content = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    category = serializers.CharField(max_length=100, required=False)
    tags = serializers.JSONField(required=False)
    is_pinned = serializers.BooleanField(required=False)

    def validate_tags(self, value):
        if isinstance(value, list):
            if not all(isinstance(tag, str) for tag in value):
                raise serializers.ValidationError("Tags must be strings.")
            value = ", ".join(tag.strip() for tag in value if tag.strip())
        if not isinstance(value, str):
            raise serializers.ValidationError("Tags must be a string or a list of strings.")
        if len(value) > 500:
            raise serializers.ValidationError("Tags must be 500 characters or less.")
        return value

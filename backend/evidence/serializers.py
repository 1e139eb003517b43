"""
Evidence app serializers.

Read and create serializers for case documents and evidence metadata.
No file bytes pass through these serializers; ``file_url`` points at the
external storage object.
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH

from .models import CaseDocument, Evidence


class CaseDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = CaseDocument
        fields = [
            "id",
            "case",
            "uploaded_by",
            "file_name",
            "file_type",
            "file_size",
            "file_url",
            "created_at",
        ]
        read_only_fields = fields


class CaseDocumentCreateSerializer(serializers.Serializer):
    file_name = serializers.CharField(max_length=255)
    file_type = serializers.CharField(max_length=100, help_text="MIME type, e.g. application/pdf.")
    file_size = serializers.IntegerField(min_value=0, help_text="Size in bytes.")
    file_url = serializers.URLField(max_length=500)


class EvidenceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Evidence
        fields = [
            "id",
            "case",
            "added_by",
            "title",
            "description",
            "file_url",
            "created_at",
        ]
        read_only_fields = fields


class EvidenceCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
    )
    file_url = serializers.URLField(max_length=500, required=False, allow_blank=True)


class AttachmentFilterSerializer(serializers.Serializer):
    case = serializers.IntegerField(required=False, min_value=1, help_text="Only attachments of this case.")
    search = serializers.CharField(required=False, max_length=255, help_text="Case-insensitive free-text search.")

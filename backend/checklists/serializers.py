"""
Checklists app serializers.
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH

from .models import Checklist, ChecklistItem


class ChecklistFilterSerializer(serializers.Serializer):
    is_completed = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, max_length=255)


class ChecklistItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = ChecklistItem
        fields = ["id", "text", "category", "order_index", "is_checked", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class ChecklistItemUpdateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=500)
    category = serializers.CharField(max_length=100, allow_blank=True)
    order_index = serializers.IntegerField(min_value=0)
    is_checked = serializers.BooleanField()


class ChecklistSerializer(serializers.ModelSerializer):
    owner_username = serializers.CharField(source="owner.username", read_only=True)
    items = ChecklistItemSerializer(many=True, read_only=True)

    class Meta:
        model = Checklist
        fields = [
            "id", "owner", "owner_username", "title", "description",
            "is_completed", "items", "created_at", "updated_at",
        ]
        read_only_fields = fields


class ChecklistCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH, required=False, allow_blank=True,
    )


class ChecklistUpdateSerializer(ChecklistCreateSerializer):
    is_completed = serializers.BooleanField()

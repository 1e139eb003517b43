"""
Core app serializers.

Two groups live here:

1. Shared building blocks for every moderated kind — the base read
   serializer that hides the moderation ledger from unrelated principals,
   the moderation-action request serializers and the base list-filter
   serializer.
2. **Response-only** serializers for the aggregated endpoints served by
   the core app (statistics, system constants, notifications).

Architectural note
------------------
These serializers never import models from other apps.  Per-kind
serializers subclass the bases below in their own app.
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from core.constants import STATUS_ALL, RecordStatus, Role


# ════════════════════════════════════════════════════════════════════
#  Moderated Records
# ════════════════════════════════════════════════════════════════════

MODERATED_READ_FIELDS = [
    "id",
    "owner",
    "owner_username",
    "status",
    "status_display",
    "moderator",
    "moderator_notes",
    "is_active",
    "created_at",
    "updated_at",
]


class ModeratedRecordSerializer(serializers.ModelSerializer):
    """
    Base read serializer for every ``ModeratedModel`` subclass.

    The moderator / notes pair is blanked unless the requesting principal
    may read the ledger (Admins, and the record's owner).  Views pass
    ``principal`` and ``policy`` in the serializer context.
    """

    owner_username = serializers.CharField(source="owner.username", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        fields = MODERATED_READ_FIELDS
        read_only_fields = MODERATED_READ_FIELDS

    def to_representation(self, instance: Any) -> dict[str, Any]:
        data = super().to_representation(instance)
        policy = self.context.get("policy")
        principal = self.context.get("principal")
        if policy is not None and not policy.ledger.is_visible_to(principal, instance, policy.kind):
            data["moderator"] = None
            data["moderator_notes"] = None
        return data


class RecordFilterSerializer(serializers.Serializer):
    """
    Validates the query parameters shared by every moderated list endpoint.

    ``status=all`` is accepted and means "no status filter".  Per-kind
    filter serializers subclass this and add their own fields; the
    validated dict is handed to ``ModerationPolicy.execute`` as-is.
    """

    status = serializers.ChoiceField(
        choices=[(STATUS_ALL, "All")] + list(RecordStatus.choices),
        required=False,
        help_text="Filter by workflow status, or 'all'.",
    )
    search = serializers.CharField(
        required=False,
        max_length=255,
        allow_blank=False,
        help_text="Case-insensitive free-text search.",
    )


class ModeratedRecordFilterSerializer(RecordFilterSerializer):
    is_active = serializers.BooleanField(
        required=False,
        allow_null=True,
        default=None,
        help_text="Filter by the active flag.",
    )


class ApproveSerializer(serializers.Serializer):
    notes = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Optional remark. Approval always clears stored moderator notes.",
    )


class RejectSerializer(serializers.Serializer):
    notes = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Reason for the rejection. Required and must not be blank.",
    )


class ToggleActiveSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(
        required=False,
        allow_null=True,
        default=None,
        help_text="Target value. Omit to flip the current value.",
    )


class ModerationEntrySerializer(serializers.Serializer):
    status = serializers.CharField(read_only=True)
    moderator_id = serializers.IntegerField(read_only=True, allow_null=True)
    moderator_notes = serializers.CharField(read_only=True, allow_null=True)


# ════════════════════════════════════════════════════════════════════
#  Moderation Statistics
# ════════════════════════════════════════════════════════════════════

class StatusCountsSerializer(serializers.Serializer):
    pending = serializers.IntegerField()
    approved = serializers.IntegerField()
    rejected = serializers.IntegerField()
    closed = serializers.IntegerField()
    total = serializers.IntegerField()


class ModerationStatsSerializer(serializers.Serializer):
    """
    Per-kind status counts, keyed by kind name (``report``, ``alert``,
    ``case``, ``comment``, ``role_change``).
    """

    stats = serializers.DictField(child=StatusCountsSerializer())


# ════════════════════════════════════════════════════════════════════
#  System Constants
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()


class LimitsSerializer(serializers.Serializer):
    title_max_length = serializers.IntegerField()
    description_max_length = serializers.IntegerField()


class SystemConstantsSerializer(serializers.Serializer):
    """
    All choice enumerations the frontend needs to render dropdowns and
    labels.
    """

    roles = ChoiceItemSerializer(many=True)
    record_statuses = ChoiceItemSerializer(many=True)
    alert_severities = ChoiceItemSerializer(many=True)
    case_priorities = ChoiceItemSerializer(many=True)
    limits = LimitsSerializer()


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationSerializer(serializers.Serializer):
    """
    Read-only serializer for ``Notification`` instances.

    Used by the Notification ViewSet to list notifications for the
    authenticated user.
    """

    id = serializers.IntegerField(read_only=True, help_text="Notification PK.")
    recipient = serializers.IntegerField(
        source="recipient_id",
        read_only=True,
        help_text="PK of the receiving user.",
    )
    title = serializers.CharField(
        read_only=True,
        help_text="Short notification title.",
    )
    message = serializers.CharField(
        read_only=True,
        help_text="Full notification message body.",
    )
    is_read = serializers.BooleanField(
        read_only=True,
        help_text="Whether the recipient has marked this notification as read.",
    )
    created_at = serializers.DateTimeField(
        read_only=True,
        help_text="When the notification was created.",
    )
    content_type = serializers.StringRelatedField(
        read_only=True,
        help_text="Related content type (if any).",
    )
    object_id = serializers.IntegerField(
        read_only=True,
        allow_null=True,
        help_text="PK of the related object (if any).",
    )


class NotificationAnnounceSerializer(serializers.Serializer):
    """Request body for ``POST /api/core/notifications/announce/`` (Admin)."""

    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    audience = serializers.ChoiceField(
        choices=[("all", "All users")] + list(Role.choices),
        default="all",
        help_text="Role that receives the announcement. Ignored when 'recipient' is given.",
    )
    recipient = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Send to this single user instead of an audience.",
    )


class NotificationUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    message = serializers.CharField(required=False)
    is_read = serializers.BooleanField(required=False)


class NotificationAdminFilterSerializer(serializers.Serializer):
    recipient = serializers.IntegerField(required=False, min_value=1)
    is_read = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, max_length=255)

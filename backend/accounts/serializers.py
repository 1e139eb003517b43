"""
Accounts app serializers.

Contains the Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here; the role-change
workflow runs through ``ROLE_CHANGE_POLICY`` and user management through
``services.py``.
"""

from __future__ import annotations

import re

from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.constants import DESCRIPTION_MAX_LENGTH, Role
from core.serializers import (
    MODERATED_READ_FIELDS,
    ModeratedRecordSerializer,
    RecordFilterSerializer,
)

from .models import RoleChangeRequest

User = get_user_model()

# A role change can only ask for a role above the default one.
REQUESTABLE_ROLES = [(Role.OFFICER.value, Role.OFFICER.label), (Role.ADMIN.value, Role.ADMIN.label)]


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserListSerializer(serializers.ModelSerializer):
    """Serializer for listing users (admin views)."""

    role_display = serializers.CharField(source="get_role_display", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "is_active",
            "role",
            "role_display",
        ]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Full user representation (used by retrieve, assign-role and me).

    ``effective_role`` is the role the access policy applies: superusers
    are always Admins whatever their stored ``role``.
    """

    role_display = serializers.CharField(source="get_role_display", read_only=True)
    effective_role = serializers.SerializerMethodField(
        help_text="Role used for access decisions.",
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "phone_number",
            "first_name",
            "last_name",
            "is_active",
            "date_joined",
            "role",
            "role_display",
            "effective_role",
        ]
        read_only_fields = [
            "id",
            "username",
            "date_joined",
            "is_active",
            "role",
            "role_display",
            "effective_role",
        ]

    def get_effective_role(self, obj) -> str:
        return Role.ADMIN.value if obj.is_admin_role else obj.role


class UserFilterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, max_length=255)


class AssignRoleSerializer(serializers.Serializer):
    """
    Accepts the ``role`` to assign to a user.

    Used by the ``assign-role`` action on ``UserViewSet`` (Admin only).
    """

    role = serializers.ChoiceField(
        choices=Role.choices,
        help_text="One of 'admin', 'officer' or 'user'.",
    )


class RoleStatisticsSerializer(serializers.Serializer):
    admin = serializers.IntegerField()
    officer = serializers.IntegerField()
    user = serializers.IntegerField()


class MeUpdateSerializer(serializers.ModelSerializer):
    """
    Allows the authenticated user to update limited profile fields.
    Sensitive fields (role, is_active, username) are read-only and
    cannot be self-modified.
    """

    class Meta:
        model = User
        fields = [
            "email",
            "phone_number",
            "first_name",
            "last_name",
        ]

    def validate_email(self, value: str) -> str:
        if (
            self.instance
            and User.objects.exclude(pk=self.instance.pk)
            .filter(email=value)
            .exists()
        ):
            raise serializers.ValidationError(
                "This email is already in use by another account."
            )
        return value

    def validate_phone_number(self, value: str) -> str:
        if value and not re.match(r"^\+?\d{7,15}$", value):
            raise serializers.ValidationError(
                "Phone number must contain 7 to 15 digits, optionally prefixed with '+'."
            )
        return value


# ═══════════════════════════════════════════════════════════════════
#  Role Change Request Serializers
# ═══════════════════════════════════════════════════════════════════


class RoleChangeRequestFilterSerializer(RecordFilterSerializer):
    requested_role = serializers.ChoiceField(choices=REQUESTABLE_ROLES, required=False)


class RoleChangeRequestSerializer(ModeratedRecordSerializer):
    requested_role_display = serializers.CharField(
        source="get_requested_role_display", read_only=True,
    )

    class Meta(ModeratedRecordSerializer.Meta):
        model = RoleChangeRequest
        fields = MODERATED_READ_FIELDS + [
            "requested_role",
            "requested_role_display",
            "reason",
        ]
        read_only_fields = fields


class RoleChangeRequestCreateSerializer(serializers.Serializer):
    requested_role = serializers.ChoiceField(choices=REQUESTABLE_ROLES)
    reason = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)


class RoleChangeRequestUpdateSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)


class LatestRoleChangeSerializer(serializers.Serializer):
    """
    Response of ``GET /api/accounts/role-requests/latest/``.

    Every field is ``None`` when the caller has never filed a request.
    """

    id = serializers.IntegerField(allow_null=True)
    status = serializers.CharField(allow_null=True)
    requested_role = serializers.CharField(allow_null=True)
    moderator_notes = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField(allow_null=True)

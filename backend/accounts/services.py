"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``ROLE_CHANGE_KIND`` / ``ROLE_CHANGE_POLICY`` — role-change requests
  run through the shared moderation workflow.
- ``RoleChangeService``     — caller's latest request.
- ``UserManagementService`` — Admin-only user listing and role assignment.
- ``CurrentUserService``    — "Me" endpoint helpers.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet

from core.constants import DESCRIPTION_MAX_LENGTH, RecordStatus, Role
from core.domain.exceptions import NotFound, PermissionDenied, Unauthenticated
from core.domain.kinds import KindDescriptor, Scope
from core.domain.notifications import NotificationService
from core.domain.policies import ModerationPolicy
from core.domain.repositories import DjangoRepository
from core.domain.roles import Principal

from .models import RoleChangeRequest

User = get_user_model()
logger = logging.getLogger(__name__)


def apply_requested_role(request: Any, approver: Principal) -> None:
    """Grant the owner of an approved request the role they asked for."""
    updated = User.objects.filter(pk=request.owner_id).update(role=request.requested_role)
    if not updated:
        raise NotFound(f"User with id {request.owner_id} not found.")
    logger.info(
        "User %s promoted to %s by admin=%s (request pk=%s)",
        request.owner_id,
        request.requested_role,
        approver.id,
        request.pk,
    )


ROLE_CHANGE_KIND = KindDescriptor(
    name="role_change",
    verbose_name="role change request",
    creator_roles=frozenset({Role.USER}),
    scopes={
        Role.ADMIN: (Scope.ALL,),
        Role.OFFICER: (Scope.OWN,),
        Role.USER: (Scope.OWN,),
    },
    create_fields=("requested_role", "reason"),
    required_fields=("requested_role", "reason"),
    editable_fields=("reason",),
    max_lengths={"reason": DESCRIPTION_MAX_LENGTH},
    one_pending_per_owner=True,
    approve_sources=frozenset({RecordStatus.PENDING, RecordStatus.APPROVED}),
    reject_sources=frozenset({RecordStatus.PENDING}),
    on_approved=apply_requested_role,
    filter_fields=("status", "requested_role"),
    search_fields=("reason",),
)

ROLE_CHANGE_POLICY = ModerationPolicy(
    ROLE_CHANGE_KIND,
    DjangoRepository(RoleChangeRequest, select_related=("owner",)),
    notifier=NotificationService.notify_owner,
).register()


# ═══════════════════════════════════════════════════════════════════
#  Role Change Requests
# ═══════════════════════════════════════════════════════════════════


class RoleChangeService:

    @staticmethod
    def latest_for(principal: Principal | None) -> RoleChangeRequest | None:
        """Return the caller's most recent request, or ``None``."""
        if principal is None:
            raise Unauthenticated()
        return (
            RoleChangeRequest.objects
            .filter(owner_id=principal.id)
            .order_by("-created_at", "-pk")
            .first()
        )


# ═══════════════════════════════════════════════════════════════════
#  User Management (Admin)
# ═══════════════════════════════════════════════════════════════════


class UserManagementService:
    """
    Administrative operations on users: listing, role assignment and
    role statistics.  Every method is Admin-only.
    """

    @staticmethod
    def _require_admin(principal: Principal | None) -> Principal:
        if principal is None:
            raise Unauthenticated()
        if not principal.is_admin:
            raise PermissionDenied("Only administrators can manage users.")
        return principal

    @staticmethod
    def list_users(
        principal: Principal | None,
        *,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> QuerySet[User]:
        """
        Return a filtered queryset of users.

        ``search`` is a case-insensitive match across ``username``,
        ``email``, ``first_name`` and ``last_name``.
        """
        UserManagementService._require_admin(principal)
        qs = User.objects.all().order_by("username")

        if role is not None:
            qs = qs.filter(role=role)
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )

        return qs

    @staticmethod
    def get_user(principal: Principal | None, user_id: int) -> User:
        UserManagementService._require_admin(principal)
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound(f"User with id {user_id} not found.")

    @staticmethod
    def assign_role(principal: Principal | None, user_id: int, role: str) -> User:
        """
        Set a user's role directly, bypassing the request workflow.

        An Admin cannot demote themselves; that would leave the caller
        unable to undo the change.
        """
        admin = UserManagementService._require_admin(principal)
        target = UserManagementService.get_user(admin, user_id)
        if target.pk == admin.id and role != Role.ADMIN:
            raise PermissionDenied("You cannot remove your own administrator role.")

        previous = target.role
        target.role = role
        target.save(update_fields=["role"])
        logger.info(
            "Role of user %s changed %s -> %s by admin=%s",
            target.pk,
            previous,
            role,
            admin.id,
        )
        return target

    @staticmethod
    def role_statistics(principal: Principal | None) -> dict[str, int]:
        UserManagementService._require_admin(principal)
        counts = Counter(User.objects.values_list("role", flat=True))
        return {role.value: counts.get(role.value, 0) for role in Role}


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me")
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:

    @staticmethod
    def get_profile(user: User) -> User:
        return User.objects.get(pk=user.pk)

    @staticmethod
    def update_profile(user: User, validated_data: dict[str, Any]) -> User:
        """
        Update the authenticated user's own profile fields.

        The user may NOT change their own ``role``, ``is_active`` or
        ``username`` via this endpoint; the serializer only exposes
        email, phone number and names.
        """
        for field, value in validated_data.items():
            setattr(user, field, value)
        user.save(update_fields=list(validated_data.keys()))
        return User.objects.get(pk=user.pk)

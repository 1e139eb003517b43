"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``MeView``                    — GET / PATCH /me/
- ``UserViewSet``               — /users/  (list, retrieve, assign-role,
                                  role-statistics; Admin only)
- ``RoleChangeRequestViewSet``  — /role-requests/  (moderated CRUD +
                                  latest)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.roles import Principal
from core.views import ModeratedRecordViewSet

from .serializers import (
    AssignRoleSerializer,
    LatestRoleChangeSerializer,
    MeUpdateSerializer,
    RoleChangeRequestCreateSerializer,
    RoleChangeRequestFilterSerializer,
    RoleChangeRequestSerializer,
    RoleChangeRequestUpdateSerializer,
    RoleStatisticsSerializer,
    UserDetailSerializer,
    UserFilterSerializer,
    UserListSerializer,
)
from .services import (
    ROLE_CHANGE_POLICY,
    CurrentUserService,
    RoleChangeService,
    UserManagementService,
)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET  /api/accounts/me/  → Retrieve current user profile.
    PATCH /api/accounts/me/ → Update own profile fields.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user",
        responses={200: OpenApiResponse(response=UserDetailSerializer)},
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update current user",
        request=MeUpdateSerializer,
        responses={200: OpenApiResponse(response=UserDetailSerializer)},
        tags=["Accounts"],
    )
    def patch(self, request: Request) -> Response:
        serializer = MeUpdateSerializer(
            instance=request.user,
            data=request.data,
            partial=True,
        )
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile(request.user, serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  User Management ViewSet
# ═══════════════════════════════════════════════════════════════════


@extend_schema(tags=["Accounts"])
class UserViewSet(viewsets.ViewSet):
    """
    /api/accounts/users/

    Administrative user management.  Every action is Admin-only; the
    check lives in ``UserManagementService``.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        summary="List users",
        parameters=[UserFilterSerializer],
        responses={200: OpenApiResponse(response=UserListSerializer(many=True))},
    )
    def list(self, request: Request) -> Response:
        filters = UserFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        users = UserManagementService.list_users(
            Principal.from_user(request.user),
            **filters.validated_data,
        )
        return Response(UserListSerializer(users, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve user",
        responses={200: OpenApiResponse(response=UserDetailSerializer)},
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        user = UserManagementService.get_user(Principal.from_user(request.user), int(pk))
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Assign role",
        request=AssignRoleSerializer,
        responses={
            200: OpenApiResponse(response=UserDetailSerializer),
            403: OpenApiResponse(description="Caller is not an administrator."),
            404: OpenApiResponse(description="User not found."),
        },
    )
    @action(detail=True, methods=["patch"], url_path="assign-role")
    def assign_role(self, request: Request, pk: str = None) -> Response:
        serializer = AssignRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.assign_role(
            Principal.from_user(request.user),
            int(pk),
            serializer.validated_data["role"],
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Users per role",
        responses={200: OpenApiResponse(response=RoleStatisticsSerializer)},
    )
    @action(detail=False, methods=["get"], url_path="role-statistics")
    def role_statistics(self, request: Request) -> Response:
        stats = UserManagementService.role_statistics(Principal.from_user(request.user))
        return Response(RoleStatisticsSerializer(stats).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Role Change Requests
# ═══════════════════════════════════════════════════════════════════


@extend_schema(tags=["Role Change Requests"])
class RoleChangeRequestViewSet(ModeratedRecordViewSet):
    """
    GET    /api/accounts/role-requests/                → own requests (Admin: all)
    POST   /api/accounts/role-requests/                → Users only; one pending at a time
    PATCH  /api/accounts/role-requests/{id}/           → owner while pending
    DELETE /api/accounts/role-requests/{id}/           → owner while pending, or Admin
    POST   /api/accounts/role-requests/{id}/approve/   → Admin; grants the role
    POST   /api/accounts/role-requests/{id}/reject/    → Admin; notes required
    GET    /api/accounts/role-requests/latest/         → caller's most recent request
    """

    policy = ROLE_CHANGE_POLICY
    read_serializer_class = RoleChangeRequestSerializer
    create_serializer_class = RoleChangeRequestCreateSerializer
    update_serializer_class = RoleChangeRequestUpdateSerializer
    filter_serializer_class = RoleChangeRequestFilterSerializer

    @extend_schema(
        summary="Latest role change request",
        responses={200: OpenApiResponse(response=LatestRoleChangeSerializer)},
    )
    @action(detail=False, methods=["get"], url_path="latest")
    def latest(self, request: Request) -> Response:
        latest = RoleChangeService.latest_for(self.principal(request))
        if latest is None:
            data = dict.fromkeys(LatestRoleChangeSerializer().fields)
        else:
            data = {
                "id": latest.pk,
                "status": latest.status,
                "requested_role": latest.requested_role,
                "moderator_notes": latest.moderator_notes,
                "created_at": latest.created_at,
            }
        return Response(LatestRoleChangeSerializer(data).data, status=status.HTTP_200_OK)

"""
Core app views — **Thin Views**.

Two kinds of views live here:

* ``OwnedRecordViewSet`` / ``ModeratedRecordViewSet`` — the shared
  ViewSet bases every app subclasses for its moderated kind.  Each action
  validates input with a serializer, calls ``ModerationPolicy.execute``
  and renders the returned ``Result``.
* The aggregated core endpoints (moderation statistics, system constants,
  notifications).

No workflow logic, no visibility rules and no cross-app queries live here.
"""

from __future__ import annotations

from typing import Any

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.exception_handler import error_response
from core.domain.policies import ModerationPolicy, Operation
from core.domain.results import Result
from core.domain.roles import Principal

from .serializers import (
    ApproveSerializer,
    ModerationEntrySerializer,
    ModerationStatsSerializer,
    NotificationAdminFilterSerializer,
    NotificationAnnounceSerializer,
    NotificationSerializer,
    NotificationUpdateSerializer,
    RecordFilterSerializer,
    RejectSerializer,
    SystemConstantsSerializer,
    ToggleActiveSerializer,
)
from .services import (
    ModerationStatsService,
    NotificationAdminService,
    NotificationInboxService,
    SystemConstantsService,
)


# ════════════════════════════════════════════════════════════════════
#  Shared ViewSet bases
# ════════════════════════════════════════════════════════════════════

class OwnedRecordViewSet(viewsets.ViewSet):
    """
    CRUD over one kind, routed through its ``ModerationPolicy``.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined.  Subclasses set ``policy`` and the serializer
    classes; visibility, ownership and workflow rules are enforced
    exclusively inside the policy, never in the view.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    policy: ModerationPolicy | None = None
    read_serializer_class = None
    create_serializer_class = None
    update_serializer_class = None
    filter_serializer_class = RecordFilterSerializer

    # ── Helpers ──────────────────────────────────────────────────────

    def get_serializer_class(self):
        return self.read_serializer_class

    def principal(self, request: Request) -> Principal | None:
        return Principal.from_user(request.user)

    def serializer_context(self, request: Request) -> dict[str, Any]:
        return {
            "request": request,
            "principal": self.principal(request),
            "policy": self.policy,
        }

    def render(
        self,
        request: Request,
        result: Result,
        *,
        status_code: int = status.HTTP_200_OK,
        many: bool = False,
        serializer_class=None,
    ) -> Response:
        """Translate a ``Result`` into a ``Response``."""
        if not result.ok:
            return error_response(result.error, result.message)
        if result.value is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        serializer_class = serializer_class or self.read_serializer_class
        serializer = serializer_class(
            result.value,
            many=many,
            context=self.serializer_context(request),
        )
        return Response(serializer.data, status=status_code)

    def execute(self, request: Request, operation: Operation, pk: Any = None, payload=None) -> Result:
        return self.policy.execute(
            self.principal(request),
            operation,
            pk=int(pk) if pk is not None else None,
            payload=payload,
        )

    # ── Standard CRUD ────────────────────────────────────────────────

    def list(self, request: Request) -> Response:
        filter_serializer = self.filter_serializer_class(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        result = self.execute(request, Operation.LIST, payload=filter_serializer.validated_data)
        return self.render(request, result, many=True)

    def retrieve(self, request: Request, pk: str = None) -> Response:
        return self.render(request, self.execute(request, Operation.GET, pk))

    def create(self, request: Request) -> Response:
        serializer = self.create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.execute(request, Operation.CREATE, payload=serializer.validated_data)
        return self.render(request, result, status_code=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = self.update_serializer_class(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = self.execute(request, Operation.UPDATE, pk, payload=serializer.validated_data)
        return self.render(request, result)

    def destroy(self, request: Request, pk: str = None) -> Response:
        return self.render(request, self.execute(request, Operation.DELETE, pk))


class ModeratedRecordViewSet(OwnedRecordViewSet):
    """
    ``OwnedRecordViewSet`` plus the Admin moderation actions.

    POST /{id}/approve/         → approve (optional ``notes``)
    POST /{id}/reject/          → reject (``notes`` required)
    POST /{id}/toggle-active/   → set or flip ``is_active``
    GET  /{id}/moderation/      → moderator and notes (Admin or owner)
    """

    @extend_schema(
        summary="Approve",
        request=ApproveSerializer,
        responses={
            200: OpenApiResponse(description="Record approved."),
            403: OpenApiResponse(description="Only administrators can moderate."),
            409: OpenApiResponse(description="Concurrent change or invalid source status."),
        },
    )
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request: Request, pk: str = None) -> Response:
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.execute(request, Operation.APPROVE, pk, payload=serializer.validated_data)
        return self.render(request, result)

    @extend_schema(
        summary="Reject",
        request=RejectSerializer,
        responses={
            200: OpenApiResponse(description="Record rejected."),
            400: OpenApiResponse(description="Rejection notes missing."),
            403: OpenApiResponse(description="Only administrators can moderate."),
            409: OpenApiResponse(description="Concurrent change or invalid source status."),
        },
    )
    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request: Request, pk: str = None) -> Response:
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.execute(request, Operation.REJECT, pk, payload=serializer.validated_data)
        return self.render(request, result)

    @extend_schema(
        summary="Toggle active flag",
        request=ToggleActiveSerializer,
        responses={200: OpenApiResponse(description="Updated record.")},
    )
    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request: Request, pk: str = None) -> Response:
        serializer = ToggleActiveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.execute(request, Operation.TOGGLE_ACTIVE, pk, payload=serializer.validated_data)
        return self.render(request, result)

    @extend_schema(
        summary="Moderation details",
        request=None,
        responses={200: OpenApiResponse(response=ModerationEntrySerializer, description="Ledger entry.")},
    )
    @action(detail=True, methods=["get"], url_path="moderation")
    def moderation(self, request: Request, pk: str = None) -> Response:
        entry = self.policy.moderation_entry(self.principal(request), int(pk))
        return Response(ModerationEntrySerializer(entry).data, status=status.HTTP_200_OK)


# ════════════════════════════════════════════════════════════════════
#  Aggregated endpoints
# ════════════════════════════════════════════════════════════════════

class ModerationStatsView(APIView):
    """
    **GET /api/core/stats/**

    Record counts per kind and status, each kind counted within the
    caller's own visibility ceiling.  ``closed`` is always present (and
    currently always 0) so dashboards keep a stable shape.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Moderation statistics",
        description="Per-kind counts of pending, approved, rejected and closed records visible to the caller.",
        responses={200: OpenApiResponse(response=ModerationStatsSerializer, description="Status counts.")},
        tags=["Dashboard"],
    )
    def get(self, request: Request) -> Response:
        stats = ModerationStatsService(Principal.from_user(request.user)).get_stats()
        serializer = ModerationStatsSerializer({"stats": stats})
        return Response(serializer.data, status=status.HTTP_200_OK)


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Return every choice enumeration the frontend needs.

    **Authentication**: Not required.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="System constants",
        description=(
            "Return roles, workflow statuses, alert severities, case priorities "
            "and content limits so the frontend can build dropdowns and validation."
        ),
        responses={200: OpenApiResponse(response=SystemConstantsSerializer, description="System constants.")},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        data = SystemConstantsService.get_constants()
        serializer = SystemConstantsSerializer(data)
        return Response(serializer.data, status=status.HTTP_200_OK)


class NotificationViewSet(viewsets.ViewSet):
    """
    **Notification API** — the authenticated user's inbox plus Admin
    management of every notification.

    Endpoints
    ---------
    GET    /api/core/notifications/              → own notifications (``unread``, ``search``)
    POST   /api/core/notifications/{id}/read/    → mark one as read
    POST   /api/core/notifications/read-all/     → mark every unread one as read
    DELETE /api/core/notifications/{id}/         → delete an own notification (Admin: any)
    GET    /api/core/notifications/all/          → every notification (Admin)
    POST   /api/core/notifications/announce/     → send an announcement (Admin)
    PATCH  /api/core/notifications/{id}/         → edit a notification (Admin)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        summary="List notifications",
        description="Return the notifications of the authenticated user, most recent first.",
        parameters=[
            OpenApiParameter(name="unread", type=bool, location=OpenApiParameter.QUERY, description="Only unread notifications."),
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, description="Search title and message."),
        ],
        responses={200: OpenApiResponse(response=NotificationSerializer(many=True), description="Notification list.")},
        tags=["Notifications"],
    )
    def list(self, request: Request) -> Response:
        unread_only = request.query_params.get("unread", "").lower() in ("1", "true", "yes")
        service = NotificationInboxService(user=request.user)
        notifications = service.list_notifications(
            unread_only=unread_only,
            search=request.query_params.get("search") or None,
        )
        serializer = NotificationSerializer(notifications, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Mark notification as read",
        request=None,
        responses={200: OpenApiResponse(response=NotificationSerializer, description="Updated notification.")},
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"], url_path="read")
    def mark_as_read(self, request: Request, pk: str = None) -> Response:
        service = NotificationInboxService(user=request.user)
        notification = service.mark_as_read(notification_id=int(pk))
        serializer = NotificationSerializer(notification)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Mark all notifications as read",
        request=None,
        responses={200: OpenApiResponse(description="Number of notifications updated.")},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def mark_all_as_read(self, request: Request) -> Response:
        updated = NotificationInboxService(user=request.user).mark_all_as_read()
        return Response({"updated": updated}, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete notification",
        request=None,
        responses={
            204: OpenApiResponse(description="Deleted."),
            404: OpenApiResponse(description="Not found, or not the caller's notification."),
        },
        tags=["Notifications"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        principal = Principal.from_user(request.user)
        if principal is not None and principal.is_admin:
            NotificationAdminService(principal).delete(int(pk))
        else:
            NotificationInboxService(user=request.user).delete(int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Edit notification (Admin)",
        request=NotificationUpdateSerializer,
        responses={200: OpenApiResponse(response=NotificationSerializer, description="Updated notification.")},
        tags=["Notifications"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        service = NotificationAdminService(Principal.from_user(request.user))
        serializer = NotificationUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        notification = service.update(int(pk), dict(serializer.validated_data))
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="List every notification (Admin)",
        parameters=[
            OpenApiParameter(name="recipient", type=int, location=OpenApiParameter.QUERY, description="Recipient user id."),
            OpenApiParameter(name="is_read", type=bool, location=OpenApiParameter.QUERY, description="Read state."),
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, description="Search title and message."),
        ],
        responses={200: OpenApiResponse(response=NotificationSerializer(many=True), description="Notification list.")},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="all")
    def list_all(self, request: Request) -> Response:
        service = NotificationAdminService(Principal.from_user(request.user))
        filters = NotificationAdminFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        notifications = service.list_all(
            recipient_id=filters.validated_data.get("recipient"),
            is_read=filters.validated_data.get("is_read"),
            search=filters.validated_data.get("search"),
        )
        return Response(NotificationSerializer(notifications, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Send an announcement (Admin)",
        request=NotificationAnnounceSerializer,
        responses={201: OpenApiResponse(description="Number of users notified.")},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="announce")
    def announce(self, request: Request) -> Response:
        service = NotificationAdminService(Principal.from_user(request.user))
        serializer = NotificationAnnounceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sent = service.announce(
            title=data["title"],
            message=data["message"],
            audience=data["audience"],
            recipient_id=data.get("recipient"),
        )
        return Response({"sent": sent}, status=status.HTTP_201_CREATED)

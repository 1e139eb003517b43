"""
Alerts app ViewSets.

``ScamAlertViewSet`` and ``CommentViewSet`` are ``ModeratedRecordViewSet``
subclasses bound to their policies in ``services.py``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view

from core.views import ModeratedRecordViewSet

from .serializers import (
    CommentCreateSerializer,
    CommentFilterSerializer,
    CommentSerializer,
    CommentUpdateSerializer,
    ScamAlertFilterSerializer,
    ScamAlertSerializer,
    ScamAlertWriteSerializer,
)
from .services import ALERT_POLICY, COMMENT_POLICY


@extend_schema(tags=["Alerts"])
class ScamAlertViewSet(ModeratedRecordViewSet):
    """
    GET    /api/alerts/                     → published alerts (+ own for Officers, all for Admins)
    POST   /api/alerts/                     → Officer (pending) or Admin (approved)
    PATCH  /api/alerts/{id}/                → Officer owner while pending/rejected, or Admin
    DELETE /api/alerts/{id}/                → also deletes the alert's comments
    POST   /api/alerts/{id}/toggle-active/  → Admin
    """

    policy = ALERT_POLICY
    read_serializer_class = ScamAlertSerializer
    create_serializer_class = ScamAlertWriteSerializer
    update_serializer_class = ScamAlertWriteSerializer
    filter_serializer_class = ScamAlertFilterSerializer


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter(name="alert", type=int, location=OpenApiParameter.QUERY, description="Only comments on this alert."),
        ],
    ),
)
@extend_schema(tags=["Comments"])
class CommentViewSet(ModeratedRecordViewSet):
    """
    GET    /api/comments/?alert={id}        → approved comments (+ own), all for Admins
    POST   /api/comments/                   → comment on an existing alert
    """

    policy = COMMENT_POLICY
    read_serializer_class = CommentSerializer
    create_serializer_class = CommentCreateSerializer
    update_serializer_class = CommentUpdateSerializer
    filter_serializer_class = CommentFilterSerializer

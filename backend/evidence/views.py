"""
Evidence app ViewSets.

Attachments are created through their case (``/api/cases/{id}/documents/``
and ``/api/cases/{id}/evidence/``, see ``cases.views``).  The ViewSets here
list attachments across every visible case and address a single
attachment by id.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.roles import Principal

from .serializers import (
    AttachmentFilterSerializer,
    CaseDocumentCreateSerializer,
    CaseDocumentSerializer,
    EvidenceCreateSerializer,
    EvidenceSerializer,
)
from .services import CaseAttachmentService

_LIST_PARAMETERS = [
    OpenApiParameter(name="case", type=int, location=OpenApiParameter.QUERY, description="Case id."),
    OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, description="Free-text search."),
]


class _AttachmentViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"
    attachment_kind: str = ""
    serializer_class = None
    update_serializer_class = None

    def list(self, request: Request) -> Response:
        filters = AttachmentFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        attachments = CaseAttachmentService.list_all(
            Principal.from_user(request.user),
            self.attachment_kind,
            case_pk=filters.validated_data.get("case"),
            search=filters.validated_data.get("search"),
        )
        return Response(self.serializer_class(attachments, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request: Request, pk: str = None) -> Response:
        attachment = CaseAttachmentService.get(
            Principal.from_user(request.user), self.attachment_kind, int(pk),
        )
        return Response(self.serializer_class(attachment).data, status=status.HTTP_200_OK)

    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = self.update_serializer_class(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        attachment = CaseAttachmentService.update(
            Principal.from_user(request.user),
            self.attachment_kind,
            int(pk),
            dict(serializer.validated_data),
        )
        return Response(self.serializer_class(attachment).data, status=status.HTTP_200_OK)

    def destroy(self, request: Request, pk: str = None) -> Response:
        CaseAttachmentService.remove(
            Principal.from_user(request.user), self.attachment_kind, int(pk),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    tags=["Case Attachments"],
    parameters=_LIST_PARAMETERS,
    request=CaseDocumentCreateSerializer,
    responses={200: OpenApiResponse(response=CaseDocumentSerializer)},
)
class CaseDocumentViewSet(_AttachmentViewSet):
    """
    GET    /api/documents/        → documents of every visible case
    GET    /api/documents/{id}/   → visible if its case is visible
    PATCH  /api/documents/{id}/   → Admin, or case owner while the case is editable
    DELETE /api/documents/{id}/   → Admin, or case owner while the case is pending
    """

    attachment_kind = "documents"
    serializer_class = CaseDocumentSerializer
    update_serializer_class = CaseDocumentCreateSerializer


@extend_schema(
    tags=["Case Attachments"],
    parameters=_LIST_PARAMETERS,
    request=EvidenceCreateSerializer,
    responses={200: OpenApiResponse(response=EvidenceSerializer)},
)
class EvidenceViewSet(_AttachmentViewSet):
    """
    GET    /api/evidence/
    GET    /api/evidence/{id}/
    PATCH  /api/evidence/{id}/
    DELETE /api/evidence/{id}/
    """

    attachment_kind = "evidence"
    serializer_class = EvidenceSerializer
    update_serializer_class = EvidenceCreateSerializer

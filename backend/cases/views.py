"""
Cases app ViewSets.

Architecture: Views are intentionally thin.  ``LegalCaseViewSet`` inherits
CRUD and moderation from ``ModeratedRecordViewSet``; the two extra
actions manage the case's documents and evidence through
``evidence.services.CaseAttachmentService``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core.views import ModeratedRecordViewSet
from evidence.serializers import (
    CaseDocumentCreateSerializer,
    CaseDocumentSerializer,
    EvidenceCreateSerializer,
    EvidenceSerializer,
)
from evidence.services import CaseAttachmentService

from .serializers import (
    LegalCaseCreateSerializer,
    LegalCaseFilterSerializer,
    LegalCaseSerializer,
    LegalCaseUpdateSerializer,
)
from .services import CASE_POLICY


@extend_schema(tags=["Cases"])
class LegalCaseViewSet(ModeratedRecordViewSet):
    """
    Central ViewSet for legal cases.

    GET    /api/cases/                    → visible cases
    POST   /api/cases/                    → Officer (pending) or Admin (approved)
    PATCH  /api/cases/{id}/               → Officer owner while pending/rejected, or Admin
    DELETE /api/cases/{id}/               → removes documents and evidence atomically
    GET    /api/cases/{id}/documents/     → documents of a visible case
    POST   /api/cases/{id}/documents/     → case owner or Admin
    GET    /api/cases/{id}/evidence/
    POST   /api/cases/{id}/evidence/
    """

    policy = CASE_POLICY
    read_serializer_class = LegalCaseSerializer
    create_serializer_class = LegalCaseCreateSerializer
    update_serializer_class = LegalCaseUpdateSerializer
    filter_serializer_class = LegalCaseFilterSerializer

    def _attachments(self, request: Request, pk: str, kind: str, create_serializer, read_serializer) -> Response:
        principal = self.principal(request)
        if request.method == "GET":
            items = CaseAttachmentService.list_for_case(principal, int(pk), kind)
            return Response(read_serializer(items, many=True).data, status=status.HTTP_200_OK)

        serializer = create_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = CaseAttachmentService.add(principal, int(pk), kind, serializer.validated_data)
        return Response(read_serializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="List or add case documents",
        request=CaseDocumentCreateSerializer,
        responses={
            200: OpenApiResponse(response=CaseDocumentSerializer(many=True)),
            201: OpenApiResponse(response=CaseDocumentSerializer),
            403: OpenApiResponse(description="Not the case owner."),
            404: OpenApiResponse(description="Case not found."),
        },
    )
    @action(detail=True, methods=["get", "post"], url_path="documents")
    def documents(self, request: Request, pk: str = None) -> Response:
        return self._attachments(
            request, pk, "documents", CaseDocumentCreateSerializer, CaseDocumentSerializer,
        )

    @extend_schema(
        summary="List or add case evidence",
        request=EvidenceCreateSerializer,
        responses={
            200: OpenApiResponse(response=EvidenceSerializer(many=True)),
            201: OpenApiResponse(response=EvidenceSerializer),
            403: OpenApiResponse(description="Not the case owner."),
            404: OpenApiResponse(description="Case not found."),
        },
    )
    @action(detail=True, methods=["get", "post"], url_path="evidence")
    def evidence(self, request: Request, pk: str = None) -> Response:
        return self._attachments(
            request, pk, "evidence", EvidenceCreateSerializer, EvidenceSerializer,
        )

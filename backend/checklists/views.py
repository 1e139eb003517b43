"""
Checklists app ViewSets.

``ChecklistViewSet`` reuses the owned-record CRUD (no moderation actions)
and adds item management under ``/api/checklists/{id}/items/``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core.views import OwnedRecordViewSet

from .serializers import (
    ChecklistCreateSerializer,
    ChecklistFilterSerializer,
    ChecklistItemSerializer,
    ChecklistItemUpdateSerializer,
    ChecklistSerializer,
    ChecklistUpdateSerializer,
)
from .services import CHECKLIST_POLICY, ChecklistItemService


@extend_schema(tags=["Checklists"])
class ChecklistViewSet(OwnedRecordViewSet):
    """
    GET    /api/checklists/                          → own checklists (Admin: all)
    POST   /api/checklists/
    PATCH  /api/checklists/{id}/
    DELETE /api/checklists/{id}/                     → removes its items too
    GET    /api/checklists/{id}/items/
    POST   /api/checklists/{id}/items/
    PATCH  /api/checklists/{id}/items/{item_id}/
    DELETE /api/checklists/{id}/items/{item_id}/
    """

    policy = CHECKLIST_POLICY
    read_serializer_class = ChecklistSerializer
    create_serializer_class = ChecklistCreateSerializer
    update_serializer_class = ChecklistUpdateSerializer
    filter_serializer_class = ChecklistFilterSerializer

    @extend_schema(
        summary="List or add checklist items",
        request=ChecklistItemSerializer,
        responses={
            200: OpenApiResponse(response=ChecklistItemSerializer(many=True)),
            201: OpenApiResponse(response=ChecklistItemSerializer),
        },
    )
    @action(detail=True, methods=["get", "post"], url_path="items")
    def items(self, request: Request, pk: str = None) -> Response:
        principal = self.principal(request)
        if request.method == "GET":
            items = ChecklistItemService.list_items(principal, int(pk))
            return Response(ChecklistItemSerializer(items, many=True).data, status=status.HTTP_200_OK)

        serializer = ChecklistItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = ChecklistItemService.add_item(principal, int(pk), serializer.validated_data)
        return Response(ChecklistItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update or remove a checklist item",
        request=ChecklistItemUpdateSerializer,
        responses={
            200: OpenApiResponse(response=ChecklistItemSerializer),
            204: OpenApiResponse(description="Item removed."),
        },
    )
    @action(detail=True, methods=["patch", "delete"], url_path=r"items/(?P<item_pk>\d+)")
    def item_detail(self, request: Request, pk: str = None, item_pk: str = None) -> Response:
        principal = self.principal(request)
        if request.method == "DELETE":
            ChecklistItemService.remove_item(principal, int(pk), int(item_pk))
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = ChecklistItemUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        item = ChecklistItemService.update_item(principal, int(pk), int(item_pk), serializer.validated_data)
        return Response(ChecklistItemSerializer(item).data, status=status.HTTP_200_OK)

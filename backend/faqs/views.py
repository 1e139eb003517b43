"""
FAQs app ViewSets.

Reads (``list``, ``retrieve``) and the ``helpful`` vote are open to
anonymous callers; the policy limits them to published entries.  Every
other action requires authentication and, through ``FAQ_POLICY``, an
Admin.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.policies import Operation
from core.views import ModeratedRecordViewSet

from .serializers import FAQFilterSerializer, FAQSerializer, FAQWriteSerializer
from .services import FAQ_POLICY

_PUBLIC_ACTIONS = ("list", "retrieve", "helpful")


@extend_schema(tags=["FAQs"])
class FAQViewSet(ModeratedRecordViewSet):
    """
    GET    /api/faqs/                  → published FAQs (all for Admins)
    GET    /api/faqs/{id}/             → one FAQ; counts a view
    POST   /api/faqs/{id}/helpful/     → count a helpful vote
    POST   /api/faqs/                  → Admin, starts as a draft
    PATCH  /api/faqs/{id}/             → Admin
    DELETE /api/faqs/{id}/             → Admin
    POST   /api/faqs/{id}/approve/     → Admin, publishes the draft
    """

    policy = FAQ_POLICY
    read_serializer_class = FAQSerializer
    create_serializer_class = FAQWriteSerializer
    update_serializer_class = FAQWriteSerializer
    filter_serializer_class = FAQFilterSerializer

    def get_permissions(self):
        if self.action in _PUBLIC_ACTIONS:
            return [AllowAny()]
        return super().get_permissions()

    def retrieve(self, request: Request, pk: str = None) -> Response:
        result = self.execute(request, Operation.INCREMENT, pk, payload={"field": "views"})
        return self.render(request, result)

    @extend_schema(
        summary="Mark helpful",
        request=None,
        responses={200: OpenApiResponse(response=FAQSerializer, description="FAQ with the updated vote count.")},
    )
    @action(detail=True, methods=["post"], url_path="helpful")
    def helpful(self, request: Request, pk: str = None) -> Response:
        result = self.execute(request, Operation.INCREMENT, pk, payload={"field": "helpful"})
        return self.render(request, result)

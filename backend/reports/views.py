"""
Reports app ViewSets.

``ScamReportViewSet`` is a ``ModeratedRecordViewSet`` bound to
``REPORT_POLICY``; it adds no actions of its own.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema

from core.views import ModeratedRecordViewSet

from .serializers import (
    ScamReportFilterSerializer,
    ScamReportSerializer,
    ScamReportWriteSerializer,
)
from .services import REPORT_POLICY


@extend_schema(tags=["Reports"])
class ScamReportViewSet(ModeratedRecordViewSet):
    """
    GET    /api/reports/                 → own reports (User) or all (Officer, Admin)
    POST   /api/reports/                 → file a report (pending)
    GET    /api/reports/{id}/
    PATCH  /api/reports/{id}/            → owner or Admin; status is kept
    DELETE /api/reports/{id}/            → owner while pending, or Admin
    POST   /api/reports/{id}/approve/    → Admin
    POST   /api/reports/{id}/reject/     → Admin, notes required
    """

    policy = REPORT_POLICY
    read_serializer_class = ScamReportSerializer
    create_serializer_class = ScamReportWriteSerializer
    update_serializer_class = ScamReportWriteSerializer
    filter_serializer_class = ScamReportFilterSerializer

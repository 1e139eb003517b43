"""
Evidence app URL configuration.

  /api/documents/         → CaseDocumentViewSet (list)
  /api/documents/{id}/    → CaseDocumentViewSet (retrieve / partial_update / destroy)
  /api/evidence/          → EvidenceViewSet (list)
  /api/evidence/{id}/     → EvidenceViewSet (retrieve / partial_update / destroy)
"""

from rest_framework.routers import DefaultRouter

from .views import CaseDocumentViewSet, EvidenceViewSet

router = DefaultRouter()
router.register(
    prefix=r"documents",
    viewset=CaseDocumentViewSet,
    basename="case-document",
)
router.register(
    prefix=r"evidence",
    viewset=EvidenceViewSet,
    basename="evidence",
)

urlpatterns = router.urls

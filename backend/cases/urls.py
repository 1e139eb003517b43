"""
Cases app URL configuration.

All routes are registered under the ``/api/cases/`` prefix.

Route Hierarchy
---------------
  /api/cases/                             → list / create
  /api/cases/{id}/                        → retrieve / partial_update / destroy

  ── Moderation @actions (Admin) ─────────────────────────────────
  POST /api/cases/{id}/approve/
  POST /api/cases/{id}/reject/
  POST /api/cases/{id}/toggle-active/
  GET  /api/cases/{id}/moderation/

  ── Attachment @actions ─────────────────────────────────────────
  GET|POST /api/cases/{id}/documents/
  GET|POST /api/cases/{id}/evidence/
"""

from rest_framework.routers import DefaultRouter

from .views import LegalCaseViewSet

router = DefaultRouter()
router.register(
    prefix=r"cases",
    viewset=LegalCaseViewSet,
    basename="case",
)

urlpatterns = router.urls

"""
Checklists app URL configuration.

All routes are registered under the ``/api/checklists/`` prefix.
"""

from rest_framework.routers import DefaultRouter

from .views import ChecklistViewSet

router = DefaultRouter()
router.register(
    prefix=r"checklists",
    viewset=ChecklistViewSet,
    basename="checklist",
)

urlpatterns = router.urls

"""
Reports app URL configuration.

All routes are registered under the ``/api/reports/`` prefix.
"""

from rest_framework.routers import DefaultRouter

from .views import ScamReportViewSet

router = DefaultRouter()
router.register(
    prefix=r"reports",
    viewset=ScamReportViewSet,
    basename="report",
)

urlpatterns = router.urls

"""
Alerts app URL configuration.

  /api/alerts/      → ScamAlertViewSet
  /api/comments/    → CommentViewSet
"""

from rest_framework.routers import DefaultRouter

from .views import CommentViewSet, ScamAlertViewSet

router = DefaultRouter()
router.register(
    prefix=r"alerts",
    viewset=ScamAlertViewSet,
    basename="alert",
)
router.register(
    prefix=r"comments",
    viewset=CommentViewSet,
    basename="comment",
)

urlpatterns = router.urls

"""
FAQs app URL configuration.

All routes are registered under the ``/api/faqs/`` prefix.
"""

from rest_framework.routers import DefaultRouter

from .views import FAQViewSet

router = DefaultRouter()
router.register(
    prefix=r"faqs",
    viewset=FAQViewSet,
    basename="faq",
)

urlpatterns = router.urls

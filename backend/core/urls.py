"""
Core app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET  /api/core/stats/                      — Per-kind status counts (role-aware).
GET  /api/core/constants/                  — System choice enumerations for frontend dropdowns.
GET  /api/core/notifications/              — List notifications for the authenticated user.
POST /api/core/notifications/{id}/read/    — Mark a single notification as read.
POST /api/core/notifications/read-all/     — Mark every notification as read.
DELETE /api/core/notifications/{id}/        — Delete an own notification (Admin: any).
PATCH  /api/core/notifications/{id}/        — Edit a notification (Admin).
GET  /api/core/notifications/all/           — Every notification, filterable (Admin).
POST /api/core/notifications/announce/      — Send an announcement to an audience (Admin).
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "core"

# ── Router for ViewSet-based endpoints ───────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"notifications",
    viewset=views.NotificationViewSet,
    basename="notification",
)

urlpatterns = [
    # ── Moderation statistics ────────────────────────────────────────
    path(
        "stats/",
        views.ModerationStatsView.as_view(),
        name="moderation-stats",
    ),

    # ── System Constants / Enums ─────────────────────────────────────
    path(
        "constants/",
        views.SystemConstantsView.as_view(),
        name="system-constants",
    ),

    # ── Notifications (router-generated URLs) ────────────────────────
    path("", include(router.urls)),
]

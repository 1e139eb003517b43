"""
Accounts app URL configuration.

All routes are namespaced under ``accounts`` and included in the
project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
Current User Profile ("Me")
    GET    /me/                              → MeView  (retrieve)
    PATCH  /me/                              → MeView  (partial update)

User Management (Admin)
    GET    /users/                           → UserViewSet.list
    GET    /users/{id}/                      → UserViewSet.retrieve
    PATCH  /users/{id}/assign-role/          → UserViewSet.assign_role
    GET    /users/role-statistics/           → UserViewSet.role_statistics

Role Change Requests
    GET    /role-requests/                   → list
    POST   /role-requests/                   → create
    GET    /role-requests/latest/            → latest
    GET    /role-requests/{id}/              → retrieve
    PATCH  /role-requests/{id}/              → partial_update
    DELETE /role-requests/{id}/              → destroy
    POST   /role-requests/{id}/approve/      → approve (Admin)
    POST   /role-requests/{id}/reject/       → reject (Admin)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MeView, RoleChangeRequestViewSet, UserViewSet

app_name = "accounts"

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")
router.register(r"role-requests", RoleChangeRequestViewSet, basename="role-request")

urlpatterns = [
    # ── Current User (Me) ───────────────────────────────────────────
    path("me/", MeView.as_view(), name="me"),

    # ── Router-registered viewsets (users/, role-requests/) ──────────
    path("", include(router.urls)),
]

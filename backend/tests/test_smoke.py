"""
Smoke tests — verify that Django boots, URL routing resolves, the
OpenAPI schema renders and every kind registered a policy.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse
from django.utils.module_loading import autodiscover_modules


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path_prefix)
        ("report-list",                    "/api/reports/"),
        ("alert-list",                     "/api/alerts/"),
        ("comment-list",                   "/api/comments/"),
        ("case-list",                      "/api/cases/"),
        ("checklist-list",                 "/api/checklists/"),
        ("faq-list",                       "/api/faqs/"),
        ("case-document-list",             "/api/documents/"),
        ("evidence-list",                  "/api/evidence/"),
        ("accounts:role-request-list",     "/api/accounts/role-requests/"),
        ("accounts:role-request-latest",   "/api/accounts/role-requests/latest/"),
        ("accounts:me",                    "/api/accounts/me/"),
        ("core:moderation-stats",          "/api/core/stats/"),
        ("core:system-constants",          "/api/core/constants/"),
        ("core:notification-list",         "/api/core/notifications/"),
        ("core:notification-list-all",     "/api/core/notifications/all/"),
    ]

    @pytest.mark.parametrize("url_name,expected_prefix", EXPECTED_URLS)
    def test_url_resolves(self, url_name: str, expected_prefix: str):
        url = reverse(url_name)
        assert url.startswith(expected_prefix), (
            f"{url_name} resolved to {url}, expected prefix {expected_prefix}"
        )

    @pytest.mark.parametrize("url_name,expected_prefix", EXPECTED_URLS)
    def test_url_resolve_matches_view(self, url_name: str, expected_prefix: str):
        match = resolve(expected_prefix)
        assert match.func is not None


# ════════════════════════════════════════════════════════════════════
#  Policy registry
# ════════════════════════════════════════════════════════════════════

def test_every_kind_registers_a_policy():
    from core.domain.policies import registered_policies

    autodiscover_modules("services")
    names = {policy.kind.name for policy in registered_policies()}
    assert names == {"report", "alert", "comment", "case", "role_change", "checklist", "faq"}


# ════════════════════════════════════════════════════════════════════
#  OpenAPI schema
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
def test_schema_renders(api_client):
    response = api_client.get("/api/schema/")
    assert response.status_code == 200


# ════════════════════════════════════════════════════════════════════
#  End-to-end flow with the shared fixtures
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
def test_report_lifecycle(api_client, auth_header):
    user_header = auth_header(username="smoke_user")
    admin_header = auth_header(username="smoke_admin", role="admin")

    api_client.credentials(HTTP_AUTHORIZATION=user_header["Authorization"])
    created = api_client.post(
        "/api/reports/",
        {
            "title": "Lottery win call",
            "description": "Asked to pay a release fee.",
            "scammer_info": "+4400000000",
            "platform": "Phone",
        },
        format="json",
    )
    assert created.status_code == 201
    report_id = created.data["id"]

    api_client.credentials(HTTP_AUTHORIZATION=admin_header["Authorization"])
    rejected = api_client.post(f"/api/reports/{report_id}/reject/", {"notes": "Need the number"}, format="json")
    assert rejected.data["status"] == "rejected"
    approved = api_client.post(f"/api/reports/{report_id}/approve/", {}, format="json")
    assert approved.data["status"] == "approved"
    assert approved.data["moderator_notes"] is None

    api_client.credentials(HTTP_AUTHORIZATION=user_header["Authorization"])
    inbox = api_client.get("/api/core/notifications/")
    assert sorted(n["title"] for n in inbox.data) == ["Report Approved", "Report Rejected"]

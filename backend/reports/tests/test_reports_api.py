"""
Integration tests — scam reports API.

Real endpoint calls through APIClient with Bearer JWT headers.
"""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.constants import RecordStatus, Role
from reports.models import ScamReport

PAYLOAD = {
    "title": "Fake job offer",
    "description": "Asked for a training fee before starting.",
    "scammer_info": "recruiter@example.com",
    "platform": "Email",
}


class TestScamReportsApi(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="rep_admin", password="P@ss12345", email="rep_admin@example.com", role=Role.ADMIN,
        )
        cls.officer = User.objects.create_user(
            username="rep_officer", password="P@ss12345", email="rep_officer@example.com", role=Role.OFFICER,
        )
        cls.user = User.objects.create_user(
            username="rep_user", password="P@ss12345", email="rep_user@example.com",
        )
        cls.other = User.objects.create_user(
            username="rep_other", password="P@ss12345", email="rep_other@example.com",
        )

    def setUp(self):
        self.client = APIClient()
        self.list_url = reverse("report-list")

    def login(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def _create_as(self, user, **overrides):
        self.login(user)
        response = self.client.post(self.list_url, {**PAYLOAD, **overrides}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    # ── Auth ─────────────────────────────────────────────────────────

    def test_anonymous_list_is_401(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    # ── Create ───────────────────────────────────────────────────────

    def test_user_creates_pending_report(self):
        data = self._create_as(self.user)
        self.assertEqual(data["status"], RecordStatus.PENDING)
        self.assertEqual(data["owner"], self.user.pk)
        self.assertTrue(data["is_active"])
        self.assertIsNone(data["moderator"])

    def test_status_in_payload_is_ignored(self):
        data = self._create_as(self.user, status="approved")
        self.assertEqual(data["status"], RecordStatus.PENDING)

    def test_title_over_limit_is_400(self):
        self.login(self.user)
        response = self.client.post(self.list_url, {**PAYLOAD, "title": "x" * 201}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    # ── List / visibility ────────────────────────────────────────────

    def test_user_lists_only_own_reports(self):
        self._create_as(self.user)
        self._create_as(self.other)
        self.login(self.user)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r["owner"] for r in response.data], [self.user.pk])

    def test_officer_lists_every_report(self):
        self._create_as(self.user)
        self._create_as(self.other)
        self.login(self.officer)
        response = self.client.get(self.list_url)
        self.assertEqual(len(response.data), 2)

    def test_filter_and_search(self):
        self._create_as(self.user)
        self._create_as(self.user, title="Crypto doubling", platform="Telegram")
        self.login(self.user)
        response = self.client.get(self.list_url, {"platform": "Telegram"})
        self.assertEqual([r["title"] for r in response.data], ["Crypto doubling"])
        response = self.client.get(self.list_url, {"search": "job offer", "status": "all"})
        self.assertEqual([r["title"] for r in response.data], ["Fake job offer"])

    def test_retrieve_someone_elses_report_is_403(self):
        report = self._create_as(self.other)
        self.login(self.user)
        response = self.client.get(reverse("report-detail", kwargs={"pk": report["id"]}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "forbidden")

    def test_retrieve_missing_report_is_404(self):
        self.login(self.admin)
        response = self.client.get(reverse("report-detail", kwargs={"pk": 999999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # ── Moderation ───────────────────────────────────────────────────

    def test_reject_requires_notes(self):
        report = self._create_as(self.user)
        self.login(self.admin)
        url = reverse("report-reject", kwargs={"pk": report["id"]})
        response = self.client.post(url, {"notes": "   "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ScamReport.objects.get(pk=report["id"]).status, RecordStatus.PENDING)

    def test_reject_then_approve(self):
        report = self._create_as(self.user)
        self.login(self.admin)
        response = self.client.post(
            reverse("report-reject", kwargs={"pk": report["id"]}),
            {"notes": "Please attach a screenshot."},
            format="json",
        )
        self.assertEqual(response.data["status"], RecordStatus.REJECTED)
        self.assertEqual(response.data["moderator_notes"], "Please attach a screenshot.")

        response = self.client.post(reverse("report-approve", kwargs={"pk": report["id"]}), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], RecordStatus.APPROVED)
        self.assertIsNone(response.data["moderator_notes"])
        self.assertEqual(response.data["moderator"], self.admin.pk)

    def test_officer_cannot_approve(self):
        report = self._create_as(self.user)
        self.login(self.officer)
        response = self.client.post(reverse("report-approve", kwargs={"pk": report["id"]}), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_moderation_ledger_hidden_from_non_owner(self):
        report = self._create_as(self.user)
        self.login(self.admin)
        self.client.post(
            reverse("report-reject", kwargs={"pk": report["id"]}),
            {"notes": "Spam."},
            format="json",
        )
        self.login(self.officer)
        response = self.client.get(reverse("report-detail", kwargs={"pk": report["id"]}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["moderator_notes"])
        response = self.client.get(reverse("report-moderation", kwargs={"pk": report["id"]}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.login(self.user)
        response = self.client.get(reverse("report-moderation", kwargs={"pk": report["id"]}))
        self.assertEqual(response.data["moderator_notes"], "Spam.")

    def test_toggle_active(self):
        report = self._create_as(self.user)
        self.login(self.admin)
        url = reverse("report-toggle-active", kwargs={"pk": report["id"]})
        response = self.client.post(url, {}, format="json")
        self.assertFalse(response.data["is_active"])
        response = self.client.post(url, {"is_active": True}, format="json")
        self.assertTrue(response.data["is_active"])

    # ── Edit / delete ────────────────────────────────────────────────

    def test_owner_edits_approved_report_without_status_change(self):
        report = self._create_as(self.user)
        ScamReport.objects.filter(pk=report["id"]).update(status=RecordStatus.APPROVED)
        self.login(self.user)
        response = self.client.patch(
            reverse("report-detail", kwargs={"pk": report["id"]}),
            {"platform": "WhatsApp"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["platform"], "WhatsApp")
        self.assertEqual(response.data["status"], RecordStatus.APPROVED)

    def test_owner_deletes_pending_but_not_approved(self):
        pending = self._create_as(self.user)
        approved = self._create_as(self.user)
        ScamReport.objects.filter(pk=approved["id"]).update(status=RecordStatus.APPROVED)
        self.login(self.user)

        response = self.client.delete(reverse("report-detail", kwargs={"pk": pending["id"]}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.delete(reverse("report-detail", kwargs={"pk": approved["id"]}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(ScamReport.objects.filter(pk=approved["id"]).exists())

"""
Integration tests for the core endpoints.

Scope in this file:
- GET  /api/core/constants/
- GET  /api/core/stats/
- GET  /api/core/notifications/ (+ read, read-all)
"""

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.constants import RecordStatus, Role
from core.models import Notification
from reports.models import ScamReport


def _report(owner, status_=RecordStatus.PENDING, **extra):
    return ScamReport.objects.create(
        owner=owner,
        title="Fake shop",
        description="Paid, nothing arrived.",
        scammer_info="shop.example",
        platform="Web",
        status=status_,
        moderator_notes="rejected" if status_ == RecordStatus.REJECTED else None,
        **extra,
    )


class CoreEndpointTestBase(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="core_admin", password="P@ss12345", email="core_admin@example.com", role=Role.ADMIN,
        )
        cls.officer = User.objects.create_user(
            username="core_officer", password="P@ss12345", email="core_officer@example.com", role=Role.OFFICER,
        )
        cls.user = User.objects.create_user(
            username="core_user", password="P@ss12345", email="core_user@example.com",
        )
        cls.other = User.objects.create_user(
            username="core_other", password="P@ss12345", email="core_other@example.com",
        )

    def setUp(self):
        self.client = APIClient()

    def login(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")


class TestSystemConstants(CoreEndpointTestBase):
    def test_constants_are_public(self):
        response = self.client.get(reverse("core:system-constants"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        roles = {item["value"] for item in response.data["roles"]}
        self.assertEqual(roles, {"admin", "officer", "user"})
        statuses = [item["value"] for item in response.data["record_statuses"]]
        self.assertEqual(statuses, ["pending", "approved", "rejected", "closed"])
        self.assertEqual(response.data["limits"]["title_max_length"], 200)
        self.assertEqual(response.data["limits"]["description_max_length"], 5000)
        self.assertTrue(response.data["alert_severities"])
        self.assertTrue(response.data["case_priorities"])


class TestModerationStats(CoreEndpointTestBase):
    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        _report(cls.user)
        _report(cls.user, RecordStatus.APPROVED)
        _report(cls.other, RecordStatus.REJECTED)

    def test_requires_authentication(self):
        response = self.client.get(reverse("core:moderation-stats"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_admin_counts_everything(self):
        self.login(self.admin)
        response = self.client.get(reverse("core:moderation-stats"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        reports = response.data["stats"]["report"]
        self.assertEqual(reports["pending"], 1)
        self.assertEqual(reports["approved"], 1)
        self.assertEqual(reports["rejected"], 1)
        self.assertEqual(reports["closed"], 0)
        self.assertEqual(reports["total"], 3)
        self.assertIn("alert", response.data["stats"])
        self.assertIn("role_change", response.data["stats"])
        self.assertNotIn("checklist", response.data["stats"])

    def test_user_counts_only_visible_records(self):
        self.login(self.user)
        response = self.client.get(reverse("core:moderation-stats"))
        reports = response.data["stats"]["report"]
        self.assertEqual(reports["total"], 2)
        self.assertEqual(reports["rejected"], 0)


class TestNotifications(CoreEndpointTestBase):
    def test_rejection_notifies_owner(self):
        report = _report(self.user)
        self.login(self.admin)
        response = self.client.post(
            reverse("report-reject", kwargs={"pk": report.pk}),
            {"notes": "Duplicate of an earlier report."},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.login(self.user)
        response = self.client.get(reverse("core:notification-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["title"], "Report Rejected")
        self.assertEqual(response.data[0]["object_id"], report.pk)

    def test_mark_as_read_and_read_all(self):
        first = Notification.objects.create(recipient=self.user, title="a", message="a")
        Notification.objects.create(recipient=self.user, title="b", message="b")
        Notification.objects.create(recipient=self.other, title="c", message="c")
        self.login(self.user)

        response = self.client.post(reverse("core:notification-mark-as-read", kwargs={"pk": first.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_read"])

        response = self.client.get(reverse("core:notification-list"), {"unread": "true"})
        self.assertEqual(len(response.data), 1)

        response = self.client.post(reverse("core:notification-mark-all-as-read"))
        self.assertEqual(response.data["updated"], 1)

    def test_cannot_read_someone_elses_notification(self):
        foreign = Notification.objects.create(recipient=self.other, title="c", message="c")
        self.login(self.user)
        response = self.client.post(reverse("core:notification-mark-as-read", kwargs={"pk": foreign.pk}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_search_own_notifications(self):
        Notification.objects.create(recipient=self.user, title="Case update", message="Evidence added.")
        Notification.objects.create(recipient=self.user, title="Report approved", message="Thanks.")
        self.login(self.user)
        response = self.client.get(reverse("core:notification-list"), {"search": "evidence"})
        self.assertEqual([n["title"] for n in response.data], ["Case update"])

    def test_delete_own_notification(self):
        own = Notification.objects.create(recipient=self.user, title="a", message="a")
        foreign = Notification.objects.create(recipient=self.other, title="c", message="c")
        self.login(self.user)

        response = self.client.delete(reverse("core:notification-detail", kwargs={"pk": foreign.pk}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Notification.objects.filter(pk=foreign.pk).exists())

        response = self.client.delete(reverse("core:notification-detail", kwargs={"pk": own.pk}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Notification.objects.filter(pk=own.pk).exists())


class TestNotificationAdmin(CoreEndpointTestBase):
    def test_announce_to_officers(self):
        self.login(self.admin)
        response = self.client.post(
            reverse("core:notification-announce"),
            {"title": "Shift change", "message": "Night rota starts Monday.", "audience": Role.OFFICER},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["sent"], 1)
        notification = Notification.objects.get(recipient=self.officer)
        self.assertEqual(notification.title, "Shift change")
        self.assertFalse(Notification.objects.filter(recipient=self.user).exists())

    def test_announce_to_everyone(self):
        self.login(self.admin)
        response = self.client.post(
            reverse("core:notification-announce"),
            {"title": "Maintenance", "message": "Back at 02:00."},
            format="json",
        )
        self.assertEqual(response.data["sent"], 4)

    def test_announce_to_single_user(self):
        self.login(self.admin)
        response = self.client.post(
            reverse("core:notification-announce"),
            {"title": "Hello", "message": "Please verify your email.", "recipient": self.other.pk},
            format="json",
        )
        self.assertEqual(response.data["sent"], 1)
        self.assertEqual(Notification.objects.get().recipient, self.other)

    def test_announce_to_missing_user_is_404(self):
        self.login(self.admin)
        response = self.client.post(
            reverse("core:notification-announce"),
            {"title": "Hello", "message": "Anyone?", "recipient": 99999},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_admin_cannot_manage(self):
        notification = Notification.objects.create(recipient=self.user, title="a", message="a")
        self.login(self.officer)
        response = self.client.post(
            reverse("core:notification-announce"),
            {"title": "t", "message": "m"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get(reverse("core:notification-list-all"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.patch(
            reverse("core:notification-detail", kwargs={"pk": notification.pk}),
            {"title": "Changed"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Notification.objects.filter(recipient=self.officer).exists())

    def test_admin_lists_updates_and_deletes(self):
        first = Notification.objects.create(recipient=self.user, title="Welcome", message="Hi")
        Notification.objects.create(recipient=self.other, title="Reminder", message="Hi", is_read=True)
        self.login(self.admin)

        response = self.client.get(reverse("core:notification-list-all"), {"is_read": "false"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([n["id"] for n in response.data], [first.pk])
        self.assertEqual(response.data[0]["recipient"], self.user.pk)

        response = self.client.get(reverse("core:notification-list-all"), {"recipient": self.other.pk})
        self.assertEqual([n["title"] for n in response.data], ["Reminder"])

        url = reverse("core:notification-detail", kwargs={"pk": first.pk})
        response = self.client.patch(url, {"title": "Welcome aboard", "is_read": True}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        first.refresh_from_db()
        self.assertEqual(first.title, "Welcome aboard")
        self.assertTrue(first.is_read)

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Notification.objects.filter(pk=first.pk).exists())

    def test_empty_update_is_rejected(self):
        notification = Notification.objects.create(recipient=self.user, title="a", message="a")
        self.login(self.admin)
        response = self.client.patch(
            reverse("core:notification-detail", kwargs={"pk": notification.pk}), {}, format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

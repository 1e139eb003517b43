"""
Integration tests — current user profile and Admin user management.
"""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.constants import Role


class TestMeEndpoint(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="me_user", password="P@ss12345", email="me_user@example.com",
        )
        cls.taken = User.objects.create_user(
            username="me_taken", password="P@ss12345", email="taken@example.com",
        )
        cls.superuser = User.objects.create_superuser(
            username="root", password="P@ss12345", email="root@example.com",
        )

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("accounts:me")

    def login(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def test_requires_authentication(self):
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_get_profile(self):
        self.login(self.user)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["username"], "me_user")
        self.assertEqual(response.data["role"], Role.USER)
        self.assertEqual(response.data["effective_role"], Role.USER)

    def test_superuser_effective_role_is_admin(self):
        self.login(self.superuser)
        response = self.client.get(self.url)
        self.assertEqual(response.data["effective_role"], Role.ADMIN)

    def test_patch_cannot_change_role(self):
        self.login(self.user)
        response = self.client.patch(self.url, {"first_name": "Sam", "role": "admin"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["first_name"], "Sam")
        self.assertEqual(response.data["role"], Role.USER)

    def test_patch_duplicate_email_is_400(self):
        self.login(self.user)
        response = self.client.patch(self.url, {"email": "taken@example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TestUserManagement(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="um_admin", password="P@ss12345", email="um_admin@example.com", role=Role.ADMIN,
        )
        cls.officer = User.objects.create_user(
            username="um_officer", password="P@ss12345", email="um_officer@example.com", role=Role.OFFICER,
        )
        cls.user = User.objects.create_user(
            username="um_user", password="P@ss12345", email="um_user@example.com",
        )

    def setUp(self):
        self.client = APIClient()

    def login(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def test_non_admin_cannot_list_users(self):
        self.login(self.officer)
        response = self.client.get(reverse("accounts:user-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_lists_and_filters_users(self):
        self.login(self.admin)
        response = self.client.get(reverse("accounts:user-list"), {"role": "officer"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u["username"] for u in response.data], ["um_officer"])

    def test_assign_role(self):
        self.login(self.admin)
        response = self.client.patch(
            reverse("accounts:user-assign-role", kwargs={"pk": self.user.pk}),
            {"role": "officer"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, Role.OFFICER)

    def test_admin_cannot_demote_self(self):
        self.login(self.admin)
        response = self.client.patch(
            reverse("accounts:user-assign-role", kwargs={"pk": self.admin.pk}),
            {"role": "user"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_assign_role_to_missing_user_is_404(self):
        self.login(self.admin)
        response = self.client.patch(
            reverse("accounts:user-assign-role", kwargs={"pk": 999999}),
            {"role": "officer"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_role_statistics(self):
        self.login(self.admin)
        response = self.client.get(reverse("accounts:user-role-statistics"))
        self.assertEqual(response.data, {"admin": 1, "officer": 1, "user": 1})

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from account.models import Role, User


class AccountApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        warden_role, _ = Role.objects.get_or_create(name=Role.WARDEN)
        self.user = User.objects.create_user(
            email="warden@example.com", name="Warden", password="Hostel#2024pass", role=warden_role
        )

    def test_register_returns_tokens(self):
        response = self.client.post(reverse("register"), {
            "email": "new.admin@example.com",
            "name": "New Admin",
            "password": "Hostel#2024pass",
            "password2": "Hostel#2024pass",
            "role": Role.ADMIN,
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertIn("access", response.data["token"])
        self.assertEqual(response.data["user"]["role"], Role.ADMIN)

    def test_register_password_mismatch(self):
        response = self.client.post(reverse("register"), {
            "email": "someone@example.com",
            "name": "Someone",
            "password": "Hostel#2024pass",
            "password2": "Hostel#2024other",
        }, format="json")

        self.assertEqual(response.status_code, 400)

    def test_login(self):
        response = self.client.post(reverse("login"), {
            "email": "warden@example.com",
            "password": "Hostel#2024pass",
        }, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["role"], Role.WARDEN)

        access = response.data["token"]["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        response = self.client.get(reverse("profile"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["email"], "warden@example.com")

    def test_login_with_wrong_password(self):
        response = self.client.post(reverse("login"), {
            "email": "warden@example.com",
            "password": "wrong-password",
        }, format="json")

        self.assertEqual(response.status_code, 401)

    def test_change_password(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse("change-password"), {
            "current_password": "Hostel#2024pass",
            "new_password": "Hostel#2025pass",
        }, format="json")

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Hostel#2025pass"))

    def test_change_password_requires_current_password(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse("change-password"), {
            "current_password": "not-it",
            "new_password": "Hostel#2025pass",
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("current_password", response.data)

    def test_roles_are_seeded(self):
        self.assertEqual(
            set(Role.objects.values_list("name", flat=True)),
            {Role.ADMIN, Role.WARDEN},
        )

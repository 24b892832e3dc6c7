from datetime import date
from unittest.mock import MagicMock, patch

import requests
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from account.models import Role, User
from hostel.models import Bed, Building, Floor, Room, Student
from hostel.services import send_sms
from payments.constants import REGISTRATION


@override_settings(REGISTRATION_FEE=0)
class HostelApiTestCase(TestCase):
    def setUp(self):
        admin_role, _ = Role.objects.get_or_create(name=Role.ADMIN)
        warden_role, _ = Role.objects.get_or_create(name=Role.WARDEN)
        self.admin = User.objects.create_user(
            email="admin@example.com", name="Admin", password="adminpass", role=admin_role
        )
        self.warden = User.objects.create_user(
            email="warden@example.com", name="Warden", password="wardenpass", role=warden_role
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

        self.building = Building.objects.create(name="Block A")
        self.floor = Floor.objects.create(building=self.building, floor_number=1)
        self.room = Room.objects.create(floor=self.floor, room_number="101", capacity=2, base_rent=8000)
        self.bed = Bed.objects.create(room=self.room, bed_number="1")

    def admit(self, **overrides):
        data = {
            "full_name": "Ram Thapa",
            "phone": "9800000001",
            "bed": self.bed.id,
            "admission_date": "2024-01-01",
            "security_deposit": 5000,
        }
        data.update(overrides)
        return self.client.post(reverse("student-list"), data, format="json")


class InventoryTestCase(HostelApiTestCase):
    def test_only_admin_creates_buildings(self):
        self.client.force_authenticate(user=self.warden)
        response = self.client.post(reverse("building-list"), {"name": "Block B"}, format="json")
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse("building-list"), {"name": "Block B"}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["floor_count"], 0)

    def test_duplicate_floor(self):
        response = self.client.post(
            reverse("floor-list"), {"building": self.building.id, "floor_number": 1}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_bed_rent_falls_back_to_room(self):
        response = self.client.get(reverse("bed-list"), {"room_id": self.room.id})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]["effective_rent"], 8000)
        self.assertEqual(response.data[0]["label"], "Block A - 101 - Bed 1")

    def test_room_capacity(self):
        Bed.objects.create(room=self.room, bed_number="2")

        response = self.client.post(
            reverse("bed-list"), {"room": self.room.id, "bed_number": "3"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_invalid_filter(self):
        response = self.client.get(reverse("room-list"), {"floor_id": "first"})
        self.assertEqual(response.status_code, 400)


class AdmissionTestCase(HostelApiTestCase):
    def test_admission_uses_bed_rent_and_occupies_bed(self):
        response = self.admit()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["monthly_rent"], 8000)
        self.assertIsNone(response.data["last_payment_date"])
        self.bed.refresh_from_db()
        self.assertTrue(self.bed.is_occupied)

        response = self.client.get(reverse("vacant-beds"))
        self.assertEqual(response.data, [])

    def test_full_initial_payment_settles_first_cycle(self):
        response = self.admit(initial_payment=13000, payment_method="ESEWA")

        self.assertEqual(response.status_code, 201)
        student = Student.objects.get(id=response.data["id"])
        self.assertEqual(student.last_payment_date, date(2024, 1, 31))

        payment = student.payments.get()
        self.assertEqual(payment.payment_type, REGISTRATION)
        self.assertEqual(payment.method, "ESEWA")
        self.assertEqual(payment.recorded_by, self.admin)

    def test_partial_initial_payment(self):
        response = self.admit(initial_payment=5000)

        student = Student.objects.get(id=response.data["id"])
        self.assertIsNone(student.last_payment_date)
        self.assertEqual(student.payments.get().amount, 5000)

    def test_initial_payment_above_admission_balance(self):
        response = self.admit(initial_payment=13001)

        self.assertEqual(response.status_code, 400)
        self.assertIn("initial_payment", response.data)
        self.assertFalse(Student.objects.exists())

    def test_occupied_bed(self):
        self.bed.is_occupied = True
        self.bed.save()

        response = self.admit()
        self.assertEqual(response.status_code, 400)
        self.assertIn("bed", response.data)

    def test_rent_required_without_bed(self):
        response = self.admit(bed=None)

        self.assertEqual(response.status_code, 400)
        self.assertIn("monthly_rent", response.data)

    def test_checkout_frees_bed(self):
        student_id = self.admit().data["id"]

        url = reverse("student-checkout", kwargs={"student_id": student_id})
        response = self.client.post(url, {"checkout_date": "2024-03-15"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["student"]["status"], Student.CHECKED_OUT)
        self.bed.refresh_from_db()
        self.assertFalse(self.bed.is_occupied)

        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_student_search_and_status_filter(self):
        self.admit()
        Student.objects.create(full_name="Sita Rai", phone="9811111111", monthly_rent=7000)

        response = self.client.get(reverse("student-list"), {"search": "sita"})
        self.assertEqual(response.data["count"], 1)

        response = self.client.get(reverse("student-list"), {"status": "unknown"})
        self.assertEqual(response.status_code, 400)

    def test_student_not_found(self):
        response = self.client.get(reverse("student-detail", kwargs={"student_id": 9999}))
        self.assertEqual(response.status_code, 404)


class SendSmsTestCase(TestCase):
    @override_settings(SMS_API_KEY="")
    def test_missing_api_key(self):
        with self.assertRaises(ValueError):
            send_sms("9800000001", "hello")

    @override_settings(SMS_API_KEY="secret", SMS_API_URL="https://sms.example.com/send", SMS_SENDER_ID="HOSTEL")
    @patch("hostel.services.requests.post")
    def test_posts_to_gateway(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(return_value={"request_id": "r-1"}))

        self.assertEqual(send_sms("9800000001", "hello"), "r-1")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://sms.example.com/send")
        self.assertEqual(kwargs["headers"]["authorization"], "secret")
        self.assertEqual(kwargs["json"]["numbers"], "9800000001")
        self.assertEqual(kwargs["json"]["sender_id"], "HOSTEL")

    @override_settings(SMS_API_KEY="secret")
    @patch("hostel.services.requests.post")
    def test_gateway_errors_propagate(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("slow")

        with self.assertRaises(requests.exceptions.Timeout):
            send_sms("9800000001", "hello")

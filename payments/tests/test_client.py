from dataclasses import replace
from datetime import date
from unittest.mock import MagicMock

from django.test import SimpleTestCase

from payments.allocation import allocate_completion, allocate_payment
from payments.client import ApiError, ApiSession, BillingApiClient, SessionExpired, error_message
from payments.constants import EXTRA, MONTHLY


def fake_response(status_code=200, data=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if data is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = data
    return response


class ApiSessionTestCase(SimpleTestCase):
    def setUp(self):
        self.http = MagicMock()
        self.session = ApiSession("http://hostel.local/api/v1/", token="abc123", http=self.http)

    def test_sends_bearer_token(self):
        self.http.request.return_value = fake_response(data={"ok": True})

        self.assertEqual(self.session.request("GET", "/payments"), {"ok": True})
        args, kwargs = self.http.request.call_args
        self.assertEqual(args, ("GET", "http://hostel.local/api/v1/payments"))
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer abc123")

    def test_unauthorized_clears_token(self):
        self.http.request.return_value = fake_response(401, {"detail": "Token is invalid or expired"})

        with self.assertRaises(SessionExpired):
            self.session.request("GET", "/payments")
        self.assertIsNone(self.session.token)
        self.assertNotIn("Authorization", self.session.headers())

    def test_error_payload_is_surfaced(self):
        self.http.request.return_value = fake_response(400, {
            "error": "Please enter a reason/description for this payment",
            "code": "missing_reason",
        })

        with self.assertRaises(ApiError) as ctx:
            self.session.request("POST", "/students/1/payments/extra", json={})
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, "Please enter a reason/description for this payment")

    def test_error_without_body(self):
        self.http.request.return_value = fake_response(502)

        with self.assertRaises(ApiError) as ctx:
            self.session.request("GET", "/payments")
        self.assertEqual(ctx.exception.message, "Request failed")


class ErrorMessageTestCase(SimpleTestCase):
    def test_field_errors(self):
        message = error_message({"amount": ["A valid integer is required."], "payment_method": ["Invalid"]})
        self.assertEqual(message, "amount: A valid integer is required., payment_method: Invalid")

    def test_detail_list(self):
        data = {"detail": [{"loc": ["body", "amount"], "msg": "field required"}, {"msg": "bad"}]}
        self.assertEqual(error_message(data), "amount: field required, Unknown field: bad")

    def test_plain_detail(self):
        self.assertEqual(error_message({"detail": "Not found."}), "Not found.")


class BillingApiClientTestCase(SimpleTestCase):
    def setUp(self):
        self.session = MagicMock()
        self.client = BillingApiClient(self.session)
        self.student = {
            "id": 7,
            "admission_date": "2024-01-01",
            "last_payment_date": None,
            "monthly_rent": 10000,
        }

    def test_monthly_payment_body(self):
        draft = allocate_payment(MONTHLY, 10000, method="KHALTI", start=date(2024, 1, 31))

        self.client.record_payment(7, draft)

        self.session.request.assert_called_once_with("POST", "/students/7/payments/monthly", json={
            "amount": 10000,
            "payment_method": "KHALTI",
            "description": "Monthly rent payment",
            "notes": None,
            "billing_period_start": "2024-01-31",
            "billing_period_end": "2024-03-01",
        })

    def test_extra_payment_body(self):
        draft = allocate_payment(EXTRA, 500, description="late fine")

        self.client.record_payment(7, draft)

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("POST", "/students/7/payments/extra"))
        self.assertEqual(kwargs["json"]["description"], "late fine")
        self.assertEqual(kwargs["json"]["documents_data"], [])
        self.assertNotIn("billing_period_start", kwargs["json"])

    def test_completion_draft_goes_to_complete_route(self):
        draft = allocate_completion(5000, 15000, method="CASH")

        self.client.record_payment(7, draft)

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("POST", "/students/7/payments/complete"))
        self.assertEqual(kwargs["json"]["amount"], 5000)
        self.assertEqual(kwargs["json"]["description"], "Remaining balance payment")
        self.assertNotIn("documents_data", kwargs["json"])

    def test_unroutable_draft(self):
        draft = replace(allocate_completion(5000, 15000), payment_type="SECURITY_DEPOSIT")

        with self.assertRaises(ValueError):
            self.client.record_payment(7, draft)
        self.session.request.assert_not_called()

    def test_billing_periods_from_server(self):
        server_periods = [{"start": "2024-01-31", "end": "2024-03-01", "remaining": 10000}]
        self.session.request.return_value = {"available_periods": server_periods}

        self.assertEqual(self.client.billing_periods(self.student), server_periods)

    def test_billing_periods_fall_back_to_local_calculation(self):
        self.session.request.return_value = {"available_periods": []}

        periods = self.client.billing_periods(self.student, today=date(2024, 1, 20))
        self.assertEqual(periods[0]["start"], "2024-01-01")
        self.assertEqual(periods[0]["end"], "2024-01-31")
        self.assertTrue(periods[0]["is_current"])

    def test_billing_periods_fall_back_on_api_error(self):
        self.session.request.side_effect = ApiError(500, "Server error")

        periods = self.client.billing_periods(self.student, today=date(2024, 1, 20))
        self.assertEqual(periods[0]["remaining"], 10000)

    def test_expired_session_is_not_swallowed(self):
        self.session.request.side_effect = SessionExpired("Session expired")

        with self.assertRaises(SessionExpired):
            self.client.billing_periods(self.student)

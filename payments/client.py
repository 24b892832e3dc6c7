"""
HTTP client for the billing endpoints.

Authentication lives on an explicit ``ApiSession`` object instead of global
state: a 401 response clears the session token and raises
``SessionExpired`` so the caller decides how to log in again.
"""

import logging

import requests

from payments.constants import EXTRA, REGISTRATION, RENT
from payments.periods import compute_billing_periods, select_periods

logger = logging.getLogger(__name__)


class SessionExpired(Exception):
    pass


class ApiError(Exception):
    def __init__(self, status_code, message):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def error_message(data):
    """Flatten the error payload of a failed response into one line."""
    if not data:
        return "Request failed"
    if isinstance(data, str):
        return data
    if isinstance(data, list):
        return ", ".join(error_message(item) for item in data)

    detail = data.get("detail", data.get("error"))
    if isinstance(detail, list):
        messages = []
        for err in detail:
            if isinstance(err, dict):
                loc = err.get("loc") or ["Unknown field"]
                messages.append(f"{loc[-1]}: {err.get('msg')}")
            else:
                messages.append(str(err))
        return ", ".join(messages)
    if detail:
        return str(detail)

    # DRF field errors: {"field": ["message", ...]}
    messages = []
    for field, errors in data.items():
        if isinstance(errors, list):
            errors = ", ".join(str(e) for e in errors)
        messages.append(f"{field}: {errors}")
    return ", ".join(messages) or "Request failed"


class ApiSession:
    def __init__(self, base_url, token=None, timeout=10, http=None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.http = http or requests.Session()

    def headers(self):
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def clear(self):
        self.token = None

    def request(self, method, endpoint, json=None, params=None):
        response = self.http.request(
            method,
            f"{self.base_url}{endpoint}",
            json=json,
            params=params,
            headers=self.headers(),
            timeout=self.timeout,
        )

        if response.status_code == 401:
            self.clear()
            raise SessionExpired("Session expired")

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            raise ApiError(response.status_code, error_message(data))
        return data


def _draft_body(draft):
    body = {
        "amount": draft.amount,
        "payment_method": draft.method,
        "description": draft.description or None,
        "notes": draft.notes or None,
    }
    if draft.payment_type == RENT:
        body["billing_period_start"] = draft.billing_period_start.isoformat()
        body["billing_period_end"] = draft.billing_period_end.isoformat()
    elif draft.payment_type == EXTRA:
        body["documents_data"] = list(draft.documents)
    return body


class BillingApiClient:
    def __init__(self, session):
        self.session = session

    def get_billing_status(self, student_id):
        return self.session.request("GET", f"/students/{student_id}/billing-status")

    def list_payments(self, student_id):
        return self.session.request("GET", f"/students/{student_id}/payments")

    def record_monthly_payment(self, student_id, draft):
        return self.session.request("POST", f"/students/{student_id}/payments/monthly", json=_draft_body(draft))

    def record_extra_payment(self, student_id, draft):
        return self.session.request("POST", f"/students/{student_id}/payments/extra", json=_draft_body(draft))

    def complete_payment(self, student_id, draft):
        return self.session.request("POST", f"/students/{student_id}/payments/complete", json=_draft_body(draft))

    def record_payment(self, student_id, draft):
        """Send a draft to the route matching its payment type."""
        recorders = {
            RENT: self.record_monthly_payment,
            EXTRA: self.record_extra_payment,
            REGISTRATION: self.complete_payment,
        }
        try:
            recorder = recorders[draft.payment_type]
        except KeyError:
            raise ValueError(f"No endpoint records {draft.payment_type} payments")
        return recorder(student_id, draft)

    def billing_periods(self, student, today=None):
        """
        Periods offered for a monthly payment: the server's list when it has
        one, otherwise periods computed locally from the student record.
        """
        def fallback():
            return [
                period.as_dict()
                for period in compute_billing_periods(
                    student.get("admission_date"),
                    student.get("last_payment_date"),
                    student.get("monthly_rent"),
                    today=today,
                )
            ]

        try:
            status = self.get_billing_status(student["id"])
        except ApiError as exc:
            logger.warning("Failed to load billing status for student %s: %s", student["id"], exc)
            return fallback()

        return select_periods((status or {}).get("available_periods"), fallback)

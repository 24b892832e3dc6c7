from datetime import date, timedelta

from django.test import SimpleTestCase

from payments.balance import admission_balance, rent_balance
from payments.constants import DUE_SOON, EXTRA, OK, OVERDUE, REGISTRATION, RENT
from payments.due_status import DueStatusResult, due_date_for, evaluate_due_status, summarize_due
from payments.periods import compute_billing_periods

TODAY = date(2024, 3, 1)


class EvaluateDueStatusTestCase(SimpleTestCase):
    def test_due_today_is_overdue(self):
        result = evaluate_due_status(TODAY, today=TODAY)
        self.assertEqual(result.days_until_due, 0)
        self.assertEqual(result.status, OVERDUE)

    def test_window_boundaries(self):
        cases = [(-5, OVERDUE), (1, DUE_SOON), (7, DUE_SOON), (8, OK), (30, OK)]
        for days, expected in cases:
            with self.subTest(days=days):
                result = evaluate_due_status(TODAY + timedelta(days=days), today=TODAY)
                self.assertEqual(result.days_until_due, days)
                self.assertEqual(result.status, expected)

    def test_days_overdue(self):
        self.assertEqual(evaluate_due_status(date(2024, 2, 25), today=TODAY).days_overdue, 5)
        self.assertEqual(evaluate_due_status(date(2024, 3, 5), today=TODAY).days_overdue, 0)

    def test_accepts_iso_strings(self):
        result = evaluate_due_status("2024-03-04", today=TODAY)
        self.assertEqual(result.due_date, date(2024, 3, 4))
        self.assertEqual(result.as_dict(), {
            "due_date": "2024-03-04",
            "days_until_due": 3,
            "days_overdue": 0,
            "status": DUE_SOON,
        })


class SummarizeDueTestCase(SimpleTestCase):
    def test_first_cycle_is_due_at_its_end(self):
        admission = date(2024, 1, 1)
        periods = compute_billing_periods(admission, None, 10000, today=date(2024, 1, 20))

        self.assertEqual(due_date_for(periods[0], admission), date(2024, 1, 31))
        result = summarize_due(periods, admission, today=date(2024, 1, 20))
        self.assertEqual(result.days_until_due, 11)
        self.assertEqual(result.status, OK)

    def test_later_cycles_are_due_on_their_first_day(self):
        admission = date(2024, 1, 1)
        payments = [{"amount": 10000, "payment_type": RENT, "billing_period_start": admission}]
        periods = compute_billing_periods(admission, date(2024, 1, 31), 10000, payments, today=date(2024, 2, 5))

        result = summarize_due(periods, admission, today=date(2024, 2, 5))
        self.assertEqual(result.due_date, date(2024, 1, 31))
        self.assertEqual(result.days_until_due, -5)
        self.assertEqual(result.status, OVERDUE)

    def test_oldest_unpaid_period_drives_status(self):
        admission = date(2024, 1, 1)
        payments = [{"amount": 10000, "payment_type": RENT, "billing_period_start": date(2024, 1, 31)}]
        periods = compute_billing_periods(admission, None, 10000, payments, today=date(2024, 2, 5))

        result = summarize_due(periods, admission, today=date(2024, 2, 5))
        self.assertEqual(result.due_date, date(2024, 1, 31))

    def test_nothing_outstanding(self):
        periods = [{"start": "2024-01-01", "end": "2024-01-31", "remaining": 0}]

        result = summarize_due(periods, date(2024, 1, 1), today=TODAY)
        self.assertEqual(result, DueStatusResult(due_date=None, days_until_due=None, status=OK))
        self.assertIsNone(result.as_dict()["due_date"])


class BalanceTestCase(SimpleTestCase):
    def test_admission_balance_ignores_extra_payments(self):
        payments = [
            {"amount": 5000, "payment_type": REGISTRATION},
            {"amount": 500, "payment_type": EXTRA},
        ]
        balance = admission_balance(10000, 5000, payments, registration_fee=1000)

        self.assertEqual(balance.total_due, 16000)
        self.assertEqual(balance.total_paid, 5000)
        self.assertEqual(balance.remaining, 11000)

    def test_admission_balance_never_negative(self):
        payments = [{"amount": 12000, "payment_type": REGISTRATION}]
        balance = admission_balance(10000, 0, payments, admission_date=date(2024, 1, 1))
        self.assertEqual(balance.remaining, 0)

    def test_first_cycle_rent_counts_toward_admission_balance(self):
        payments = [{"amount": 10000, "payment_type": RENT, "billing_period_start": date(2024, 1, 1)}]
        balance = admission_balance(10000, 5000, payments, admission_date=date(2024, 1, 1))

        self.assertEqual(balance.total_paid, 10000)
        self.assertEqual(balance.remaining, 5000)

    def test_later_rent_does_not_clear_deposit(self):
        payments = [
            {"amount": 10000, "payment_type": RENT, "billing_period_start": date(2024, 1, 1)},
            {"amount": 10000, "payment_type": RENT, "billing_period_start": date(2024, 1, 31)},
        ]
        balance = admission_balance(10000, 5000, payments, admission_date=date(2024, 1, 1))

        self.assertEqual(balance.as_dict(), {"total_due": 15000, "total_paid": 10000, "remaining": 5000})

    def test_first_cycle_rent_is_capped_at_one_month(self):
        payments = [{"amount": 25000, "payment_type": RENT, "billing_period_start": "2024-01-01"}]
        balance = admission_balance(10000, 5000, payments, admission_date="2024-01-01")

        self.assertEqual(balance.remaining, 5000)

    def test_rent_balance_counts_started_periods_only(self):
        payments = [{"amount": 4000, "payment_type": RENT, "billing_period_start": date(2024, 1, 1)}]
        periods = compute_billing_periods(date(2024, 1, 1), None, 10000, payments, today=date(2024, 2, 5))

        balance = rent_balance(periods, 10000, today=date(2024, 2, 5))
        self.assertEqual(balance.as_dict(), {"total_due": 20000, "total_paid": 4000, "remaining": 16000})

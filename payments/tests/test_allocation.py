from datetime import date

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from payments.allocation import (
    advance_anchor,
    allocate_completion,
    allocate_payment,
    default_payment_amount,
)
from payments.constants import ESEWA, EXTRA, MONTHLY, REGISTRATION, RENT
from payments.periods import compute_billing_periods
from payments.validators import (
    AMOUNT_EXCEEDS_BALANCE,
    INVALID_AMOUNT,
    MISSING_PERIOD_START,
    MISSING_REASON,
    validate_amount,
)


def rent(amount, start):
    return {"amount": amount, "payment_type": RENT, "billing_period_start": start}


class AllocatePaymentTestCase(SimpleTestCase):
    def test_monthly_payment_uses_selected_period(self):
        period = {"start": "2024-01-31", "end": "2024-03-01", "remaining": 10000}

        draft = allocate_payment(MONTHLY, 10000, method=ESEWA, selected_period=period, paid_date=date(2024, 2, 5))

        self.assertEqual(draft.payment_type, RENT)
        self.assertEqual(draft.amount, 10000)
        self.assertEqual(draft.method, ESEWA)
        self.assertEqual(draft.billing_period_start, date(2024, 1, 31))
        self.assertEqual(draft.billing_period_end, date(2024, 3, 1))
        self.assertEqual(draft.description, "Monthly rent payment")

    def test_monthly_custom_range_defaults_to_full_cycle(self):
        draft = allocate_payment(MONTHLY, "5000", start="2024-05-10")

        self.assertEqual(draft.amount, 5000)
        self.assertEqual(draft.billing_period_start, date(2024, 5, 10))
        self.assertEqual(draft.billing_period_end, date(2024, 6, 9))

    def test_monthly_amount_is_not_clamped(self):
        partial = allocate_payment(MONTHLY, 2500, start=date(2024, 1, 1))
        advance = allocate_payment(MONTHLY, 30000, start=date(2024, 1, 1))

        self.assertEqual(partial.amount, 2500)
        self.assertEqual(advance.amount, 30000)

    def test_monthly_without_period_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            allocate_payment(MONTHLY, 10000)
        self.assertEqual(ctx.exception.code, MISSING_PERIOD_START)

    def test_invalid_amounts_are_rejected(self):
        for amount in (None, "", "abc", 0, "0", -100, True, "nan", "inf", 10.5):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError) as ctx:
                    allocate_payment(MONTHLY, amount, start=date(2024, 1, 1))
                self.assertEqual(ctx.exception.code, INVALID_AMOUNT)

    def test_whole_decimal_strings_are_accepted(self):
        self.assertEqual(validate_amount("1500.00"), 1500)
        self.assertEqual(validate_amount(" 750 "), 750)

    def test_extra_payment_requires_description(self):
        for description in (None, "", "   "):
            with self.subTest(description=description):
                with self.assertRaises(ValidationError) as ctx:
                    allocate_payment(EXTRA, 500, description=description)
                self.assertEqual(ctx.exception.code, MISSING_REASON)

    def test_extra_payment_has_no_billing_period(self):
        draft = allocate_payment(EXTRA, 500, description=" late fine ", documents=["receipt.jpg"])

        self.assertEqual(draft.payment_type, EXTRA)
        self.assertEqual(draft.description, "late fine")
        self.assertIsNone(draft.billing_period_start)
        self.assertIsNone(draft.billing_period_end)
        self.assertEqual(draft.documents, ["receipt.jpg"])

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            allocate_payment("WEEKLY", 100)


class AllocateCompletionTestCase(SimpleTestCase):
    def test_amount_above_remaining_balance_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            allocate_completion(15001, 15000)

        self.assertEqual(ctx.exception.code, AMOUNT_EXCEEDS_BALANCE)
        self.assertIn("Rs. 15,000", ctx.exception.messages[0])

    def test_exact_remaining_balance_is_accepted(self):
        draft = allocate_completion(15000, 15000)

        self.assertEqual(draft.amount, 15000)
        self.assertEqual(draft.payment_type, REGISTRATION)
        self.assertEqual(draft.description, "Remaining balance payment")

    def test_nothing_left_to_pay(self):
        with self.assertRaises(ValidationError) as ctx:
            allocate_completion(1, 0)
        self.assertEqual(ctx.exception.code, AMOUNT_EXCEEDS_BALANCE)


class AdvanceAnchorTestCase(SimpleTestCase):
    def test_full_payment_moves_anchor_one_cycle(self):
        anchor = advance_anchor(date(2024, 1, 1), 10000, [rent(10000, date(2024, 1, 1))])
        self.assertEqual(anchor, date(2024, 1, 31))

    def test_partial_payment_keeps_anchor(self):
        anchor = advance_anchor(date(2024, 1, 1), 10000, [rent(9999, date(2024, 1, 1))])
        self.assertEqual(anchor, date(2024, 1, 1))

    def test_consecutive_paid_cycles(self):
        payments = [
            rent(10000, date(2024, 1, 1)),
            rent(10000, date(2024, 1, 31)),
            rent(10000, date(2024, 3, 31)),
        ]
        # the cycle starting 2024-03-01 is unpaid, so the later one does not count yet
        self.assertEqual(advance_anchor(date(2024, 1, 1), 10000, payments), date(2024, 3, 1))

    def test_extra_payments_never_move_anchor(self):
        payments = [{"amount": 50000, "payment_type": EXTRA, "billing_period_start": date(2024, 1, 1)}]
        self.assertEqual(advance_anchor(date(2024, 1, 1), 10000, payments), date(2024, 1, 1))

    def test_zero_rent_keeps_anchor(self):
        self.assertEqual(advance_anchor(date(2024, 1, 1), 0, []), date(2024, 1, 1))

    def test_anchor_after_rent_payment_scenario(self):
        payments = [rent(10000, date(2024, 1, 1))]
        anchor = advance_anchor(date(2024, 1, 1), 10000, payments)

        periods = compute_billing_periods(date(2024, 1, 1), anchor, 10000, payments, today=date(2024, 2, 5))
        self.assertEqual(periods[0].start, date(2024, 1, 31))
        self.assertEqual(periods[0].end, date(2024, 3, 1))
        self.assertEqual(periods[0].remaining, 10000)


class DefaultPaymentAmountTestCase(SimpleTestCase):
    def test_current_period_remaining(self):
        period = {"is_current": True, "remaining": 4000}
        self.assertEqual(default_payment_amount(period, 10000), 4000)

    def test_falls_back_to_monthly_rent(self):
        self.assertEqual(default_payment_amount({"is_current": False, "remaining": 4000}, 10000), 10000)
        self.assertEqual(default_payment_amount({"is_current": True, "remaining": 0}, 10000), 10000)
        self.assertEqual(default_payment_amount(None, 10000), 10000)

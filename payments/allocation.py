"""
Payment allocation.

Turns a requested payment into a ``PaymentDraft`` ready to be stored:
monthly payments are bound to a billing period, extra payments stay outside
the billing cycle, and completion payments settle what is left of the
admission balance.
"""

from dataclasses import asdict, dataclass, field
from datetime import date

from payments.constants import CASH, EXTRA, MONTHLY, REGISTRATION, RENT
from payments.periods import as_date, period_bounds, read_field, rent_paid_by_period
from payments.validators import (
    validate_amount,
    validate_completion_amount,
    validate_description,
    validate_period_start,
)


@dataclass(frozen=True)
class PaymentDraft:
    amount: int
    payment_type: str
    method: str
    paid_date: date
    billing_period_start: date | None = None
    billing_period_end: date | None = None
    description: str = ""
    notes: str = ""
    documents: list = field(default_factory=list)

    def as_model_kwargs(self):
        return asdict(self)


def allocate_payment(kind, amount, method=CASH, selected_period=None, start=None, end=None,
                     description="", notes="", documents=None, paid_date=None):
    """
    Build a draft for a MONTHLY or EXTRA payment.

    MONTHLY amounts are not clamped to the period's remaining balance, so
    partial payments and pre-payments are both accepted. The period comes
    from ``selected_period`` when given, otherwise from the custom ``start``
    and ``end`` dates (``end`` defaults to a full cycle after ``start``).
    """
    paid_date = paid_date or date.today()
    notes = notes or ""

    if kind == MONTHLY:
        amount = validate_amount(amount)
        if selected_period is not None:
            start = read_field(selected_period, "start")
            end = read_field(selected_period, "end")
        start = as_date(validate_period_start(start))
        end = as_date(end) or period_bounds(start)[1]
        return PaymentDraft(
            amount=amount,
            payment_type=RENT,
            method=method,
            paid_date=paid_date,
            billing_period_start=start,
            billing_period_end=end,
            description=(description or "").strip() or "Monthly rent payment",
            notes=notes,
        )

    if kind == EXTRA:
        description = validate_description(description)
        amount = validate_amount(amount)
        return PaymentDraft(
            amount=amount,
            payment_type=EXTRA,
            method=method,
            paid_date=paid_date,
            description=description,
            notes=notes,
            documents=list(documents or []),
        )

    raise ValueError(f"Unknown payment kind: {kind!r}")


def allocate_completion(amount, remaining_balance, method=CASH, description="", notes="", paid_date=None):
    """Draft a payment against the unpaid part of the admission balance."""
    amount = validate_completion_amount(amount, remaining_balance)
    return PaymentDraft(
        amount=amount,
        payment_type=REGISTRATION,
        method=method,
        paid_date=paid_date or date.today(),
        description=(description or "").strip() or "Remaining balance payment",
        notes=notes or "",
    )


def advance_anchor(anchor, monthly_rent, payments):
    """
    Move the anchor forward one cycle at a time while the cycle starting at
    the anchor is fully paid by RENT payments.
    """
    anchor = as_date(anchor)
    monthly_rent = int(monthly_rent or 0)
    if anchor is None or monthly_rent <= 0:
        return anchor

    paid_by_start = rent_paid_by_period(payments)
    while paid_by_start.get(anchor, 0) >= monthly_rent:
        anchor = period_bounds(anchor)[1]
    return anchor


def default_payment_amount(period, monthly_rent):
    if period is not None and read_field(period, "is_current") and read_field(period, "remaining", 0) > 0:
        return read_field(period, "remaining")
    return monthly_rent

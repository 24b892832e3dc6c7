"""
Billing period calculation.

A tenancy is billed in fixed 30-day cycles. The first cycle starts on the
anchor date (the date the rent cycle was last settled to, or the admission
date for a fresh tenant); every following cycle starts where the previous one
ended. Nothing here touches the database: payments are any objects (model
instances or API dicts) exposing ``amount``, ``payment_type`` and
``billing_period_start``.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from payments.constants import BILLING_CYCLE_DAYS, RENT


@dataclass(frozen=True)
class BillingPeriod:
    start: date
    end: date
    is_current: bool
    paid: int
    remaining: int

    @property
    def label(self):
        return format_period_label(self.start, self.end)

    def as_dict(self):
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "label": self.label,
            "is_current": self.is_current,
            "paid": self.paid,
            "remaining": self.remaining,
        }


def as_date(value):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def read_field(obj, name, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def period_bounds(start):
    start = as_date(start)
    return start, start + timedelta(days=BILLING_CYCLE_DAYS)


def format_period_label(start, end):
    # ``end`` is exclusive, the label shows the last day of the cycle
    last = end - timedelta(days=1)
    if start.year == last.year:
        return f"{start:%b} {start.day} – {last:%b} {last.day}, {last.year}"
    return f"{start:%b} {start.day}, {start.year} – {last:%b} {last.day}, {last.year}"


def resolve_anchor(admission_date, last_payment_date=None):
    return as_date(last_payment_date) or as_date(admission_date)


def rent_paid_by_period(payments):
    """Sum RENT payments by their ``billing_period_start``."""
    totals = {}
    for payment in payments:
        if read_field(payment, "payment_type") != RENT:
            continue
        start = as_date(read_field(payment, "billing_period_start"))
        if start is None:
            continue
        totals[start] = totals.get(start, 0) + int(read_field(payment, "amount", 0) or 0)
    return totals


def compute_billing_periods(admission_date, last_payment_date, monthly_rent, payments=(), today=None):
    """
    Return the billing periods from the anchor date up to and including the
    first period that starts after ``today``.

    Payments whose period start does not fall on one of the generated
    boundaries are left out of the per-period totals.
    """
    anchor = resolve_anchor(admission_date, last_payment_date)
    if anchor is None:
        return []

    today = today or date.today()
    monthly_rent = max(0, int(monthly_rent or 0))
    paid_by_start = rent_paid_by_period(payments)

    periods = []
    start = anchor
    while True:
        start, end = period_bounds(start)
        paid = paid_by_start.get(start, 0)
        periods.append(BillingPeriod(
            start=start,
            end=end,
            is_current=start <= today < end,
            paid=paid,
            remaining=max(0, monthly_rent - paid),
        ))
        if start > today:
            break
        start = end
    return periods


def select_periods(available_periods, fallback):
    """
    Prefer the periods supplied by the server; fall back to locally computed
    ones when that list is empty or missing. ``fallback`` may be a list or a
    zero-argument callable.
    """
    if available_periods:
        return list(available_periods)
    return list(fallback() if callable(fallback) else fallback)


def current_period(periods):
    for period in periods:
        if read_field(period, "is_current"):
            return period
    return None


def find_period(periods, start):
    start = as_date(start)
    for period in periods:
        if as_date(read_field(period, "start")) == start:
            return period
    return None

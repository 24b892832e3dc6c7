"""
Outstanding balances derived from a student's payments.

The admission balance is what a student owes on moving in: the first
month's rent, the security deposit and any registration fee. The rent
balance is what is owed across the billing periods that have started.
"""

from dataclasses import dataclass
from datetime import date

from payments.constants import EXTRA, RENT
from payments.periods import as_date, read_field


@dataclass(frozen=True)
class OutstandingBalance:
    total_due: int
    total_paid: int
    remaining: int

    def as_dict(self):
        return {
            "total_due": self.total_due,
            "total_paid": self.total_paid,
            "remaining": self.remaining,
        }


def admission_balance(monthly_rent, security_deposit, payments=(), registration_fee=0, admission_date=None):
    """
    Registration, deposit and reactivation money all count toward the
    admission balance. Rent only counts when it was paid for the cycle
    starting on ``admission_date``, and never for more than one month.
    Extra payments are charges of their own.
    """
    monthly_rent = int(monthly_rent or 0)
    admission_date = as_date(admission_date)
    total_due = monthly_rent + int(security_deposit or 0) + int(registration_fee or 0)

    first_cycle_rent = 0
    other_paid = 0
    for payment in payments:
        payment_type = read_field(payment, "payment_type")
        amount = int(read_field(payment, "amount", 0) or 0)
        if payment_type == EXTRA:
            continue
        if payment_type == RENT:
            start = as_date(read_field(payment, "billing_period_start"))
            if admission_date is not None and start == admission_date:
                first_cycle_rent += amount
            continue
        other_paid += amount

    total_paid = min(first_cycle_rent, monthly_rent) + other_paid
    return OutstandingBalance(
        total_due=total_due,
        total_paid=total_paid,
        remaining=max(0, total_due - total_paid),
    )


def rent_balance(periods, monthly_rent, today=None):
    """Rent owed across the periods that have already started."""
    today = today or date.today()
    started = [p for p in periods if as_date(read_field(p, "start")) <= today]
    return OutstandingBalance(
        total_due=int(monthly_rent or 0) * len(started),
        total_paid=sum(read_field(p, "paid", 0) for p in started),
        remaining=sum(read_field(p, "remaining", 0) for p in started),
    )

"""
Due status of a billing period: days until the due date and the
OVERDUE / DUE_SOON / OK bucket shown to staff.
"""

from dataclasses import dataclass
from datetime import date

from payments.constants import DUE_SOON, DUE_SOON_DAYS, OK, OVERDUE
from payments.periods import as_date, read_field


@dataclass(frozen=True)
class DueStatusResult:
    due_date: date | None
    days_until_due: int | None
    status: str

    @property
    def days_overdue(self):
        if self.status != OVERDUE or self.days_until_due is None:
            return 0
        return abs(self.days_until_due)

    def as_dict(self):
        return {
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "days_until_due": self.days_until_due,
            "days_overdue": self.days_overdue,
            "status": self.status,
        }


def evaluate_due_status(due_date, today=None):
    due_date = as_date(due_date)
    today = today or date.today()
    days = (due_date - today).days
    if days <= 0:
        status = OVERDUE
    elif days <= DUE_SOON_DAYS:
        status = DUE_SOON
    else:
        status = OK
    return DueStatusResult(due_date=due_date, days_until_due=days, status=status)


def due_date_for(period, admission_date):
    """
    The first cycle of a tenancy is due at its end; every later cycle is
    collected in advance and falls due on its first day.
    """
    start = as_date(read_field(period, "start"))
    if start == as_date(admission_date):
        return as_date(read_field(period, "end"))
    return start


def summarize_due(periods, admission_date, today=None):
    """Evaluate the oldest period that still has rent outstanding."""
    for period in periods:
        if read_field(period, "remaining", 0) > 0:
            return evaluate_due_status(due_date_for(period, admission_date), today)
    return DueStatusResult(due_date=None, days_until_due=None, status=OK)

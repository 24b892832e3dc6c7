# payments/services.py
"""
Payment recording and billing read-models.

The billing rules themselves live in ``periods``, ``allocation``,
``due_status`` and ``balance``; this module loads students and payments,
runs those rules and persists the outcome.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Prefetch, Sum
from django.utils import timezone

from hostel.models import Student
from payments.allocation import advance_anchor, allocate_completion, allocate_payment
from payments.balance import admission_balance, rent_balance
from payments.constants import CASH, DUE_SOON, EXTRA, MONTHLY, OVERDUE, REGISTRATION, RENT
from payments.due_status import summarize_due
from payments.models import Payment
from payments.periods import compute_billing_periods, period_bounds, resolve_anchor

logger = logging.getLogger(__name__)

STUDENT_NOT_PAYABLE = "student_not_payable"


def ensure_can_receive_payment(student):
    if student.status == Student.CHECKED_OUT:
        raise ValidationError(
            "Cannot record a payment for a checked-out student",
            code=STUDENT_NOT_PAYABLE,
        )


def get_admission_balance(student, payments=None):
    if payments is None:
        payments = student.payments.all()
    return admission_balance(
        student.monthly_rent,
        student.security_deposit,
        payments,
        registration_fee=settings.REGISTRATION_FEE,
        admission_date=student.admission_date,
    )


def get_billing_periods(student, payments=None, today=None):
    if payments is None:
        payments = student.payments.all()
    return compute_billing_periods(
        student.admission_date,
        student.last_payment_date,
        student.monthly_rent,
        payments,
        today=today or timezone.localdate(),
    )


def build_billing_status(student, today=None):
    today = today or timezone.localdate()
    payments = list(student.payments.all())
    periods = get_billing_periods(student, payments, today)
    due = summarize_due(periods, student.admission_date, today)

    return {
        "student_id": student.id,
        "student_name": student.full_name,
        "monthly_rent": student.monthly_rent,
        "anchor_date": resolve_anchor(student.admission_date, student.last_payment_date),
        "available_periods": [period.as_dict() for period in periods],
        "due": due.as_dict(),
        "rent_balance": rent_balance(periods, student.monthly_rent, today).as_dict(),
        "admission_balance": get_admission_balance(student, payments).as_dict(),
    }


def sync_anchor(student):
    """
    Move ``student.last_payment_date`` forward over every fully paid cycle.

    The first cycle also counts as settled once the admission balance
    (first month, deposit and registration fee) has been cleared. Rent
    paid for later cycles does not clear it.
    """
    if student.monthly_rent <= 0:
        return student.last_payment_date

    payments = list(student.payments.exclude(payment_type=EXTRA))
    anchor = resolve_anchor(student.admission_date, student.last_payment_date)

    if student.last_payment_date is None and get_admission_balance(student, payments).remaining == 0:
        anchor = period_bounds(anchor)[1]

    anchor = advance_anchor(anchor, student.monthly_rent, payments)

    if anchor != resolve_anchor(student.admission_date, student.last_payment_date):
        logger.info(
            "Rent cycle for student %s moved from %s to %s",
            student.id, student.last_payment_date or student.admission_date, anchor,
        )
        student.last_payment_date = anchor
        student.save(update_fields=["last_payment_date"])
    return student.last_payment_date


def _lock_student(student):
    return Student.objects.select_for_update().get(pk=student.pk)


@transaction.atomic
def record_monthly_payment(student, data, recorded_by=None):
    student = _lock_student(student)
    ensure_can_receive_payment(student)

    draft = allocate_payment(
        MONTHLY,
        data.get("amount"),
        method=data.get("payment_method") or CASH,
        start=data.get("billing_period_start"),
        end=data.get("billing_period_end"),
        description=data.get("description"),
        notes=data.get("notes"),
        paid_date=data.get("paid_date") or timezone.localdate(),
    )
    payment = Payment.objects.create(student=student, recorded_by=recorded_by, **draft.as_model_kwargs())
    sync_anchor(student)

    logger.info(
        "Recorded rent payment %s of Rs. %s for student %s (%s to %s)",
        payment.id, payment.amount, student.id,
        payment.billing_period_start, payment.billing_period_end,
    )
    return payment


@transaction.atomic
def record_extra_payment(student, data, recorded_by=None):
    student = _lock_student(student)
    ensure_can_receive_payment(student)

    draft = allocate_payment(
        EXTRA,
        data.get("amount"),
        method=data.get("payment_method") or CASH,
        description=data.get("description"),
        notes=data.get("notes"),
        documents=data.get("documents_data"),
        paid_date=data.get("paid_date") or timezone.localdate(),
    )
    payment = Payment.objects.create(student=student, recorded_by=recorded_by, **draft.as_model_kwargs())

    logger.info(
        "Recorded extra payment %s of Rs. %s for student %s: %s",
        payment.id, payment.amount, student.id, payment.description,
    )
    return payment


@transaction.atomic
def record_completion_payment(student, data, recorded_by=None):
    student = _lock_student(student)
    ensure_can_receive_payment(student)

    balance = get_admission_balance(student)
    draft = allocate_completion(
        data.get("amount"),
        balance.remaining,
        method=data.get("payment_method") or CASH,
        description=data.get("description"),
        notes=data.get("notes"),
        paid_date=data.get("paid_date") or timezone.localdate(),
    )
    payment = Payment.objects.create(student=student, recorded_by=recorded_by, **draft.as_model_kwargs())
    sync_anchor(student)

    logger.info(
        "Recorded admission balance payment %s of Rs. %s for student %s (Rs. %s was outstanding)",
        payment.id, payment.amount, student.id, balance.remaining,
    )
    return payment


def record_admission_payment(student, amount, method=CASH, recorded_by=None):
    """Initial payment taken while admitting a student."""
    return record_completion_payment(
        student,
        {
            "amount": amount,
            "payment_method": method,
            "description": "Admission payment",
        },
        recorded_by=recorded_by,
    )


# Read models ----------------------------------------------------------------

def _active_students():
    return (
        Student.objects
        .filter(status=Student.ACTIVE)
        .select_related("bed__room__floor__building")
        .prefetch_related(Prefetch("payments", queryset=Payment.objects.exclude(payment_type=EXTRA)))
    )


def student_dues(today=None):
    """Billing position of every active student, most urgent first."""
    today = today or timezone.localdate()
    rows = []
    for student in _active_students():
        payments = list(student.payments.all())
        periods = get_billing_periods(student, payments, today)
        due = summarize_due(periods, student.admission_date, today)
        rows.append({
            "student": student,
            "due": due,
            "rent_balance": rent_balance(periods, student.monthly_rent, today),
            "admission_balance": get_admission_balance(student, payments),
        })

    rows.sort(key=lambda row: (
        row["due"].days_until_due is None,
        row["due"].days_until_due if row["due"].days_until_due is not None else 0,
    ))
    return rows


def students_with_status(statuses, today=None):
    return [row for row in student_dues(today) if row["due"].status in statuses]


def financial_summary(start=None, end=None, today=None):
    today = today or timezone.localdate()
    payments = Payment.objects.all()
    if start:
        payments = payments.filter(paid_date__gte=start)
    if end:
        payments = payments.filter(paid_date__lte=end)

    by_type = {
        row["payment_type"]: {"total": row["total"], "count": row["count"]}
        for row in payments.order_by().values("payment_type").annotate(total=Sum("amount"), count=Count("id"))
    }
    collected = payments.aggregate(total=Sum("amount"))["total"] or 0

    dues = student_dues(today)
    pending_rent = sum(row["rent_balance"].remaining for row in dues)
    pending_admission = sum(row["admission_balance"].remaining for row in dues)

    return {
        "start": start,
        "end": end,
        "total_collected": collected,
        "rent_collected": by_type.get(RENT, {}).get("total", 0),
        "extra_collected": by_type.get(EXTRA, {}).get("total", 0),
        "registration_collected": by_type.get(REGISTRATION, {}).get("total", 0),
        "by_type": by_type,
        "pending_rent": pending_rent,
        "pending_admission": pending_admission,
        "pending_revenue": pending_rent + pending_admission,
        "due_payments": sum(1 for row in dues if row["due"].status == DUE_SOON),
        "overdue_payments": sum(1 for row in dues if row["due"].status == OVERDUE),
        "active_students": len(dues),
    }


def pending_students(limit=10, today=None):
    rows = [
        row for row in student_dues(today)
        if row["rent_balance"].remaining or row["admission_balance"].remaining
    ]
    rows.sort(
        key=lambda row: row["rent_balance"].remaining + row["admission_balance"].remaining,
        reverse=True,
    )
    return rows[:limit]

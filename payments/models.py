# payments/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from hostel.models import Student
from payments.constants import PAYMENT_METHOD_CHOICES, PAYMENT_TYPE_CHOICES, CASH, RENT


class Payment(models.Model):
    """A recorded payment. Rows are only ever inserted, never edited."""

    student = models.ForeignKey(Student, on_delete=models.PROTECT, related_name="payments")

    amount = models.PositiveIntegerField()
    payment_type = models.CharField(max_length=20, choices=PAYMENT_TYPE_CHOICES, default=RENT)

    # null for everything that is not rent
    billing_period_start = models.DateField(null=True, blank=True)
    billing_period_end = models.DateField(null=True, blank=True)

    paid_date = models.DateField(default=timezone.localdate)
    method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default=CASH)

    description = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    documents = models.JSONField(default=list, blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_payments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-paid_date", "-created_at"]
        indexes = [
            models.Index(fields=["student", "payment_type"], name="payments_student_type_idx"),
            models.Index(fields=["student", "billing_period_start"], name="payments_student_period_idx"),
        ]

    def __str__(self):
        return f"{self.student} paid Rs. {self.amount} ({self.payment_type})"

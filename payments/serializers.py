# payments/serializers.py
from rest_framework import serializers

from payments.constants import CASH, PAYMENT_METHOD_CHOICES
from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source="student.full_name", read_only=True)
    recorded_by = serializers.CharField(source="recorded_by.name", read_only=True, default=None)

    class Meta:
        model = Payment
        fields = [
            "id",
            "student",
            "student_name",
            "amount",
            "payment_type",
            "billing_period_start",
            "billing_period_end",
            "paid_date",
            "method",
            "description",
            "notes",
            "documents",
            "recorded_by",
            "created_at",
        ]
        read_only_fields = fields


class _PaymentRequestSerializer(serializers.Serializer):
    # amount is checked by the billing validators so every endpoint reports
    # the same error codes
    amount = serializers.JSONField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, default=CASH)
    paid_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_internal_value(self, data):
        if hasattr(data, "copy") and isinstance(data.get("payment_method"), str):
            data = data.copy()
            data["payment_method"] = data["payment_method"].upper()
        return super().to_internal_value(data)


class MonthlyPaymentSerializer(_PaymentRequestSerializer):
    billing_period_start = serializers.DateField(required=False, allow_null=True)
    billing_period_end = serializers.DateField(required=False, allow_null=True)


class ExtraPaymentSerializer(_PaymentRequestSerializer):
    documents_data = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class CompletePaymentSerializer(_PaymentRequestSerializer):
    pass


class StudentDueSerializer(serializers.Serializer):
    """Serializes a row produced by ``services.student_dues``."""

    def to_representation(self, row):
        student = row["student"]
        bed = student.bed
        return {
            "student_id": student.id,
            "full_name": student.full_name,
            "phone": student.phone,
            "bed": str(bed) if bed else None,
            "monthly_rent": student.monthly_rent,
            "due": row["due"].as_dict(),
            "rent_balance": row["rent_balance"].as_dict(),
            "admission_balance": row["admission_balance"].as_dict(),
            "total_pending": row["rent_balance"].remaining + row["admission_balance"].remaining,
        }

# payments/views.py
import logging

from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from account.permissions import IsAdminOrWarden
from hostel.models import Student
from hostel.pagination import StandardResultsSetPagination
from payments import services
from payments.constants import DUE_SOON, OVERDUE, PAYMENT_TYPE_CHOICES
from payments.models import Payment
from payments.serializers import (
    CompletePaymentSerializer,
    ExtraPaymentSerializer,
    MonthlyPaymentSerializer,
    PaymentSerializer,
    StudentDueSerializer,
)

logger = logging.getLogger(__name__)


def _get_student(student_id):
    try:
        return Student.objects.select_related("bed").get(id=student_id)
    except Student.DoesNotExist:
        return None


def _validation_error_response(exc):
    return Response(
        {"error": exc.messages[0], "code": exc.code},
        status=status.HTTP_400_BAD_REQUEST
    )


class StudentBillingStatusView(APIView):
    """
    GET /api/v1/students/<student_id>/billing-status

    Billing periods from the current anchor date, due status and balances.
    """
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request, student_id):
        student = _get_student(student_id)
        if student is None:
            return Response({"error": "Student not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(services.build_billing_status(student), status=status.HTTP_200_OK)


class _RecordPaymentView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]
    serializer_class = None
    success_message = ""

    def record(self, student, data, user):
        raise NotImplementedError

    def post(self, request, student_id):
        student = _get_student(student_id)
        if student is None:
            return Response({"error": "Student not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = self.record(student, serializer.validated_data, request.user)
        except ValidationError as exc:
            logger.info("Rejected payment for student %s: %s", student_id, exc.messages[0])
            return _validation_error_response(exc)

        return Response({
            "message": self.success_message,
            "payment": PaymentSerializer(payment).data,
        }, status=status.HTTP_201_CREATED)


class MonthlyPaymentView(_RecordPaymentView):
    """POST /api/v1/students/<student_id>/payments/monthly"""
    serializer_class = MonthlyPaymentSerializer
    success_message = "Monthly payment recorded"

    def record(self, student, data, user):
        return services.record_monthly_payment(student, data, recorded_by=user)


class ExtraPaymentView(_RecordPaymentView):
    """POST /api/v1/students/<student_id>/payments/extra"""
    serializer_class = ExtraPaymentSerializer
    success_message = "Extra payment recorded"

    def record(self, student, data, user):
        return services.record_extra_payment(student, data, recorded_by=user)


class CompletePaymentView(_RecordPaymentView):
    """POST /api/v1/students/<student_id>/payments/complete"""
    serializer_class = CompletePaymentSerializer
    success_message = "Payment recorded"

    def record(self, student, data, user):
        return services.record_completion_payment(student, data, recorded_by=user)


class StudentPaymentListView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request, student_id):
        student = _get_student(student_id)
        if student is None:
            return Response({"error": "Student not found"}, status=status.HTTP_404_NOT_FOUND)

        payments = student.payments.select_related("recorded_by", "student")
        return Response(PaymentSerializer(payments, many=True).data, status=status.HTTP_200_OK)


class PaymentListView(APIView):
    """
    GET /api/v1/payments

    Query Parameters:
        - payment_type: RENT, EXTRA, REGISTRATION, ... (optional)
        - student_id: student ID (optional)
        - page: page number (optional, default: 1)
    """
    permission_classes = [IsAuthenticated, IsAdminOrWarden]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        payments = Payment.objects.select_related("student", "recorded_by")

        payment_type = request.GET.get("payment_type")
        student_id = request.GET.get("student_id")

        if payment_type:
            valid_types = [choice for choice, _ in PAYMENT_TYPE_CHOICES]
            if payment_type.upper() not in valid_types:
                return Response(
                    {"error": f"Invalid payment_type. Must be one of {valid_types}"},
                    status=status.HTTP_400_BAD_REQUEST
                )
            payments = payments.filter(payment_type=payment_type.upper())

        if student_id:
            try:
                payments = payments.filter(student_id=int(student_id))
            except ValueError:
                return Response({"error": "Invalid student_id"}, status=status.HTTP_400_BAD_REQUEST)

        paginator = self.pagination_class()
        page = paginator.paginate_queryset(payments, request)
        return paginator.get_paginated_response(PaymentSerializer(page, many=True).data)


class PaymentDetailView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request, payment_id):
        try:
            payment = Payment.objects.select_related("student", "recorded_by").get(id=payment_id)
        except Payment.DoesNotExist:
            return Response({"error": "Payment not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_200_OK)


class DuePaymentsView(APIView):
    """Active students whose rent falls due within the due-soon window."""
    permission_classes = [IsAuthenticated, IsAdminOrWarden]
    statuses = (DUE_SOON,)

    def get(self, request):
        rows = services.students_with_status(self.statuses, timezone.localdate())
        return Response(StudentDueSerializer(rows, many=True).data, status=status.HTTP_200_OK)


class OverduePaymentsView(DuePaymentsView):
    statuses = (OVERDUE,)


class FinancialSummaryView(APIView):
    """
    GET /api/v1/financial/summary?start=YYYY-MM-DD&end=YYYY-MM-DD

    Collections by payment type within the optional date range, plus what is
    still pending across active students.
    """
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        start = request.GET.get("start")
        end = request.GET.get("end")

        try:
            start_date = parse_date(start) if start else None
            end_date = parse_date(end) if end else None
        except ValueError:
            start_date = end_date = None

        if (start and start_date is None) or (end and end_date is None):
            return Response({"error": "Dates must be YYYY-MM-DD"}, status=status.HTTP_400_BAD_REQUEST)

        summary = services.financial_summary(start=start_date, end=end_date, today=timezone.localdate())
        return Response(summary, status=status.HTTP_200_OK)


class PendingStudentsView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        try:
            limit = int(request.GET.get("limit", 10))
        except ValueError:
            return Response({"error": "Invalid limit"}, status=status.HTTP_400_BAD_REQUEST)

        rows = services.pending_students(limit=max(1, limit), today=timezone.localdate())
        return Response(StudentDueSerializer(rows, many=True).data, status=status.HTTP_200_OK)

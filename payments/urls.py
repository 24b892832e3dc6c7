from django.urls import path
from payments.views import (
    StudentBillingStatusView,
    MonthlyPaymentView,
    ExtraPaymentView,
    CompletePaymentView,
    StudentPaymentListView,
    PaymentListView,
    PaymentDetailView,
    DuePaymentsView,
    OverduePaymentsView,
    FinancialSummaryView,
    PendingStudentsView,
)

urlpatterns = [
    # Student billing
    path("students/<int:student_id>/billing-status", StudentBillingStatusView.as_view(), name="student-billing-status"), # billing periods, due status and balances
    path("students/<int:student_id>/payments/monthly", MonthlyPaymentView.as_view(), name="record-monthly-payment"), # rent payment bound to a billing period
    path("students/<int:student_id>/payments/extra", ExtraPaymentView.as_view(), name="record-extra-payment"), # fines and other charges, outside the billing cycle
    path("students/<int:student_id>/payments/complete", CompletePaymentView.as_view(), name="complete-payment"), # settle the admission balance
    path("students/<int:student_id>/payments", StudentPaymentListView.as_view(), name="student-payments"), # payment history for a student

    # Payments
    path("payments", PaymentListView.as_view(), name="payment-list"),
    path("payments/due", DuePaymentsView.as_view(), name="payments-due"),
    path("payments/overdue", OverduePaymentsView.as_view(), name="payments-overdue"),
    path("payments/<int:payment_id>", PaymentDetailView.as_view(), name="payment-detail"),

    # Financial summary
    path("financial/summary", FinancialSummaryView.as_view(), name="financial-summary"),
    path("financial/pending-students", PendingStudentsView.as_view(), name="pending-students"),
]

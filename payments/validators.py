"""Field checks shared by the payment allocator and the API serializers."""

from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError

INVALID_AMOUNT = "invalid_amount"
MISSING_REASON = "missing_reason"
AMOUNT_EXCEEDS_BALANCE = "amount_exceeds_balance"
MISSING_PERIOD_START = "missing_period_start"


def validate_amount(value):
    """Return ``value`` as a positive whole amount or raise ``invalid_amount``."""
    if value is None or isinstance(value, bool):
        raise ValidationError("Please enter a valid amount greater than 0", code=INVALID_AMOUNT)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Please enter a valid amount greater than 0", code=INVALID_AMOUNT)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Please enter a valid amount greater than 0", code=INVALID_AMOUNT)
    if amount != amount.to_integral_value():
        raise ValidationError("Amount must be a whole number", code=INVALID_AMOUNT)
    return int(amount)


def validate_description(description):
    if description is None or not str(description).strip():
        raise ValidationError(
            "Please enter a reason/description for this payment",
            code=MISSING_REASON,
        )
    return str(description).strip()


def validate_completion_amount(value, remaining_balance):
    amount = validate_amount(value)
    if amount > remaining_balance:
        raise ValidationError(
            f"Amount cannot exceed remaining balance of Rs. {remaining_balance:,}",
            code=AMOUNT_EXCEEDS_BALANCE,
        )
    return amount


def validate_period_start(start):
    if start is None or start == "":
        raise ValidationError(
            "Please select a billing period start date",
            code=MISSING_PERIOD_START,
        )
    return start

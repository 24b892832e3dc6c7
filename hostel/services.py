import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


def send_sms(mobile, message):
    """
    Send a plain SMS through the configured gateway and return its request id.
    """
    api_key = settings.SMS_API_KEY
    if not api_key:
        raise ValueError("SMS_API_KEY not configured in settings")

    payload = {
        "sender_id": settings.SMS_SENDER_ID,
        "message": message,
        "language": "english",
        "route": "q",
        "numbers": mobile
    }

    headers = {
        "authorization": api_key,
        "Content-Type": "application/json"
    }

    try:
        response = requests.post(settings.SMS_API_URL, json=payload, headers=headers, timeout=10)
        response.raise_for_status()
        result = response.json()
    except requests.exceptions.RequestException as e:
        logger.error("Failed to send SMS to %s: %s", mobile, e)
        raise

    logger.info("SMS sent to %s: %s", mobile, result)
    return result.get('request_id', 'success')


def rent_reminder_message(student, due):
    if due.days_until_due <= 0:
        when = f"was due on {due.due_date:%b %d, %Y} ({due.days_overdue} day(s) overdue)"
    else:
        when = f"is due on {due.due_date:%b %d, %Y}"

    return (
        f"Hi {student.full_name},\n\n"
        f"Your hostel rent of Rs. {student.monthly_rent:,} {when}.\n"
        f"Please clear it at the office or via eSewa/Khalti/Fonepay."
    )

import logging

import requests
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from hostel.services import rent_reminder_message, send_sms
from payments.services import student_dues

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Send SMS reminders to active students whose rent is due soon or overdue."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the reminders that would be sent without sending them."
        )
        parser.add_argument(
            "--date",
            type=str,
            help="Evaluate dues as of this date (YYYY-MM-DD) instead of today."
        )

    def handle(self, *args, **options):
        dry_run = options.get("dry_run")
        today = timezone.localdate()
        if options.get("date"):
            try:
                today = parse_date(options["date"])
            except ValueError:
                today = None
            if today is None:
                raise CommandError(f"Invalid --date {options['date']!r}, expected YYYY-MM-DD")
        window = settings.RENT_REMINDER_DAYS

        reminders = [
            row for row in student_dues(today)
            if row["due"].days_until_due is not None and row["due"].days_until_due <= window
        ]
        if not reminders:
            self.stdout.write(self.style.SUCCESS("No rent reminders to send."))
            return

        sent = failed = 0
        for row in reminders:
            student, due = row["student"], row["due"]
            message = rent_reminder_message(student, due)

            if dry_run:
                self.stdout.write(f"Would remind student {student.id} ({student.phone}): {due.status}, {due.days_until_due} day(s)")
                continue

            try:
                send_sms(student.phone, message)
            except (ValueError, requests.exceptions.RequestException) as exc:
                failed += 1
                self.stdout.write(self.style.WARNING(f"Could not remind student {student.id}: {exc}"))
                continue
            sent += 1

        if dry_run:
            self.stdout.write(self.style.SUCCESS(f"Finished. {len(reminders)} reminder(s) would be sent."))
        else:
            logger.info("Rent reminders: %s sent, %s failed", sent, failed)
            self.stdout.write(self.style.SUCCESS(f"Finished. {sent} reminder(s) sent, {failed} failed."))

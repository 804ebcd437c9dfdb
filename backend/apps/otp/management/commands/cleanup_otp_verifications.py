"""
Management command to clean up consumed and expired OTP verifications.

Run periodically via cron or scheduled task to prevent database bloat.
Example: ./manage.py cleanup_otp_verifications --hours 24
"""

from datetime import timedelta

from django.core.management.base import BaseCommand

from apps.otp.services import cleanup_expired_verifications


class Command(BaseCommand):
    help = "Delete consumed or expired OTP verifications older than specified hours"

    def add_arguments(self, parser):
        parser.add_argument(
            "--hours",
            type=int,
            default=24,
            help="Delete rows created more than this many hours ago (default: 24)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without actually deleting",
        )

    def handle(self, *args, **options):
        hours = options["hours"]
        dry_run = options["dry_run"]

        count = cleanup_expired_verifications(older_than=timedelta(hours=hours), dry_run=dry_run)

        if dry_run:
            self.stdout.write(
                self.style.WARNING(f"[DRY RUN] Would delete {count} OTP verifications")
            )
        else:
            self.stdout.write(self.style.SUCCESS(f"Successfully deleted {count} OTP verifications"))

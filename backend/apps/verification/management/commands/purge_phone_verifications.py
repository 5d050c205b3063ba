"""
Management command to purge stale phone verification rows.
Removes expired codes and issuance records older than the rate-limit window.

Usage:
    python manage.py purge_phone_verifications --dry-run  # Preview
    python manage.py purge_phone_verifications             # Execute
"""
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.verification.models import PhoneCodeIssuance, PhoneVerificationChallenge
from apps.verification.services import PhoneVerificationService


class Command(BaseCommand):
    help = 'Purge expired verification codes and old issuance records'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Preview deletions without actually deleting',
        )
        parser.add_argument(
            '--hours',
            type=int,
            default=24,
            help='Age in hours after which issuance records are purged (default: 24)',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        now = timezone.now()

        # Never purge issuances the rate limit still counts
        retention = max(timedelta(hours=options['hours']), PhoneVerificationService.RATE_LIMIT_WINDOW)

        expired = PhoneVerificationChallenge.objects.filter(expires_at__lte=now)
        old_issuances = PhoneCodeIssuance.objects.filter(issued_at__lt=now - retention)

        if dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f'DRY RUN: Would delete {expired.count()} expired codes '
                    f'and {old_issuances.count()} issuance records'
                )
            )
            return

        expired_count, _ = expired.delete()
        issuance_count, _ = old_issuances.delete()

        self.stdout.write(
            self.style.SUCCESS(
                f'Deleted {expired_count} expired codes and {issuance_count} issuance records'
            )
        )

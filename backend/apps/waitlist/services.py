"""
Waitlist sign-up.

The confirmation email (when enabled) is sent inside the transaction: if it
fails the entry is rolled back. Admin notifications go out after commit and
their failures are only logged.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.waitlist.models import WaitlistEntry
from common.exceptions import ConflictError, DeliveryFailed, MissingFields
from common.services.email import EmailDeliveryError
from common.validators import normalize_email

logger = logging.getLogger(__name__)


class DuplicateWaitlistEmail(ConflictError):
    code = "DUPLICATE_EMAIL"

    def __init__(self):
        super().__init__("email", "This email has already been added to the waitlist.")


class WaitlistService:
    """Service for joining and listing the waitlist"""

    def __init__(self, email_sender, require_confirmation=None, admin_emails=None):
        self.email_sender = email_sender
        if require_confirmation is None:
            require_confirmation = settings.WAITLIST_REQUIRE_CONFIRMATION
        self.require_confirmation = require_confirmation
        self.admin_emails = list(settings.WAITLIST_ADMIN_EMAILS if admin_emails is None else admin_emails)

    def join(self, name, email) -> WaitlistEntry:
        """
        Add a person to the waitlist.

        Raises:
            MissingFields: name or email absent
            ValidationError: malformed email
            DuplicateWaitlistEmail: email already on the waitlist
            DeliveryFailed: confirmation required but could not be sent
        """
        missing = [field for field, value in (("name", name), ("email", email)) if not value or not str(value).strip()]
        if missing:
            raise MissingFields(missing)

        email = normalize_email(email)
        name = str(name).strip()

        try:
            with transaction.atomic():
                entry = WaitlistEntry.objects.create(name=name, email=email)

                if self.require_confirmation:
                    self._send_confirmation(entry)

                transaction.on_commit(lambda: self._notify_admins(entry))
        except IntegrityError:
            logger.info("Waitlist join rejected: duplicate email")
            raise DuplicateWaitlistEmail()

        logger.info(f"✅ Waitlist entry created: ID {entry.id}")
        return entry

    @staticmethod
    def list_entries():
        return WaitlistEntry.objects.order_by('-joined_at', '-id')

    def _send_confirmation(self, entry):
        try:
            self.email_sender.send(
                entry.email,
                "You're on the Kudora waitlist",
                f"Hi {entry.name},\n\nThanks for joining the Kudora waitlist. We'll let you know as soon as we open up."
            )
        except EmailDeliveryError as e:
            logger.error(f"❌ Waitlist confirmation failed for entry {entry.id}: {e}")
            raise DeliveryFailed("Failed to send confirmation email")

    def _notify_admins(self, entry):
        for admin_email in self.admin_emails:
            try:
                self.email_sender.send(
                    admin_email,
                    "New waitlist sign-up",
                    f"{entry.name} <{entry.email}> joined the waitlist at {entry.joined_at:%Y-%m-%d %H:%M} UTC."
                )
            except EmailDeliveryError as e:
                logger.error(f"Failed to notify {admin_email} about waitlist entry {entry.id}: {e}")

"""
Email capability used for buyer decisions and waitlist notifications.
"""
import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the mail backend."""


class EmailSender:
    """Interface for email transports."""

    def send(self, to: str, subject: str, body: str, html_body: str = None) -> None:
        raise NotImplementedError


class DjangoEmailSender(EmailSender):
    """
    Sends mail through Django's configured EMAIL_BACKEND.
    Unlike fail_silently=True, delivery errors are raised so callers can
    decide between rollback and logging.
    """

    def __init__(self, from_email=None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send(self, to: str, subject: str, body: str, html_body: str = None) -> None:
        email = EmailMultiAlternatives(
            subject=subject,
            body=body,
            from_email=self.from_email,
            to=[to]
        )
        if html_body:
            email.attach_alternative(html_body, "text/html")

        try:
            email.send(fail_silently=False)
        except (SMTPException, OSError) as e:
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email '{subject}' sent to {to}")

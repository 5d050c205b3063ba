"""
SMS capability used by phone verification.
Senders raise SmsDeliveryError on failure; callers decide whether that is fatal.
"""
import logging

from django.conf import settings
from twilio.base.exceptions import TwilioException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

logger = logging.getLogger(__name__)


class SmsDeliveryError(Exception):
    """Raised when an SMS provider rejects or fails to deliver a message."""


class SmsSender:
    """Interface for SMS transports."""

    def send(self, to: str, body: str) -> None:
        raise NotImplementedError


class LoggingSmsSender(SmsSender):
    """
    Development sender: writes the message to the log instead of a carrier.
    """

    def send(self, to: str, body: str) -> None:
        logger.info(f"📱 SMS to {to}: {body}")


class TwilioSmsSender(SmsSender):
    """Sends SMS through the Twilio REST API."""

    def __init__(self, account_sid=None, auth_token=None, from_number=None, timeout=None):
        account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER

        if not (account_sid and auth_token and self.from_number):
            raise ValueError(
                "Twilio is not configured. Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN "
                "and TWILIO_PHONE_NUMBER in your .env file."
            )

        http_client = TwilioHttpClient(timeout=timeout or settings.PROVIDER_TIMEOUT_SECONDS)
        self.client = Client(account_sid, auth_token, http_client=http_client)

    def send(self, to: str, body: str) -> None:
        try:
            message = self.client.messages.create(body=body, from_=self.from_number, to=to)
        except (TwilioException, OSError) as e:
            raise SmsDeliveryError(str(e)) from e

        logger.info(f"✅ SMS sent to {to} (sid={message.sid})")

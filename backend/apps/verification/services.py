"""
Phone verification service: issues, rate-limits, stores and validates one-time codes.

Per phone number: NONE -> ISSUED -> {VERIFIED, EXPIRED}. Re-issuing replaces the
live code. Expiry is enforced when a code is checked, not by deleting rows.
"""
import logging
import math
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.buyers.models import Buyer
from apps.verification.models import PhoneCodeIssuance, PhoneVerificationChallenge, VerifiedPhone
from common.exceptions import DeliveryFailed, InvalidOrExpiredCode, NotFound, RateLimited
from common.services.providers import get_sms_sender
from common.services.sms import SmsDeliveryError
from common.validators import validate_international_phone_number

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class PhoneStatus(str, Enum):
    VERIFIED = "verified"
    CODE_ACTIVE = "code_active"
    CODE_EXPIRED = "code_expired"
    NOT_STARTED = "not_started"


@dataclass(frozen=True)
class IssuedCode:
    phone: str
    code: str
    expires_at: datetime
    delivered: bool


def mask_phone(phone):
    return phone[:5] + '****' + phone[-2:] if phone else phone


class PhoneVerificationService:
    """Service for issuing and checking phone verification codes"""

    CODE_TTL = timedelta(minutes=10)
    RATE_LIMIT_WINDOW = timedelta(hours=1)
    MAX_CODES_PER_WINDOW = 5
    MESSAGE_TEMPLATE = "Your Kudora verification code is: {code}. This code expires in {minutes} minutes."

    def __init__(self, sms_sender, environment=Environment.PRODUCTION, clock=timezone.now,
                 code_ttl=None, max_codes_per_window=None):
        self.sms_sender = sms_sender
        self.environment = Environment(environment)
        self.clock = clock
        self.code_ttl = code_ttl or self.CODE_TTL
        self.max_codes_per_window = max_codes_per_window or self.MAX_CODES_PER_WINDOW

    @property
    def exposes_debug_codes(self):
        return self.environment is Environment.DEVELOPMENT

    @staticmethod
    def generate_code() -> str:
        """Uniformly random 6-digit code in 100000-999999"""
        return str(100000 + secrets.randbelow(900000))

    def issue_code(self, phone: str) -> IssuedCode:
        """
        Issue a new code for a phone, replacing any live one, and text it.

        Raises:
            ValidationError: phone is not an international number
            RateLimited: the phone already received the maximum codes this hour
            DeliveryFailed: SMS failed in production (the stored code stays valid)
        """
        phone = validate_international_phone_number(phone)
        now = self.clock()

        with transaction.atomic():
            self._check_rate_limit(phone, now)

            code = self.generate_code()
            expires_at = now + self.code_ttl
            self._store_challenge(phone, code, now, expires_at)
            PhoneCodeIssuance.objects.create(phone=phone, issued_at=now)

        if self.exposes_debug_codes:
            logger.info(f"📱 Code for {phone}: {code} (expires {expires_at:%H:%M:%S})")

        # Sent after commit: a delivery failure never rolls back the stored code
        delivered = self._deliver(phone, code)

        return IssuedCode(phone=phone, code=code, expires_at=expires_at, delivered=delivered)

    def verify_code(self, phone: str, code: str) -> bool:
        """
        Consume a code. Returns True if a buyer record was marked verified.

        The conditional delete is the check, so only one concurrent attempt
        can consume a given code.

        Raises:
            InvalidOrExpiredCode: no live code, wrong code, or expired
        """
        phone = validate_international_phone_number(phone)
        now = self.clock()

        with transaction.atomic():
            deleted, _ = PhoneVerificationChallenge.objects.filter(
                phone=phone,
                code=str(code),
                expires_at__gt=now
            ).delete()

            if not deleted:
                security_logger.warning(f"Invalid or expired verification code for {mask_phone(phone)}")
                raise InvalidOrExpiredCode()

            VerifiedPhone.objects.update_or_create(phone=phone, defaults={'verified_at': now})
            updated = Buyer.objects.filter(phone=phone).update(is_phone_verified=True, updated_at=now)

        logger.info(f"✅ Phone verified successfully: {mask_phone(phone)}")
        return updated > 0

    def resend_code(self, buyer_id) -> IssuedCode:
        """Re-issue a code to a buyer's phone. The normal rate limit applies."""
        try:
            buyer = Buyer.objects.get(id=buyer_id)
        except Buyer.DoesNotExist:
            raise NotFound("Buyer not found")

        return self.issue_code(buyer.phone)

    @staticmethod
    def phone_status(is_verified, challenge, now) -> PhoneStatus:
        if is_verified:
            return PhoneStatus.VERIFIED
        if challenge is None:
            return PhoneStatus.NOT_STARTED
        if challenge.is_expired(now):
            return PhoneStatus.CODE_EXPIRED
        return PhoneStatus.CODE_ACTIVE

    def _check_rate_limit(self, phone, now):
        window_start = now - self.RATE_LIMIT_WINDOW
        recent = PhoneCodeIssuance.objects.filter(phone=phone, issued_at__gt=window_start)

        if recent.count() >= self.max_codes_per_window:
            oldest = recent.order_by('issued_at').first()
            retry_after = math.ceil((oldest.issued_at + self.RATE_LIMIT_WINDOW - now).total_seconds())
            security_logger.warning(f"Code issuance rate limit hit for {mask_phone(phone)}")
            raise RateLimited(retry_after=max(retry_after, 1))

    @staticmethod
    def _store_challenge(phone, code, now, expires_at):
        values = {'code': code, 'issued_at': now, 'expires_at': expires_at}
        try:
            with transaction.atomic():
                PhoneVerificationChallenge.objects.update_or_create(phone=phone, defaults=values)
        except IntegrityError:
            # A concurrent issuance created the row first; last writer wins
            PhoneVerificationChallenge.objects.filter(phone=phone).update(**values)

    def _deliver(self, phone, code):
        body = self.MESSAGE_TEMPLATE.format(code=code, minutes=int(self.code_ttl.total_seconds() // 60))
        try:
            self.sms_sender.send(phone, body)
        except SmsDeliveryError as e:
            logger.error(f"❌ SMS delivery failed for {mask_phone(phone)}: {e}")
            if self.environment is Environment.PRODUCTION:
                raise DeliveryFailed("Failed to send SMS")
            return False
        return True


def build_phone_verification_service(**overrides):
    """Compose the service from settings; keyword overrides win."""
    if "sms_sender" not in overrides:
        overrides["sms_sender"] = get_sms_sender()
    overrides.setdefault("environment", settings.VERIFICATION_ENVIRONMENT)
    overrides.setdefault("code_ttl", timedelta(minutes=settings.PHONE_CODE_TTL_MINUTES))
    overrides.setdefault("max_codes_per_window", settings.PHONE_CODE_MAX_PER_HOUR)
    return PhoneVerificationService(**overrides)

"""
Buyer onboarding: validates sign-up input, enforces uniqueness and
derives the initial verification status.
"""
import logging

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction
from rest_framework import serializers

from apps.buyers.models import Buyer
from apps.buyers.services.registry import IdentityRegistry
from apps.verification.models import VerifiedPhone
from common.exceptions import (
    CaptchaRequired,
    ConflictError,
    ConsentRequired,
    MissingFields,
    NotFound,
    ValidationError,
)
from common.validators import normalize_email, validate_international_phone_number

logger = logging.getLogger(__name__)


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _as_bool(value, field):
    """Coerce JSON/form booleans the way DRF's BooleanField does."""
    try:
        if value in serializers.BooleanField.TRUE_VALUES:
            return True
        if value in serializers.BooleanField.FALSE_VALUES:
            return False
    except TypeError:
        pass
    raise ValidationError(f"'{field}' must be a boolean", field=field)


class BuyerOnboarding:
    """Service for creating buyer accounts."""

    REQUIRED_FIELDS = (
        "first_name",
        "last_name",
        "email",
        "phone",
        "password",
        "street_address",
        "city",
        "state",
        "zip_code",
        "country",
        "accepted_terms",
        "privacy_accepted",
    )
    CONSENT_FIELDS = ("accepted_terms", "privacy_accepted")
    OPTIONAL_TEXT_FIELDS = ("province", "id_type")

    def __init__(self, registry=None, require_captcha=None):
        self.registry = registry or IdentityRegistry()
        if require_captcha is None:
            require_captcha = settings.SIGNUP_REQUIRE_CAPTCHA
        self.require_captcha = require_captcha

    @property
    def required_fields(self):
        if self.require_captcha:
            return self.REQUIRED_FIELDS + ("is_captcha_verified",)
        return self.REQUIRED_FIELDS

    def signup(self, fields) -> Buyer:
        """
        Create a buyer from raw sign-up fields.

        Raises:
            ConsentRequired: terms or privacy explicitly declined
            MissingFields: any required field absent or blank
            CaptchaRequired: captcha required but not verified
            ValidationError: malformed email or phone
            ConflictError: email or phone already registered
        """
        # Declined consent wins over every other problem with the payload
        for name in self.CONSENT_FIELDS:
            value = fields.get(name)
            if not _is_blank(value) and not _as_bool(value, name):
                raise ConsentRequired()

        missing = [name for name in self.required_fields if _is_blank(fields.get(name))]
        if missing:
            raise MissingFields(missing)

        if self.require_captcha and not _as_bool(fields.get("is_captcha_verified"), "is_captcha_verified"):
            raise CaptchaRequired()

        email = normalize_email(fields.get("email"))
        phone = validate_international_phone_number(str(fields.get("phone")))

        conflict = self.registry.find_conflict(email, phone)
        if conflict:
            logger.info(f"Signup rejected: {conflict} already exists")
            raise ConflictError(conflict)

        documents = {name: (fields.get(name) or None) for name in Buyer.DOCUMENT_FIELDS}
        status = Buyer.Status.PENDING if all(documents.values()) else Buyer.Status.INCOMPLETE

        buyer = Buyer(
            first_name=str(fields.get("first_name")).strip(),
            last_name=str(fields.get("last_name")).strip(),
            email=email,
            phone=phone,
            password_hash=make_password(str(fields.get("password"))),
            street_address=str(fields.get("street_address")).strip(),
            city=str(fields.get("city")).strip(),
            state=str(fields.get("state")).strip(),
            zip_code=str(fields.get("zip_code")).strip(),
            country=str(fields.get("country")).strip(),
            is_phone_verified=VerifiedPhone.objects.filter(phone=phone).exists(),
            is_captcha_verified=_as_bool(fields.get("is_captcha_verified") or False, "is_captcha_verified"),
            status=status,
            accepted_terms=True,
            privacy_accepted=True,
            marketing_accepted=_as_bool(fields.get("marketing_accepted") or False, "marketing_accepted"),
            **documents,
        )
        for name in self.OPTIONAL_TEXT_FIELDS:
            setattr(buyer, name, str(fields.get(name) or "").strip())
        if fields.get("id_number"):
            buyer.set_id_number(str(fields.get("id_number")).strip())

        try:
            with transaction.atomic():
                buyer.save()
        except IntegrityError:
            # Lost a race with a concurrent signup; the constraint decides
            field = self.registry.find_conflict(email, phone) or "email"
            logger.info(f"Signup rejected by unique constraint: {field} already exists")
            raise ConflictError(field)

        logger.info(f"✅ Buyer signup successful: ID {buyer.id}, status {buyer.status}")
        return buyer

    @staticmethod
    def get_profile(buyer_id) -> Buyer:
        try:
            return Buyer.objects.get(id=buyer_id)
        except Buyer.DoesNotExist:
            raise NotFound("Buyer not found")

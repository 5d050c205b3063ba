"""
Centralized validators for buyer onboarding.
Includes validators for phone numbers, emails and uploaded image payloads.
"""
import base64
import binascii
import re
from io import BytesIO

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import RegexValidator, validate_email
from PIL import Image, UnidentifiedImageError

from common.exceptions import ValidationError


# ============================
# Phone Number Validator (International Format)
# ============================

phone_regex = RegexValidator(
    regex=r'^\+[1-9]\d{7,14}$',
    message="Phone number must be in E.164 format (e.g., +15551234567)"
)


def validate_international_phone_number(value):
    """
    Validates international phone number format.
    Accepts formats with country code: +15551234567, +447700900123, etc.
    Length: 8-15 digits (excluding + sign)
    SECURITY: Rejects non-ASCII to prevent unicode bypass attacks.

    Returns the E.164 form: separators removed and a leading '+' added if missing,
    so every spelling of one number compares equal.
    """
    cleaned = re.sub(r'[\s\-()]', '', value or '')

    if not cleaned.isascii():
        raise ValidationError("Phone number must contain only ASCII characters", field='phone')

    if not re.match(r'^\+?[1-9]\d{7,14}$', cleaned):
        raise ValidationError(
            "Phone number must be in international format with country code (e.g., +15551234567)",
            field='phone'
        )

    return '+' + cleaned.lstrip('+')


def normalize_email(value):
    """Validate an email address and lower-case it for uniqueness checks."""
    cleaned = (value or '').strip().lower()
    try:
        validate_email(cleaned)
    except DjangoValidationError:
        raise ValidationError("Enter a valid email address", field='email')
    return cleaned


# ============================
# Image Payload Validator
# ============================

MAX_IMAGE_BYTES = 10 * 1024 * 1024
ALLOWED_IMAGE_FORMATS = ('JPEG', 'PNG', 'WEBP', 'GIF')

# Upper bound on width x height of an accepted image
MAX_IMAGE_PIXELS = 50_000_000

_DATA_URI_RE = re.compile(r'^data:(?P<mime>[\w/+.-]+)?(;[\w=.-]+)*;base64,', re.IGNORECASE)


def decode_image_payload(image_data):
    """
    Decode a base64 string or data URI into raw image bytes.
    Checks size and that the bytes actually decode as an image (not just the declared type).
    """
    payload = _DATA_URI_RE.sub('', image_data.strip(), count=1)

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data must be base64 encoded", field='imageData')

    if not raw:
        raise ValidationError("Image data is empty", field='imageData')

    if len(raw) > MAX_IMAGE_BYTES:
        raise ValidationError(
            f"Image must not exceed {MAX_IMAGE_BYTES // (1024 * 1024)}MB. "
            f"Current size: {len(raw) / (1024 * 1024):.2f}MB",
            field='imageData'
        )

    try:
        with Image.open(BytesIO(raw)) as img:
            img_format = img.format
            width, height = img.size
            img.verify()
    except Image.DecompressionBombError:
        raise ValidationError("Image dimensions are too large", field='imageData')
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Image data is not a valid image", field='imageData')

    # Header dimensions are checked before any pixel data is decoded
    if width * height > MAX_IMAGE_PIXELS:
        raise ValidationError(
            f"Image dimensions {width}x{height} exceed the {MAX_IMAGE_PIXELS} pixel limit",
            field='imageData'
        )

    if img_format not in ALLOWED_IMAGE_FORMATS:
        raise ValidationError(
            f"Image format '{img_format}' is not allowed. "
            f"Allowed formats: {', '.join(ALLOWED_IMAGE_FORMATS)}",
            field='imageData'
        )

    return raw

"""
Error taxonomy for the onboarding workflow and the DRF handler that renders it.
Every error response carries the same envelope: success, error, code.
"""
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the workflow services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def as_dict(self):
        return {
            'success': False,
            'error': self.message,
            'code': self.code,
            **self.extra,
        }


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid request"

    def __init__(self, message=None, field=None, **extra):
        if field is not None:
            extra['field'] = field
        super().__init__(message, **extra)


class MissingFields(ValidationError):
    code = "missing_fields"
    default_message = "Missing required fields"

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(missing_fields=self.fields)


class ConsentRequired(ValidationError):
    code = "consent_required"
    default_message = "Terms of service and privacy policy must be accepted"


class CaptchaRequired(ValidationError):
    code = "captcha_required"
    default_message = "Captcha verification is required"


class InvalidStatus(ValidationError):
    code = "invalid_status"
    default_message = "Invalid status"


class InvalidOrExpiredCode(ValidationError):
    code = "invalid_or_expired_code"
    default_message = "Invalid or expired verification code"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"

    def __init__(self, field, message=None, **extra):
        self.field = field
        super().__init__(message or f"{field.capitalize()} already in use", field=field, **extra)


class RateLimited(ServiceError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "rate_limited"
    default_message = "Too many verification codes requested. Please try again later."


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class UploadFailed(ServiceError):
    code = "upload_failed"
    default_message = "Failed to upload image"


class DeliveryFailed(ServiceError):
    code = "delivery_failed"
    default_message = "Failed to deliver message"


class InternalError(ServiceError):
    pass


def service_exception_handler(exc, context):
    """
    DRF exception handler.
    Renders ServiceError subclasses directly and wraps DRF's own errors in the same envelope.
    """
    if isinstance(exc, ServiceError):
        return Response(exc.as_dict(), status=exc.status_code)

    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.exception(f"Storage failure in {view.__class__.__name__ if view else 'unknown view'}")
        return Response(InternalError().as_dict(), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data
    if isinstance(detail, dict) and 'detail' in detail:
        message = str(detail['detail'])
        body = {'success': False, 'error': message, 'code': getattr(exc, 'default_code', 'error')}
    else:
        body = {'success': False, 'error': 'Invalid request', 'code': 'validation_error', 'errors': detail}

    response.data = body
    return response

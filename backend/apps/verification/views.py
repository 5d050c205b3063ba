"""
Phone verification API views.
"""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.verification.serializers import SendCodeSerializer, VerifyCodeSerializer
from apps.verification.services import build_phone_verification_service
from common.permissions import IsReviewer
from common.throttling import OTPVerifyThrottle


def _issued_response(service, issued):
    body = {
        'success': True,
        'message': 'Verification code sent successfully' if issued.delivered else 'SMS service unavailable (dev mode)',
        'expires_at': issued.expires_at,
        'expires_in': int(service.code_ttl.total_seconds()),
    }
    # Only ever exposed in the development environment
    if service.exposes_debug_codes:
        body['debug_code'] = issued.code
    return Response(body)


@extend_schema(
    tags=['Phone Verification'],
    summary='Send verification code',
    description='''
    Sends a 6-digit code to the phone number by SMS.

    **Security Notes:**
    - At most 5 codes per phone number per rolling hour
    - Codes expire after 10 minutes
    - A new code replaces the previous one immediately
    ''',
    request=SendCodeSerializer,
    examples=[
        OpenApiExample('International Phone (US)', value={'phone': '+15551234567'}, request_only=True),
    ],
    responses={
        200: OpenApiResponse(
            description='Code sent',
            examples=[
                OpenApiExample(
                    'Success Response',
                    value={
                        'success': True,
                        'message': 'Verification code sent successfully',
                        'expires_at': '2026-10-18T10:10:00Z',
                        'expires_in': 600
                    }
                )
            ]
        ),
        400: OpenApiResponse(description='Missing or malformed phone number'),
        429: OpenApiResponse(
            description='Rate limit exceeded',
            examples=[
                OpenApiExample(
                    'Too Many Requests',
                    value={
                        'success': False,
                        'error': 'Too many verification codes requested. Please try again later.',
                        'code': 'rate_limited',
                        'retry_after': 1800
                    }
                )
            ]
        ),
        500: OpenApiResponse(description='SMS delivery failed'),
    }
)
@api_view(['POST'])
@permission_classes([AllowAny])
def send_sms_code(request):
    """Send a verification code to a phone."""
    serializer = SendCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    service = build_phone_verification_service()
    issued = service.issue_code(serializer.validated_data['phone'])
    return _issued_response(service, issued)


@extend_schema(
    tags=['Phone Verification'],
    summary='Verify code',
    description='''
    Checks a code against the live code for the phone. A code can be used once.
    On success the buyer with this phone (if any) is marked phone-verified.
    ''',
    request=VerifyCodeSerializer,
    responses={
        200: OpenApiResponse(
            description='Phone verified',
            examples=[OpenApiExample('Success', value={'success': True, 'message': 'Phone verified successfully'})]
        ),
        400: OpenApiResponse(
            description='Invalid or expired code',
            examples=[
                OpenApiExample(
                    'Invalid Code',
                    value={
                        'success': False,
                        'error': 'Invalid or expired verification code',
                        'code': 'invalid_or_expired_code'
                    }
                )
            ]
        ),
    }
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([OTPVerifyThrottle])
def verify_sms_code(request):
    """Verify a phone with a code."""
    serializer = VerifyCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    service = build_phone_verification_service()
    service.verify_code(serializer.validated_data['phone'], serializer.validated_data['code'])
    return Response({'success': True, 'message': 'Phone verified successfully'})


@extend_schema(
    tags=['Admin - Buyers'],
    summary='Resend verification code to a buyer',
    parameters=[
        OpenApiParameter(
            name='buyer_id',
            type=OpenApiTypes.INT,
            location=OpenApiParameter.PATH,
            description='ID of the buyer',
            required=True
        )
    ],
    request=None,
    responses={
        200: OpenApiResponse(description='Code sent'),
        404: OpenApiResponse(description='Buyer not found'),
        429: OpenApiResponse(description='Rate limit exceeded'),
    }
)
@api_view(['POST'])
@permission_classes([IsReviewer])
def resend_sms_code(request, buyer_id):
    """Resend a code to a buyer's phone (reviewers only)."""
    service = build_phone_verification_service()
    issued = service.resend_code(buyer_id)
    return _issued_response(service, issued)

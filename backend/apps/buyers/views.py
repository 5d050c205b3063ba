"""
Buyer API views: sign-up, availability checks, document uploads and reviewer actions.
"""
import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.buyers.serializers import (
    BuyerAdminSerializer,
    BuyerProfileSerializer,
    BuyerPublicSerializer,
    CheckEmailSerializer,
    CheckPhoneSerializer,
    ReviewDecisionSerializer,
    UploadVerificationImageSerializer,
    VerificationStatusSerializer,
)
from apps.buyers.services.documents import DocumentIntake
from apps.buyers.services.onboarding import BuyerOnboarding
from apps.buyers.services.registry import identity_registry
from apps.buyers.services.review import AdminReviewWorkflow
from common.exceptions import ConflictError
from common.permissions import IsReviewer
from common.services.providers import get_email_sender, get_image_store
from common.throttling import LookupThrottle, SignupThrottle, UploadThrottle
from common.validators import normalize_email, validate_international_phone_number

logger = logging.getLogger(__name__)


def _review_workflow():
    return AdminReviewWorkflow(email_sender=get_email_sender())


# ==================== Sign-up Endpoints ====================

@extend_schema(
    tags=['Buyers'],
    summary='Register a buyer',
    description='''
    Creates a buyer account and derives the initial verification status.

    **Business Rules:**
    - accepted_terms and privacy_accepted must be true
    - Email and phone must not belong to another buyer
    - Status is "pending" when id_front_url, id_back_url and selfie_url are all supplied, otherwise "incomplete"
    - A phone verified with a code before sign-up is carried over
    ''',
    request=OpenApiTypes.OBJECT,
    examples=[
        OpenApiExample(
            'Minimal Sign-up',
            value={
                'first_name': 'Ada',
                'last_name': 'Lovelace',
                'email': 'a@x.com',
                'phone': '+15551234567',
                'password': 'S3cure-pass!',
                'street_address': '1 Main St',
                'city': 'Springfield',
                'state': 'IL',
                'zip_code': '62701',
                'country': 'US',
                'accepted_terms': True,
                'privacy_accepted': True,
            },
            request_only=True
        ),
    ],
    responses={
        201: BuyerPublicSerializer,
        400: OpenApiResponse(
            description='Missing fields, consent not given or malformed input',
            examples=[
                OpenApiExample(
                    'Missing Fields',
                    value={
                        'success': False,
                        'error': 'Missing required fields',
                        'code': 'missing_fields',
                        'missing_fields': ['city', 'zip_code']
                    }
                )
            ]
        ),
        409: OpenApiResponse(
            description='Email or phone already registered',
            examples=[
                OpenApiExample(
                    'Email Conflict',
                    value={'success': False, 'error': 'Email already in use', 'code': 'conflict', 'field': 'email'}
                )
            ]
        ),
    }
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([SignupThrottle])
def signup(request):
    """Register a new buyer."""
    buyer = BuyerOnboarding().signup(request.data)
    return Response({
        'success': True,
        'message': 'Signup successful! Your account is being reviewed.',
        'buyer': BuyerPublicSerializer(buyer).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=['Buyers'],
    summary='Check email availability',
    request=CheckEmailSerializer,
    responses={
        200: OpenApiResponse(description='Email is available'),
        409: OpenApiResponse(description='Email already exists'),
    }
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LookupThrottle])
def check_email(request):
    """Check whether an email can be used for sign-up."""
    serializer = CheckEmailSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    email = normalize_email(serializer.validated_data['email'])

    if not identity_registry.is_email_available(email):
        raise ConflictError('email', 'Email already exists')

    return Response({'success': True, 'available': True, 'message': 'Email is available'})


@extend_schema(
    tags=['Buyers'],
    summary='Check phone availability',
    request=CheckPhoneSerializer,
    responses={
        200: OpenApiResponse(description='Phone is available'),
        409: OpenApiResponse(description='Phone already exists'),
    }
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LookupThrottle])
def check_phone(request):
    """Check whether a phone can be used for sign-up."""
    serializer = CheckPhoneSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    phone = validate_international_phone_number(serializer.validated_data['phone'])

    if not identity_registry.is_phone_available(phone):
        raise ConflictError('phone', 'Phone already exists')

    return Response({'success': True, 'available': True, 'message': 'Phone is available'})


# ==================== Document Endpoints ====================

@extend_schema(
    tags=['Documents'],
    summary='Upload a verification image',
    description='''
    Uploads an identity image (base64 or data URI). Images are shrunk to fit 1000x1000 and re-encoded as JPEG.

    **imageType:** id-front, id-back or selfie

    When userId is given, the URL is written to that buyer's matching document field.
    ''',
    request=UploadVerificationImageSerializer,
    responses={
        200: OpenApiResponse(
            description='Image stored',
            examples=[
                OpenApiExample(
                    'Success',
                    value={
                        'success': True,
                        'url': '/media/kudora-verification/selfie/3f2a.jpg',
                        'public_id': 'kudora-verification/selfie/3f2a.jpg'
                    }
                )
            ]
        ),
        400: OpenApiResponse(description='Missing or invalid image data/type'),
        404: OpenApiResponse(description='Buyer not found'),
        500: OpenApiResponse(description='Image store failure'),
    }
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([UploadThrottle])
def upload_verification_image(request):
    """Upload an identity document image."""
    serializer = UploadVerificationImageSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    stored = DocumentIntake(get_image_store()).upload_verification_image(
        data.get('imageData'),
        data.get('imageType'),
        buyer_id=data.get('userId'),
    )
    return Response({'success': True, 'url': stored.url, 'public_id': stored.id})


# ==================== Reviewer Endpoints ====================

BUYER_ID_PARAMETER = OpenApiParameter(
    name='buyer_id',
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    description='ID of the buyer',
    required=True
)


@extend_schema(
    tags=['Admin - Buyers'],
    summary='Get buyer profile',
    parameters=[BUYER_ID_PARAMETER],
    responses={200: BuyerProfileSerializer, 404: OpenApiResponse(description='Buyer not found')}
)
@api_view(['GET'])
@permission_classes([IsReviewer])
def buyer_profile(request, buyer_id):
    """Get a buyer's profile (reviewers only)."""
    buyer = BuyerOnboarding.get_profile(buyer_id)
    return Response({'success': True, 'buyer': BuyerProfileSerializer(buyer).data})


@extend_schema(
    tags=['Admin - Buyers'],
    summary='Approve buyer',
    parameters=[BUYER_ID_PARAMETER],
    request=ReviewDecisionSerializer,
    examples=[
        OpenApiExample('With Notes', value={'admin_notes': 'docs ok'}, request_only=True),
    ],
    responses={
        200: OpenApiResponse(
            description='Buyer approved',
            examples=[OpenApiExample('Success', value={'success': True, 'message': 'Buyer approved successfully'})]
        ),
        404: OpenApiResponse(description='Buyer not found'),
    }
)
@api_view(['PATCH'])
@permission_classes([IsReviewer])
def approve_buyer(request, buyer_id):
    """Approve a buyer (reviewers only)."""
    serializer = ReviewDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    buyer = _review_workflow().approve(
        buyer_id, notes=serializer.validated_data.get('admin_notes'), reviewer=request.user
    )
    return Response({
        'success': True,
        'message': 'Buyer approved successfully',
        'buyer': BuyerPublicSerializer(buyer).data,
    })


@extend_schema(
    tags=['Admin - Buyers'],
    summary='Reject buyer',
    parameters=[BUYER_ID_PARAMETER],
    request=ReviewDecisionSerializer,
    responses={
        200: OpenApiResponse(
            description='Buyer rejected',
            examples=[OpenApiExample('Success', value={'success': True, 'message': 'Buyer rejected successfully'})]
        ),
        404: OpenApiResponse(description='Buyer not found'),
    }
)
@api_view(['PATCH'])
@permission_classes([IsReviewer])
def reject_buyer(request, buyer_id):
    """Reject a buyer (reviewers only)."""
    serializer = ReviewDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    buyer = _review_workflow().reject(
        buyer_id, notes=serializer.validated_data.get('admin_notes'), reviewer=request.user
    )
    return Response({
        'success': True,
        'message': 'Buyer rejected successfully',
        'buyer': BuyerPublicSerializer(buyer).data,
    })


@extend_schema(
    tags=['Admin - Buyers'],
    summary='Set verification status',
    description='Directly sets status to pending, approved or rejected.',
    parameters=[BUYER_ID_PARAMETER],
    request=VerificationStatusSerializer,
    responses={
        200: OpenApiResponse(description='Status updated'),
        400: OpenApiResponse(description='Invalid status'),
        404: OpenApiResponse(description='Buyer not found'),
    }
)
@api_view(['PATCH'])
@permission_classes([IsReviewer])
def update_verification_status(request, buyer_id):
    """Set a buyer's verification status (reviewers only)."""
    serializer = VerificationStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    new_status = serializer.validated_data['status']

    buyer = _review_workflow().update_verification_status(
        buyer_id,
        new_status,
        notes=serializer.validated_data.get('admin_notes'),
        reviewer=request.user,
    )
    return Response({
        'success': True,
        'message': f'Verification status updated to {buyer.status}',
        'buyer': BuyerPublicSerializer(buyer).data,
    })


@extend_schema(
    tags=['Admin - Buyers'],
    summary='List all buyers',
    description='''
    Lists every buyer, newest first.

    Unless summary=false, each buyer includes verification_summary:
    - phone_status: verified, code_active, code_expired or not_started
    - documents_uploaded: true when all three document URLs are present
    ''',
    parameters=[
        OpenApiParameter(
            name='summary',
            type=OpenApiTypes.BOOL,
            location=OpenApiParameter.QUERY,
            description='Include the verification summary (default true)',
            required=False
        )
    ],
    responses={200: BuyerAdminSerializer(many=True)}
)
@api_view(['GET'])
@permission_classes([IsReviewer])
def list_buyers(request):
    """List all buyers (reviewers only)."""
    with_summary = request.query_params.get('summary', 'true').lower() not in ('false', '0', 'no')
    buyers = AdminReviewWorkflow().list_all(with_verification_summary=with_summary)

    serializer_class = BuyerAdminSerializer if with_summary else BuyerProfileSerializer
    return Response({
        'success': True,
        'count': len(buyers),
        'data': serializer_class(buyers, many=True).data,
    })

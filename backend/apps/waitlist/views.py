"""
Waitlist API views.
"""
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.response import Response

from apps.waitlist.serializers import JoinWaitlistSerializer, WaitlistEntrySerializer
from apps.waitlist.services import WaitlistService
from common.permissions import IsReviewerOrCreateOnly
from common.services.providers import get_email_sender
from common.throttling import WaitlistThrottle


@extend_schema(
    methods=['POST'],
    tags=['Waitlist'],
    summary='Join the waitlist',
    request=JoinWaitlistSerializer,
    examples=[
        OpenApiExample('Join', value={'name': 'Ada Lovelace', 'email': 'ada@example.com'}, request_only=True),
    ],
    responses={
        201: WaitlistEntrySerializer,
        400: OpenApiResponse(description='Missing name or email, or malformed email'),
        409: OpenApiResponse(
            description='Email already on the waitlist',
            examples=[
                OpenApiExample(
                    'Duplicate Email',
                    value={
                        'success': False,
                        'error': 'This email has already been added to the waitlist.',
                        'code': 'DUPLICATE_EMAIL',
                        'field': 'email'
                    }
                )
            ]
        ),
        500: OpenApiResponse(description='Confirmation email could not be sent'),
    }
)
@extend_schema(
    methods=['GET'],
    tags=['Waitlist'],
    summary='List waitlist entries (reviewers only)',
    responses={200: WaitlistEntrySerializer(many=True)}
)
@api_view(['GET', 'POST'])
@permission_classes([IsReviewerOrCreateOnly])
@throttle_classes([WaitlistThrottle])
def waitlist(request):
    """Join the waitlist (POST) or list it (GET)."""
    service = WaitlistService(email_sender=get_email_sender())

    if request.method == 'GET':
        entries = service.list_entries()
        return Response({
            'success': True,
            'count': len(entries),
            'data': WaitlistEntrySerializer(entries, many=True).data
        })

    serializer = JoinWaitlistSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    entry = service.join(serializer.validated_data.get('name'), serializer.validated_data.get('email'))
    return Response({
        'success': True,
        'data': WaitlistEntrySerializer(entry).data
    }, status=status.HTTP_201_CREATED)

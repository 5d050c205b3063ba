"""
Serializers for buyer projections and reviewer requests.
The password hash is never part of any projection.
"""
from rest_framework import serializers

from apps.buyers.models import Buyer


class BuyerPublicSerializer(serializers.ModelSerializer):
    """Projection returned right after sign-up"""

    name = serializers.CharField(source='full_name', read_only=True)

    class Meta:
        model = Buyer
        fields = [
            'id',
            'email',
            'name',
            'status',
            'is_phone_verified',
            'is_captcha_verified',
        ]
        read_only_fields = fields


class BuyerProfileSerializer(serializers.ModelSerializer):
    """Full buyer profile for reviewers"""

    id_number_masked = serializers.SerializerMethodField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Buyer
        fields = [
            'id',
            'first_name',
            'last_name',
            'email',
            'phone',
            'street_address',
            'city',
            'state',
            'province',
            'zip_code',
            'country',
            'id_type',
            'id_number_masked',
            'id_front_url',
            'id_back_url',
            'selfie_url',
            'is_phone_verified',
            'is_captcha_verified',
            'status',
            'status_display',
            'admin_notes',
            'accepted_terms',
            'privacy_accepted',
            'marketing_accepted',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_id_number_masked(self, obj):
        """Mask ID number for display"""
        id_number = obj.id_number
        if id_number:
            return '*' * max(len(id_number) - 4, 0) + id_number[-4:]
        return None


class BuyerAdminSerializer(BuyerProfileSerializer):
    """Profile plus the derived verification summary used by the admin listing"""

    verification_summary = serializers.SerializerMethodField()

    class Meta(BuyerProfileSerializer.Meta):
        fields = BuyerProfileSerializer.Meta.fields + ['verification_summary']
        read_only_fields = fields

    def get_verification_summary(self, obj):
        return getattr(obj, 'verification_summary', None)


class CheckEmailSerializer(serializers.Serializer):
    email = serializers.CharField()


class CheckPhoneSerializer(serializers.Serializer):
    phone = serializers.CharField()


class UploadVerificationImageSerializer(serializers.Serializer):
    """Request body for image uploads (names follow the web client)."""

    imageData = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    imageType = serializers.CharField(required=False, allow_blank=True)
    userId = serializers.IntegerField(required=False, allow_null=True)


class ReviewDecisionSerializer(serializers.Serializer):
    """Serializer for approving or rejecting a buyer"""

    admin_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)


class VerificationStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    admin_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

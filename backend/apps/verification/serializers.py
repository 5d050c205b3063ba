"""
Serializers for phone verification requests.
"""
from rest_framework import serializers

from common.exceptions import ValidationError
from common.validators import validate_international_phone_number


class PhoneField(serializers.CharField):
    """CharField that returns the phone in cleaned international format."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        try:
            return validate_international_phone_number(value)
        except ValidationError as e:
            raise serializers.ValidationError(e.message)


class SendCodeSerializer(serializers.Serializer):
    """Serializer for requesting a code"""

    phone = PhoneField(max_length=20)


class VerifyCodeSerializer(serializers.Serializer):
    """Serializer for verifying a code"""

    phone = PhoneField(max_length=20)
    code = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'Code must be exactly 6 digits'})

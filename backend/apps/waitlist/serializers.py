from rest_framework import serializers

from apps.waitlist.models import WaitlistEntry


class WaitlistEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = WaitlistEntry
        fields = ['id', 'name', 'email', 'joined_at']
        read_only_fields = fields


class JoinWaitlistSerializer(serializers.Serializer):
    """Both fields are checked by the service so errors share one envelope."""

    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    email = serializers.CharField(required=False, allow_blank=True, max_length=254)

"""
Identity registry: uniqueness lookups for buyer emails and phones.
These checks are advisory; the unique constraints on Buyer are authoritative.
"""
from typing import Optional

from apps.buyers.models import Buyer


class IdentityRegistry:
    """Read-only availability checks against existing buyers."""

    @staticmethod
    def is_email_available(email: str) -> bool:
        return not Buyer.objects.filter(email__iexact=email).exists()

    @staticmethod
    def is_phone_available(phone: str) -> bool:
        return not Buyer.objects.filter(phone=phone).exists()

    @classmethod
    def find_conflict(cls, email: str, phone: str) -> Optional[str]:
        """
        Return the field that collides with an existing buyer, or None.
        When both collide, email is reported.
        """
        if not cls.is_email_available(email):
            return "email"
        if not cls.is_phone_available(phone):
            return "phone"
        return None


# Singleton instance
identity_registry = IdentityRegistry()

"""
Encryption service for sensitive buyer data like ID numbers.
Uses Fernet symmetric encryption with key from settings.
"""
import logging

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


class EncryptionService:
    """Service for encrypting and decrypting sensitive data"""

    def __init__(self, key=None):
        encryption_key = key or getattr(settings, 'ENCRYPTION_KEY', None)

        if not encryption_key:
            raise ImproperlyConfigured(
                "ENCRYPTION_KEY not found in settings. "
                "Add ENCRYPTION_KEY to your .env file. "
                "Generate one with: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'"
            )

        if isinstance(encryption_key, str):
            encryption_key = encryption_key.encode()

        self.cipher = Fernet(encryption_key)

    def encrypt(self, value: str) -> str:
        """
        Encrypt a value for storage.

        Args:
            value: Plain text value

        Returns:
            Encrypted token as string ("" for empty input)
        """
        if not value:
            return ""

        return self.cipher.encrypt(value.encode()).decode()

    def decrypt(self, token: str) -> str:
        """
        Decrypt a stored token.

        Returns "" when the token is empty or was encrypted with another key.
        """
        if not token:
            return ""

        try:
            return self.cipher.decrypt(token.encode()).decode()
        except InvalidToken:
            logger.error("Decryption failed: token is invalid or key has rotated")
            return ""


def get_encryption_service():
    return EncryptionService()

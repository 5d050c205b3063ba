from django.db import models

from common.services.encryption import get_encryption_service
from common.validators import phone_regex


# ============================
# Buyer Model
# ============================

class Buyer(models.Model):
    """
    A registering marketplace buyer and their identity-verification state.
    Email and phone are unique; the database constraint is authoritative.
    """

    class Status(models.TextChoices):
        INCOMPLETE = "incomplete", "Incomplete"
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    # Identity
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(unique=True, db_index=True)
    phone = models.CharField(max_length=20, unique=True, db_index=True, validators=[phone_regex])
    password_hash = models.CharField(max_length=255)

    # Address
    street_address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    province = models.CharField(max_length=100, blank=True, default="")
    zip_code = models.CharField(max_length=20)
    country = models.CharField(max_length=100)

    # Identity documents
    id_type = models.CharField(max_length=50, blank=True, default="")
    id_number_encrypted = models.TextField(blank=True, default="")
    id_front_url = models.CharField(max_length=500, null=True, blank=True)
    id_back_url = models.CharField(max_length=500, null=True, blank=True)
    selfie_url = models.CharField(max_length=500, null=True, blank=True)

    # Verification
    is_phone_verified = models.BooleanField(default=False)
    is_captcha_verified = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.INCOMPLETE, db_index=True)
    admin_notes = models.TextField(blank=True, default="")

    # Consent
    accepted_terms = models.BooleanField(default=False)
    privacy_accepted = models.BooleanField(default=False)
    marketing_accepted = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    DOCUMENT_FIELDS = ("id_front_url", "id_back_url", "selfie_url")

    class Meta:
        db_table = "buyers"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.email} - {self.get_status_display()}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def documents_uploaded(self):
        return all(getattr(self, field) for field in self.DOCUMENT_FIELDS)

    @property
    def id_number(self):
        return get_encryption_service().decrypt(self.id_number_encrypted)

    def set_id_number(self, id_number):
        self.id_number_encrypted = get_encryption_service().encrypt(id_number)

from django.db import models


class PhoneVerificationChallenge(models.Model):
    """
    The live one-time code for a phone number.
    The phone is the primary key: issuing a new code overwrites this single slot.
    """
    phone = models.CharField(max_length=20, primary_key=True)
    code = models.CharField(max_length=6)
    issued_at = models.DateTimeField()
    expires_at = models.DateTimeField()

    class Meta:
        db_table = "phone_verifications"

    def __str__(self):
        return f"{self.phone[:5]}**** (expires {self.expires_at:%Y-%m-%d %H:%M})"

    def is_expired(self, now):
        return self.expires_at <= now


class PhoneCodeIssuance(models.Model):
    """Append-only record of code issuances, used for the rolling-hour rate limit."""
    phone = models.CharField(max_length=20)
    issued_at = models.DateTimeField()

    class Meta:
        db_table = "phone_code_issuances"
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["phone", "issued_at"], name="phone_issuance_lookup_idx"),
        ]


class VerifiedPhone(models.Model):
    """Phones whose possession was proven, including before the buyer signed up."""
    phone = models.CharField(max_length=20, primary_key=True)
    verified_at = models.DateTimeField()

    class Meta:
        db_table = "verified_phones"

    def __str__(self):
        return f"{self.phone[:5]}**** verified {self.verified_at:%Y-%m-%d}"

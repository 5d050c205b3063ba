"""
Custom throttle classes for rate limiting public onboarding endpoints.
SECURITY: Prevents enumeration of emails/phones, upload abuse and brute force of codes.
Rates come from REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'].
"""
from rest_framework.throttling import AnonRateThrottle


class SignupThrottle(AnonRateThrottle):
    """Throttle for buyer sign-up."""
    scope = 'signup'


class LookupThrottle(AnonRateThrottle):
    """
    Throttle for email/phone availability checks.
    Limits how fast an anonymous client can probe which identities exist.
    """
    scope = 'lookup'


class OTPVerifyThrottle(AnonRateThrottle):
    """
    Throttle for code verification.
    SECURITY: Prevents attackers from trying all 900,000 6-digit combinations.
    """
    scope = 'otp_verify'


class UploadThrottle(AnonRateThrottle):
    """Throttle for verification image uploads."""
    scope = 'upload'


class WaitlistThrottle(AnonRateThrottle):
    """Throttle for waitlist sign-ups."""
    scope = 'waitlist'

from django.contrib import admin

from .models import PhoneCodeIssuance, PhoneVerificationChallenge, VerifiedPhone


@admin.register(PhoneVerificationChallenge)
class PhoneVerificationChallengeAdmin(admin.ModelAdmin):
    # Codes are deliberately not listed
    list_display = ('phone', 'issued_at', 'expires_at')
    search_fields = ('phone',)
    exclude = ('code',)


@admin.register(PhoneCodeIssuance)
class PhoneCodeIssuanceAdmin(admin.ModelAdmin):
    list_display = ('phone', 'issued_at')
    search_fields = ('phone',)
    date_hierarchy = 'issued_at'


@admin.register(VerifiedPhone)
class VerifiedPhoneAdmin(admin.ModelAdmin):
    list_display = ('phone', 'verified_at')
    search_fields = ('phone',)

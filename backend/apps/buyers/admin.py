from django.contrib import admin

from .models import Buyer


@admin.register(Buyer)
class BuyerAdmin(admin.ModelAdmin):
    """
    Read-mostly admin for buyers.
    Status changes go through the reviewer API so transitions stay validated.
    """
    list_display = ('email', 'first_name', 'last_name', 'phone', 'status', 'is_phone_verified', 'created_at')
    list_filter = ('status', 'is_phone_verified', 'is_captcha_verified', 'country')
    search_fields = ('email', 'phone', 'first_name', 'last_name')
    ordering = ('-created_at',)
    readonly_fields = (
        'password_hash', 'id_number_encrypted', 'status', 'is_phone_verified',
        'created_at', 'updated_at',
    )

    fieldsets = (
        ('Identity', {'fields': ('first_name', 'last_name', 'email', 'phone', 'password_hash')}),
        ('Address', {'fields': ('street_address', 'city', 'state', 'province', 'zip_code', 'country')}),
        ('Documents', {'fields': ('id_type', 'id_number_encrypted', 'id_front_url', 'id_back_url', 'selfie_url')}),
        ('Verification', {'fields': ('status', 'admin_notes', 'is_phone_verified', 'is_captcha_verified')}),
        ('Consent', {'fields': ('accepted_terms', 'privacy_accepted', 'marketing_accepted')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at')}),
    )

from django.contrib import admin

from .models import WaitlistEntry


@admin.register(WaitlistEntry)
class WaitlistEntryAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'joined_at')
    search_fields = ('name', 'email')
    ordering = ('-joined_at',)

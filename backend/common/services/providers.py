"""
Builds provider capabilities from settings.
Backends are configured by dotted path, the same way Django resolves EMAIL_BACKEND.
"""
from django.conf import settings
from django.utils.module_loading import import_string


def get_sms_sender():
    return import_string(settings.SMS_BACKEND)()


def get_email_sender():
    return import_string(settings.EMAIL_SENDER_BACKEND)()


def get_image_store():
    return import_string(settings.IMAGE_STORE_BACKEND)()

"""
Settings used by the test suite.
"""
from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret-key"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ENCRYPTION_KEY = "knbe9juSBo7xb1FzGH81MfYEEJLqZC4QxWxRCWhrBL8="

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

SMS_BACKEND = "common.services.sms.LoggingSmsSender"

VERIFICATION_ENVIRONMENT = "production"

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'signup': '1000/min',
        'lookup': '1000/min',
        'otp_verify': '1000/min',
        'upload': '1000/min',
        'waitlist': '1000/min',
    },
}

WAITLIST_ADMIN_EMAILS = ["ops@kudora.com"]

WAITLIST_REQUIRE_CONFIRMATION = False

SIGNUP_REQUIRE_CAPTCHA = False

PHONE_CODE_TTL_MINUTES = 10
PHONE_CODE_MAX_PER_HOUR = 5

EMAIL_SENDER_BACKEND = "common.services.email.DjangoEmailSender"
IMAGE_STORE_BACKEND = "common.services.images.StorageImageStore"

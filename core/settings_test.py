"""
Test settings.

SQLite in-memory database, in-memory mail outbox and simulated SMS so the
suite never touches a real database server or provider.
"""
from .settings import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
CONTACT_EMAIL_FROM = 'registros@example.com'

SMS_ENABLED = False
TWILIO_ACCOUNT_SID = 'ACtest'
TWILIO_AUTH_TOKEN = 'test-token'
TWILIO_FROM_PHONE = '+15550000000'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

"""
pytest configuration for CementOps.
Starts from the development settings and swaps in an in-memory database,
quiet logging and fixed company details for the printed documents.
"""

import django
from django.conf import settings

from cementops import settings_dev


def _dev_settings() -> dict:
    return {name: getattr(settings_dev, name) for name in dir(settings_dev) if name.isupper()}


def pytest_configure(config):
    """Configure Django settings before tests run."""
    if settings.configured:
        return

    overrides = _dev_settings()
    overrides.update(
        DATABASES={"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}},
        SECRET_KEY="test-secret-key-not-for-production",
        STATIC_ROOT="/tmp/staticfiles_test",
        # JWT only, as in production
        REST_FRAMEWORK={
            **settings_dev.REST_FRAMEWORK,
            "DEFAULT_AUTHENTICATION_CLASSES": [
                "rest_framework_simplejwt.authentication.JWTAuthentication",
            ],
            "PAGE_SIZE": 50,
        },
        LOGGING={
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {"console": {"class": "logging.StreamHandler"}},
            "root": {"handlers": ["console"], "level": "WARNING"},
        },
        COMPANY_NAME="CementOps Test Depot Ltd",
        COMPANY_ADDRESS="1 Plant Road, Kano",
        COMPANY_PHONE="+2348000000000",
        # never reached; requests.post is patched wherever an SMS goes out
        SMS_GATEWAY_URL="http://sms-mock:8003",
    )
    settings.configure(**overrides)


# tests/conftest.py resolves the user model at import time, which happens
# before pytest_configure; configure settings and load the app registry now.
pytest_configure(None)
django.setup()

"""
CementOps — DEVELOPMENT settings.
Production settings with SQLite, in-process cache/channels/Celery and
human-readable logs, so the whole stack runs without Docker.
DO NOT use in production.
"""

from datetime import timedelta

from .settings import *  # noqa: F401,F403
from .settings import BASE_DIR, REST_FRAMEWORK, SIMPLE_JWT

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = "dev-insecure-key-change-in-production-do-not-use"

DEBUG = True
ALLOWED_HOSTS = ["*"]
CORS_ALLOW_ALL_ORIGINS = True

# ── Database: SQLite, no Docker needed ────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME":   BASE_DIR / "db.sqlite3",
    }
}

CACHES         = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}
CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}   # single runserver only

# ── Celery: run tasks inline, no broker ───────────────────────────────────────
CELERY_TASK_ALWAYS_EAGER     = True
CELERY_TASK_EAGER_PROPAGATES = True

SIMPLE_JWT = {**SIMPLE_JWT, "ACCESS_TOKEN_LIFETIME": timedelta(hours=24)}

REST_FRAMEWORK = {
    key: value for key, value in REST_FRAMEWORK.items()
    if key not in ("DEFAULT_THROTTLE_CLASSES", "DEFAULT_THROTTLE_RATES")
}
REST_FRAMEWORK["DEFAULT_AUTHENTICATION_CLASSES"] = [
    "rest_framework_simplejwt.authentication.JWTAuthentication",
    "rest_framework.authentication.SessionAuthentication",   # browsable API
]
REST_FRAMEWORK["PAGE_SIZE"] = 20

SPECTACULAR_SETTINGS = {
    "TITLE":       "CementOps API (Dev)",
    "DESCRIPTION": "Development build — CementOps distribution platform",
    "VERSION":     "dev",
}

# Local SMS stub: python docker/mocks/sms_server.py
SMS_GATEWAY_URL = "http://localhost:8003"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers":   {"console": {"class": "logging.StreamHandler", "formatter": "verbose"}},
    "formatters": {"verbose": {"format": "[{levelname}] {name}: {message}", "style": "{"}},
    "root": {"handlers": ["console"], "level": "DEBUG"},
}

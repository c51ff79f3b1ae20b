"""Test settings - uses SQLite for fast local testing."""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-7f3c9a1e5b2d8f4a6c0e9b7d3a1f5c8e2b4d6a9f0c3e7b1d")
os.environ.setdefault("DEBUG", "True")

from .base import *  # noqa: E402,F401,F403

DEBUG = True

# Use SQLite for tests (no PostgreSQL dependency)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# Faster password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable Redis cache in tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Disable Celery in tests
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_RESULT_BACKEND = "cache+memory://"

# Disable API throttling in tests for deterministic runs
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {  # noqa: F405
    "auth_burst": "1000/min",
    "auth_sustained": "1000/min",
    "otp": "1000/min",
}

JWT_AUTH_COOKIE_SECURE = False
OTP_DEBUG_RETURN_CODE = True
REWARD_OTP_REQUIRED = True

# Benepik and UAT
BENEPIK_BASE_URL = "https://benepik.test/"
BENEPIK_AUTH_KEY = "test-benepik-auth-key-0123456789abcdef"
BENEPIK_SECRET_KEY = "test-benepik-secret"
BENEPIK_CLIENT_ID = "7"
BENEPIK_ADMIN_ID = "11"
BENEPIK_CLIENT_CODE = "ZOPPER"
BENEPIK_WEBHOOK_SECRET = "test-webhook-secret"
UAT_CLIENT_ID = "uat-client"
UAT_TOKEN_SECRET = "test-uat-token-secret-0123456789abcdef"

# Disable logging noise during tests
LOGGING["handlers"].pop("file", None)  # noqa: F405
LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["spotincentive"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["spotincentive"]["level"] = "WARNING"  # noqa: F405

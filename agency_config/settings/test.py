"""
agency_config/settings/test.py
─────────────────────────────────────────────────────────────────────
pytest-django settings: in-memory SQLite, no Redis, eager Celery
"""
from .base import *  # noqa: F401, F403

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME":   ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

SESSION_ENGINE      = "django.contrib.sessions.backends.db"
STORAGES = {
    "default":     {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}
PASSWORD_HASHERS    = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CELERY_TASK_ALWAYS_EAGER     = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL            = "memory://"
CELERY_RESULT_BACKEND        = "cache+memory://"

AGENCY_CURRENT_SEASON = ""
AGENCY_PLAYER_STORE   = "django"

# Quiet console, keep the file handler out of the test run
LOGGING["loggers"]["agency"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["django"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["agency"]["level"]    = "WARNING"    # noqa: F405

import os
import tempfile
from pathlib import Path


# Mock SECRET_KEY for tests BEFORE importing settings to bypass validation
os.environ.setdefault("SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: E402, F403


# Override Database to use in-memory SQLite for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Keep uploaded test files out of the project tree
MEDIA_ROOT = Path(tempfile.mkdtemp(prefix="catalog-test-uploads-"))

# No real file storage or broker in tests
INFRASTRUCTURE["STORAGE_BACKEND"] = "memory"  # noqa: F405
CATALOG["IMAGE_GC_ASYNC"] = False  # noqa: F405

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOGGING["root"]["level"] = "WARNING"  # noqa: F405

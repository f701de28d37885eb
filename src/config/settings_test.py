"""Settings for the test suite.

Supplies the values that ``config.settings`` refuses to default and swaps
Redis for a local-memory cache so tests run without external services.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///test-db.sqlite3")

from config.settings import *  # noqa: E402,F401,F403

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "stockledger-tests",
    }
}

# Threads open their own connections; an in-memory SQLite test database
# would give each of them an empty schema.
if DATABASES["default"]["ENGINE"] == "django.db.backends.sqlite3":  # noqa: F405
    DATABASES["default"]["TEST"] = {  # noqa: F405
        "NAME": str(BASE_DIR / "test-stockledger.sqlite3")  # noqa: F405
    }

"""
Roombook – Django Settings (Infrastructure Only)
================================================
Django serves as the framework container for the reservation core.
The core owns the rules; Django supplies persistence, settings and
the HTTP adapter.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
# BASE_DIR = project root (where pyproject.toml lives)
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("ROOMBOOK_SECRET_KEY", "roombook-dev-key-replace-before-deployment")

DEBUG = os.environ.get("ROOMBOOK_DEBUG", "1") == "1"

ALLOWED_HOSTS = [h for h in os.environ.get("ROOMBOOK_ALLOWED_HOSTS", "").split(",") if h]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # ── Roombook Modules ──────────────────────────────────
    "core.reservation_store.apps.CoreReservationStoreConfig",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL ───────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("ROOMBOOK_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Reservation Rules ─────────────────────────────────────────
# Read once by adapters.django_api.wiring. Minutes / days as integers.
ROOM_BOOKING = {
    "CHECK_IN_BEFORE_MINUTES": 10,
    "CHECK_IN_AFTER_MINUTES": 10,
    "LATE_CHECK_IN_GRACE_MINUTES": 0,
    "CANCEL_CUTOFF_MINUTES": 30,
    "AUTO_NO_SHOW_AFTER_MINUTES": 30,
    "MAX_DURATION_MINUTES": 120,
    "NO_SHOW_CANCELS_RESERVATION": True,
    "MAX_WRITE_ATTEMPTS": 2,
    "BAN_LADDER": {
        "STRIKES_PER_BAN": 3,
        "BAN_DURATION_DAYS": 7,
        "BANS_BEFORE_PERMANENT": 3,
        "LATES_PER_NO_SHOW": 3,
    },
}

# Role → permission tokens. None keeps the built-in table.
ROOM_BOOKING_PERMISSIONS = None

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "roombook": {
            "handlers": ["console"],
            "level": os.environ.get("ROOMBOOK_LOG_LEVEL", "INFO"),
        },
    },
}

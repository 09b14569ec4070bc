"""
Django settings for the epos project.

Only what the POS core and its collaborators need: the ORM backend for the
catalog, table registry and order history, DRF for the data contracts, and
logging.
"""

import os
from decimal import Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "epos-dev-key-replace-before-deployment")

DEBUG = os.getenv("DJANGO_DEBUG", "True").lower() == "true"

ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "pos",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("EPOS_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# POS
# Tax applied on top of the (already VAT-inclusive) line totals at checkout.
POS_TAX_RATE = Decimal(os.getenv("POS_TAX_RATE", "0.10"))
POS_DEFAULT_ZONE = os.getenv("POS_DEFAULT_ZONE", "terrace")
# When true, a draft may only hold a table from its own zone.
POS_STRICT_ZONES = os.getenv("POS_STRICT_ZONES", "False").lower() == "true"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "pos": {
            "handlers": ["console"],
            "level": os.getenv("POS_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

"""
Django settings for macrolens.

Everything that changes between environments is read from the environment
(or a .env file next to manage.py) through django-environ.
"""

from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve().parent.parent

env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    LOG_LEVEL=(str, "INFO"),
    FRED_API_KEY=(str, None),
    OPENAI_API_KEY=(str, None),
    OPENAI_MODEL=(str, "gpt-4o"),
    UPSTREAM_CACHE_SECONDS=(int, 3600),
    UPSTREAM_TIMEOUT_SECONDS=(float, 10.0),
    UPSTREAM_MAX_WORKERS=(int, 8),
    HISTORY_LOOKBACK_DAYS=(int, 730),
    MARKET_HISTORY_LOOKBACK_DAYS=(int, 365),
    YAHOO_HISTORY_RANGE=(str, "1y"),
)
environ.Env.read_env(BASE_DIR / ".env")

SECRET_KEY = env("SECRET_KEY", default="django-insecure-macrolens-dev-key")
DEBUG = env("DEBUG")
ALLOWED_HOSTS = env("ALLOWED_HOSTS")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "analysis",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "macrolens.urls"
WSGI_APPLICATION = "macrolens.wsgi.application"

# Nothing is persisted, every request recomputes from upstream data
DATABASES = {}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "macrolens-upstream",
    }
}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "UNAUTHENTICATED_USER": None,
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": env("LOG_LEVEL"),
    },
}

# Upstream providers
FRED_API_KEY = env("FRED_API_KEY")
OPENAI_API_KEY = env("OPENAI_API_KEY")
OPENAI_MODEL = env("OPENAI_MODEL")

UPSTREAM_CACHE_SECONDS = env("UPSTREAM_CACHE_SECONDS")
UPSTREAM_TIMEOUT_SECONDS = env("UPSTREAM_TIMEOUT_SECONDS")
UPSTREAM_MAX_WORKERS = env("UPSTREAM_MAX_WORKERS")
HISTORY_LOOKBACK_DAYS = env("HISTORY_LOOKBACK_DAYS")
MARKET_HISTORY_LOOKBACK_DAYS = env("MARKET_HISTORY_LOOKBACK_DAYS")
YAHOO_HISTORY_RANGE = env("YAHOO_HISTORY_RANGE")

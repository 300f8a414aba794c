"""Django settings for the booth access project.

Values come from environment variables with development defaults.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name: str, default: bool = False) -> bool:
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "booths.apps.BoothsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]


def database_settings(environ) -> dict:
    """Postgres when POSTGRES_DB is set, otherwise a local SQLite file.

    Lock waits and statements are bounded at 5 seconds so a stuck row lock
    surfaces as a storage error instead of a hung request.
    """
    if environ.get("POSTGRES_DB"):
        return {
            "default": {
                "ENGINE": "django.db.backends.postgresql",
                "NAME": environ["POSTGRES_DB"],
                "USER": environ.get("POSTGRES_USER", "postgres"),
                "PASSWORD": environ.get("POSTGRES_PASSWORD", ""),
                "HOST": environ.get("POSTGRES_HOST", "localhost"),
                "PORT": environ.get("POSTGRES_PORT", "5432"),
                "OPTIONS": {
                    "connect_timeout": 5,
                    "options": "-c lock_timeout=5000 -c statement_timeout=5000",
                },
            }
        }
    return {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
            "OPTIONS": {"timeout": 5},
        }
    }


DATABASES = database_settings(os.environ)

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "UTC"

STATIC_URL = "static/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.IsAdminUser"],
    "EXCEPTION_HANDLER": "booths.handlers.exceptions.domain_exception_handler",
}

BOOTH_ACCESS = {
    # 24 hours by default; set to 8 for the one-shift policy.
    "SESSION_TTL_HOURS": int(os.environ.get("BOOTH_SESSION_TTL_HOURS", "24")),
    "MAX_FAILED_ATTEMPTS": int(os.environ.get("BOOTH_MAX_FAILED_ATTEMPTS", "5")),
    "RATE_LIMIT_WINDOW_MINUTES": int(os.environ.get("BOOTH_RATE_LIMIT_WINDOW_MINUTES", "60")),
    "DEFAULT_CODE_EXPIRY_DAYS": int(os.environ.get("BOOTH_CODE_EXPIRY_DAYS", "30")),
    "CODE_MAX_ATTEMPTS": 10,
    "ATTEMPT_RETENTION_DAYS": 7,
    "STATS_CACHE_SECONDS": 60,
    "LOG_JSON": env_bool("LOG_JSON", False),
    "LOG_LEVEL": os.environ.get("LOG_LEVEL", "INFO"),
}

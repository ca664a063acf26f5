"""Base Django settings for ShowRate."""

from __future__ import annotations

import os

import dj_database_url

from .config import BASE_DIR, get_settings

settings = get_settings()

SECRET_KEY = settings.secret_key
DEBUG = settings.debug
ALLOWED_HOSTS: list[str] = settings.allowed_hosts

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party
    "rest_framework",
    "corsheaders",
    # Project apps
    "apps.core",
    "apps.performances",
    "apps.evaluations",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "showrate_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "showrate_project.wsgi.application"
ASGI_APPLICATION = "showrate_project.asgi.application"

if settings.database_url:
    DATABASES = {
        "default": dj_database_url.parse(
            settings.database_url,
            conn_max_age=settings.db_conn_max_age,
        )
    }
    # Bound every store round trip; a cancelled statement surfaces as OperationalError.
    if DATABASES["default"]["ENGINE"] == "django.db.backends.postgresql":
        DATABASES["default"].setdefault("OPTIONS", {})["options"] = (
            f"-c statement_timeout={settings.db_statement_timeout_ms}"
        )
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
            "OPTIONS": {"timeout": max(settings.db_statement_timeout_ms // 1000, 1)},
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
}

CORS_ALLOWED_ORIGINS: list[str] = settings.cors_allowed_origins
CORS_ALLOW_CREDENTIALS = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} {funcName}:{lineno} - {message}",
            "style": "{",
        },
        "simple": {
            "format": "[{levelname}] {name} - {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.core": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.performances": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.evaluations": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
}

# Debug mode logging - enabled via DJANGO_DEBUG_STARTUP env var
if os.getenv("DJANGO_DEBUG_STARTUP") == "true":
    LOGGING["handlers"]["console"]["formatter"] = "verbose"
    LOGGING["loggers"]["django"]["level"] = "DEBUG"
    LOGGING["loggers"]["apps.core"]["level"] = "DEBUG"
    LOGGING["loggers"]["apps.performances"]["level"] = "DEBUG"
    LOGGING["loggers"]["apps.evaluations"]["level"] = "DEBUG"
    LOGGING["root"]["level"] = "DEBUG"

REDIS_URL = settings.redis_url

RATE_LIMITS = {
    "evaluations": {
        "per_minute": settings.evaluation_rate_limit_per_minute,
    }
}

GUEST_SESSION_KEY = settings.guest_session_key

POSTHOG_PROJECT_API_KEY = settings.posthog_project_api_key
POSTHOG_HOST = settings.posthog_host
POSTHOG_DEBUG = settings.posthog_debug
POSTHOG_DISABLED = settings.posthog_disabled

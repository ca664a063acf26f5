"""Production settings."""

from __future__ import annotations

import os

from .base import *  # noqa: F401,F403

DEBUG = False

# Security hardening defaults; values should be overridden via environment variables.
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = int(os.getenv("DJANGO_SECURE_HSTS_SECONDS", 3600))
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Handle wildcard patterns for CORS (for preview environments)
CORS_ALLOWED_ORIGIN_REGEXES = []
CORS_ALLOWED_ORIGINS = []

for origin in settings.cors_allowed_origins:  # noqa: F405
    if origin.startswith("."):
        escaped_domain = origin[1:].replace(".", r"\.")
        CORS_ALLOWED_ORIGIN_REGEXES.append(rf"https://[a-zA-Z0-9\-]+\.{escaped_domain}")
    else:
        CORS_ALLOWED_ORIGINS.append(origin)

CORS_ALLOW_ALL_ORIGINS = False

if not SECRET_KEY or SECRET_KEY == "development-secret-key":  # noqa: F405
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production environment")

if not ALLOWED_HOSTS:  # noqa: F405
    raise RuntimeError("DJANGO_ALLOWED_HOSTS must be configured for production")

"""App configuration for the core utilities."""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.core"
    verbose_name = "Core"

    def ready(self) -> None:  # pragma: no cover - executed at app startup
        from .posthog import configure_posthog

        logger.debug("Starting PostHog bootstrap")
        configure_posthog()
        logger.debug("PostHog bootstrap complete")

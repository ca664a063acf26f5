"""App configuration for the performance catalogue."""

from django.apps import AppConfig


class PerformancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.performances"
    verbose_name = "Performances"

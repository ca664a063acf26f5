"""App configuration for viewer evaluations."""

from django.apps import AppConfig


class EvaluationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.evaluations"
    verbose_name = "Evaluations"

"""App config for the incentives module."""
from django.apps import AppConfig


class IncentivesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "incentives"
    verbose_name = "Incentives"

    def ready(self):
        import incentives.signals  # noqa: F401

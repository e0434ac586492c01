"""
apps.py - App configuration with signal registration
"""
from django.apps import AppConfig


class AgencyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name               = "agency"
    verbose_name       = "Gestión de la agencia deportiva"

    def ready(self):
        import agency.signals  # noqa: F401  ← registers all signals

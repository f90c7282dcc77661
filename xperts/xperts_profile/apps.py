"""Configure this application."""

from django.apps import AppConfig


class XpertsProfileConfig(AppConfig):
    """Configuration for this django app."""

    name = "xperts.xperts_profile"
    label = "xperts_profile"
    verbose_name = "Xperts profile"
    default_auto_field = "django.db.models.BigAutoField"

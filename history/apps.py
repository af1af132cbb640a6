"""Django app configuration for the history app."""

from django.apps import AppConfig


class HistoryConfig(AppConfig):
    """Append-only audit trail of lifecycle transitions."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "history"

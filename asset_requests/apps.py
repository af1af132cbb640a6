"""Django app configuration for the asset requests app."""

from django.apps import AppConfig


class AssetRequestsConfig(AppConfig):
    """Request lifecycle: submit, approve, reject, complete."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "asset_requests"

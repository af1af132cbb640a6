"""DRF exception handler mapping domain errors onto HTTP responses."""

import logging

from django.db import OperationalError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import AssetDeskError, Unavailable

logger = logging.getLogger("assetdesk")


def error_body(exc: AssetDeskError) -> dict:
    return {"detail": exc.detail, "code": exc.code}


def api_exception_handler(exc, context):
    """Render AssetDeskError subclasses as ``{"detail", "code"}`` with their status.

    Database outages and timeouts surface as 503 ``unavailable``. Anything else
    is left to DRF's default handler.
    """
    if isinstance(exc, OperationalError):
        view = context.get("view")
        logger.error(
            "persistence.unavailable",
            exc_info=exc,
            extra={"view": type(view).__name__ if view is not None else None},
        )
        exc = Unavailable()
    if isinstance(exc, AssetDeskError):
        return Response(error_body(exc), status=exc.status_code)
    return exception_handler(exc, context)

import logging

logger = logging.getLogger("auth")


def log_auth_event(action: str, request, user=None, status: str = "success", **context):
    """Log `auth.<action>` with the caller's ip, outcome and, when known, id and role."""
    extra = {"ip": request.META.get("REMOTE_ADDR"), "status": status, **context}
    if user is not None and getattr(user, "is_authenticated", False):
        extra.update(user_id=user.id, role=user.role)
    logger.info(f"auth.{action}", extra=extra)

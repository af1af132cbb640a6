"""Idempotent replay for retried mutations (`Idempotency-Key` header).

Approve, reject, complete and return may be retried by clients after a timeout;
a repeated key replays the stored response instead of re-running the handler.
"""

import hashlib
import json
import logging
from datetime import timedelta
from typing import Callable, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import IdempotencyKey

logger = logging.getLogger("assetdesk.requests")

# Outcomes that may change on a later retry; they are returned but never stored.
TRANSIENT_ERROR_CODES = frozenset({"insufficient_stock", "unavailable"})


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - If the handler raises or reports a transient error, the key is forgotten so the client can retry.
    """
    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)
    ttl = timedelta(hours=getattr(settings, "IDEMPOTENCY_KEY_TTL_HOURS", 24))

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + ttl,
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload", "code": "conflict"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            logger.info("idempotency.replayed", extra={"key": key, "path": path, "scope": scope})
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress", "code": "conflict"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    if code >= 500 or (isinstance(body, dict) and body.get("code") in TRANSIENT_ERROR_CODES):
        IdempotencyKey.objects.filter(id=idem.id).delete()
        return body, code

    IdempotencyKey.objects.filter(id=idem.id).update(response_json=body, response_code=code)
    return body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def run_idempotent(request, handler: Callable[[], Tuple[dict, int]]) -> Tuple[dict, int]:
    """Apply `with_idempotency` when the request carries an `Idempotency-Key` header."""
    idem_key = request.headers.get("Idempotency-Key")
    if not idem_key:
        return handler()
    return with_idempotency(
        key=idem_key,
        user=request.user,
        path=str(request.path),
        method=str(request.method),
        request_hash=compute_request_hash(getattr(request, "data", None)),
        handler=handler,
    )


# EOF

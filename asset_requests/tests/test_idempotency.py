import io
from datetime import timedelta

import pytest
from asset_requests.idempotency import compute_request_hash, with_idempotency
from asset_requests.models import IdempotencyKey
from django.core.management import call_command
from django.utils import timezone
from users.tests.factories import UserFactory


def _call(user, handler, key="k-1", request_hash=None):
    return with_idempotency(
        key=key,
        user=user,
        path="/api/v1/requests/1/approve/",
        method="post",
        handler=handler,
        request_hash=request_hash,
    )


@pytest.mark.django_db
def test_handler_runs_once_per_key_and_scope():
    user = UserFactory()
    calls = []

    def handler():
        calls.append(1)
        return {"status": "approved"}, 200

    assert _call(user, handler) == ({"status": "approved"}, 200)
    assert _call(user, handler) == ({"status": "approved"}, 200)
    assert len(calls) == 1

    # another user gets its own scope
    _call(UserFactory(), handler)
    assert len(calls) == 2
    idem = IdempotencyKey.objects.get(user=user)
    assert idem.scope == f"user:{user.id}"
    assert idem.method == "POST"
    assert idem.expires_at > timezone.now()


@pytest.mark.django_db
def test_raising_handler_forgets_the_key():
    user = UserFactory()

    def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        _call(user, failing)
    assert not IdempotencyKey.objects.exists()

    assert _call(user, lambda: ({"ok": True}, 200)) == ({"ok": True}, 200)


@pytest.mark.django_db
def test_in_flight_key_reports_conflict():
    user = UserFactory()
    IdempotencyKey.objects.create(
        key="k-1", user=user, scope=f"user:{user.id}", path="/api/v1/requests/1/approve/", method="POST"
    )
    body, code = _call(user, lambda: ({"ok": True}, 200))
    assert code == 409
    assert body["code"] == "conflict"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "body, code",
    [
        ({"detail": "Only 1 unit(s) available.", "code": "insufficient_stock"}, 409),
        ({"detail": "Service temporarily unavailable.", "code": "unavailable"}, 503),
    ],
)
def test_transient_outcomes_are_not_stored(body, code):
    user = UserFactory()
    calls = []

    def handler():
        calls.append(1)
        return body, code

    assert _call(user, handler) == (body, code)
    assert not IdempotencyKey.objects.exists()
    _call(user, handler)
    assert len(calls) == 2


def test_request_hash_is_order_independent():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({"a": 1}) != compute_request_hash({"a": 2})
    assert compute_request_hash({}) is None


@pytest.mark.django_db
def test_cleanup_idempotency_command():
    user = UserFactory()
    now = timezone.now()
    for i, expires in enumerate([now - timedelta(hours=1), now - timedelta(days=2), now + timedelta(hours=1)]):
        IdempotencyKey.objects.create(
            key=f"k-{i}", user=user, scope=f"user:{user.id}", path="/p/", method="POST", expires_at=expires
        )

    out = io.StringIO()
    call_command("cleanup_idempotency", "--dry-run", stdout=out)
    assert "2 expired" in out.getvalue()
    assert IdempotencyKey.objects.count() == 3

    call_command("cleanup_idempotency", stdout=io.StringIO())
    assert list(IdempotencyKey.objects.values_list("key", flat=True)) == ["k-2"]

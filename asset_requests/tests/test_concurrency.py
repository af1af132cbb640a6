import threading

import pytest
from asset_requests.models import AssetRequest
from asset_requests.services import approve_request, submit_request
from common.exceptions import Conflict, InsufficientStock
from django.db import close_old_connections, connection
from history.models import HistoryEntry
from inventory.tests.factories import InventoryItemFactory
from users.tests.factories import AdminFactory, UserFactory

pytestmark = pytest.mark.skipif(
    connection.vendor == "sqlite", reason="SQLite serializes writers; needs a database with row-level locking"
)


def _race(callables):
    barrier = threading.Barrier(len(callables))
    outcomes = []
    lock = threading.Lock()

    def _run(fn):
        barrier.wait()
        try:
            fn()
            result = "ok"
        except (Conflict, InsufficientStock) as exc:
            result = exc.code
        finally:
            close_old_connections()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=_run, args=(fn,)) for fn in callables]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


@pytest.mark.django_db(transaction=True)
def test_concurrent_approvals_never_oversubscribe():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=5)
    requests = [submit_request(actor=UserFactory(), item_id=item.id, quantity=3, notes="Team") for _ in range(4)]

    outcomes = _race([lambda r=r: approve_request(actor=admin, request_id=r.id) for r in requests])

    item.refresh_from_db()
    assert outcomes.count("ok") == 1
    assert outcomes.count("insufficient_stock") == 3
    assert item.available_quantity == 2
    assert AssetRequest.objects.filter(status=AssetRequest.STATUS_APPROVED).count() == 1


@pytest.mark.django_db(transaction=True)
def test_double_click_approval_applies_once():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=5)
    req = submit_request(actor=UserFactory(), item_id=item.id, quantity=1, notes="Mouse")

    outcomes = _race([lambda: approve_request(actor=admin, request_id=req.id)] * 2)

    item.refresh_from_db()
    assert sorted(outcomes) == ["conflict", "ok"]
    assert item.available_quantity == 4
    assert HistoryEntry.objects.filter(action_type="approved").count() == 1

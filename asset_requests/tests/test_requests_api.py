import pytest
from asset_requests import views
from asset_requests.models import AssetRequest, IdempotencyKey
from asset_requests.tests.factories import AssetRequestFactory
from django.db import OperationalError
from history.models import HistoryEntry
from inventory import stock
from inventory.tests.factories import InventoryItemFactory
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_submit_and_list_visibility():
    alice, bob = UserFactory(), UserFactory()
    item = InventoryItemFactory(total_quantity=3)

    resp = _client(alice).post(
        "/api/v1/requests/",
        {"item_id": item.id, "quantity": 1, "notes": "Replacement", "urgency": "Urgent"},
        format="json",
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["item_name"] == item.name
    assert body["available_quantity"] == 3
    AssetRequestFactory(employee=bob)

    mine = _client(alice).get("/api/v1/requests/").json()
    assert [r["id"] for r in mine["results"]] == [body["id"]]
    # employees cannot widen the scope
    assert _client(alice).get(f"/api/v1/requests/?employee={bob.id}").json()["count"] == 1
    assert _client(bob).get(f"/api/v1/requests/{body['id']}/").status_code == 404

    everyone = _client(AdminFactory()).get("/api/v1/requests/").json()
    assert everyone["count"] == 2


@pytest.mark.django_db
def test_submit_validation_errors():
    client = _client(UserFactory())
    missing_notes = client.post("/api/v1/requests/", {"item_id": InventoryItemFactory().id, "quantity": 1})
    assert missing_notes.status_code == 400
    assert "notes" in missing_notes.json()

    no_item = client.post("/api/v1/requests/", {"quantity": 1, "notes": "x"}, format="json")
    assert no_item.status_code == 400

    unknown = client.post("/api/v1/requests/", {"item_id": 999999, "quantity": 1, "notes": "x"}, format="json")
    assert unknown.status_code == 404
    assert unknown.json()["code"] == "not_found"
    assert not AssetRequest.objects.exists()


@pytest.mark.django_db
def test_list_filters_and_unknown_status():
    admin = AdminFactory()
    urgent = AssetRequestFactory(urgency="Urgent", item_name="Monitor arm")
    AssetRequestFactory()
    client = _client(admin)

    assert [r["id"] for r in client.get("/api/v1/requests/?urgency=Urgent").json()["results"]] == [urgent.id]
    assert client.get("/api/v1/requests/?search=monitor arm").json()["count"] == 1
    assert client.get(f"/api/v1/requests/?item={urgent.item_id}").json()["count"] == 1

    bad = client.get("/api/v1/requests/?status=archived")
    assert bad.status_code == 400
    assert bad.json()["code"] == "validation_error"


@pytest.mark.django_db
def test_review_endpoints_map_domain_errors():
    admin = _client(AdminFactory())
    item = InventoryItemFactory(total_quantity=1)
    first = AssetRequestFactory(item=item)
    second = AssetRequestFactory(item=item)

    ok = admin.post(f"/api/v1/requests/{first.id}/approve/", {"comment": "Go"}, format="json")
    assert ok.status_code == 200
    assert ok.json()["status"] == "approved"
    assert ok.json()["reviewed_by_name"]

    short = admin.post(f"/api/v1/requests/{second.id}/approve/", {}, format="json")
    assert short.status_code == 409
    assert short.json()["code"] == "insufficient_stock"

    again = admin.post(f"/api/v1/requests/{first.id}/approve/", {}, format="json")
    assert again.status_code == 409
    assert again.json()["code"] == "conflict"

    missing = admin.post("/api/v1/requests/999999/reject/", {"reason": "x"}, format="json")
    assert missing.status_code == 404

    no_reason = admin.post(f"/api/v1/requests/{second.id}/reject/", {}, format="json")
    assert no_reason.status_code == 400

    done = admin.post(f"/api/v1/requests/{first.id}/complete/", {"condition": "Good"}, format="json")
    assert done.status_code == 200
    assert done.json()["status"] == "completed"


@pytest.mark.django_db
def test_employees_cannot_review():
    req = AssetRequestFactory()
    client = _client(req.employee)
    for action in ("approve", "reject", "complete"):
        assert client.post(f"/api/v1/requests/{req.id}/{action}/", {"reason": "x"}, format="json").status_code == 403


@pytest.mark.django_db
def test_approve_replays_with_idempotency_key():
    admin = _client(AdminFactory())
    item = InventoryItemFactory(total_quantity=5)
    req = AssetRequestFactory(item=item, quantity=2)
    url = f"/api/v1/requests/{req.id}/approve/"

    r1 = admin.post(url, {"comment": "OK"}, format="json", HTTP_IDEMPOTENCY_KEY="approve-1")
    r2 = admin.post(url, {"comment": "OK"}, format="json", HTTP_IDEMPOTENCY_KEY="approve-1")
    assert r1.status_code == r2.status_code == 200
    assert r1.json() == r2.json()
    item.refresh_from_db()
    assert item.available_quantity == 3
    assert HistoryEntry.objects.filter(action_type="approved").count() == 1

    reused = admin.post(url, {"comment": "Different"}, format="json", HTTP_IDEMPOTENCY_KEY="approve-1")
    assert reused.status_code == 409

    # without a key the retry is a plain conflict
    assert admin.post(url, {"comment": "OK"}, format="json").status_code == 409


@pytest.mark.django_db
def test_insufficient_stock_is_retried_under_the_same_key():
    admin = _client(AdminFactory())
    item = InventoryItemFactory(total_quantity=1)
    req = AssetRequestFactory(item=item, quantity=3)
    url = f"/api/v1/requests/{req.id}/approve/"

    r1 = admin.post(url, {}, format="json", HTTP_IDEMPOTENCY_KEY="short-1")
    assert r1.status_code == 409
    assert r1.json()["code"] == "insufficient_stock"
    assert not IdempotencyKey.objects.filter(key="short-1").exists()

    stock.set_total_quantity(item_id=item.id, total_quantity=5)
    r2 = admin.post(url, {}, format="json", HTTP_IDEMPOTENCY_KEY="short-1")
    assert r2.status_code == 200
    assert r2.json()["status"] == "approved"
    assert IdempotencyKey.objects.get(key="short-1").response_code == 200


@pytest.mark.django_db
def test_settled_domain_error_is_replayed():
    admin = _client(AdminFactory())
    req = AssetRequestFactory(status=AssetRequest.STATUS_REJECTED, reject_reason="No budget")
    url = f"/api/v1/requests/{req.id}/approve/"

    r1 = admin.post(url, {}, format="json", HTTP_IDEMPOTENCY_KEY="late-1")
    r2 = admin.post(url, {}, format="json", HTTP_IDEMPOTENCY_KEY="late-1")
    assert r1.status_code == r2.status_code == 409
    assert r2.json() == r1.json()
    assert r2.json()["code"] == "conflict"
    assert IdempotencyKey.objects.get(key="late-1").response_code == 409


@pytest.mark.django_db
def test_persistence_outage_maps_to_503(monkeypatch):
    req = AssetRequestFactory()

    def _boom(**kwargs):
        raise OperationalError("statement timeout")

    monkeypatch.setattr(views, "approve_request", _boom)
    resp = _client(AdminFactory()).post(f"/api/v1/requests/{req.id}/approve/", {}, format="json")
    assert resp.status_code == 503
    assert resp.json()["code"] == "unavailable"


@pytest.mark.django_db
def test_patch_and_delete_pending_request():
    req = AssetRequestFactory(quantity=1)
    owner = _client(req.employee)

    resp = owner.patch(f"/api/v1/requests/{req.id}/", {"quantity": 2, "notes": "Two please"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["quantity"] == 2

    admin = _client(AdminFactory())
    assert admin.patch(f"/api/v1/requests/{req.id}/", {"quantity": 3}, format="json").status_code == 403

    assert owner.delete(f"/api/v1/requests/{req.id}/").status_code == 204
    assert owner.delete(f"/api/v1/requests/{req.id}/").status_code == 404

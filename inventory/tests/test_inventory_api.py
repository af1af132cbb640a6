import csv
import io

import pytest
from assignments.services import assign
from common.choices import ItemCategory
from inventory.models import InventoryItem
from inventory.tests.factories import InventoryItemFactory
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_admin_creates_item_with_all_units_available():
    admin = AdminFactory()
    payload = {
        "name": "MacBook Pro 14",
        "category": "Laptop",
        "total_quantity": 5,
        "specifications": {"ram": "16GB", "company": "Apple"},
    }
    resp = _client(admin).post("/api/v1/inventory/items/", payload, format="json")
    assert resp.status_code == 201
    body = resp.json()
    assert body["total_quantity"] == 5
    assert body["available_quantity"] == 5
    assert body["stock_status"] == "Unassigned"
    assert body["specifications"]["condition"] == "Good"
    assert body["created_by"] == admin.id


@pytest.mark.django_db
def test_employee_cannot_create_shared_item():
    resp = _client(UserFactory()).post(
        "/api/v1/inventory/items/", {"name": "Desk", "category": "Furniture", "total_quantity": 1}, format="json"
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"
    assert not InventoryItem.objects.exists()


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Laptop", "category": "Laptop", "total_quantity": 0},
        {"name": "Laptop", "category": "Gadgets", "total_quantity": 1},
        {"name": "", "category": "Laptop", "total_quantity": 1},
        {"name": "Laptop", "category": "Laptop", "total_quantity": 1, "specifications": {"gpu": "RTX"}},
        {"name": "Laptop", "category": "Laptop", "total_quantity": 1, "specifications": {"ram": "3GB"}},
    ],
)
def test_create_item_validation(payload):
    resp = _client(AdminFactory()).post("/api/v1/inventory/items/", payload, format="json")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_list_filters_by_stock_status_category_and_search():
    admin = AdminFactory()
    free = InventoryItemFactory(name="Dell Monitor", category=ItemCategory.ACCESSORIES, total_quantity=2)
    taken = InventoryItemFactory(name="Office Chair", category=ItemCategory.FURNITURE, total_quantity=1)
    assign(actor=admin, employee_id=UserFactory().id, item_id=taken.id, quantity=1)
    client = _client(UserFactory())

    unassigned = client.get("/api/v1/inventory/items/?stock_status=Unassigned").json()["results"]
    assert [it["id"] for it in unassigned] == [free.id]

    assigned = client.get("/api/v1/inventory/items/?stock_status=Assigned").json()["results"]
    assert [it["id"] for it in assigned] == [taken.id]
    assert assigned[0]["stock_status"] == "Assigned"

    furniture = client.get("/api/v1/inventory/items/?category=Furniture").json()["results"]
    assert [it["id"] for it in furniture] == [taken.id]

    search = client.get("/api/v1/inventory/items/?search=monitor").json()["results"]
    assert [it["id"] for it in search] == [free.id]


@pytest.mark.django_db
@pytest.mark.parametrize("value", ["Partially Assigned", "Lost"])
def test_unknown_stock_status_is_rejected(value):
    InventoryItemFactory()
    resp = _client(UserFactory()).get("/api/v1/inventory/items/", {"stock_status": value})
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"


@pytest.mark.django_db
def test_condition_filter_treats_missing_condition_as_good():
    good = InventoryItemFactory()
    legacy = InventoryItemFactory(specifications={})
    damaged = InventoryItemFactory(specifications={"condition": "Damaged", "returned_at": "2025-02-01"})
    client = _client(UserFactory())

    ids = {it["id"] for it in client.get("/api/v1/inventory/items/?condition=Good").json()["results"]}
    assert ids == {good.id, legacy.id}

    ids = [it["id"] for it in client.get("/api/v1/inventory/items/?condition=Damaged").json()["results"]]
    assert ids == [damaged.id]

    ids = [it["id"] for it in client.get("/api/v1/inventory/items/?returned_on=2025-02-01").json()["results"]]
    assert ids == [damaged.id]

    assert client.get("/api/v1/inventory/items/?returned_on=yesterday").status_code == 400


@pytest.mark.django_db
def test_availability_endpoint():
    item = InventoryItemFactory(total_quantity=5, available_quantity=3)
    client = _client(UserFactory())

    resp = client.get(f"/api/v1/inventory/items/{item.id}/availability/")
    assert resp.status_code == 200
    assert resp.json() == {"total": 5, "available": 3}

    missing = client.get("/api/v1/inventory/items/999999/availability/")
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"


@pytest.mark.django_db
def test_patch_total_below_committed_returns_422():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=5, available_quantity=2)
    client = _client(admin)

    resp = client.patch(f"/api/v1/inventory/items/{item.id}/", {"total_quantity": 2}, format="json")
    assert resp.status_code == 422
    assert resp.json()["code"] == "invariant_violation"

    resp = client.patch(f"/api/v1/inventory/items/{item.id}/", {"total_quantity": 7}, format="json")
    assert resp.status_code == 200
    assert resp.json()["available_quantity"] == 4


@pytest.mark.django_db
def test_patch_specifications_keeps_derived_keys():
    item = InventoryItemFactory(specifications={"ram": "8GB", "condition": "Damaged", "returned_at": "2025-02-01"})
    resp = _client(AdminFactory()).patch(
        f"/api/v1/inventory/items/{item.id}/", {"specifications": {"ram": "16GB"}}, format="json"
    )
    assert resp.status_code == 200
    assert resp.json()["specifications"] == {"ram": "16GB", "condition": "Damaged", "returned_at": "2025-02-01"}


@pytest.mark.django_db
def test_only_admin_or_creator_can_edit_or_delete():
    item = InventoryItemFactory()
    stranger = _client(UserFactory())
    assert stranger.patch(f"/api/v1/inventory/items/{item.id}/", {"name": "x"}, format="json").status_code == 403
    assert stranger.delete(f"/api/v1/inventory/items/{item.id}/").status_code == 403

    creator = UserFactory()
    own = InventoryItemFactory(created_by=creator)
    assert _client(creator).patch(f"/api/v1/inventory/items/{own.id}/", {"name": "Mine"}, format="json").json()[
        "name"
    ] == "Mine"


@pytest.mark.django_db
def test_delete_blocked_while_assigned():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=2)
    assign(actor=admin, employee_id=UserFactory().id, item_id=item.id, quantity=1)
    client = _client(admin)

    resp = client.delete(f"/api/v1/inventory/items/{item.id}/")
    assert resp.status_code == 409
    assert InventoryItem.objects.filter(pk=item.id).exists()

    spare = InventoryItemFactory()
    assert client.delete(f"/api/v1/inventory/items/{spare.id}/").status_code == 204
    assert not InventoryItem.objects.filter(pk=spare.id).exists()


@pytest.mark.django_db
def test_export_is_admin_only_and_flattens_specifications():
    admin = AdminFactory(first_name="Grace", last_name="Hopper")
    InventoryItemFactory(name="ThinkPad", created_by=admin, specifications={"ram": "32GB", "condition": "Good"})

    assert _client(UserFactory()).get("/api/v1/inventory/items/export/").status_code == 403

    resp = _client(admin).get("/api/v1/inventory/items/export/")
    assert resp.status_code == 200
    rows = list(csv.DictReader(io.StringIO(resp.content.decode("utf-8"))))
    assert len(rows) == 1
    assert rows[0]["Item Name"] == "ThinkPad"
    assert rows[0]["Created By"] == "Grace Hopper"
    assert rows[0]["ram"] == "32GB"


@pytest.mark.django_db
def test_category_metadata():
    resp = _client(UserFactory()).get("/api/v1/inventory/categories/")
    assert resp.status_code == 200
    by_category = {row["category"]: row["fields"] for row in resp.json()}
    assert set(by_category) == {"Laptop", "Desktop", "Accessories", "Furniture", "Other"}
    ram = next(f for f in by_category["Laptop"] if f["name"] == "ram")
    assert ram["type"] == "select"
    assert "16GB" in ram["options"]


@pytest.mark.django_db
def test_pagination_page_size_override():
    InventoryItemFactory.create_batch(3)
    body = _client(UserFactory()).get("/api/v1/inventory/items/?page_size=2").json()
    assert body["count"] == 3
    assert len(body["results"]) == 2
    assert body["next"] is not None

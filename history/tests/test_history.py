import csv
import io
import logging
from datetime import timedelta

import pytest
from common.exceptions import InvariantViolation, ValidationError
from django.db import DatabaseError
from django.utils import timezone
from history.models import HistoryEntry
from history.selectors import query_history
from history.services import record_event
from inventory.models import InventoryItem
from inventory.tests.factories import InventoryItemFactory
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_entries_are_append_only():
    entry = record_event(action_type="requested", employee_id=UserFactory().id, item_id=None, quantity=1)
    entry.notes = "edited"
    with pytest.raises(InvariantViolation):
        entry.save()
    with pytest.raises(InvariantViolation):
        entry.delete()
    assert HistoryEntry.objects.get(pk=entry.pk).notes == ""


@pytest.mark.django_db
def test_labels_fall_back_when_references_are_gone():
    item = InventoryItemFactory(name="Old Laptop")
    entry = record_event(action_type="assigned", employee_id=None, item_id=item.id, quantity=1)
    InventoryItem.objects.filter(pk=item.id).delete()
    entry.refresh_from_db()
    assert entry.employee_label == "System"
    assert entry.item_label == "Deleted Item"


@pytest.mark.django_db
def test_append_failure_is_logged_not_raised(monkeypatch, caplog):
    def _fail(**kwargs):
        raise DatabaseError("disk full")

    monkeypatch.setattr(HistoryEntry.objects, "create", _fail)
    with caplog.at_level(logging.ERROR, logger="assetdesk.history"):
        assert record_event(action_type="requested", employee_id=None, item_id=None) is None
    failed = [r for r in caplog.records if r.getMessage() == "history.append_failed"]
    assert failed and failed[0].action_type == "requested"


@pytest.mark.django_db
def test_request_still_commits_when_history_write_fails(monkeypatch):
    from asset_requests.models import AssetRequest
    from asset_requests.services import submit_request

    def _fail(**kwargs):
        raise DatabaseError("disk full")

    monkeypatch.setattr(HistoryEntry.objects, "create", _fail)
    req = submit_request(actor=UserFactory(), item_id=InventoryItemFactory().id, quantity=1, notes="Headset")
    assert AssetRequest.objects.filter(pk=req.id).exists()


@pytest.mark.django_db
def test_query_filters():
    ada, bob = UserFactory(first_name="Ada"), UserFactory()
    laptop = InventoryItemFactory(name="ThinkPad")
    record_event(action_type="requested", employee_id=ada.id, item_id=laptop.id, notes="for travel")
    record_event(action_type="approved", employee_id=ada.id, item_id=laptop.id)
    record_event(action_type="requested", employee_id=bob.id, item_id=None)

    assert query_history(action_type="requested").count() == 2
    assert query_history(employee_id=ada.id).count() == 2
    assert query_history(item_id=laptop.id).count() == 2
    assert query_history(search="thinkpad").count() == 2
    assert query_history(search="travel").count() == 1

    today = timezone.localdate()
    assert query_history(start=today, end=today).count() == 3
    assert query_history(start=today + timedelta(days=1)).count() == 0
    with pytest.raises(ValidationError):
        query_history(start=today, end=today - timedelta(days=1))
    with pytest.raises(ValidationError):
        query_history(action_type="deleted")

    newest = query_history().first()
    assert newest.employee_id == bob.id


@pytest.mark.django_db
def test_list_endpoint_scopes_employees_to_their_own_entries():
    ada, bob = UserFactory(), UserFactory()
    record_event(action_type="requested", employee_id=ada.id, item_id=None)
    record_event(action_type="requested", employee_id=bob.id, item_id=None)

    own = _client(ada).get(f"/api/v1/history/?employee={bob.id}").json()
    assert own["count"] == 1
    assert own["results"][0]["employee"] == ada.id
    assert own["results"][0]["item_name"] == "Deleted Item"

    everyone = _client(AdminFactory()).get("/api/v1/history/").json()
    assert everyone["count"] == 2

    assert _client(ada).get("/api/v1/history/?start=notadate").status_code == 400


@pytest.mark.django_db
def test_export_is_admin_only():
    employee = UserFactory(first_name="Ada", last_name="Lovelace")
    record_event(action_type="returned", employee_id=employee.id, item_id=None, quantity=2, notes="Returned")

    assert _client(employee).get("/api/v1/history/export/").status_code == 403

    resp = _client(AdminFactory()).get("/api/v1/history/export/?action_type=returned")
    assert resp.status_code == 200
    assert resp.streaming
    rows = list(csv.DictReader(io.StringIO(b"".join(resp.streaming_content).decode("utf-8"))))
    assert rows == [
        {
            "Date": rows[0]["Date"],
            "Action": "Returned",
            "Employee": "Ada Lovelace",
            "Employee Email": employee.email,
            "Item": "Deleted Item",
            "Quantity": "2",
            "Notes": "Returned",
            "Performed By": "",
        }
    ]


@pytest.mark.django_db
def test_export_rejects_bad_filters_before_streaming():
    resp = _client(AdminFactory()).get("/api/v1/history/export/?action_type=lost")
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"

import pytest
from asset_requests.models import AssetRequest
from asset_requests.services import (
    approve_request,
    complete_request,
    delete_request,
    reject_request,
    submit_request,
    update_request,
)
from assignments.models import AssignmentLedgerEntry
from common.exceptions import Conflict, Forbidden, InsufficientStock, NotFound, ValidationError
from history.models import HistoryEntry
from inventory import stock
from inventory.tests.factories import InventoryItemFactory
from users.tests.factories import AdminFactory, UserFactory


def _actions(reference):
    return list(HistoryEntry.objects.filter(reference=reference).order_by("id").values_list("action_type", flat=True))


@pytest.mark.django_db
def test_request_approve_complete_books_assignment():
    admin = AdminFactory()
    employee = UserFactory()
    item = InventoryItemFactory(total_quantity=5)

    req = submit_request(actor=employee, item_id=item.id, quantity=2, notes="New hires")
    assert req.status == AssetRequest.STATUS_PENDING
    item.refresh_from_db()
    assert item.available_quantity == 5

    req = approve_request(actor=admin, request_id=req.id, comment="OK")
    assert req.status == AssetRequest.STATUS_APPROVED
    assert req.reviewed_by_id == admin.id
    assert req.reviewed_at is not None
    assert req.admin_comment == "OK"
    item.refresh_from_db()
    assert item.available_quantity == 3

    req = complete_request(actor=admin, request_id=req.id)
    assert req.status == AssetRequest.STATUS_COMPLETED
    assert req.completed_at is not None
    entry = AssignmentLedgerEntry.objects.get(request=req)
    assert (entry.employee_id, entry.item_id, entry.quantity, entry.status) == (employee.id, item.id, 2, "assigned")
    assert entry.assigned_by_id == admin.id
    # handover does not touch stock again
    item.refresh_from_db()
    assert item.available_quantity == 3


@pytest.mark.django_db
def test_second_approval_fails_when_stock_runs_out():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=5)
    first = submit_request(actor=UserFactory(), item_id=item.id, quantity=3, notes="Team A")
    second = submit_request(actor=UserFactory(), item_id=item.id, quantity=3, notes="Team B")

    approve_request(actor=admin, request_id=first.id)
    with pytest.raises(InsufficientStock):
        approve_request(actor=admin, request_id=second.id)

    second.refresh_from_db()
    item.refresh_from_db()
    assert second.status == AssetRequest.STATUS_PENDING
    assert second.reviewed_by_id is None
    assert item.available_quantity == 2
    assert _actions(f"request:{second.id}") == ["requested"]


@pytest.mark.django_db
def test_reject_leaves_stock_unchanged_and_records_history():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=5)
    req = submit_request(actor=UserFactory(), item_id=item.id, quantity=1, notes="Spare")

    req = reject_request(actor=admin, request_id=req.id, reason="Out of stock")
    assert req.status == AssetRequest.STATUS_REJECTED
    assert req.reject_reason == "Out of stock"
    item.refresh_from_db()
    assert item.available_quantity == 5
    rejected = HistoryEntry.objects.get(reference=f"request:{req.id}", action_type="rejected")
    assert rejected.notes == "Out of stock"
    assert rejected.performed_by_id == admin.id


@pytest.mark.django_db
@pytest.mark.parametrize("reason", ["", "   "])
def test_reject_requires_reason(reason):
    req = submit_request(actor=UserFactory(), item_id=InventoryItemFactory().id, quantity=1, notes="Spare")
    with pytest.raises(ValidationError):
        reject_request(actor=AdminFactory(), request_id=req.id, reason=reason)
    req.refresh_from_db()
    assert req.status == AssetRequest.STATUS_PENDING


@pytest.mark.django_db
@pytest.mark.parametrize(
    "kwargs",
    [
        {"notes": "", "quantity": 1},
        {"notes": "   ", "quantity": 1},
        {"notes": "Need it", "quantity": 0},
        {"notes": "Need it", "quantity": 1, "urgency": "Yesterday"},
    ],
)
def test_invalid_submissions_are_never_persisted(kwargs):
    item = InventoryItemFactory()
    with pytest.raises(ValidationError):
        submit_request(actor=UserFactory(), item_id=item.id, **kwargs)
    assert not AssetRequest.objects.exists()
    assert not HistoryEntry.objects.exists()


@pytest.mark.django_db
def test_submit_needs_item_or_name():
    employee = UserFactory()
    with pytest.raises(ValidationError):
        submit_request(actor=employee, quantity=1, notes="Something")
    with pytest.raises(NotFound):
        submit_request(actor=employee, item_id=999999, quantity=1, notes="Something")

    free_text = submit_request(
        actor=employee, item_name=" Standing desk ", category="Furniture", quantity=1, notes="Back pain"
    )
    assert free_text.item_id is None
    assert free_text.item_name == "Standing desk"


@pytest.mark.django_db
def test_free_text_request_must_be_linked_before_approval():
    admin = AdminFactory()
    req = submit_request(actor=UserFactory(), item_name="Standing desk", quantity=1, notes="Back pain")

    with pytest.raises(ValidationError):
        approve_request(actor=admin, request_id=req.id)

    desk = InventoryItemFactory(name="Adjustable Desk", total_quantity=2)
    req = approve_request(actor=admin, request_id=req.id, item_id=desk.id)
    assert req.item_id == desk.id
    assert req.item_name == "Adjustable Desk"
    desk.refresh_from_db()
    assert desk.available_quantity == 1


@pytest.mark.django_db
def test_status_never_moves_backwards():
    admin = AdminFactory()
    item = InventoryItemFactory(total_quantity=5)
    req = submit_request(actor=UserFactory(), item_id=item.id, quantity=1, notes="Laptop")
    approve_request(actor=admin, request_id=req.id)

    with pytest.raises(Conflict):
        approve_request(actor=admin, request_id=req.id)
    with pytest.raises(Conflict):
        reject_request(actor=admin, request_id=req.id, reason="Changed my mind")
    complete_request(actor=admin, request_id=req.id)
    with pytest.raises(Conflict):
        complete_request(actor=admin, request_id=req.id)

    item.refresh_from_db()
    req.refresh_from_db()
    assert req.status == AssetRequest.STATUS_COMPLETED
    assert item.available_quantity == 4
    assert AssignmentLedgerEntry.objects.filter(request=req).count() == 1


@pytest.mark.django_db
def test_complete_requires_approved_status():
    req = submit_request(actor=UserFactory(), item_id=InventoryItemFactory().id, quantity=1, notes="Laptop")
    with pytest.raises(Conflict):
        complete_request(actor=AdminFactory(), request_id=req.id)
    with pytest.raises(NotFound):
        complete_request(actor=AdminFactory(), request_id=999999)


@pytest.mark.django_db
def test_every_transition_appends_exactly_one_entry():
    admin = AdminFactory()
    employee = UserFactory()
    item = InventoryItemFactory(total_quantity=5)

    req = submit_request(actor=employee, item_id=item.id, quantity=2, notes="Onboarding")
    approve_request(actor=admin, request_id=req.id)
    complete_request(actor=admin, request_id=req.id, condition="Good")
    entry = AssignmentLedgerEntry.objects.get(request=req)

    assert _actions(f"request:{req.id}") == ["requested", "approved"]
    assert _actions(f"assignment:{entry.id}") == ["completed"]
    assert HistoryEntry.objects.count() == 3
    approved = HistoryEntry.objects.get(action_type="approved")
    assert approved.notes == f"Request approved by {admin.email}"
    assert approved.quantity == 2
    assert approved.employee_id == employee.id


@pytest.mark.django_db
def test_only_admins_review():
    employee = UserFactory()
    req = submit_request(actor=employee, item_id=InventoryItemFactory().id, quantity=1, notes="Mouse")
    with pytest.raises(Forbidden):
        approve_request(actor=employee, request_id=req.id)
    with pytest.raises(Forbidden):
        reject_request(actor=employee, request_id=req.id, reason="no")
    with pytest.raises(Forbidden):
        complete_request(actor=employee, request_id=req.id)


@pytest.mark.django_db
def test_requester_edits_and_deletes_only_while_pending():
    employee = UserFactory()
    item = InventoryItemFactory(total_quantity=5)
    req = submit_request(actor=employee, item_id=item.id, quantity=1, notes="Keyboard")

    req = update_request(actor=employee, request_id=req.id, quantity=2, urgency="Urgent")
    assert (req.quantity, req.urgency) == (2, "Urgent")

    with pytest.raises(Forbidden):
        update_request(actor=UserFactory(), request_id=req.id, quantity=3)
    with pytest.raises(Forbidden):
        delete_request(actor=AdminFactory(), request_id=req.id)

    approve_request(actor=AdminFactory(), request_id=req.id)
    with pytest.raises(Forbidden):
        update_request(actor=employee, request_id=req.id, notes="Changed")
    with pytest.raises(Forbidden):
        delete_request(actor=employee, request_id=req.id)

    other = submit_request(actor=employee, item_id=item.id, quantity=1, notes="Mouse")
    delete_request(actor=employee, request_id=other.id)
    assert not AssetRequest.objects.filter(pk=other.id).exists()


@pytest.mark.django_db
def test_edit_landing_mid_approval_rolls_back_the_reservation(monkeypatch):
    admin = AdminFactory()
    employee = UserFactory()
    item = InventoryItemFactory(total_quantity=5)
    req = submit_request(actor=employee, item_id=item.id, quantity=1, notes="Spare charger")
    real_reserve = stock.reserve

    def reserve_then_edit(**kwargs):
        real_reserve(**kwargs)
        update_request(actor=employee, request_id=req.id, quantity=5)

    monkeypatch.setattr(stock, "reserve", reserve_then_edit)
    with pytest.raises(Conflict):
        approve_request(actor=admin, request_id=req.id)
    monkeypatch.undo()

    item.refresh_from_db()
    req.refresh_from_db()
    assert item.available_quantity == 5
    assert (req.status, req.quantity) == (AssetRequest.STATUS_PENDING, 1)
    assert _actions(f"request:{req.id}") == ["requested"]

    approve_request(actor=admin, request_id=req.id)
    complete_request(actor=admin, request_id=req.id)
    item.refresh_from_db()
    assert item.available_quantity == 5 - AssignmentLedgerEntry.objects.get(request=req).quantity

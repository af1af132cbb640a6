"""Request lifecycle engine.

pending -> approved (reserves stock) -> completed (books the ledger entry)
pending -> rejected (no stock effect)

Every transition is a conditional UPDATE on the expected prior status, so a
double-click or a concurrent reviewer can apply at most one transition. Each
successful transition appends exactly one history entry.
"""

import logging

from assignments.services import record_assignment
from common.choices import HistoryAction, ItemCondition, RequestStatus, Urgency
from common.exceptions import Conflict, Forbidden, NotFound, ValidationError
from django.db import transaction
from django.utils import timezone
from history.services import record_event
from inventory import stock
from inventory.models import InventoryItem

from .models import AssetRequest

logger = logging.getLogger("assetdesk.requests")

EDITABLE_FIELDS = ("item_id", "item_name", "category", "quantity", "notes", "urgency", "expected_date", "brand")


def _require_admin(actor):
    if not actor.is_admin:
        raise Forbidden("Only administrators can review requests.")


def _check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be at least 1.")
    return quantity


def _check_notes(notes) -> str:
    notes = (notes or "").strip()
    if not notes:
        raise ValidationError("Notes describing the purpose are required.")
    return notes


def _check_urgency(urgency) -> str:
    if urgency not in Urgency.values:
        raise ValidationError(f"Urgency must be one of: {', '.join(Urgency.values)}.")
    return urgency


def _transition(
    request_id: int, *, from_status: str, to_status: str, expected: dict | None = None, **fields
) -> AssetRequest:
    """Move a request from `from_status` to `to_status` or raise.

    `expected` pins further columns to the values the caller acted on. Zero
    affected rows means the row is gone (NotFound), someone else already moved
    it, or it was edited underneath the caller (Conflict).
    """
    updated = AssetRequest.objects.filter(pk=request_id, status=from_status, **(expected or {})).update(
        status=to_status, updated_at=timezone.now(), **fields
    )
    if updated == 0:
        current = AssetRequest.objects.filter(pk=request_id).values_list("status", flat=True).first()
        if current is None:
            raise NotFound("Request not found.")
        if current == from_status:
            raise Conflict("Request was edited while it was being reviewed.")
        raise Conflict(f"Request is {current}, expected {from_status}.")
    req = AssetRequest.objects.select_related("item").get(pk=request_id)
    logger.info(
        "request_status_changed",
        extra={
            "request_id": request_id,
            "employee_id": req.employee_id,
            "item_id": req.item_id,
            "status_from": from_status,
            "status_to": to_status,
        },
    )
    return req


@transaction.atomic
def submit_request(
    *,
    actor,
    quantity: int,
    notes: str,
    item_id: int | None = None,
    item_name: str = "",
    urgency: str = Urgency.NORMAL,
    expected_date=None,
    brand: str = "",
    category: str = "",
) -> AssetRequest:
    """Create a pending request for a catalog item or a free-text item name."""
    quantity = _check_quantity(quantity)
    notes = _check_notes(notes)
    urgency = _check_urgency(urgency)

    item = None
    if item_id is not None:
        try:
            item = InventoryItem.objects.get(pk=item_id)
        except InventoryItem.DoesNotExist:
            raise NotFound("Inventory item not found.")
        item_name = item.name
        category = category or item.category
    item_name = (item_name or "").strip()
    if not item_name:
        raise ValidationError("Either an inventory item or an item name is required.")

    req = AssetRequest.objects.create(
        employee=actor,
        item=item,
        item_name=item_name,
        category=category or "",
        quantity=quantity,
        notes=notes,
        urgency=urgency,
        expected_date=expected_date,
        brand=brand or "",
    )
    record_event(
        action_type=HistoryAction.REQUESTED,
        employee_id=actor.id,
        item_id=item.id if item else None,
        quantity=quantity,
        notes=notes,
        performed_by_id=actor.id,
        reference=f"request:{req.id}",
    )
    logger.info(
        "request_submitted",
        extra={"request_id": req.id, "employee_id": actor.id, "item_id": req.item_id, "quantity": quantity},
    )
    return req


@transaction.atomic
def approve_request(*, actor, request_id: int, comment: str = "", item_id: int | None = None) -> AssetRequest:
    """Reserve stock and move a pending request to approved.

    InsufficientStock propagates and the request stays pending. A free-text
    request must be linked to a catalog item (`item_id`) before approval.
    """
    _require_admin(actor)
    # same row lock as update_request and delete_request, held until commit
    try:
        req = AssetRequest.objects.select_for_update().get(pk=request_id)
    except AssetRequest.DoesNotExist:
        raise NotFound("Request not found.")
    if req.status != AssetRequest.STATUS_PENDING:
        raise Conflict(f"Request is {req.status}, expected {AssetRequest.STATUS_PENDING}.")

    fields = {}
    target_id = req.item_id
    if item_id is not None and item_id != req.item_id:
        try:
            item = InventoryItem.objects.get(pk=item_id)
        except InventoryItem.DoesNotExist:
            raise NotFound("Inventory item not found.")
        target_id = item.id
        fields.update(item_id=item.id, item_name=item.name)
    if target_id is None:
        raise ValidationError("Link the request to an inventory item before approving it.")

    stock.reserve(item_id=target_id, quantity=req.quantity)
    req = _transition(
        request_id,
        from_status=AssetRequest.STATUS_PENDING,
        to_status=AssetRequest.STATUS_APPROVED,
        expected={"quantity": req.quantity, "item_id": req.item_id},
        reviewed_by_id=actor.id,
        reviewed_at=timezone.now(),
        admin_comment=comment or "",
        **fields,
    )
    record_event(
        action_type=HistoryAction.APPROVED,
        employee_id=req.employee_id,
        item_id=target_id,
        quantity=req.quantity,
        notes=comment or f"Request approved by {actor.email}",
        performed_by_id=actor.id,
        reference=f"request:{req.id}",
    )
    return req


@transaction.atomic
def reject_request(*, actor, request_id: int, reason: str) -> AssetRequest:
    """Reject a pending request. Approved requests cannot be rejected (Conflict)."""
    _require_admin(actor)
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A rejection reason is required.")
    req = _transition(
        request_id,
        from_status=AssetRequest.STATUS_PENDING,
        to_status=AssetRequest.STATUS_REJECTED,
        reject_reason=reason,
        reviewed_by_id=actor.id,
        reviewed_at=timezone.now(),
    )
    record_event(
        action_type=HistoryAction.REJECTED,
        employee_id=req.employee_id,
        item_id=req.item_id,
        quantity=req.quantity,
        notes=reason,
        performed_by_id=actor.id,
        reference=f"request:{req.id}",
    )
    return req


@transaction.atomic
def complete_request(*, actor, request_id: int, condition: str = ItemCondition.GOOD, notes: str = "") -> AssetRequest:
    """Hand over an approved request: book the ledger entry, no further stock effect."""
    _require_admin(actor)
    if condition not in ItemCondition.values:
        raise ValidationError(f"Condition must be one of: {', '.join(ItemCondition.values)}.")
    req = _transition(
        request_id,
        from_status=AssetRequest.STATUS_APPROVED,
        to_status=AssetRequest.STATUS_COMPLETED,
        completed_at=timezone.now(),
    )
    if req.item is None:
        # the item was removed between approval and handover
        raise NotFound("The requested inventory item no longer exists.")
    entry = record_assignment(
        employee_id=req.employee_id,
        item=req.item,
        quantity=req.quantity,
        assigned_by_id=actor.id,
        notes=notes or req.notes,
        request_id=req.id,
        condition=condition,
    )
    record_event(
        action_type=HistoryAction.COMPLETED,
        employee_id=req.employee_id,
        item_id=req.item_id,
        quantity=req.quantity,
        notes=notes or f"Handed over in {condition} condition",
        performed_by_id=actor.id,
        reference=f"assignment:{entry.id}",
    )
    return req


@transaction.atomic
def update_request(*, actor, request_id: int, **changes) -> AssetRequest:
    """Requester edits while the request is still pending."""
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}.")
    try:
        req = AssetRequest.objects.select_for_update().get(pk=request_id)
    except AssetRequest.DoesNotExist:
        raise NotFound("Request not found.")
    if req.employee_id != actor.id or req.status != AssetRequest.STATUS_PENDING:
        raise Forbidden("Only the requester can edit a request, and only while it is pending.")

    if "quantity" in changes:
        req.quantity = _check_quantity(changes["quantity"])
    if "notes" in changes:
        req.notes = _check_notes(changes["notes"])
    if "urgency" in changes:
        req.urgency = _check_urgency(changes["urgency"])
    if "item_id" in changes and changes["item_id"] != req.item_id:
        if changes["item_id"] is None:
            req.item = None
        else:
            try:
                req.item = InventoryItem.objects.get(pk=changes["item_id"])
            except InventoryItem.DoesNotExist:
                raise NotFound("Inventory item not found.")
            req.item_name = req.item.name
    if "item_name" in changes and req.item_id is None:
        req.item_name = (changes["item_name"] or "").strip()
    if not req.item_name:
        raise ValidationError("Either an inventory item or an item name is required.")
    if "category" in changes:
        req.category = changes["category"] or ""
    if "brand" in changes:
        req.brand = changes["brand"] or ""
    if "expected_date" in changes:
        req.expected_date = changes["expected_date"]
    req.save()
    logger.info("request_updated", extra={"request_id": req.id, "fields": sorted(changes)})
    return req


@transaction.atomic
def delete_request(*, actor, request_id: int) -> None:
    try:
        req = AssetRequest.objects.select_for_update().get(pk=request_id)
    except AssetRequest.DoesNotExist:
        raise NotFound("Request not found.")
    if req.employee_id != actor.id or req.status != AssetRequest.STATUS_PENDING:
        raise Forbidden("Only the requester can delete a request, and only while it is pending.")
    req.delete()
    logger.info("request_deleted", extra={"request_id": request_id, "employee_id": actor.id})


# EOF

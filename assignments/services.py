"""Assignment ledger services: direct assignment, own items and returns.

Stock moves only through `inventory.stock`. Each successful operation appends
one history entry.
"""

import logging

from common.choices import HistoryAction, ItemCondition
from common.exceptions import Conflict, Forbidden, NotFound, ValidationError
from django.db import transaction
from django.utils import timezone
from history.services import record_event
from inventory import stock
from inventory.models import InventoryItem
from inventory.services import create_item, record_return_condition
from users.models import User

from .models import AssignmentLedgerEntry

logger = logging.getLogger("assetdesk.assignments")


def record_assignment(
    *,
    employee_id: int,
    item: InventoryItem,
    quantity: int,
    assigned_by_id: int | None = None,
    notes: str = "",
    request_id: int | None = None,
    condition: str = ItemCondition.GOOD,
) -> AssignmentLedgerEntry:
    """Insert an active ledger entry. Has no stock effect; callers reserve first."""
    entry = AssignmentLedgerEntry.objects.create(
        employee_id=employee_id,
        item=item,
        item_name=item.name,
        request_id=request_id,
        quantity=quantity,
        assigned_by_id=assigned_by_id,
        notes=notes or "",
        issued_condition=condition,
    )
    logger.info(
        "assignment_recorded",
        extra={"entry_id": entry.id, "employee_id": employee_id, "item_id": item.id, "quantity": quantity},
    )
    return entry


@transaction.atomic
def assign(*, actor, employee_id: int, item_id: int, quantity: int, notes: str = "") -> AssignmentLedgerEntry:
    """Admin shortcut that hands units to an employee without a request."""
    if not actor.is_admin:
        raise Forbidden("Only administrators can assign items directly.")
    if not User.objects.filter(pk=employee_id, is_active=True).exists():
        raise NotFound("Employee not found.")

    stock.reserve(item_id=item_id, quantity=quantity)
    item = InventoryItem.objects.get(pk=item_id)
    entry = record_assignment(
        employee_id=employee_id,
        item=item,
        quantity=quantity,
        assigned_by_id=actor.id,
        notes=notes,
        condition=item.condition or ItemCondition.GOOD,
    )
    record_event(
        action_type=HistoryAction.ASSIGNED,
        employee_id=employee_id,
        item_id=item.id,
        quantity=quantity,
        notes=notes or "Manually assigned by admin",
        performed_by_id=actor.id,
        reference=f"assignment:{entry.id}",
    )
    return entry


@transaction.atomic
def register_own_item(
    *,
    actor,
    name: str,
    category: str,
    total_quantity: int,
    description: str = "",
    specifications: dict | None = None,
    notes: str = "",
) -> AssignmentLedgerEntry:
    """Record an item the employee already holds.

    The item is created with nothing available and the whole quantity is
    booked to the actor in one step.
    """
    item = create_item(
        actor=actor,
        name=name,
        category=category,
        total_quantity=total_quantity,
        description=description,
        specifications=specifications,
        self_assign=True,
    )
    entry = record_assignment(
        employee_id=actor.id,
        item=item,
        quantity=item.total_quantity,
        assigned_by_id=actor.id,
        notes=notes,
        condition=item.condition or ItemCondition.GOOD,
    )
    record_event(
        action_type=HistoryAction.ASSIGNED,
        employee_id=actor.id,
        item_id=item.id,
        quantity=item.total_quantity,
        notes=notes or "Added to own inventory",
        performed_by_id=actor.id,
        reference=f"assignment:{entry.id}",
    )
    return entry


@transaction.atomic
def return_assignment(*, actor, entry_id: int, condition: str, return_date=None) -> AssignmentLedgerEntry:
    """Flip an active entry to returned and credit its units back.

    The status flip is a guarded UPDATE, so a repeated return fails with
    Conflict instead of crediting stock twice.
    """
    if condition not in ItemCondition.values:
        raise ValidationError(f"Condition must be one of: {', '.join(ItemCondition.values)}.")
    returned_on = return_date or timezone.localdate()

    owner_id = AssignmentLedgerEntry.objects.filter(pk=entry_id).values_list("employee_id", flat=True).first()
    if owner_id is None:
        raise NotFound("Assignment not found.")
    if not (actor.is_admin or owner_id == actor.id):
        raise Forbidden("You can only return your own items.")

    updated = AssignmentLedgerEntry.objects.filter(pk=entry_id, status=AssignmentLedgerEntry.STATUS_ASSIGNED).update(
        status=AssignmentLedgerEntry.STATUS_RETURNED,
        return_condition=condition,
        returned_on=returned_on,
        updated_at=timezone.now(),
    )
    if updated == 0:
        if not AssignmentLedgerEntry.objects.filter(pk=entry_id).exists():
            raise NotFound("Assignment not found.")
        raise Conflict("Assignment was already returned.")

    entry = AssignmentLedgerEntry.objects.get(pk=entry_id)
    if entry.item_id is not None:
        stock.release(item_id=entry.item_id, quantity=entry.quantity)
        record_return_condition(item_id=entry.item_id, condition=condition, returned_on=returned_on)
    else:
        logger.warning(
            "assignment.return_item_missing",
            extra={"entry_id": entry.id, "item_name": entry.item_name, "quantity": entry.quantity},
        )

    record_event(
        action_type=HistoryAction.RETURNED,
        employee_id=entry.employee_id,
        item_id=entry.item_id,
        quantity=entry.quantity,
        notes=f"Returned in {condition} condition",
        performed_by_id=actor.id,
        reference=f"assignment:{entry.id}",
    )
    logger.info(
        "assignment_returned",
        extra={"entry_id": entry.id, "item_id": entry.item_id, "quantity": entry.quantity, "condition": condition},
    )
    return entry


# EOF

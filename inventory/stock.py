"""Stock reservation coordinator: the only writer of `available_quantity`.

`reserve` is a single conditional UPDATE so two concurrent reservations against
the same item can never both pass the availability check. `release` and
`set_total_quantity` take a row lock before writing.
"""

import logging

from common.exceptions import InsufficientStock, InvariantViolation, NotFound, ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .models import InventoryItem

logger = logging.getLogger("assetdesk.inventory")


def _check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer.")
    return quantity


def reserve(*, item_id: int, quantity: int) -> None:
    """Decrement available stock by `quantity` or fail without side effects."""
    quantity = _check_quantity(quantity)
    updated = InventoryItem.objects.filter(pk=item_id, available_quantity__gte=quantity).update(
        available_quantity=F("available_quantity") - quantity,
        updated_at=timezone.now(),
    )
    if updated == 0:
        if not InventoryItem.objects.filter(pk=item_id).exists():
            raise NotFound("Inventory item not found.")
        logger.info("stock.reserve_rejected", extra={"item_id": item_id, "quantity": quantity})
        raise InsufficientStock(f"Only {available_or_zero(item_id)} unit(s) available.")
    logger.info("stock.reserved", extra={"item_id": item_id, "quantity": quantity})


@transaction.atomic
def release(*, item_id: int, quantity: int) -> int:
    """Credit `quantity` back, clamped at `total_quantity`. Returns the new available count."""
    quantity = _check_quantity(quantity)
    try:
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
    except InventoryItem.DoesNotExist:
        raise NotFound("Inventory item not found.")

    target = int(item.available_quantity) + quantity
    if target > item.total_quantity:
        logger.warning(
            "stock.release_clamped",
            extra={
                "item_id": item_id,
                "quantity": quantity,
                "requested_available": target,
                "total_quantity": item.total_quantity,
            },
        )
        target = item.total_quantity
    item.available_quantity = target
    item.save(update_fields=["available_quantity", "updated_at"])
    logger.info("stock.released", extra={"item_id": item_id, "quantity": quantity, "available": target})
    return target


@transaction.atomic
def set_total_quantity(*, item_id: int, total_quantity: int) -> InventoryItem:
    """Change the provisioned total, moving available by the same delta.

    Units already committed (held or reserved) stay committed; shrinking the
    total below them raises InvariantViolation.
    """
    if isinstance(total_quantity, bool) or not isinstance(total_quantity, int) or total_quantity < 0:
        raise ValidationError("Total quantity must be a non-negative integer.")
    try:
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
    except InventoryItem.DoesNotExist:
        raise NotFound("Inventory item not found.")

    committed = item.committed_quantity
    if total_quantity < committed:
        raise InvariantViolation(
            f"Total quantity cannot drop below the {committed} unit(s) currently assigned or reserved."
        )
    item.total_quantity = total_quantity
    item.available_quantity = total_quantity - committed
    item.save(update_fields=["total_quantity", "available_quantity", "updated_at"])
    logger.info(
        "stock.total_changed",
        extra={"item_id": item_id, "total_quantity": total_quantity, "available": item.available_quantity},
    )
    return item


def available_or_zero(item_id: int) -> int:
    value = InventoryItem.objects.filter(pk=item_id).values_list("available_quantity", flat=True).first()
    return int(value or 0)


# EOF

"""Inventory catalog services: create, edit and delete items.

Quantity changes on existing items go through `inventory.stock`; these
functions never write `available_quantity` directly except when an item is
first inserted.
"""

import logging

from common.choices import AssignmentStatus, ItemCategory, ItemCondition, RequestStatus
from common.exceptions import Conflict, Forbidden, NotFound, ValidationError
from django.db import transaction

from . import stock
from .models import InventoryItem

logger = logging.getLogger("assetdesk.inventory")

EDITABLE_FIELDS = ("name", "category", "description", "total_quantity", "specifications")
DERIVED_SPEC_KEYS = ("condition", "returned_at")


def _clean_name(name) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Item name is required.")
    return name


def _clean_category(category) -> str:
    if not category:
        raise ValidationError("Category is required.")
    if category not in ItemCategory.values:
        raise ValidationError(f"Unknown category '{category}'.")
    return category


def _clean_specifications(specifications) -> dict:
    if specifications is None:
        return {}
    if not isinstance(specifications, dict):
        raise ValidationError("Specifications must be a mapping of names to values.")
    return {str(k): "" if v is None else str(v) for k, v in specifications.items()}


def _can_manage(actor, item: InventoryItem) -> bool:
    return bool(actor.is_admin or (item.created_by_id and item.created_by_id == actor.id))


@transaction.atomic
def create_item(
    *,
    actor,
    name: str,
    category: str,
    total_quantity: int,
    description: str = "",
    specifications: dict | None = None,
    self_assign: bool = False,
) -> InventoryItem:
    """Insert a catalog item.

    The admin path puts every unit on the shelf. The self-assign path is used
    when an employee records an item they already hold, so nothing is
    available to others.
    """
    if not self_assign and not actor.is_admin:
        raise Forbidden("Only administrators can add items to the shared inventory.")
    name = _clean_name(name)
    category = _clean_category(category)
    if isinstance(total_quantity, bool) or not isinstance(total_quantity, int) or total_quantity < 1:
        raise ValidationError("Total quantity must be at least 1.")

    specs = _clean_specifications(specifications)
    specs.setdefault("condition", ItemCondition.GOOD)

    item = InventoryItem.objects.create(
        name=name,
        category=category,
        description=description or "",
        total_quantity=total_quantity,
        available_quantity=0 if self_assign else total_quantity,
        specifications=specs,
        created_by=actor,
    )
    logger.info(
        "item_created",
        extra={"item_id": item.id, "actor_id": actor.id, "total_quantity": total_quantity, "self_assign": self_assign},
    )
    return item


@transaction.atomic
def update_item(*, actor, item_id: int, **patch) -> InventoryItem:
    unknown = set(patch) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}.")

    try:
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
    except InventoryItem.DoesNotExist:
        raise NotFound("Inventory item not found.")
    if not _can_manage(actor, item):
        raise Forbidden("Only administrators or the item's creator can edit it.")

    if "total_quantity" in patch and patch["total_quantity"] != item.total_quantity:
        item = stock.set_total_quantity(item_id=item.id, total_quantity=patch["total_quantity"])

    fields = []
    if "name" in patch:
        item.name = _clean_name(patch["name"])
        fields.append("name")
    if "category" in patch:
        item.category = _clean_category(patch["category"])
        fields.append("category")
    if "description" in patch:
        item.description = patch["description"] or ""
        fields.append("description")
    if "specifications" in patch:
        specs = _clean_specifications(patch["specifications"])
        current = item.specifications or {}
        for key in DERIVED_SPEC_KEYS:
            if key not in specs and key in current:
                specs[key] = current[key]
        item.specifications = specs
        fields.append("specifications")

    if fields:
        item.save(update_fields=[*fields, "updated_at"])
    logger.info("item_updated", extra={"item_id": item.id, "actor_id": actor.id, "fields": sorted(patch)})
    return item


@transaction.atomic
def delete_item(*, actor, item_id: int) -> None:
    """Delete an item nobody holds and no approved request has reserved.

    History entries, returned ledger entries and open requests keep their
    name snapshots; their foreign keys are nulled.
    """
    try:
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
    except InventoryItem.DoesNotExist:
        raise NotFound("Inventory item not found.")
    if not _can_manage(actor, item):
        raise Forbidden("Only administrators or the item's creator can delete it.")
    if item.assignments.filter(status=AssignmentStatus.ASSIGNED).exists():
        raise Conflict("Item is currently assigned to employees.")
    if item.requests.filter(status=RequestStatus.APPROVED).exists():
        raise Conflict("Item has approved requests awaiting handover.")
    item.delete()
    logger.info("item_deleted", extra={"item_id": item_id, "actor_id": actor.id})


@transaction.atomic
def record_return_condition(*, item_id: int, condition: str, returned_on) -> None:
    """Store the condition and date of the latest return in the item's specifications."""
    if condition not in ItemCondition.values:
        raise ValidationError(f"Condition must be one of: {', '.join(ItemCondition.values)}.")
    try:
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
    except InventoryItem.DoesNotExist:
        raise NotFound("Inventory item not found.")
    specs = dict(item.specifications or {})
    specs["condition"] = condition
    specs["returned_at"] = returned_on.isoformat()
    item.specifications = specs
    item.save(update_fields=["specifications", "updated_at"])


# EOF

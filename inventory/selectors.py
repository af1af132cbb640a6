"""Selectors for the inventory catalog."""

from datetime import date

from common.choices import ItemCondition, StockStatus
from common.exceptions import NotFound, ValidationError
from django.db.models import Q

from .models import InventoryItem


def get_availability(item_id: int) -> dict:
    row = InventoryItem.objects.filter(pk=item_id).values("total_quantity", "available_quantity").first()
    if row is None:
        raise NotFound("Inventory item not found.")
    return {"total": row["total_quantity"], "available": row["available_quantity"]}


def available_quantity(item_id: int) -> int:
    return get_availability(item_id)["available"]


def stock_status(item: InventoryItem) -> str:
    return StockStatus.UNASSIGNED if item.available_quantity > 0 else StockStatus.ASSIGNED


def stock_status_q(value: str) -> Q:
    """Filter expression for a derived stock status.

    Only the two produced states are accepted. A partial state (some units out,
    some in) would be added here as `0 < available < total`.
    """
    if value == StockStatus.UNASSIGNED:
        return Q(available_quantity__gt=0)
    if value == StockStatus.ASSIGNED:
        return Q(available_quantity__lte=0)
    raise ValidationError(f"Unknown stock status '{value}'. Use one of: {', '.join(StockStatus.values)}.")


def condition_q(value: str) -> Q:
    if value not in ItemCondition.values:
        raise ValidationError(f"Unknown condition '{value}'.")
    q = Q(specifications__condition=value)
    if value == ItemCondition.GOOD:
        # items never returned carry no condition and count as good
        q |= ~Q(specifications__has_key="condition")
    return q


def list_items(
    *,
    category: str | None = None,
    stock_status: str | None = None,
    condition: str | None = None,
    search: str | None = None,
    returned_on: date | None = None,
    created_by: int | None = None,
):
    qs = InventoryItem.objects.select_related("created_by").order_by("-created_at", "id")
    if category:
        qs = qs.filter(category=category)
    if stock_status:
        qs = qs.filter(stock_status_q(stock_status))
    if condition:
        qs = qs.filter(condition_q(condition))
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search) | Q(category__icontains=search))
    if returned_on:
        qs = qs.filter(specifications__returned_at=returned_on.isoformat())
    if created_by:
        qs = qs.filter(created_by_id=created_by)
    return qs


def item_export_rows(qs):
    for item in qs:
        creator = item.created_by
        row = {
            "Item Name": item.name,
            "Category": item.category,
            "Description": item.description or "N/A",
            "Total Quantity": item.total_quantity,
            "Available Quantity": item.available_quantity,
            "Created By": (creator.get_full_name() or "N/A") if creator else "N/A",
            "Creator Email": creator.email if creator else "N/A",
            "Created At": item.created_at.date().isoformat(),
        }
        for key, value in (item.specifications or {}).items():
            row.setdefault(key, value)
        yield row


# EOF

"""Selectors for the assignment ledger."""

from common.choices import AssignmentStatus
from common.exceptions import ValidationError
from django.db.models import Count, Sum

from .models import AssignmentLedgerEntry


def list_active_by_employee(employee_id: int):
    return (
        AssignmentLedgerEntry.objects.filter(employee_id=employee_id, status=AssignmentStatus.ASSIGNED)
        .select_related("item")
        .order_by("-assigned_date", "-id")
    )


def count_active_by_item(item_id: int) -> int:
    """Units of the item currently held by employees."""
    total = AssignmentLedgerEntry.objects.filter(item_id=item_id, status=AssignmentStatus.ASSIGNED).aggregate(
        units=Sum("quantity")
    )["units"]
    return int(total or 0)


def list_assignments(*, employee_id: int | None = None, status: str | None = None, item_id: int | None = None):
    if status and status not in AssignmentStatus.values:
        raise ValidationError(f"Unknown assignment status '{status}'.")
    qs = AssignmentLedgerEntry.objects.select_related("employee", "item", "assigned_by").order_by(
        "-assigned_date", "-id"
    )
    if employee_id:
        qs = qs.filter(employee_id=employee_id)
    if status:
        qs = qs.filter(status=status)
    if item_id:
        qs = qs.filter(item_id=item_id)
    return qs


def active_counts_by_employee() -> dict[int, int]:
    rows = (
        AssignmentLedgerEntry.objects.filter(status=AssignmentStatus.ASSIGNED)
        .values("employee_id")
        .annotate(entries=Count("id"))
    )
    return {row["employee_id"]: row["entries"] for row in rows}


# EOF

"""Read-side queries for the history log."""

from datetime import date

from common.choices import HistoryAction
from common.exceptions import ValidationError
from django.db.models import Q

from .models import HistoryEntry


def query_history(
    *,
    action_type: str | None = None,
    employee_id: int | None = None,
    item_id: int | None = None,
    start: date | None = None,
    end: date | None = None,
    search: str | None = None,
):
    """Entries newest first. Returns a lazy QuerySet for the caller to paginate."""
    if action_type and action_type not in HistoryAction.values:
        raise ValidationError(f"Unknown action type '{action_type}'.")
    if start and end and start > end:
        raise ValidationError("start must not be after end.")

    qs = HistoryEntry.objects.select_related("employee", "item", "performed_by").order_by("-created_at", "-id")
    if action_type:
        qs = qs.filter(action_type=action_type)
    if employee_id:
        qs = qs.filter(employee_id=employee_id)
    if item_id:
        qs = qs.filter(item_id=item_id)
    if start:
        qs = qs.filter(created_at__date__gte=start)
    if end:
        qs = qs.filter(created_at__date__lte=end)
    if search:
        qs = qs.filter(
            Q(item__name__icontains=search)
            | Q(employee__email__icontains=search)
            | Q(employee__first_name__icontains=search)
            | Q(employee__last_name__icontains=search)
            | Q(notes__icontains=search)
        )
    return qs


EXPORT_COLUMNS = ("Date", "Action", "Employee", "Employee Email", "Item", "Quantity", "Notes", "Performed By")


def iter_history(**filters):
    """Export rows, newest first. Filters are checked before the first row is produced."""
    qs = query_history(**filters)
    return (_export_row(entry) for entry in qs.iterator(chunk_size=500))


def _export_row(entry) -> dict:
    return {
        "Date": entry.created_at.isoformat(),
        "Action": entry.get_action_type_display(),
        "Employee": entry.employee_label,
        "Employee Email": entry.employee.email if entry.employee_id else "",
        "Item": entry.item_label,
        "Quantity": entry.quantity,
        "Notes": entry.notes,
        "Performed By": entry.performed_by.display_name if entry.performed_by_id else "",
    }


# EOF

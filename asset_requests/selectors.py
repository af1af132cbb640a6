"""Read-side queries for asset requests."""

from common.choices import RequestStatus
from common.exceptions import ValidationError
from django.db.models import Q

from .models import AssetRequest


def list_requests(
    *,
    employee_id: int | None = None,
    status: str | None = None,
    item_id: int | None = None,
    urgency: str | None = None,
    search: str | None = None,
):
    if status and status not in RequestStatus.values:
        raise ValidationError(f"Unknown request status '{status}'.")
    qs = AssetRequest.objects.select_related("employee", "item", "reviewed_by").order_by("-created_at", "-id")
    if employee_id:
        qs = qs.filter(employee_id=employee_id)
    if status:
        qs = qs.filter(status=status)
    if item_id:
        qs = qs.filter(item_id=item_id)
    if urgency:
        qs = qs.filter(urgency=urgency)
    if search:
        qs = qs.filter(
            Q(item_name__icontains=search)
            | Q(notes__icontains=search)
            | Q(employee__email__icontains=search)
            | Q(employee__first_name__icontains=search)
            | Q(employee__last_name__icontains=search)
        )
    return qs


def visible_requests(user):
    """Admins see every request; employees only their own."""
    qs = AssetRequest.objects.select_related("employee", "item", "reviewed_by")
    return qs if user.is_admin else qs.filter(employee_id=user.id)


# EOF

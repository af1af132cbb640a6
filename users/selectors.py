"""Read-only queries for the employee directory."""

from common.choices import AssignmentStatus, Role
from django.db.models import Count, Q

from .models import User


def list_employees():
    """Employees annotated with their count of active ledger entries, newest first."""
    return (
        User.objects.filter(role=Role.EMPLOYEE)
        .annotate(active_assignments=Count("assignments", filter=Q(assignments__status=AssignmentStatus.ASSIGNED)))
        .order_by("-date_joined", "id")
    )


def employee_export_rows(qs):
    for emp in qs:
        yield {
            "Full Name": emp.get_full_name() or "Unnamed",
            "Email": emp.email,
            "Department": emp.department or "N/A",
            "Phone": emp.phone or "N/A",
            "Address": emp.address or "N/A",
            "Items Assigned": emp.active_assignments,
            "Joined Date": emp.date_joined.date().isoformat(),
        }

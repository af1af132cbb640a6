"""Admin registrations for the assignment ledger."""

from django.contrib import admin

from .models import AssignmentLedgerEntry


@admin.register(AssignmentLedgerEntry)
class AssignmentLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "employee", "item_name", "quantity", "status", "assigned_date", "returned_on")
    list_filter = ("status", "return_condition")
    search_fields = ("item_name", "employee__email", "notes")
    readonly_fields = (
        "employee",
        "item",
        "request",
        "quantity",
        "status",
        "return_condition",
        "returned_on",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF

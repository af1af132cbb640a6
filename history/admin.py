"""Admin registrations for history app (read-only)."""

from django.contrib import admin

from .models import HistoryEntry


@admin.register(HistoryEntry)
class HistoryEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "action_type", "employee", "item", "quantity", "reference", "created_at")
    list_filter = ("action_type",)
    search_fields = ("notes", "reference", "item__name", "employee__email")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF

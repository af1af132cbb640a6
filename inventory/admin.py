"""Admin registrations for inventory app."""

from django.contrib import admin

from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "category", "total_quantity", "available_quantity", "created_by", "updated_at")
    list_filter = ("category",)
    search_fields = ("name", "description")
    # stock moves only through the reservation coordinator; create and delete go through the API
    readonly_fields = ("total_quantity", "available_quantity", "created_by", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF

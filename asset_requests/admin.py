"""Admin registrations for asset requests."""

from django.contrib import admin

from .models import AssetRequest, IdempotencyKey


@admin.register(AssetRequest)
class AssetRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "employee", "item_name", "quantity", "status", "urgency", "reviewed_by", "created_at")
    list_filter = ("status", "urgency", "category")
    search_fields = ("item_name", "notes", "employee__email")
    # status and the reserved quantity move only through the review endpoints
    readonly_fields = (
        "employee",
        "item",
        "quantity",
        "status",
        "reviewed_by",
        "reviewed_at",
        "completed_at",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "scope", "method", "path", "response_code", "expires_at")
    search_fields = ("key", "path")


# EOF

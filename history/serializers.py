"""Read-only serializers for the history log."""

from rest_framework import serializers

from .models import HistoryEntry


class HistoryEntrySerializer(serializers.ModelSerializer):
    """Audit entry with fallback labels for deleted employees and items."""

    employee_name = serializers.CharField(source="employee_label", read_only=True)
    item_name = serializers.CharField(source="item_label", read_only=True)
    performed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = HistoryEntry
        fields = [
            "id",
            "action_type",
            "employee",
            "employee_name",
            "item",
            "item_name",
            "quantity",
            "notes",
            "reference",
            "performed_by",
            "performed_by_name",
            "created_at",
        ]
        read_only_fields = fields

    def get_performed_by_name(self, obj) -> str | None:
        return obj.performed_by.display_name if obj.performed_by_id else None


# EOF

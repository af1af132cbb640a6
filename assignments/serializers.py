"""Serializers for the assignment ledger."""

from common.choices import ItemCategory, ItemCondition
from inventory.categories import validate_specifications
from rest_framework import serializers

from .models import AssignmentLedgerEntry
from .services import assign, register_own_item


class AssignmentSerializer(serializers.ModelSerializer):
    """Read-only ledger entry; `item_name` is the snapshot taken at assignment."""

    employee_name = serializers.CharField(source="employee.display_name", read_only=True)
    category = serializers.SerializerMethodField()
    assigned_by_name = serializers.SerializerMethodField()

    class Meta:
        model = AssignmentLedgerEntry
        fields = [
            "id",
            "employee",
            "employee_name",
            "item",
            "item_name",
            "category",
            "request",
            "quantity",
            "status",
            "assigned_date",
            "assigned_by",
            "assigned_by_name",
            "notes",
            "issued_condition",
            "return_condition",
            "returned_on",
        ]
        read_only_fields = fields

    def get_category(self, obj) -> str | None:
        return obj.item.category if obj.item_id else None

    def get_assigned_by_name(self, obj) -> str | None:
        return obj.assigned_by.display_name if obj.assigned_by_id else None


class DirectAssignSerializer(serializers.Serializer):
    """Admin direct assignment; reserves stock itself."""

    employee_id = serializers.IntegerField()
    item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def create(self, validated_data):  # type: ignore[override]
        return assign(actor=self.context["request"].user, **validated_data)


class OwnItemSerializer(serializers.Serializer):
    """Register an item the employee already holds."""

    name = serializers.CharField(max_length=200)
    category = serializers.ChoiceField(choices=ItemCategory.choices)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    total_quantity = serializers.IntegerField(min_value=1)
    specifications = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        problems = validate_specifications(attrs["category"], attrs.get("specifications") or {})
        if problems:
            raise serializers.ValidationError({"specifications": problems})
        return attrs

    def create(self, validated_data):  # type: ignore[override]
        return register_own_item(actor=self.context["request"].user, **validated_data)


class ReturnSerializer(serializers.Serializer):
    condition = serializers.ChoiceField(choices=ItemCondition.choices)
    return_date = serializers.DateField(required=False)


# EOF

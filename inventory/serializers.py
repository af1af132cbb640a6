"""Serializers for the inventory catalog.

Read serializers expose the derived stock status; write serializers validate
specification keys against the category metadata and delegate to services.
"""

from common.choices import ItemCategory
from rest_framework import serializers

from .categories import validate_specifications
from .models import InventoryItem
from .selectors import stock_status
from .services import create_item, update_item


class InventoryItemSerializer(serializers.ModelSerializer):
    """Read-only representation of an item with its derived status."""

    stock_status = serializers.SerializerMethodField()
    condition = serializers.CharField(read_only=True, allow_null=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "name",
            "category",
            "description",
            "total_quantity",
            "available_quantity",
            "stock_status",
            "condition",
            "specifications",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_stock_status(self, obj) -> str:
        return stock_status(obj)

    def get_created_by_name(self, obj) -> str | None:
        return obj.created_by.display_name if obj.created_by_id else None


class AvailabilitySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    available = serializers.IntegerField()


class _SpecificationsMixin:
    def _check_specifications(self, category, specifications):
        problems = validate_specifications(category, specifications or {})
        if problems:
            raise serializers.ValidationError({"specifications": problems})


class ItemCreateSerializer(_SpecificationsMixin, serializers.Serializer):
    """Write serializer for adding an item to the shared inventory."""

    name = serializers.CharField(max_length=200)
    category = serializers.ChoiceField(choices=ItemCategory.choices)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    total_quantity = serializers.IntegerField(min_value=1)
    specifications = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)

    def validate(self, attrs):
        self._check_specifications(attrs["category"], attrs.get("specifications"))
        return attrs

    def create(self, validated_data):  # type: ignore[override]
        return create_item(actor=self.context["request"].user, **validated_data)


class ItemUpdateSerializer(_SpecificationsMixin, serializers.Serializer):
    """Partial update; a total change is reconciled against committed units."""

    name = serializers.CharField(max_length=200, required=False)
    category = serializers.ChoiceField(choices=ItemCategory.choices, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    total_quantity = serializers.IntegerField(min_value=0, required=False)
    specifications = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)

    def validate(self, attrs):
        if "specifications" in attrs:
            category = attrs.get("category") or self.instance.category
            self._check_specifications(category, attrs["specifications"])
        return attrs

    def update(self, instance, validated_data):  # type: ignore[override]
        return update_item(actor=self.context["request"].user, item_id=instance.id, **validated_data)


# EOF

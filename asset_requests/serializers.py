"""Asset request serializers for read and write operations."""

from common.choices import ItemCategory, ItemCondition, Urgency
from rest_framework import serializers

from .models import AssetRequest
from .services import submit_request, update_request


class AssetRequestSerializer(serializers.ModelSerializer):
    """Read serializer; reviewer and requester are exposed by display name."""

    employee_name = serializers.CharField(source="employee.display_name", read_only=True)
    employee_email = serializers.EmailField(source="employee.email", read_only=True)
    reviewed_by_name = serializers.SerializerMethodField()
    available_quantity = serializers.SerializerMethodField()

    class Meta:
        model = AssetRequest
        fields = [
            "id",
            "employee",
            "employee_name",
            "employee_email",
            "item",
            "item_name",
            "category",
            "quantity",
            "available_quantity",
            "status",
            "urgency",
            "notes",
            "brand",
            "expected_date",
            "admin_comment",
            "reject_reason",
            "reviewed_by",
            "reviewed_by_name",
            "reviewed_at",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_reviewed_by_name(self, obj) -> str | None:
        return obj.reviewed_by.display_name if obj.reviewed_by_id else None

    def get_available_quantity(self, obj) -> int | None:
        return obj.item.available_quantity if obj.item_id else None


class SubmitRequestSerializer(serializers.Serializer):
    """Write serializer for submitting a request by item id or free-text name."""

    item_id = serializers.IntegerField(required=False, allow_null=True)
    item_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    category = serializers.ChoiceField(choices=ItemCategory.choices, required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField()
    urgency = serializers.ChoiceField(choices=Urgency.choices, required=False, default=Urgency.NORMAL)
    expected_date = serializers.DateField(required=False, allow_null=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs.get("item_id") is None and not (attrs.get("item_name") or "").strip():
            raise serializers.ValidationError({"item_name": "Provide item_id or item_name."})
        return attrs

    def create(self, validated_data):  # type: ignore[override]
        return submit_request(actor=self.context["request"].user, **validated_data)


class UpdateRequestSerializer(serializers.Serializer):
    """Partial update by the requester while pending."""

    item_id = serializers.IntegerField(required=False, allow_null=True)
    item_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=ItemCategory.choices, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, required=False)
    notes = serializers.CharField(required=False)
    urgency = serializers.ChoiceField(choices=Urgency.choices, required=False)
    expected_date = serializers.DateField(required=False, allow_null=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def update(self, instance, validated_data):  # type: ignore[override]
        return update_request(actor=self.context["request"].user, request_id=instance.id, **validated_data)


class ApproveSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, default="")
    item_id = serializers.IntegerField(required=False, allow_null=True)


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class CompleteSerializer(serializers.Serializer):
    condition = serializers.ChoiceField(choices=ItemCondition.choices, required=False, default=ItemCondition.GOOD)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


# EOF

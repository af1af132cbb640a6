"""Inventory catalog endpoints: items, availability, export and category metadata."""

from common.csv_export import csv_response
from common.exceptions import Forbidden, NotFound, ValidationError
from django.utils.dateparse import parse_date
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsAdminRole

from . import selectors
from .categories import as_metadata
from .models import InventoryItem
from .serializers import AvailabilitySerializer, InventoryItemSerializer, ItemCreateSerializer, ItemUpdateSerializer
from .services import delete_item

ITEM_FILTER_PARAMS = [
    OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category"),
    OpenApiParameter(
        "stock_status", OpenApiTypes.STR, location="query", description="`Unassigned` (available > 0) or `Assigned`"
    ),
    OpenApiParameter("condition", OpenApiTypes.STR, location="query", description="`Good` or `Damaged`"),
    OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Match name, description, category"),
    OpenApiParameter("returned_on", OpenApiTypes.DATE, location="query", description="Last returned on (ISO date)"),
    OpenApiParameter("created_by", OpenApiTypes.INT, location="query", description="Creator user id"),
]

ITEM_EXAMPLE = {
    "id": 1,
    "name": "MacBook Pro 14",
    "category": "Laptop",
    "description": "",
    "total_quantity": 5,
    "available_quantity": 3,
    "stock_status": "Unassigned",
    "condition": "Good",
    "specifications": {"ram": "16GB", "company": "Apple", "condition": "Good"},
    "created_by": 1,
    "created_by_name": "Admin",
    "created_at": "2025-01-01T12:00:00Z",
    "updated_at": "2025-01-02T09:30:00Z",
}


def _item_filters(params) -> dict:
    returned_on = params.get("returned_on")
    parsed = None
    if returned_on:
        parsed = parse_date(returned_on)
        if parsed is None:
            raise ValidationError("returned_on must be an ISO date (YYYY-MM-DD).")
    created_by = params.get("created_by")
    if created_by and not created_by.isdigit():
        raise ValidationError("created_by must be a user id.")
    return {
        "category": params.get("category"),
        "stock_status": params.get("stock_status"),
        "condition": params.get("condition"),
        "search": params.get("search"),
        "returned_on": parsed,
        "created_by": int(created_by) if created_by else None,
    }


class ItemListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InventoryItemSerializer
    throttle_scope = "inventory"

    def get_queryset(self):
        return selectors.list_items(**_item_filters(self.request.query_params))

    def get_throttles(self):
        if self.request.method == "POST":
            self.throttle_scope = "inventory_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List items",
        description=(
            "Paginated catalog. Filters: category, stock_status, condition, search, returned_on, created_by. "
            "Unknown stock status values (including `Partially Assigned`) are rejected with 400."
        ),
        parameters=ITEM_FILTER_PARAMS,
        examples=[
            OpenApiExample(
                "Items",
                value={"count": 1, "next": None, "previous": None, "results": [ITEM_EXAMPLE]},
                response_only=True,
            )
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Create item",
        description="Admin only. Adds an item with every unit available.",
        request=ItemCreateSerializer,
        responses={201: InventoryItemSerializer},
    )
    def post(self, request):
        if not request.user.is_admin:
            raise Forbidden("Only administrators can add inventory items.")
        serializer = ItemCreateSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)


class ItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "inventory"

    def get_throttles(self):
        if self.request.method in ("PATCH", "DELETE"):
            self.throttle_scope = "inventory_write"
        return super().get_throttles()

    def _get_item(self, item_id: int) -> InventoryItem:
        try:
            return InventoryItem.objects.select_related("created_by").get(pk=item_id)
        except InventoryItem.DoesNotExist:
            raise NotFound("Inventory item not found.")

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Get item",
        responses={200: InventoryItemSerializer},
        examples=[OpenApiExample("Item", value=ITEM_EXAMPLE, response_only=True)],
    )
    def get(self, request, item_id: int):
        return Response(InventoryItemSerializer(self._get_item(item_id)).data)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Update item",
        description=(
            "Admin or creator. Raising total_quantity adds the delta to available; lowering it below the "
            "units currently assigned or reserved returns 422."
        ),
        request=ItemUpdateSerializer,
        responses={200: InventoryItemSerializer},
    )
    def patch(self, request, item_id: int):
        item = self._get_item(item_id)
        serializer = ItemUpdateSerializer(instance=item, data=request.data, context={"request": request}, partial=True)
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        return Response(InventoryItemSerializer(item).data)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Delete item",
        description="Admin or creator. 409 while the item is assigned or reserved by an approved request.",
        responses={204: None},
    )
    def delete(self, request, item_id: int):
        delete_item(actor=request.user, item_id=item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ItemAvailabilityView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Get item availability",
        responses={200: AvailabilitySerializer},
        examples=[OpenApiExample("Availability", value={"total": 5, "available": 3}, response_only=True)],
    )
    def get(self, request, item_id: int):
        return Response(selectors.get_availability(item_id))


class ItemExportView(APIView):
    permission_classes = [IsAdminRole]
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Export items as CSV",
        description="Same filters as the item list; specification keys become extra columns.",
        parameters=ITEM_FILTER_PARAMS,
        responses={(200, "text/csv"): OpenApiTypes.BINARY},
    )
    def get(self, request):
        qs = selectors.list_items(**_item_filters(request.query_params))
        return csv_response(selectors.item_export_rows(qs), "inventory")


class CategoryMetadataView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Category metadata",
        description="Specification fields offered by each category.",
        examples=[
            OpenApiExample(
                "Categories",
                value=[
                    {
                        "category": "Furniture",
                        "fields": [{"name": "type", "label": "Type", "type": "select", "options": ["Chair", "Desk"]}],
                    }
                ],
                response_only=True,
            )
        ],
    )
    def get(self, request):
        return Response(as_metadata())


# EOF

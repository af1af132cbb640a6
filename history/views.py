"""History log endpoints."""

from common.csv_export import csv_response
from common.exceptions import ValidationError
from django.utils.dateparse import parse_date
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView
from users.permissions import IsAdminRole

from .selectors import EXPORT_COLUMNS, iter_history, query_history
from .serializers import HistoryEntrySerializer

HISTORY_FILTER_PARAMS = [
    OpenApiParameter("action_type", OpenApiTypes.STR, location="query", description="requested, approved, ..."),
    OpenApiParameter("employee", OpenApiTypes.INT, location="query", description="Employee id (admins only)"),
    OpenApiParameter("item", OpenApiTypes.INT, location="query", description="Item id"),
    OpenApiParameter("start", OpenApiTypes.DATE, location="query", description="From date (inclusive)"),
    OpenApiParameter("end", OpenApiTypes.DATE, location="query", description="To date (inclusive)"),
    OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Match item, employee or notes"),
]


def _parse_int(params, name):
    value = params.get(name)
    if not value:
        return None
    if not value.isdigit():
        raise ValidationError(f"{name} must be an integer id.")
    return int(value)


def _parse_day(params, name):
    value = params.get(name)
    if not value:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD).")
    return parsed


def history_filters(request) -> dict:
    """Query filters; employees are always scoped to their own entries."""
    params = request.query_params
    employee_id = _parse_int(params, "employee")
    if not request.user.is_admin:
        employee_id = request.user.id
    return {
        "action_type": params.get("action_type") or None,
        "employee_id": employee_id,
        "item_id": _parse_int(params, "item"),
        "start": _parse_day(params, "start"),
        "end": _parse_day(params, "end"),
        "search": params.get("search") or None,
    }


class HistoryListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HistoryEntrySerializer
    throttle_scope = "history"

    def get_queryset(self):
        return query_history(**history_filters(self.request))

    @extend_schema(
        tags=["History Endpoints"],
        summary="List history",
        description="Newest first, paginated. Employees only see their own entries.",
        parameters=HISTORY_FILTER_PARAMS,
        examples=[
            OpenApiExample(
                "History",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 31,
                            "action_type": "returned",
                            "employee": 7,
                            "employee_name": "Ada Lovelace",
                            "item": None,
                            "item_name": "Deleted Item",
                            "quantity": 1,
                            "notes": "Returned in Damaged condition",
                            "reference": "assignment:4",
                            "performed_by": 7,
                            "performed_by_name": "Ada Lovelace",
                            "created_at": "2025-01-03T10:00:00Z",
                        }
                    ],
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class HistoryExportView(APIView):
    permission_classes = [IsAdminRole]
    throttle_scope = "history"

    @extend_schema(
        tags=["History Endpoints"],
        summary="Export history as CSV",
        parameters=HISTORY_FILTER_PARAMS,
        responses={(200, "text/csv"): OpenApiTypes.BINARY},
    )
    def get(self, request):
        return csv_response(iter_history(**history_filters(request)), "history", fieldnames=EXPORT_COLUMNS)


# EOF

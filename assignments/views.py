"""Assignment ledger endpoints."""

from asset_requests.idempotency import run_idempotent
from common.exception_handler import error_body
from common.exceptions import AssetDeskError, Forbidden
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import list_active_by_employee, list_assignments
from .serializers import AssignmentSerializer, DirectAssignSerializer, OwnItemSerializer, ReturnSerializer
from .services import return_assignment

ASSIGNMENT_EXAMPLE = {
    "id": 4,
    "employee": 7,
    "employee_name": "Ada Lovelace",
    "item": 3,
    "item_name": "MacBook Pro 14",
    "category": "Laptop",
    "request": 12,
    "quantity": 1,
    "status": "assigned",
    "assigned_date": "2025-01-02T10:00:00Z",
    "assigned_by": 1,
    "assigned_by_name": "Admin",
    "notes": "",
    "issued_condition": "Good",
    "return_condition": "",
    "returned_on": None,
}


def _int_param(params, name):
    value = params.get(name)
    return int(value) if value and value.isdigit() else None


class AssignmentListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AssignmentSerializer
    throttle_scope = "assignments"

    def get_throttles(self):
        if self.request.method == "POST":
            self.throttle_scope = "assignments_write"
        return super().get_throttles()

    def get_queryset(self):
        params = self.request.query_params
        employee_id = _int_param(params, "employee")
        if not self.request.user.is_admin:
            employee_id = self.request.user.id
        return list_assignments(
            employee_id=employee_id,
            status=params.get("status") or None,
            item_id=_int_param(params, "item"),
        )

    @extend_schema(
        tags=["Assignment Endpoints"],
        summary="List assignments",
        description="Admins see every ledger entry; employees see their own. Filters: status, item, employee.",
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, location="query", description="assigned or returned"),
            OpenApiParameter("item", OpenApiTypes.INT, location="query"),
            OpenApiParameter("employee", OpenApiTypes.INT, location="query", description="Admins only"),
        ],
        examples=[
            OpenApiExample(
                "Assignments",
                value={"count": 1, "next": None, "previous": None, "results": [ASSIGNMENT_EXAMPLE]},
                response_only=True,
            )
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Assignment Endpoints"],
        summary="Assign item directly",
        description="Admin only. Reserves stock and records the assignment without a request.",
        request=DirectAssignSerializer,
        responses={201: AssignmentSerializer},
    )
    def post(self, request):
        if not request.user.is_admin:
            raise Forbidden("Only administrators can assign items directly.")
        serializer = DirectAssignSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        entry = serializer.save()
        return Response(AssignmentSerializer(entry).data, status=status.HTTP_201_CREATED)


class MyAssignmentsView(generics.ListAPIView):
    """Active items held by the current user."""

    permission_classes = [IsAuthenticated]
    serializer_class = AssignmentSerializer
    throttle_scope = "assignments"

    def get_queryset(self):
        return list_active_by_employee(self.request.user.id).select_related("employee", "assigned_by")

    @extend_schema(tags=["Assignment Endpoints"], summary="My active assignments")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OwnItemCreateView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "assignments_write"

    @extend_schema(
        tags=["Assignment Endpoints"],
        summary="Add item to my inventory",
        description=(
            "Records an item the current user already holds. The item is created with nothing available "
            "and the whole quantity is assigned to the caller."
        ),
        request=OwnItemSerializer,
        responses={201: AssignmentSerializer},
        examples=[
            OpenApiExample(
                "Own monitor",
                value={
                    "name": "Dell 27in Monitor",
                    "category": "Accessories",
                    "total_quantity": 1,
                    "specifications": {"type": "Monitor", "company": "Dell"},
                },
                request_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = OwnItemSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        entry = serializer.save()
        return Response(AssignmentSerializer(entry).data, status=status.HTTP_201_CREATED)


class AssignmentReturnView(APIView):
    """Return an active assignment and credit its units back to stock.

    Idempotent when `Idempotency-Key` is provided. Without a key a second return fails with 409.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "assignments_write"

    @extend_schema(
        tags=["Assignment Endpoints"],
        summary="Return assignment",
        parameters=[
            OpenApiParameter(
                name="Idempotency-Key",
                location=OpenApiParameter.HEADER,
                required=False,
                description="Makes the request idempotent within scope+path+method",
                type=str,
            )
        ],
        request=ReturnSerializer,
        responses={200: AssignmentSerializer},
        examples=[
            OpenApiExample("Damaged", value={"condition": "Damaged", "return_date": "2025-02-01"}, request_only=True),
            OpenApiExample(
                "Already returned",
                value={"detail": "Assignment was already returned.", "code": "conflict"},
                response_only=True,
                status_codes=["409"],
            ),
        ],
    )
    def post(self, request, entry_id: int):
        serializer = ReturnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                entry = return_assignment(
                    actor=request.user,
                    entry_id=entry_id,
                    condition=serializer.validated_data["condition"],
                    return_date=serializer.validated_data.get("return_date"),
                )
                return AssignmentSerializer(entry).data, 200
            except AssetDeskError as exc:
                return error_body(exc), exc.status_code

        body, code = run_idempotent(request, _handler)
        return Response(body, status=code)


# EOF

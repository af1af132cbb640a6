"""Asset request API endpoints.

Review transitions (approve, reject, complete) are idempotent when the client
sends an `Idempotency-Key` header; a retried key replays the first response.
"""

from common.exception_handler import error_body
from common.exceptions import AssetDeskError, NotFound
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsAdminRole

from . import selectors
from .idempotency import run_idempotent
from .models import AssetRequest
from .serializers import (
    ApproveSerializer,
    AssetRequestSerializer,
    CompleteSerializer,
    RejectSerializer,
    SubmitRequestSerializer,
    UpdateRequestSerializer,
)
from .services import approve_request, complete_request, delete_request, reject_request

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)

REQUEST_EXAMPLE = {
    "id": 12,
    "employee": 7,
    "employee_name": "Ada Lovelace",
    "employee_email": "ada@example.com",
    "item": 3,
    "item_name": "MacBook Pro 14",
    "category": "Laptop",
    "quantity": 1,
    "available_quantity": 4,
    "status": "approved",
    "urgency": "Normal",
    "notes": "Replacement for broken laptop",
    "brand": "",
    "expected_date": None,
    "admin_comment": "OK",
    "reject_reason": "",
    "reviewed_by": 1,
    "reviewed_by_name": "Admin",
    "reviewed_at": "2025-01-02T09:30:00Z",
    "completed_at": None,
    "created_at": "2025-01-01T12:00:00Z",
    "updated_at": "2025-01-02T09:30:00Z",
}

ERROR_EXAMPLES = [
    OpenApiExample(
        "Insufficient stock",
        value={"detail": "Only 2 unit(s) available.", "code": "insufficient_stock"},
        response_only=True,
        status_codes=["409"],
    ),
    OpenApiExample(
        "Concurrent transition",
        value={"detail": "Request is approved, expected pending.", "code": "conflict"},
        response_only=True,
        status_codes=["409"],
    ),
]


class RequestListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AssetRequestSerializer
    throttle_scope = "requests"

    def get_throttles(self):
        if self.request.method == "POST":
            self.throttle_scope = "requests_write"
        return super().get_throttles()

    def get_queryset(self):
        params = self.request.query_params
        employee_id = params.get("employee")
        if not self.request.user.is_admin:
            employee_id = self.request.user.id
        item_id = params.get("item")
        return selectors.list_requests(
            employee_id=int(employee_id) if employee_id and str(employee_id).isdigit() else None,
            status=params.get("status") or None,
            item_id=int(item_id) if item_id and item_id.isdigit() else None,
            urgency=params.get("urgency") or None,
            search=params.get("search") or None,
        )

    @extend_schema(
        tags=["Request Endpoints"],
        summary="List requests",
        description=(
            "Admins see all requests; employees see their own. Filters: status, employee, item, urgency, search."
        ),
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, location="query"),
            OpenApiParameter("employee", OpenApiTypes.INT, location="query"),
            OpenApiParameter("item", OpenApiTypes.INT, location="query"),
            OpenApiParameter("urgency", OpenApiTypes.STR, location="query"),
            OpenApiParameter("search", OpenApiTypes.STR, location="query"),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Submit request",
        description="Creates a pending request. No stock is reserved until approval.",
        request=SubmitRequestSerializer,
        responses={201: AssetRequestSerializer},
        examples=[
            OpenApiExample(
                "Catalog item",
                value={"item_id": 3, "quantity": 1, "notes": "Replacement for broken laptop", "urgency": "Urgent"},
                request_only=True,
            ),
            OpenApiExample(
                "Free-text item",
                value={"item_name": "Standing desk", "category": "Furniture", "quantity": 1, "notes": "Back pain"},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = SubmitRequestSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        req = serializer.save()
        return Response(AssetRequestSerializer(req).data, status=status.HTTP_201_CREATED)


class RequestDetailView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "requests"

    def get_throttles(self):
        if self.request.method in ("PATCH", "DELETE"):
            self.throttle_scope = "requests_write"
        return super().get_throttles()

    def _get_visible(self, request, request_id: int) -> AssetRequest:
        try:
            return selectors.visible_requests(request.user).get(pk=request_id)
        except AssetRequest.DoesNotExist:
            raise NotFound("Request not found.")

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Get request",
        responses={200: AssetRequestSerializer},
        examples=[OpenApiExample("Request", value=REQUEST_EXAMPLE, response_only=True)],
    )
    def get(self, request, request_id: int):
        return Response(AssetRequestSerializer(self._get_visible(request, request_id)).data)

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Edit request",
        description="Requester only, while the request is pending (403 otherwise).",
        request=UpdateRequestSerializer,
        responses={200: AssetRequestSerializer},
    )
    def patch(self, request, request_id: int):
        req = self._get_visible(request, request_id)
        serializer = UpdateRequestSerializer(
            instance=req, data=request.data, context={"request": request}, partial=True
        )
        serializer.is_valid(raise_exception=True)
        req = serializer.save()
        return Response(AssetRequestSerializer(req).data)

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Delete request",
        description="Requester only, while the request is pending (403 otherwise).",
        responses={204: None},
    )
    def delete(self, request, request_id: int):
        self._get_visible(request, request_id)
        delete_request(actor=request.user, request_id=request_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RequestApproveView(APIView):
    """Approve a pending request, reserving stock.

    Idempotent when `Idempotency-Key` is provided. Returns 409 on key reuse with different payload.
    """

    permission_classes = [IsAdminRole]
    throttle_scope = "requests_write"

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Approve request",
        description=(
            "Reserves the requested quantity and moves the request to approved. 409 `insufficient_stock` "
            "leaves it pending. Free-text requests must pass `item_id` to link a catalog item."
        ),
        parameters=[IDEMPOTENCY_HEADER],
        request=ApproveSerializer,
        responses={200: AssetRequestSerializer},
        examples=[OpenApiExample("Approved", value=REQUEST_EXAMPLE, response_only=True), *ERROR_EXAMPLES],
    )
    def post(self, request, request_id: int):
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                req = approve_request(
                    actor=request.user,
                    request_id=request_id,
                    comment=serializer.validated_data.get("comment", ""),
                    item_id=serializer.validated_data.get("item_id"),
                )
                return AssetRequestSerializer(req).data, 200
            except AssetDeskError as exc:
                return error_body(exc), exc.status_code

        body, code = run_idempotent(request, _handler)
        return Response(body, status=code)


class RequestRejectView(APIView):
    permission_classes = [IsAdminRole]
    throttle_scope = "requests_write"

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Reject request",
        description="Pending requests only; a reason is required. No stock effect.",
        parameters=[IDEMPOTENCY_HEADER],
        request=RejectSerializer,
        responses={200: AssetRequestSerializer},
        examples=[
            OpenApiExample("Reject", value={"reason": "Out of stock"}, request_only=True),
            *ERROR_EXAMPLES[1:],
        ],
    )
    def post(self, request, request_id: int):
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                req = reject_request(
                    actor=request.user,
                    request_id=request_id,
                    reason=serializer.validated_data["reason"],
                )
                return AssetRequestSerializer(req).data, 200
            except AssetDeskError as exc:
                return error_body(exc), exc.status_code

        body, code = run_idempotent(request, _handler)
        return Response(body, status=code)


class RequestCompleteView(APIView):
    permission_classes = [IsAdminRole]
    throttle_scope = "requests_write"

    @extend_schema(
        tags=["Request Endpoints"],
        summary="Complete request",
        description="Hands over an approved request and records the assignment.",
        parameters=[IDEMPOTENCY_HEADER],
        request=CompleteSerializer,
        responses={200: AssetRequestSerializer},
        examples=ERROR_EXAMPLES[1:],
    )
    def post(self, request, request_id: int):
        serializer = CompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                req = complete_request(
                    actor=request.user,
                    request_id=request_id,
                    condition=serializer.validated_data["condition"],
                    notes=serializer.validated_data.get("notes", ""),
                )
                return AssetRequestSerializer(req).data, 200
            except AssetDeskError as exc:
                return error_body(exc), exc.status_code

        body, code = run_idempotent(request, _handler)
        return Response(body, status=code)


# EOF

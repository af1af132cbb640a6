"""Users app API views.

Endpoints include:
- profile: returns or updates the current authenticated user's profile.
- register: creates a new employee account.
- signin/refresh/verify/signout: JWT lifecycle, the access token carries the role claim.
- employees: admin-only directory with active assignment counts and CSV export.
"""

from common.csv_export import csv_response
from common.exceptions import ValidationError
from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView, TokenVerifyView

from . import selectors
from .filters import EmployeeFilterSet
from .logging import log_auth_event
from .permissions import IsAdminRole
from .serializers import (
    EmailOrPhoneTokenObtainPairSerializer,
    EmployeeDetailSerializer,
    EmployeeSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    SignOutSerializer,
    UserMeSerializer,
)


@extend_schema(
    operation_id="users_current_user",
    summary="Get or update current user profile",
    description=(
        "GET returns the current authenticated user's profile. PATCH updates name, department, phone "
        "and address.\n\n"
        "Auth: Requires JWT (Authorization: Bearer <token>).\n\n"
        "Errors: 401 if authentication credentials are missing or invalid."
    ),
    tags=["User Endpoints"],
    request=ProfileUpdateSerializer,
    responses={
        200: OpenApiResponse(description="User profile", response=UserMeSerializer),
        401: OpenApiResponse(description="Unauthorized"),
    },
)
@api_view(["GET", "PATCH"])
@permission_classes([IsAuthenticated])
@throttle_classes([ScopedRateThrottle])
def current_user(request):
    """Return or partially update the authenticated user's profile."""
    if request.method == "PATCH":
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        log_auth_event("profile_update", request, user=request.user)
    else:
        log_auth_event("profile", request, user=request.user)
    return Response(UserMeSerializer(request.user).data)


# Throttle scope for profile endpoint
current_user.throttle_scope = "profile"


@extend_schema(tags=["User Endpoints"], request=RegistrationSerializer, responses={201: UserMeSerializer})
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register(request):
    """Register a new employee account."""
    serializer = RegistrationSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        log_auth_event("register", request, user=user, status="success")
        return Response(UserMeSerializer(user).data, status=status.HTTP_201_CREATED)
    log_auth_event("register", request, status="invalid")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


register.throttle_scope = "register"


class SignOutView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signout"
    permission_classes = [AllowAny]

    @extend_schema(tags=["User Endpoints"], request=SignOutSerializer)
    def post(self, request):
        refresh = request.data.get("refresh")
        if not refresh:
            return Response({"detail": "Refresh token is required."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(refresh)
            token.blacklist()
        except TokenError:
            log_auth_event("signout", request, status="invalid_token")
            return Response({"detail": "Invalid token."}, status=status.HTTP_400_BAD_REQUEST)
        log_auth_event("signout", request, status="success")
        return Response({"detail": "Signed out."}, status=status.HTTP_205_RESET_CONTENT)


class SignInView(TokenObtainPairView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signin"
    serializer_class = EmailOrPhoneTokenObtainPairSerializer

    @extend_schema(
        tags=["User Endpoints"],
        examples=[
            OpenApiExample(
                "Signed in",
                value={"access": "<jwt>", "refresh": "<jwt>", "role": "employee"},
                response_only=True,
            )
        ],
    )
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("signin", request, status=status_label)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_refresh", request, status=status_label)
        return resp


class VerifyView(TokenVerifyView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_verify"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_verify", request, status=status_label)
        return resp


class EmployeeListView(generics.ListAPIView):
    """Admin-only employee directory."""

    permission_classes = [IsAdminRole]
    serializer_class = EmployeeSerializer
    throttle_scope = "employees"

    filter_backends = [filters.DjangoFilterBackend]
    filterset_class = EmployeeFilterSet

    def get_queryset(self):
        return selectors.list_employees()

    @extend_schema(
        tags=["Employee Endpoints"],
        summary="List employees",
        description="Employees with their count of active assignments. Filters: search, department.",
        examples=[
            OpenApiExample(
                "Employees",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 7,
                            "name": "Ada Lovelace",
                            "email": "ada@example.com",
                            "department": "MERN Stack",
                            "phone": "+14155552671",
                            "address": "",
                            "active_assignments": 2,
                            "date_joined": "2025-01-01T12:00:00Z",
                        }
                    ],
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class EmployeeDetailView(generics.RetrieveAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = EmployeeDetailSerializer
    throttle_scope = "employees"

    def get_queryset(self):
        return selectors.list_employees()

    @extend_schema(tags=["Employee Endpoints"], summary="Get employee")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class EmployeeExportView(APIView):
    permission_classes = [IsAdminRole]
    throttle_scope = "employees"

    @extend_schema(
        tags=["Employee Endpoints"],
        summary="Export employees as CSV",
        parameters=[
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Match name or email"),
            OpenApiParameter("department", OpenApiTypes.STR, location="query"),
        ],
        responses={(200, "text/csv"): OpenApiTypes.BINARY},
    )
    def get(self, request):
        filterset = EmployeeFilterSet(request.query_params, queryset=selectors.list_employees())
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        return csv_response(selectors.employee_export_rows(filterset.qs), "employees")


# EOF

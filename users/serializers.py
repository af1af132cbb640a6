"""Serializers for user profile, registration, sign-in and the employee directory.

- UserMeSerializer: profile data for the authenticated user.
- ProfileUpdateSerializer: editable profile fields (name, phone, address, department).
- RegistrationSerializer: action serializer creating employee accounts.
- EmailOrPhoneTokenObtainPairSerializer: obtain JWTs using email or phone; the
  access token carries the user's role claim.
- EmployeeSerializer: directory row with the count of active assignments.
"""

from common.choices import Department
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer returning profile fields for the current user."""

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "role",
            "department",
            "phone",
            "address",
            "date_joined",
        ]
        read_only_fields = ["id", "username", "email", "role", "date_joined"]


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["first_name", "last_name", "department", "phone", "address"]


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to register a new employee.

    Validates uniqueness of `username` and `email` and enforces Django
    password validators. New accounts always receive the employee role.
    """

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    department = serializers.ChoiceField(choices=Department.choices, required=False)

    def validate_username(self, value: str) -> str:
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username is already taken.")
        return value

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate_password(self, value: str) -> str:
        from django.contrib.auth.password_validation import validate_password

        user = User(username=self.initial_data.get("username", ""), email=self.initial_data.get("email", ""))
        validate_password(value, user=user)
        return value

    def create(self, validated_data):
        user = User(
            username=validated_data["username"],
            email=validated_data["email"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            department=validated_data.get("department", ""),
            role=User.ROLE_EMPLOYEE,
        )
        user.set_password(validated_data["password"])
        user.save()
        return user


class SignOutSerializer(serializers.Serializer):
    """Request body for signing out (blacklisting refresh token)."""

    refresh = serializers.CharField()


class EmailOrPhoneTokenObtainPairSerializer(serializers.Serializer):
    """Obtain JWTs by authenticating with either email or phone.

    Accepts a single `identifier` field which may be an email address
    (case-insensitive) or an E.164 phone number, and a `password`.
    Returns `access` and `refresh` tokens plus the resolved `role`.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("identifier") or "").strip()
        password = attrs.get("password") or ""

        if not identifier or not password:
            raise serializers.ValidationError({"detail": "identifier and password are required."})

        lookup = {"email": identifier.lower()} if "@" in identifier else {"phone": identifier}
        user = User.objects.filter(**lookup).first()

        if not user or not user.check_password(password) or not user.is_active:
            raise serializers.ValidationError({"detail": "Invalid credentials."})

        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        return {"access": str(refresh.access_token), "refresh": str(refresh), "role": user.role}


class EmployeeSerializer(serializers.ModelSerializer):
    """Employee directory row; `active_assignments` comes from a queryset annotation."""

    name = serializers.CharField(source="display_name", read_only=True)
    active_assignments = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "department",
            "phone",
            "address",
            "active_assignments",
            "date_joined",
        ]
        read_only_fields = fields


class EmployeeDetailSerializer(EmployeeSerializer):
    """Directory row plus the employee's active ledger entries."""

    active_items = serializers.SerializerMethodField()

    class Meta(EmployeeSerializer.Meta):
        fields = [*EmployeeSerializer.Meta.fields, "active_items"]
        read_only_fields = fields

    def get_active_items(self, obj) -> list[dict]:
        from assignments.selectors import list_active_by_employee

        return [
            {
                "id": entry.id,
                "item": entry.item_id,
                "item_name": entry.item_name,
                "quantity": entry.quantity,
                "assigned_date": entry.assigned_date.isoformat(),
            }
            for entry in list_active_by_employee(obj.id)
        ]

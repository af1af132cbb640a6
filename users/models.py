"""User models for authentication and role resolution.

The custom `User` extends Django's `AbstractUser` with a unique email, the
role claim (`admin` or `employee`) the asset services trust, and the
employee directory fields (department, phone, address).
"""

from common.choices import Department, Role
from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class User(AbstractUser):
    """Custom user with unique email and an explicit role.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - role: `admin` reviews requests and manages stock; `employee` requests and holds items.
    - department: optional organisational unit shown in the employee directory.
    """

    ROLE_ADMIN = Role.ADMIN
    ROLE_EMPLOYEE = Role.EMPLOYEE

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.EMPLOYEE, db_index=True)
    department = models.CharField(max_length=32, choices=Department.choices, blank=True)
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[1-9]\d{1,14}$", message="Use E.164 format (e.g., +14155552671)")],
        help_text="Primary contact number for the account in E.164 format",
    )
    address = models.TextField(blank=True)

    def save(self, *args, **kwargs):
        """Normalize email and phone before persisting."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.phone.strip()
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN or self.is_superuser

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.email or self.username

    class Meta:
        indexes = [
            models.Index(fields=["role", "department"], name="user_role_dept_idx"),
        ]

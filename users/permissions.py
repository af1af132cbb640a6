"""DRF permission classes keyed on the user's role claim."""

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow authenticated users whose role is `admin` (or superusers)."""

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))

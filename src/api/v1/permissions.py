"""Custom DRF permissions for the spot incentive API."""
from rest_framework.permissions import BasePermission


class _RolePermission(BasePermission):
    """Allow authenticated users whose ``role`` is in ``allowed_roles``."""

    allowed_roles: tuple = ()
    message = "Unauthorized"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


class IsCanvasser(_RolePermission):
    """Canvassers, including accounts still carrying the legacy SEC role."""

    allowed_roles = ("CANVASSER", "SEC")


class IsZopperAdmin(_RolePermission):
    allowed_roles = ("ZOPPER_ADMINISTRATOR",)


class DenyUatUsers(BasePermission):
    """Block UAT test accounts from endpoints that move money or change users."""

    message = "UAT users cannot access this endpoint"

    def has_permission(self, request, view):
        user = request.user
        return not (user and user.is_authenticated and user.is_uat_user)

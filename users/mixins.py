# users/mixins.py
from rest_framework import permissions


class RoleRequiredPermission(permissions.BasePermission):
    """
    Generic permission requiring request.user.role to be one of allowed roles.
    Subclass and set `allowed_roles = ['teacher', 'admin']`.
    """

    allowed_roles = None  # override in subclass
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser or self.allowed_roles is None:
            return True
        return user.role in self.allowed_roles


class AdminRequired(RoleRequiredPermission):
    allowed_roles = ["admin"]


class AdminOrReadOnly(permissions.BasePermission):
    """Anyone may read master data; only admins change it."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and user.is_school_admin)

from rest_framework import permissions
from .enums import SUPERADMIN, FINANCE_ADMIN, EMPLOYEE


class IsNotSuperAdmin(permissions.BasePermission):
    """Allows access only to non super admin users."""

    message = "Only non Super Admins are authorized to perform this action."

    def has_permission(self, request, view):
        return bool(
            request.user.is_authenticated and SUPERADMIN not in request.user.roles
        )


class IsFinanceAdmin(permissions.BasePermission):
    """Allows access only to head-office finance reviewers."""

    message = "Only Finance Admins are authorized to perform this action."

    def has_permission(self, request, view):
        return bool(
            request.user.is_authenticated and FINANCE_ADMIN in request.user.roles
        )


class IsEmployee(permissions.BasePermission):
    """Allows access only to employees."""

    message = "Only Employees users are authorized to perform this action."

    def has_permission(self, request, view):
        return bool(request.user.is_authenticated and EMPLOYEE in request.user.roles)

# account/permissions.py
from rest_framework.permissions import BasePermission

from account.models import Role


class HasRole(BasePermission):
    """Allow authenticated users holding one of ``allowed_roles``."""
    allowed_roles = ()

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.has_role(*self.allowed_roles))


class IsAdminOrWarden(HasRole):
    # wardens run the front desk: admissions, payments, reminders
    allowed_roles = (Role.ADMIN, Role.WARDEN)


class IsAdmin(HasRole):
    allowed_roles = (Role.ADMIN,)

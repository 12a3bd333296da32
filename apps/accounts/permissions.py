from rest_framework.permissions import BasePermission


class IsAdmin(BasePermission):
    """
    Back-office access: admin role or Django staff.
    """
    message = "Forbidden - Admin access required"

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_admin
        )

# providers/permissions.py
from rest_framework.permissions import BasePermission


class IsProvider(BasePermission):
    """
    Allows access only to users with role == 'provider'.
    """
    message = "Only providers can access this resource."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) == "provider"

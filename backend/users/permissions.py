from django.conf import settings
from rest_framework import permissions

from core_backend.exceptions import PermissionDeniedError
from .capabilities import Capability, Principal, can


def principal_for(request):
    """Principal for the authenticated user on this request, or None."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return Principal.for_user(user)


class CanDeleteOrders(permissions.BasePermission):
    """
    Order deletion is open to all staff unless the deployment opts into the
    manager-only variant through RESTAURANT["ORDER_DELETE_REQUIRES_MANAGER"].
    """

    message = "Manager privileges required to delete orders."

    def has_permission(self, request, view):
        if request.method != "DELETE":
            return True
        if not settings.RESTAURANT.get("ORDER_DELETE_REQUIRES_MANAGER", False):
            return True
        if not can(principal_for(request), Capability.DELETE_ORDERS):
            raise PermissionDeniedError(self.message)
        return True

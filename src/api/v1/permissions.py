"""Custom DRF permissions for the incentive dashboard API."""
from rest_framework.permissions import SAFE_METHODS, BasePermission


def _is_privileged(user) -> bool:
    return bool(
        user
        and user.is_authenticated
        and (getattr(user, "is_privileged", False) or user.is_superuser)
    )


class IsPrivileged(BasePermission):
    """Allow access to super administrators only."""

    def has_permission(self, request, view):
        return _is_privileged(request.user)


class IsPrivilegedOrReadOnly(BasePermission):
    """Anyone may read; only super administrators may write.

    Combine with ``IsAuthenticated`` when anonymous reads are not wanted.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return _is_privileged(request.user)


class IsOwnerOrPrivileged(BasePermission):
    """Object-level: writes are limited to the owner or a super administrator.

    The owner is read from ``view.owner_field`` (default ``created_by``).
    Creation only requires an authenticated user.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        if _is_privileged(request.user):
            return True
        owner_field = getattr(view, "owner_field", "created_by")
        owner_id = getattr(obj, f"{owner_field}_id", None)
        return owner_id is not None and owner_id == request.user.id

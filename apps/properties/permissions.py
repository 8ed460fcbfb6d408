"""Permission classes for property endpoints."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_platform_admin(user) -> bool:
    return bool(user and user.is_authenticated and hasattr(user, "is_admin") and user.is_admin())


class IsPropertyOwnerOrAdmin(permissions.BasePermission):
    """Read for everyone, write for the owner of the listing or an administrator."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        if is_platform_admin(request.user):
            return True
        return obj.owner_id == request.user.id


class IsPlatformAdmin(permissions.BasePermission):
    def has_permission(self, request, view):  # type: ignore
        return is_platform_admin(request.user)

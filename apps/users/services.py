"""User directory consumed by the booking engine."""

from __future__ import annotations

from shared.domain.exceptions import NotFound

from .models import CustomUser


class UserDirectory:
    """Read-only lookup of active users."""

    @staticmethod
    def find_by_id(user_id) -> CustomUser:
        try:
            return CustomUser.objects.get(pk=user_id, is_active=True)
        except (CustomUser.DoesNotExist, ValueError, TypeError):
            raise NotFound("User not found")

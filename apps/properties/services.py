"""Property directory consumed by the booking engine."""

from __future__ import annotations

from django.db import transaction  # type: ignore

from shared.domain.exceptions import NotFound

from .models import Property


class PropertyDirectory:
    """Lookup of properties, optionally locking the row for the current transaction."""

    @staticmethod
    def find_by_id(property_id, *, lock: bool = False) -> Property:
        queryset = Property.objects.all()
        if lock and transaction.get_connection().in_atomic_block:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=property_id)
        except (Property.DoesNotExist, ValueError, TypeError):
            raise NotFound("Property not found")

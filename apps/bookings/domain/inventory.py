"""
Inventory Ledger

The only writer of ``Property.available_rooms`` and ``Property.is_rented``.

Strategy (Defense in Depth):
1. Eligibility reads run with the property row locked (SELECT FOR UPDATE)
2. Reserve is a conditional UPDATE ... WHERE available_rooms >= n, so two
   writers can never both take the last room
3. Database CheckConstraint keeps 0 <= available_rooms <= total_rooms

Every call must run inside the caller's transaction so that the counter
and the booking row commit or roll back together.
"""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.db.models.functions import Least  # type: ignore

from apps.bookings.domain.exceptions import InsufficientInventory
from apps.properties.models import Property
from shared.domain.exceptions import Internal

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Room counter operations scoped to the current transaction."""

    @staticmethod
    def _ensure_transaction() -> None:
        if not transaction.get_connection().in_atomic_block:
            raise Internal("Inventory changes must run inside a transaction")

    def reserve(self, property_id: int, room_count: int) -> None:
        """
        Take ``room_count`` rooms out of the property's inventory

        Raises:
            InsufficientInventory: fewer rooms are free than requested
        """
        self._ensure_transaction()
        updated = Property.objects.filter(
            pk=property_id,
            available_rooms__gte=room_count,
        ).update(available_rooms=F("available_rooms") - room_count)
        if not updated:
            raise InsufficientInventory()

        Property.objects.filter(pk=property_id, available_rooms=0).update(is_rented=True)
        logger.info(f"Reserved {room_count} room(s) on property {property_id}")

    def release(self, property_id: int, room_count: int) -> None:
        """Return rooms to the property, never above its total."""
        self._ensure_transaction()
        Property.objects.filter(pk=property_id).update(
            available_rooms=Least(F("available_rooms") + room_count, F("total_rooms")),
            is_rented=False,
        )
        logger.info(f"Released {room_count} room(s) on property {property_id}")

    def release_for(self, booking) -> bool:
        """
        Release the rooms held by ``booking`` once

        Returns False when the booking no longer holds rooms, so repeated
        calls leave the counter untouched.
        """
        if not booking.rooms_reserved:
            logger.debug(f"Booking {booking.pk} holds no rooms, nothing to release")
            return False

        self.release(booking.property_id, booking.room_count)
        booking.rooms_reserved = False
        booking.save(update_fields=["rooms_reserved", "updated_at"])
        return True

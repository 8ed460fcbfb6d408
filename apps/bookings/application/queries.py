"""
Booking Queries

Read side of the booking domain. Every listing is ordered newest first
and optionally narrowed by status.
"""

from __future__ import annotations

from typing import Any, Mapping

from apps.bookings.domain.entities import BookingParties
from apps.bookings.filters import BookingStatusFilterSet
from apps.bookings.models import Booking
from apps.properties.services import PropertyDirectory
from shared.domain.exceptions import Forbidden, NotFound


def _bookings():
    return Booking.objects.select_related("property", "tenant", "owner").order_by("-created_at", "-pk")


def _filter_by_status(queryset, status: str | None):
    params: Mapping[str, Any] = {"status": status} if status else {}
    return BookingStatusFilterSet(params, queryset=queryset).qs


def get_booking_by_id(actor, booking_id) -> Booking:
    try:
        booking = _bookings().get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFound("Booking not found")

    parties = BookingParties.resolve(actor, booking.tenant_id, booking.owner_id)
    if not parties.is_party:
        raise Forbidden("You are not allowed to view this booking")
    return booking


def list_bookings_for_tenant(actor, status: str | None = None):
    return _filter_by_status(_bookings().filter(tenant_id=actor.pk), status)


def list_bookings_for_property(actor, property_id, status: str | None = None):
    property_obj = PropertyDirectory.find_by_id(property_id)
    is_admin = bool(getattr(actor, "is_admin", None) and actor.is_admin())
    if property_obj.owner_id != actor.pk and not is_admin:
        raise Forbidden("Only the property owner or an administrator can view its bookings")
    return _filter_by_status(_bookings().filter(property_id=property_obj.pk), status)

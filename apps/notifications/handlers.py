"""Booking event handlers that notify tenants and owners.

Handlers run after the booking transaction has committed. Every failure
is logged and swallowed so a broken mail backend never affects a
committed booking.
"""

from __future__ import annotations

import logging
from typing import Any

from apps.bookings.domain.entities import BookingStatus
from apps.bookings.domain.events import (
    BookingCreated,
    BookingStatusChanged,
    ContractDocumentAttached,
    ContractFullySigned,
    MoveInDetailsUpdated,
)
from apps.bookings.models import Booking

from .emails import EmailType
from .services import get_notification_sender

logger = logging.getLogger(__name__)

STATUS_EMAILS = {
    BookingStatus.CONFIRMED: EmailType.BOOKING_CONFIRMED,
    BookingStatus.REJECTED: EmailType.BOOKING_REJECTED,
    BookingStatus.COMPLETED: EmailType.BOOKING_COMPLETED,
    BookingStatus.CANCELLED: EmailType.BOOKING_CANCELLED,
}


def _load_booking(booking_id: int) -> Booking:
    return Booking.objects.select_related("property", "tenant", "owner").get(pk=booking_id)


def _notify(user, kind: str, booking: Booking, **extra: Any) -> None:
    try:
        payload = {"booking": booking, "recipient": user, **extra}
        get_notification_sender().send(user.email, kind, payload)
    except Exception as e:
        logger.error(
            f"Failed to send {kind} for booking {booking.pk} to user {user.pk}: {e}",
            exc_info=True,
        )


def _counter_party(booking: Booking, actor_id: int):
    return booking.owner if actor_id == booking.tenant_id else booking.tenant


def on_booking_created(event: BookingCreated) -> None:
    booking = _load_booking(event.booking_id)
    _notify(booking.tenant, EmailType.BOOKING_CONFIRMATION, booking)
    _notify(booking.owner, EmailType.NEW_BOOKING_NOTIFICATION, booking)


def on_booking_status_changed(event: BookingStatusChanged) -> None:
    kind = STATUS_EMAILS.get(event.new_status)
    if kind is None:
        return
    booking = _load_booking(event.booking_id)
    if event.new_status == BookingStatus.CANCELLED:
        recipient = _counter_party(booking, event.changed_by_id)
    else:
        recipient = booking.tenant
    _notify(recipient, kind, booking)


def on_move_in_details_updated(event: MoveInDetailsUpdated) -> None:
    booking = _load_booking(event.booking_id)
    _notify(
        _counter_party(booking, event.updated_by_id),
        EmailType.BOOKING_UPDATED,
        booking,
        message="Move-in details updated",
    )


def on_contract_document_attached(event: ContractDocumentAttached) -> None:
    booking = _load_booking(event.booking_id)
    _notify(booking.tenant, EmailType.CONTRACT_READY, booking, document_url=event.document_url)


def on_contract_fully_signed(event: ContractFullySigned) -> None:
    booking = _load_booking(event.booking_id)
    for user in (booking.tenant, booking.owner):
        _notify(user, EmailType.BOOKING_UPDATED, booking, message="Contract signed by both parties")


def register_event_handlers(bus) -> None:
    bus.register_event_handler(BookingCreated, on_booking_created)
    bus.register_event_handler(BookingStatusChanged, on_booking_status_changed)
    bus.register_event_handler(MoveInDetailsUpdated, on_move_in_details_updated)
    bus.register_event_handler(ContractDocumentAttached, on_contract_document_attached)
    bus.register_event_handler(ContractFullySigned, on_contract_fully_signed)

"""E-mail kinds and their inline HTML bodies.

Each kind renders a subject, a short in-app message and an HTML body
from a payload holding at least ``booking`` and ``recipient``; an
optional ``message`` overrides the default line for BOOKING_UPDATED.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.html import escape  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class EmailType(models.TextChoices):
    BOOKING_CONFIRMATION = "BOOKING_CONFIRMATION", _("Booking request sent")
    NEW_BOOKING_NOTIFICATION = "NEW_BOOKING_NOTIFICATION", _("New booking request")
    BOOKING_CONFIRMED = "BOOKING_CONFIRMED", _("Booking confirmed")
    BOOKING_REJECTED = "BOOKING_REJECTED", _("Booking rejected")
    BOOKING_CANCELLED = "BOOKING_CANCELLED", _("Booking cancelled")
    BOOKING_COMPLETED = "BOOKING_COMPLETED", _("Booking completed")
    BOOKING_UPDATED = "BOOKING_UPDATED", _("Booking updated")
    CONTRACT_READY = "CONTRACT_READY", _("Contract ready")
    MOVE_IN_REMINDER = "MOVE_IN_REMINDER", _("Move-in reminder")


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    message: str
    html: str


def _period(booking) -> str:
    end = booking.end_date.strftime("%d.%m.%Y") if booking.end_date else "open-ended"
    return f"{booking.start_date.strftime('%d.%m.%Y')} to {end}"


def _booking_link(booking) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/bookings/{booking.pk}"


def _wrap(greeting_name: str, lines: list[str], booking) -> str:
    body = "\n".join(f"        <p>{line}</p>" for line in lines)
    return f"""
    <html>
    <body>
        <h2>Hello, {escape(greeting_name)}!</h2>
{body}

        <h3>Booking details:</h3>
        <ul>
            <li><strong>Booking:</strong> #{booking.pk}</li>
            <li><strong>Property:</strong> {escape(booking.property.title)}</li>
            <li><strong>Period:</strong> {_period(booking)}</li>
            <li><strong>Rooms:</strong> {booking.room_count}</li>
            <li><strong>Status:</strong> {booking.status}</li>
        </ul>

        <p><a href="{_booking_link(booking)}">Open booking</a></p>

        <p>Best regards,<br>The Rentify team</p>
    </body>
    </html>
    """


def render_email(kind: str, payload: dict[str, Any]) -> RenderedEmail:
    """Build subject, in-app message and HTML for ``kind``."""

    booking = payload["booking"]
    recipient = payload["recipient"]
    title = booking.property.title
    tenant_name = booking.tenant.full_name

    if kind == EmailType.BOOKING_CONFIRMATION:
        subject = f"Booking request for {title} received"
        message = "Your booking request was sent to the owner. We will let you know when they respond."
    elif kind == EmailType.NEW_BOOKING_NOTIFICATION:
        subject = f"New booking request for {title}"
        message = f"{tenant_name} requested {booking.room_count} room(s) in {title}."
    elif kind == EmailType.BOOKING_CONFIRMED:
        subject = f"Booking #{booking.pk} confirmed"
        scheduled = booking.move_in_scheduled_date
        message = "The owner confirmed your booking."
        if scheduled:
            message += f" Move-in is scheduled for {scheduled.strftime('%d.%m.%Y')}."
    elif kind == EmailType.BOOKING_REJECTED:
        subject = f"Booking #{booking.pk} rejected"
        message = f"The owner declined your booking. Reason: {booking.cancellation_reason}"
    elif kind == EmailType.BOOKING_CANCELLED:
        subject = f"Booking #{booking.pk} cancelled"
        message = f"The booking for {title} was cancelled. Reason: {booking.cancellation_reason}"
    elif kind == EmailType.BOOKING_COMPLETED:
        subject = f"Welcome to {title}"
        message = "Your move-in is complete and the booking is now finished. Enjoy your new home!"
    elif kind == EmailType.BOOKING_UPDATED:
        subject = f"Booking #{booking.pk} updated"
        message = payload.get("message") or "Your booking was updated."
    elif kind == EmailType.CONTRACT_READY:
        subject = f"Contract for booking #{booking.pk} is ready"
        message = "The owner uploaded the rental contract. Please review and sign it."
    elif kind == EmailType.MOVE_IN_REMINDER:
        scheduled = booking.move_in_scheduled_date
        subject = f"Reminder: moving in to {title}"
        message = f"Your move-in is scheduled for {scheduled.strftime('%d.%m.%Y') if scheduled else 'soon'}."
    else:
        raise ValueError(f"Unknown e-mail kind: {kind}")

    html = _wrap(recipient.full_name, [escape(message)], booking)
    return RenderedEmail(subject=subject, message=message, html=html)

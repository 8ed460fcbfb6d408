"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from .domain.entities import BookingStatus, MoveInStatus
from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.send_move_in_reminders")
def send_move_in_reminders() -> dict[str, int]:
    """
    Remind tenants of an upcoming move-in.

    Picks confirmed bookings whose move-in is still scheduled for
    ``MOVE_IN_REMINDER_DAYS_AHEAD`` days from today.

    Returns:
        dict: {"sent": number of reminders delivered}
    """
    from apps.notifications.services import get_notification_sender
    from apps.notifications.emails import EmailType

    days_ahead = getattr(settings, "MOVE_IN_REMINDER_DAYS_AHEAD", 1)
    move_in_day = timezone.localdate() + timedelta(days=days_ahead)
    sender = get_notification_sender()
    sent_count = 0

    upcoming_bookings = Booking.objects.filter(
        status=BookingStatus.CONFIRMED,
        move_in_status=MoveInStatus.SCHEDULED,
        move_in_scheduled_date=move_in_day,
    ).select_related("property", "tenant", "owner")

    for booking in upcoming_bookings:
        try:
            sender.send(
                booking.tenant.email,
                EmailType.MOVE_IN_REMINDER,
                {"booking": booking, "recipient": booking.tenant},
            )
            sent_count += 1
        except Exception as e:
            logger.error(f"Error sending move-in reminder for booking {booking.pk}: {e}", exc_info=True)

    if sent_count > 0:
        logger.info(f"Sent {sent_count} move-in reminders for {move_in_day}")

    return {"sent": sent_count}

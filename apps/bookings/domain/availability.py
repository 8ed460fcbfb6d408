"""
Overlap rules for room capacity

A requested stay overlaps an existing pending or confirmed booking when
any of these holds:

1. the requested start falls inside the existing [start, end];
2. the requested end, if given, falls inside the existing [start, end];
3. the requested range, if bounded, encloses the existing range;
4. the existing booking is an open-ended month-to-month rental that
   started on or before the requested start.

The rooms of every overlapping booking are summed and compared with the
property's total rooms. This is a coarser check than the inventory
ledger's running counter; both must pass.
"""

from __future__ import annotations

from typing import Iterable

from django.db.models import Q  # type: ignore

from apps.bookings.domain.entities import BookingType
from apps.bookings.domain.exceptions import CapacityExceeded
from shared.domain.value_objects import DateRange


def overlaps(requested: DateRange, existing: DateRange, existing_type: str) -> bool:
    """In-memory form of :func:`overlapping_bookings_q`."""
    if existing.contains(requested.start_date):
        return True
    if requested.end_date is not None and existing.contains(requested.end_date):
        return True
    if requested.encloses(existing):
        return True
    return (
        existing_type == BookingType.MONTH_TO_MONTH
        and existing.is_open_ended
        and existing.start_date <= requested.start_date
    )


def overlapping_bookings_q(requested: DateRange) -> Q:
    """ORM filter selecting bookings that overlap ``requested``."""
    start = requested.start_date
    end = requested.end_date

    condition = Q(start_date__lte=start, end_date__gte=start)
    if end is not None:
        condition |= Q(start_date__lte=end, end_date__gte=end)
        condition |= Q(start_date__gte=start, end_date__lte=end)
    condition |= Q(
        booking_type=BookingType.MONTH_TO_MONTH,
        end_date__isnull=True,
        start_date__lte=start,
    )
    return condition


def ensure_capacity(total_rooms: int, booked_room_counts: Iterable[int], requested_rooms: int) -> None:
    booked = sum(booked_room_counts)
    if booked + requested_rooms > total_rooms:
        raise CapacityExceeded(
            f"Only {max(total_rooms - booked, 0)} of {total_rooms} rooms are free "
            f"for the requested dates"
        )

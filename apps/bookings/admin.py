"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-mostly view: status and inventory changes go through the API."""

    list_display = (
        "id",
        "property",
        "tenant",
        "owner",
        "status",
        "booking_type",
        "room_count",
        "start_date",
        "end_date",
        "created_at",
    )
    list_filter = ("status", "booking_type", "move_in_status", "start_date")
    search_fields = ("property__title", "tenant__email", "owner__email")
    readonly_fields = (
        "status",
        "room_count",
        "rooms_reserved",
        "cancelled_by",
        "cancelled_at",
        "contract_signed_at",
        "created_at",
        "updated_at",
    )

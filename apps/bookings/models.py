"""Booking domain models for Rentify."""

from __future__ import annotations

import builtins

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import BookingStatus, BookingType, MoveInStatus


class Booking(models.Model):
    """Reservation of one or more rooms of a property."""

    Status = BookingStatus
    Type = BookingType
    MoveIn = MoveInStatus

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_bookings",
    )
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    booking_type = models.CharField(max_length=20, choices=BookingType.choices)
    room_count = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
    )
    rooms_reserved = models.BooleanField(
        default=False,
        help_text=_("Rooms of this booking are currently held in the property inventory."),
    )

    # Move-in
    move_in_scheduled_date = models.DateField(null=True, blank=True)
    move_in_status = models.CharField(
        max_length=20,
        choices=MoveInStatus.choices,
        default=MoveInStatus.SCHEDULED,
    )
    move_in_notes = models.CharField(max_length=500, blank=True)
    move_in_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    # Cancellation
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)

    # Contract
    contract_document_url = models.URLField(max_length=500, blank=True)
    contract_signed_by_tenant = models.BooleanField(default=False)
    contract_signed_by_owner = models.BooleanField(default=False)
    contract_signed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__isnull=True) | models.Q(end_date__gte=models.F("start_date")),
                name="booking_end_not_before_start",
            ),
            models.CheckConstraint(
                condition=models.Q(room_count__gte=1),
                name="booking_room_count_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "status"], name="bookings_property_status_idx"),
            models.Index(fields=["tenant", "status"], name="bookings_tenant_status_idx"),
            models.Index(fields=["owner", "status"], name="bookings_owner_status_idx"),
            models.Index(fields=["start_date"], name="bookings_start_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for {self.property_id} ({self.status})"

    @builtins.property
    def has_contract_document(self) -> bool:
        return bool(self.contract_document_url)

    @builtins.property
    def contract_fully_signed(self) -> bool:
        return self.contract_signed_by_tenant and self.contract_signed_by_owner

"""Property domain models for Rentify.

A property is a listing with a fixed number of rentable rooms. The
``available_rooms`` counter and the ``is_rented`` flag belong to the
booking inventory ledger (``apps.bookings.domain.inventory``); the
listing API exposes them read-only.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """A rentable property listed by its owner."""

    class PropertyType(models.TextChoices):
        FULL_HOUSE = "full-house", _("Full house")
        SINGLE_ROOM = "single-room", _("Single room")
        MULTI_ROOM = "multi-room", _("Multi room")
        PG = "pg", _("Paying guest")

    class BillType(models.TextChoices):
        DAILY = "daily", _("Daily")
        MONTHLY = "monthly", _("Monthly")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.MULTI_ROOM,
    )
    city = models.CharField(max_length=100)
    address_line = models.CharField(max_length=255, blank=True)
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    bill_type = models.CharField(max_length=10, choices=BillType.choices, default=BillType.MONTHLY)
    total_rooms = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    available_rooms = models.PositiveIntegerField()
    available_from = models.DateField()
    is_active = models.BooleanField(default=True)
    is_verified = models.BooleanField(default=False)
    is_rented = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_rooms__gte=1),
                name="property_total_rooms_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(available_rooms__gte=0)
                & models.Q(available_rooms__lte=models.F("total_rooms")),
                name="property_available_rooms_within_total",
            ),
        ]
        indexes = [
            models.Index(fields=["is_active", "is_verified"], name="properties__is_acti_5f1c2b_idx"),
            models.Index(fields=["owner", "is_active"], name="properties__owner_i_8d3e41_idx"),
            models.Index(fields=["available_rooms"], name="properties__availab_2a7c90_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and self.available_rooms is None:
            self.available_rooms = self.total_rooms
        super().save(*args, **kwargs)

    @property
    def is_bookable(self) -> bool:
        return self.is_active and self.is_verified

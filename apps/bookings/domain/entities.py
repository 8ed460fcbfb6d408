"""
Booking Domain Entities

Core vocabulary of the booking domain:
- BookingStatus: FSM states for the booking lifecycle
- BookingType: fixed-term or open-ended month-to-month rental
- MoveInStatus: state of the move-in sub-workflow
- BookingParties: who the actor is relative to a booking
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.exceptions import InvalidTransition


class BookingStatus(models.TextChoices):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (owner accepted)
    - PENDING -> REJECTED (owner declined)
    - PENDING -> CANCELLED (either party withdrew)
    - CONFIRMED -> COMPLETED (tenant moved in)
    - CONFIRMED -> CANCELLED
    CANCELLED, COMPLETED and REJECTED are terminal.
    """
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")
    COMPLETED = "completed", _("Completed")
    REJECTED = "rejected", _("Rejected")


class BookingType(models.TextChoices):
    FIXED_TERM = "fixed-term", _("Fixed term")
    MONTH_TO_MONTH = "month-to-month", _("Month to month")


class MoveInStatus(models.TextChoices):
    SCHEDULED = "scheduled", _("Scheduled")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.REJECTED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.REJECTED: frozenset(),
}

# Bookings in these states hold rooms and take part in the overlap check
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

# Transitions that only the owner or an administrator may make
OWNER_ONLY_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED})

RELEASING_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.REJECTED})

DEFAULT_CANCELLATION_REASON = "No reason provided"


def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, new: str) -> None:
    """Raise InvalidTransition unless ``current -> new`` is in the table."""
    if not can_transition(current, new):
        raise InvalidTransition(f"Cannot change booking status from {current} to {new}")


@dataclass(frozen=True)
class BookingParties:
    """
    Relationship of an actor to a booking

    Built once per request and consulted by every authorization rule.
    """
    is_tenant: bool
    is_owner: bool
    is_admin: bool

    @classmethod
    def resolve(cls, actor, tenant_id: int, owner_id: int) -> "BookingParties":
        is_admin = bool(getattr(actor, "is_admin", None) and actor.is_admin())
        return cls(
            is_tenant=actor.pk == tenant_id,
            is_owner=actor.pk == owner_id,
            is_admin=is_admin,
        )

    @property
    def is_party(self) -> bool:
        return self.is_owner or self.is_tenant or self.is_admin

    @property
    def can_moderate(self) -> bool:
        return self.is_owner or self.is_admin

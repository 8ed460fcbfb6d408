"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits and carry
plain ids so handlers reload whatever they need.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created (status pending)

    Triggers:
    - Send booking confirmation to the tenant
    - Notify the property owner of the new request
    """
    booking_id: int
    property_id: int
    tenant_id: int
    owner_id: int


@dataclass(kw_only=True)
class BookingStatusChanged(DomainEvent):
    """
    Event: Booking moved to a new status

    Triggers:
    - Notify the counter-party (tenant or owner depending on direction)
    """
    booking_id: int
    property_id: int
    old_status: str
    new_status: str
    changed_by_id: int
    reason: str = ""


@dataclass(kw_only=True)
class MoveInDetailsUpdated(DomainEvent):
    """Event: Move-in date, status or notes changed."""
    booking_id: int
    updated_by_id: int


@dataclass(kw_only=True)
class ContractDocumentAttached(DomainEvent):
    """Event: Contract document is ready for the tenant to review."""
    booking_id: int
    document_url: str


@dataclass(kw_only=True)
class ContractFullySigned(DomainEvent):
    """Event: Both tenant and owner have signed the contract."""
    booking_id: int

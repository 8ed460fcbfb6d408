"""
Booking Domain Errors

Rule violations detected by the booking engine before any write.
"""

from shared.domain.exceptions import DomainError


class InvalidTransition(DomainError):
    code = "invalid_transition"
    default_message = "Booking status transition is not allowed"


class InvalidState(DomainError):
    code = "invalid_state"
    default_message = "Booking is not in a state that allows this change"


class PropertyUnavailable(DomainError):
    code = "property_unavailable"
    default_message = "Property is not available for booking"


class InsufficientInventory(DomainError):
    """Fewer rooms are free than the booking asks for."""

    code = "insufficient_inventory"
    status_code = 409
    default_message = "Not enough rooms available"


class CapacityExceeded(DomainError):
    """Overlapping bookings already use up the property's rooms."""

    code = "capacity_exceeded"
    status_code = 409
    default_message = "Property is fully booked for the requested dates"


class BeforeAvailability(DomainError):
    code = "before_availability"
    default_message = "Booking cannot start before the property is available"


class MissingDocument(DomainError):
    code = "missing_document"
    default_message = "Contract document must be uploaded before signing"


class NoOp(DomainError):
    code = "no_op"
    default_message = "Nothing to update"

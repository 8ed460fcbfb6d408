"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Request rooms in a property
- UpdateBookingStatusCommand: Move a booking through its lifecycle
- UpdateMoveInDetailsCommand: Reschedule or complete the move-in
- UpdateContractDetailsCommand: Attach and sign the rental contract

Every handler checks all rules before its first write. Any exception
raised inside the unit of work rolls back booking and inventory changes
together, and events are published only after commit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable
import logging

from django.utils import timezone  # type: ignore

from apps.bookings.domain.availability import ensure_capacity, overlapping_bookings_q
from apps.bookings.domain.entities import (
    ACTIVE_STATUSES,
    DEFAULT_CANCELLATION_REASON,
    OWNER_ONLY_STATUSES,
    RELEASING_STATUSES,
    BookingParties,
    BookingStatus,
    BookingType,
    MoveInStatus,
    ensure_transition,
)
from apps.bookings.domain.events import (
    BookingCreated,
    BookingStatusChanged,
    ContractDocumentAttached,
    ContractFullySigned,
    MoveInDetailsUpdated,
)
from apps.bookings.domain.exceptions import (
    BeforeAvailability,
    InsufficientInventory,
    InvalidState,
    MissingDocument,
    NoOp,
    PropertyUnavailable,
)
from apps.bookings.domain.inventory import InventoryLedger
from apps.bookings.models import Booking
from apps.properties.services import PropertyDirectory
from apps.users.services import UserDirectory
from shared.application.message_bus import Command
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import Forbidden, Internal, NotFound
from shared.domain.value_objects import DateRange
from shared.infrastructure.storage import DocumentStore, DocumentUploadError, get_document_store

logger = logging.getLogger(__name__)

CONTRACT_FOLDER = "contracts"


# ===== Commands =====

@dataclass
class CreateBookingCommand(Command):
    """
    Command to create a new booking

    This is the primary entry point for reserving rooms.
    """
    actor_id: int
    property_id: int
    start_date: date
    booking_type: str = BookingType.FIXED_TERM
    end_date: date | None = None
    room_count: int = 1


@dataclass
class UpdateBookingStatusCommand(Command):
    """Command to move a booking to a new status"""
    actor_id: int
    booking_id: int
    new_status: str
    reason: str | None = None
    scheduled_date: date | None = None


@dataclass
class UpdateMoveInDetailsCommand(Command):
    """Command to change move-in details of a confirmed booking"""
    actor_id: int
    booking_id: int
    scheduled_date: date | None = None
    status: str | None = None
    notes: str | None = None


@dataclass
class UpdateContractDetailsCommand(Command):
    """
    Command to attach or sign the contract of a confirmed booking

    ``document`` is an uploaded file stored through the document store;
    ``document_url`` points at a document stored elsewhere.
    """
    actor_id: int
    booking_id: int
    document: Any = None
    document_url: str | None = None
    signed_by_tenant: bool | None = None
    signed_by_owner: bool | None = None


# ===== Helpers =====

def _load_booking_for_update(booking_id) -> Booking:
    """Fetch a booking and lock its row until the transaction ends."""
    try:
        return Booking.objects.select_for_update().get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFound("Booking not found")


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy (Defense in Depth):
    1. Start database transaction (atomic)
    2. Load property with SELECT FOR UPDATE (pessimistic lock)
    3. Check listing state, free rooms, availability date
    4. Sum rooms of overlapping pending/confirmed bookings
    5. Insert the booking and reserve rooms in the inventory ledger
    6. Commit transaction, then publish BookingCreated
    7. Conditional UPDATE in the ledger as final safety net
    """

    def __init__(self, users=None, properties=None, ledger: InventoryLedger | None = None):
        self.users = users or UserDirectory()
        self.properties = properties or PropertyDirectory()
        self.ledger = ledger or InventoryLedger()

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Handle booking creation

        Returns: Created Booking

        Raises:
            NotFound, PropertyUnavailable, InsufficientInventory,
            BeforeAvailability, CapacityExceeded
        """
        logger.info(
            f"Creating booking for property {command.property_id}, "
            f"tenant {command.actor_id}, {command.room_count} room(s) "
            f"from {command.start_date} to {command.end_date or 'open'}"
        )
        requested = DateRange(command.start_date, command.end_date)

        with DjangoUnitOfWork() as uow:
            tenant = self.users.find_by_id(command.actor_id)
            property_obj = self.properties.find_by_id(command.property_id, lock=True)

            if not property_obj.is_bookable:
                raise PropertyUnavailable()

            if property_obj.available_rooms < command.room_count:
                raise InsufficientInventory(
                    f"Only {property_obj.available_rooms} room(s) available"
                )

            if command.start_date < property_obj.available_from:
                raise BeforeAvailability(
                    f"Property is only available from {property_obj.available_from.isoformat()}"
                )

            booked_room_counts = (
                Booking.objects.filter(property_id=property_obj.pk, status__in=ACTIVE_STATUSES)
                .filter(overlapping_bookings_q(requested))
                .values_list("room_count", flat=True)
            )
            ensure_capacity(property_obj.total_rooms, booked_room_counts, command.room_count)

            booking = Booking.objects.create(
                property=property_obj,
                tenant=tenant,
                owner_id=property_obj.owner_id,
                start_date=command.start_date,
                end_date=command.end_date,
                booking_type=command.booking_type,
                room_count=command.room_count,
                status=BookingStatus.PENDING,
                move_in_status=MoveInStatus.SCHEDULED,
                move_in_scheduled_date=command.start_date,
                rooms_reserved=True,
            )
            self.ledger.reserve(property_obj.pk, command.room_count)

            uow.add_event(BookingCreated(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                property_id=property_obj.pk,
                tenant_id=tenant.pk,
                owner_id=property_obj.owner_id,
            ))

        logger.info(f"Booking {booking.pk} created for property {property_obj.pk}")
        return booking


class UpdateBookingStatusHandler:
    """
    Handler for status transitions

    Cancelling or rejecting a booking releases its rooms in the same
    transaction as the status write.
    """

    def __init__(self, users=None, ledger: InventoryLedger | None = None):
        self.users = users or UserDirectory()
        self.ledger = ledger or InventoryLedger()

    def handle(self, command: UpdateBookingStatusCommand) -> Booking:
        logger.info(f"Changing booking {command.booking_id} to {command.new_status}")

        with DjangoUnitOfWork() as uow:
            actor = self.users.find_by_id(command.actor_id)
            booking = _load_booking_for_update(command.booking_id)
            parties = BookingParties.resolve(actor, booking.tenant_id, booking.owner_id)

            if not parties.is_party:
                raise Forbidden("You are not allowed to update this booking")

            ensure_transition(booking.status, command.new_status)

            if command.new_status in OWNER_ONLY_STATUSES and not parties.can_moderate:
                raise Forbidden(
                    f"Only the property owner or an administrator can set status {command.new_status}"
                )

            old_status = booking.status
            booking.status = command.new_status
            update_fields = ["status", "updated_at"]
            reason = ""

            if command.new_status in RELEASING_STATUSES:
                reason = command.reason or DEFAULT_CANCELLATION_REASON
                booking.cancelled_by = actor
                booking.cancelled_at = timezone.now()
                booking.cancellation_reason = reason
                update_fields += ["cancelled_by", "cancelled_at", "cancellation_reason"]
                self.ledger.release_for(booking)

            if command.new_status == BookingStatus.CONFIRMED and command.scheduled_date:
                booking.move_in_scheduled_date = command.scheduled_date
                update_fields.append("move_in_scheduled_date")

            booking.save(update_fields=update_fields)

            uow.add_event(BookingStatusChanged(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                property_id=booking.property_id,
                old_status=old_status,
                new_status=booking.status,
                changed_by_id=actor.pk,
                reason=reason,
            ))

        logger.info(f"Booking {booking.pk} moved from {old_status} to {booking.status}")
        return booking


class UpdateMoveInDetailsHandler:
    """Handler for the move-in sub-workflow of confirmed bookings"""

    def __init__(self, users=None):
        self.users = users or UserDirectory()

    def handle(self, command: UpdateMoveInDetailsCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            actor = self.users.find_by_id(command.actor_id)
            booking = _load_booking_for_update(command.booking_id)

            if booking.status != BookingStatus.CONFIRMED:
                raise InvalidState("Move-in details can only be updated for confirmed bookings")

            parties = BookingParties.resolve(actor, booking.tenant_id, booking.owner_id)
            if not parties.is_party:
                raise Forbidden("You are not allowed to update this booking")

            if command.scheduled_date is None and command.status is None and command.notes is None:
                raise NoOp("At least one move-in field must be provided")

            update_fields = ["move_in_updated_by", "updated_at"]
            if command.scheduled_date is not None:
                booking.move_in_scheduled_date = command.scheduled_date
                update_fields.append("move_in_scheduled_date")
            if command.status is not None:
                booking.move_in_status = command.status
                update_fields.append("move_in_status")
            if command.notes is not None:
                booking.move_in_notes = command.notes
                update_fields.append("move_in_notes")
            booking.move_in_updated_by = actor

            if command.status == MoveInStatus.COMPLETED:
                ensure_transition(booking.status, BookingStatus.COMPLETED)
                booking.status = BookingStatus.COMPLETED
                update_fields.append("status")
                uow.add_event(BookingStatusChanged(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    property_id=booking.property_id,
                    old_status=BookingStatus.CONFIRMED,
                    new_status=BookingStatus.COMPLETED,
                    changed_by_id=actor.pk,
                ))

            booking.save(update_fields=update_fields)
            uow.add_event(MoveInDetailsUpdated(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                updated_by_id=actor.pk,
            ))

        logger.info(f"Move-in details of booking {booking.pk} updated by user {actor.pk}")
        return booking


class UpdateContractDetailsHandler:
    """
    Handler for the contract sub-workflow of confirmed bookings

    The owner (or an administrator) attaches the document; each party
    signs only for itself, and only once a document exists.
    """

    def __init__(self, users=None, document_store: Callable[[], DocumentStore] | None = None):
        self.users = users or UserDirectory()
        self.document_store = document_store or get_document_store

    def handle(self, command: UpdateContractDetailsCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            actor = self.users.find_by_id(command.actor_id)
            booking = _load_booking_for_update(command.booking_id)

            if booking.status != BookingStatus.CONFIRMED:
                raise InvalidState("Contract details can only be updated for confirmed bookings")

            parties = BookingParties.resolve(actor, booking.tenant_id, booking.owner_id)
            if not parties.is_party:
                raise Forbidden("You are not allowed to update this booking")

            supplies_document = command.document is not None or bool(command.document_url)
            signs_as_tenant = bool(command.signed_by_tenant)
            signs_as_owner = bool(command.signed_by_owner)

            if not (supplies_document or signs_as_tenant or signs_as_owner):
                raise NoOp("At least one contract field must be provided")

            if supplies_document and not parties.can_moderate:
                raise Forbidden("Only the property owner or an administrator can upload the contract")
            if signs_as_tenant and not parties.is_tenant:
                raise Forbidden("Only the tenant can sign on behalf of the tenant")
            if signs_as_owner and not parties.is_owner:
                raise Forbidden("Only the property owner can sign on behalf of the owner")

            if (signs_as_tenant or signs_as_owner) and not (
                booking.has_contract_document or supplies_document
            ):
                raise MissingDocument()

            document_url = command.document_url
            if command.document is not None:
                document_url = self._upload(booking, command.document)

            was_fully_signed = booking.contract_fully_signed
            update_fields = ["updated_at"]

            if document_url:
                booking.contract_document_url = document_url
                update_fields.append("contract_document_url")
            if signs_as_tenant:
                booking.contract_signed_by_tenant = True
                update_fields.append("contract_signed_by_tenant")
            if signs_as_owner:
                booking.contract_signed_by_owner = True
                update_fields.append("contract_signed_by_owner")

            became_fully_signed = booking.contract_fully_signed and not was_fully_signed
            if became_fully_signed:
                booking.contract_signed_at = timezone.now()
                update_fields.append("contract_signed_at")

            booking.save(update_fields=update_fields)

            if document_url:
                uow.add_event(ContractDocumentAttached(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    document_url=document_url,
                ))
            if became_fully_signed:
                uow.add_event(ContractFullySigned(aggregate_id=booking.pk, booking_id=booking.pk))

        logger.info(f"Contract of booking {booking.pk} updated by user {actor.pk}")
        return booking

    def _upload(self, booking: Booking, document) -> str:
        name = f"contract-{booking.pk}-{int(timezone.now().timestamp())}"
        try:
            stored = self.document_store().upload(CONTRACT_FOLDER, name, document)
        except DocumentUploadError as e:
            logger.error(f"Contract upload for booking {booking.pk} failed: {e}")
            raise Internal("Failed to upload contract document") from e
        return stored["url"]


# ===== Registration =====

def register_command_handlers(bus) -> None:
    """Wire every booking command to its handler on ``bus``."""
    bus.register_command_handler(CreateBookingCommand, CreateBookingHandler().handle)
    bus.register_command_handler(UpdateBookingStatusCommand, UpdateBookingStatusHandler().handle)
    bus.register_command_handler(UpdateMoveInDetailsCommand, UpdateMoveInDetailsHandler().handle)
    bus.register_command_handler(UpdateContractDetailsCommand, UpdateContractDetailsHandler().handle)

"""
Unit of Work Pattern

Manages database transactions and ensures that domain events
are published only after successful transaction commit.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import DatabaseError, transaction

from shared.domain.base import DomainEvent
from shared.domain.exceptions import Internal

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def add_event(self, event: DomainEvent):
        """Queue a domain event for publishing after commit"""
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps one ``transaction.atomic()`` block. Any exception raised inside
    the block rolls back every write and discards queued events; database
    errors are re-raised as ``Internal`` so callers see a typed failure.

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = Booking.objects.select_for_update().get(pk=booking_id)
            booking.status = BookingStatus.CONFIRMED
            booking.save()
            uow.add_event(BookingStatusChanged(...))
            # Transaction commits here
        # Events are published after commit
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            try:
                if self._transaction:
                    self._transaction.__exit__(exc_type, exc_val, exc_tb)
            except DatabaseError as commit_error:
                logger.error(f"Transaction commit failed: {commit_error}", exc_info=True)
                raise Internal() from commit_error

        if exc_type is not None and issubclass(exc_type, DatabaseError):
            logger.error(f"Database error inside unit of work: {exc_val}", exc_info=(exc_type, exc_val, exc_tb))
            raise Internal() from exc_val
        return False

    def commit(self):
        """
        Schedule event publishing

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Rollback changes and discard events"""
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def add_event(self, event: DomainEvent):
        self._events.append(event)
        logger.debug(f"Queued event {event.__class__.__name__} (aggregate {event.aggregate_id})")

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")

        try:
            message_bus.publish_events(events)
        except Exception as e:
            # Events are already committed to database
            logger.error(f"Error publishing events: {e}", exc_info=True)

"""
Message Bus

Routes Rentify commands to their single handler and domain events to
every subscriber.

- Commands subclass :class:`Command` and are dispatched synchronously by
  the API layer. Domain errors surface unchanged; a database failure that
  escapes a handler comes out as ``Internal``.
- Events subclass :class:`shared.domain.base.DomainEvent`. A handler
  subscribed to a base event class also receives its subclasses.
  Subscribers run after commit and never affect each other.

App configs register their handlers in ``ready()``, which Django may
call more than once; registering the same handler again is a no-op.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from django.db import DatabaseError  # type: ignore

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError, Internal

logger = logging.getLogger(__name__)


class Command:
    """Base class for requests that change booking state."""


CommandHandler = Callable[[Command], Any]
EventHandler = Callable[[DomainEvent], None]


def _same_handler(first: Callable, second: Callable) -> bool:
    # bound methods of two instances of one handler class count as the same
    return first == second or getattr(first, "__func__", first) is getattr(second, "__func__", second)


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__qualname__", repr(handler))


class MessageBus:
    """One handler per command type, any number of subscribers per event type."""

    def __init__(self) -> None:
        self._command_handlers: dict[type[Command], CommandHandler] = {}
        self._event_handlers: dict[type[DomainEvent], list[EventHandler]] = {}

    def register_command_handler(self, command_type: type[Command], handler: CommandHandler) -> None:
        if not issubclass(command_type, Command):
            raise TypeError(f"{command_type.__name__} is not a Command")

        existing = self._command_handlers.get(command_type)
        if existing is not None:
            if _same_handler(existing, handler):
                return
            raise ValueError(
                f"{command_type.__name__} is already handled by {_handler_name(existing)}"
            )
        self._command_handlers[command_type] = handler
        logger.debug(f"{command_type.__name__} -> {_handler_name(handler)}")

    def register_event_handler(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        if not issubclass(event_type, DomainEvent):
            raise TypeError(f"{event_type.__name__} is not a DomainEvent")

        subscribers = self._event_handlers.setdefault(event_type, [])
        if any(_same_handler(existing, handler) for existing in subscribers):
            return
        subscribers.append(handler)
        logger.debug(f"{event_type.__name__} subscribed by {_handler_name(handler)}")

    def handle_command(self, command: Command) -> Any:
        """
        Run the handler registered for ``type(command)`` and return its result

        Raises:
            LookupError: no handler is registered for the command
            DomainError: raised by the handler, passed through as is
            Internal: a database error escaped the handler
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)
        if handler is None:
            raise LookupError(f"No handler registered for {command_type.__name__}")

        logger.info(f"Handling {command_type.__name__}")
        try:
            return handler(command)
        except DomainError as e:
            logger.info(f"{command_type.__name__} rejected ({e.code}): {e.message}")
            raise
        except DatabaseError as e:
            logger.error(f"{command_type.__name__} failed in the database: {e}", exc_info=True)
            raise Internal() from e

    def subscribers_for(self, event: DomainEvent) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for event_type in type(event).__mro__:
            handlers.extend(self._event_handlers.get(event_type, []))
        return handlers

    def publish_events(self, events: list[DomainEvent]) -> None:
        """Deliver each event to its subscribers; a failing subscriber is logged and skipped."""
        for event in events:
            name = type(event).__name__
            handlers = self.subscribers_for(event)
            if not handlers:
                logger.warning(f"Nobody subscribed to {name}")
                continue

            logger.info(f"Publishing {name} for aggregate {event.aggregate_id} ({event.event_id})")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(f"{_handler_name(handler)} failed on {name}: {e}", exc_info=True)


message_bus = MessageBus()

# reelgrid/domain/events/event_dispatcher.py
import logging
from enum import Enum
from typing import Callable, Dict, List

from .event_types import DomainEvent


EventHandler = Callable[[DomainEvent], None]


class EventDispatcher:
    """
    Dispatches domain events to registered handlers. A failing handler is
    logged and skipped, it never aborts the round that raised the event.
    """
    def __init__(self):
        self.logger = logging.getLogger("domain.events.dispatcher")
        self.handlers: Dict[Enum, List[EventHandler]] = {}
        self.global_handlers: List[EventHandler] = []

    def register(self, event_type: Enum, handler: EventHandler):
        """
        Register a handler for a specific event type.

        Args:
            event_type: Type of event to handle
            handler: Function to call when event occurs
        """
        self.handlers.setdefault(event_type, []).append(handler)
        self.logger.debug(f"Registered handler for event type: {event_type.name}")

    def register_all(self, handler: EventHandler):
        """Register a handler that receives every event."""
        self.global_handlers.append(handler)

    def dispatch(self, event: DomainEvent):
        all_handlers = self.handlers.get(event.type, []) + self.global_handlers

        if not all_handlers:
            self.logger.debug(f"No handlers registered for event: {event}")
            return

        self.logger.debug(f"Dispatching event {event} to {len(all_handlers)} handlers")

        for handler in all_handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in event handler for {event.type.name}: {str(e)}")

    def unregister(self, event_type: Enum, handler: EventHandler) -> bool:
        """
        Unregister a handler for a specific event type.

        Returns:
            True if handler was removed, False if not found
        """
        if handler in self.handlers.get(event_type, []):
            self.handlers[event_type].remove(handler)
            self.logger.debug(f"Unregistered handler for event type: {event_type.name}")
            return True
        return False

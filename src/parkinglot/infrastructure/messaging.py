# File: src/parkinglot/infrastructure/messaging.py
"""
Messaging Infrastructure for the Parking Lot System

In-process publish/subscribe for domain events. The parking service hands
every event raised during a park or leave to the EventBus once its lock is
released; handlers react to occupancy changes without the domain knowing
about them.

Handlers subscribe per event type ("vehicle.parked", "vehicle.left") or to
every event with the "*" wildcard. A failing handler is logged and does not
stop delivery to the remaining handlers.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
import logging
import threading

from ..domain.models import DomainEvent


ALL_EVENTS = "*"


# ============================================================================
# EVENT HANDLERS
# ============================================================================

class EventHandler(ABC):
    """Abstract base class for event handlers"""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """Handle a domain event"""
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can handle the event"""
        return True


class LoggingEventHandler(EventHandler):
    """Writes every event it receives to the log"""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level
        self._logger = logging.getLogger(self.__class__.__name__)

    def handle(self, event: DomainEvent) -> None:
        self._logger.log(self.level, f"{event.event_type}: {event.to_dict()['data']}")


class RecordingEventHandler(EventHandler):
    """Keeps received events in memory, in delivery order"""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def handle(self, event: DomainEvent) -> None:
        self.events.append(event)


# ============================================================================
# EVENT BUS (In-memory)
# ============================================================================

class EventBus:
    """
    In-memory event bus for intra-process event publishing

    Implements publish/subscribe pattern within the same process.
    Subscriptions may change while other threads publish.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[EventHandler]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe to events of a specific type ("*" for all)"""
        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)
                self._logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe handler from events"""
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                self._logger.debug(f"Unsubscribed {handler.__class__.__name__} from {event_type}")

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers"""
        with self._lock:
            handlers: List[EventHandler] = []
            for handler in (
                self._subscribers.get(event.event_type, [])
                + self._subscribers.get(ALL_EVENTS, [])
            ):
                if handler not in handlers:
                    handlers.append(handler)

        self._logger.debug(f"Publishing event: {event.event_type} (ID: {event.event_id})")
        for handler in handlers:
            if not handler.can_handle(event):
                continue
            try:
                handler.handle(event)
            except Exception as e:
                self._logger.error(
                    f"Error handling event {event.event_type} with "
                    f"{handler.__class__.__name__}: {e}",
                    exc_info=True
                )

    def publish_all(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def clear_subscribers(self) -> None:
        """Clear all subscribers (for testing)"""
        with self._lock:
            self._subscribers.clear()

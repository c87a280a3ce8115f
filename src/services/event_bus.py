"""
Event Bus - Stage-to-audience event routing

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)

Delivery is synchronous: publish() returns only after every subscriber has
run, so a stage tick is fully resolved before the next one begins.
"""

import asyncio
from typing import Callable, List, Dict, Optional
from dataclasses import dataclass
from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]
    event_type: EventType
    sequence: int


# Returned by subscribe(); pass back to unsubscribe()
Subscription = EventHandler


class EventBus:
    """
    Central event bus for the four performance signals

    Features:
    - Priority-based handler execution (high priority first, then registration order)
    - Per-handler filtering
    - Middleware pipeline (logging, blocking)
    - Fault tolerance (one handler crash doesn't stop others)
    - Subscriber list frozen while a publish is in progress

    Example:
        bus = EventBus()

        sub = bus.subscribe(EventType.CLAPPING_STARTED, member.on_clapping_started)
        bus.publish(ClappingStartedEvent(tick=12))
        bus.unsubscribe(sub)
    """

    def __init__(self):
        # Handlers organized by event type
        self._handlers: Dict[EventType, List[EventHandler]] = {}

        # Middleware pipeline (applied in registration order)
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Event history (circular buffer for debugging)
        self._event_history: List[Event] = []
        self._history_limit = 100

        self._sequence = 0
        self._publishing = 0

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> Subscription:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Synchronous function to call
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)

        Returns:
            Subscription handle for unsubscribe()

        Raises:
            TypeError: handler is a coroutine function
            RuntimeError: called while an event is being published
        """
        if asyncio.iscoroutinefunction(handler):
            raise TypeError(f"EventBus delivers synchronously; {handler.__name__} is async")
        self._ensure_not_publishing("subscribe")

        self._sequence += 1
        handler_entry = EventHandler(handler, priority, filter_fn, event_type, self._sequence)
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(handler_entry)

        # Highest priority first; registration order breaks ties
        handlers.sort(key=lambda h: (-h.priority, h.sequence))

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__qualname__", repr(handler)),
            priority=priority
        )
        return handler_entry

    def unsubscribe(self, subscription: Subscription) -> bool:
        """
        Remove a subscription

        Returns:
            True if it was registered, False otherwise
        """
        self._ensure_not_publishing("unsubscribe")

        handlers = self._handlers.get(subscription.event_type, [])
        if subscription not in handlers:
            return False
        handlers.remove(subscription)
        log.debug("Event handler unsubscribed", event_type=subscription.event_type.name)
        return True

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can modify events (return modified event), block events
        (return None), or log/validate events. Runs in registration order.
        """
        self._middleware.append(middleware)
        log.debug(
            "Middleware registered",
            middleware=middleware.__name__
        )

    def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute handlers by priority, applying per-handler filters
        4. Catch and log handler exceptions (fault tolerance)
        """
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                return
            event = processed_event

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        handlers = self._handlers.get(event.type, [])
        if not handlers:
            log.debug("No handlers for event", event_type=event.type.name)
            return

        self._publishing += 1
        try:
            for handler_entry in handlers:
                if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                    continue

                try:
                    handler_entry.handler(event)
                except Exception as e:
                    log.error(
                        f"Event handler failed: {getattr(handler_entry.handler, '__qualname__', handler_entry.handler)} "
                        f"for {event.type.name}",
                        exception=repr(e)
                    )
        finally:
            self._publishing -= 1

    def subscriber_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """
        Get recent events from history (newest last)
        """
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        """Clear event history"""
        self._event_history.clear()

    def _ensure_not_publishing(self, operation: str) -> None:
        if self._publishing:
            raise RuntimeError(f"Cannot {operation} while an event is being published")

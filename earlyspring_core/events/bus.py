"""
Event Bus implementation.

Provides pub/sub so UI layers can follow the engine without the engine
knowing about them.
"""

import asyncio
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from earlyspring_core.events.types import Event, EventType
from earlyspring_core.utils.async_utils import spawn
from earlyspring_core.utils.exceptions import EventError
from earlyspring_core.utils.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[Event], Any]


class EventBus:
    """
    Event bus for publish/subscribe pattern.

    Features:
    - Sync and async handlers
    - Event type filtering and wildcard subscriptions
    - Handler prioritization
    - Fire-and-forget publishing from synchronous code (timer callbacks)
    - Optional event history

    A failing handler is logged and never stops delivery to the others.

    Example:
        >>> bus = EventBus()
        >>>
        >>> async def on_fired(event):
        ...     print(f"Ringing: {event.label}")
        >>>
        >>> bus.subscribe(EventType.ALARM_TRIGGERED, on_fired)
        >>> await bus.publish(AlarmEvent(event_type=EventType.ALARM_TRIGGERED, alarm_id="a1"))
    """

    def __init__(self, enable_history: bool = False, max_history: int = 100):
        """
        Initialize event bus.

        Args:
            enable_history: Enable event history tracking
            max_history: Maximum events to keep in history
        """
        self.enable_history = enable_history
        self.max_history = max_history

        self._handlers: Dict[str, List[Tuple[int, Handler]]] = defaultdict(list)
        self._wildcard_handlers: List[Handler] = []
        self._history: List[Event] = []
        self._pending: Set["asyncio.Task[Any]"] = set()

        self._stats = {
            "published": 0,
            "handled": 0,
            "errors": 0,
        }

        logger.info("event_bus_initialized", history_enabled=enable_history)

    def subscribe(self, event_type: EventType, handler: Handler, priority: int = 0) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Event type to subscribe to
            handler: Handler function (can be sync or async)
            priority: Handler priority (higher = earlier execution)

        Raises:
            EventError: If handler is not callable
        """
        if not callable(handler):
            raise EventError("Event handler must be callable", details={"handler": repr(handler)})

        handlers = self._handlers[EventType(event_type).value]
        handlers.append((priority, handler))
        handlers.sort(key=lambda x: x[0], reverse=True)

        logger.debug(
            "handler_subscribed",
            event_type=EventType(event_type).value,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority,
        )

    def subscribe_all(self, handler: Handler) -> None:
        """Subscribe to every event."""
        self._wildcard_handlers.append(handler)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> bool:
        """
        Unsubscribe from an event type.

        Returns:
            True if handler was found and removed
        """
        key = EventType(event_type).value
        if key not in self._handlers:
            return False

        before = len(self._handlers[key])
        self._handlers[key] = [(p, h) for p, h in self._handlers[key] if h != handler]
        return len(self._handlers[key]) < before

    async def publish(self, event: Event) -> None:
        """
        Publish an event to all subscribed handlers.

        Args:
            event: Event to publish
        """
        self._stats["published"] += 1

        if self.enable_history:
            self._history.append(event)
            if len(self._history) > self.max_history:
                self._history.pop(0)

        logger.debug("event_published", event_type=event.event_type, event_id=event.event_id)

        handlers = [h for _, h in self._handlers.get(event.event_type, [])]
        handlers.extend(self._wildcard_handlers)

        for handler in handlers:
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
                self._stats["handled"] += 1
            except Exception as e:
                self._stats["errors"] += 1
                logger.error(
                    "handler_error",
                    event_type=event.event_type,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(e),
                )

    def publish_nowait(self, event: Event) -> Optional["asyncio.Task[Any]"]:
        """
        Schedule publication from synchronous code.

        Returns:
            The publishing task, or None when no loop is running
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("event_dropped_no_loop", event_type=event.event_type)
            return None
        return spawn(self.publish(event), self._pending, name=f"publish:{event.event_type}")

    async def drain(self) -> None:
        """Wait for events published with publish_nowait() to be delivered."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def get_history(
        self,
        event_type: Optional[EventType] = None,
        limit: Optional[int] = None,
    ) -> List[Event]:
        """
        Get event history (most recent first).

        Args:
            event_type: Optional filter by event type
            limit: Optional limit number of events
        """
        history = self._history[::-1]

        if event_type:
            history = [e for e in history if e.event_type == EventType(event_type).value]

        if limit:
            history = history[:limit]

        return history

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()

    def get_subscriber_count(self, event_type: Optional[EventType] = None) -> int:
        """Number of subscribers, for one event type or in total."""
        if event_type:
            return len(self._handlers.get(EventType(event_type).value, []))
        total = sum(len(handlers) for handlers in self._handlers.values())
        return total + len(self._wildcard_handlers)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get event bus statistics.

        Returns:
            Dict with statistics
        """
        return {
            **self._stats,
            "subscribers": self.get_subscriber_count(),
            "history_size": len(self._history),
        }

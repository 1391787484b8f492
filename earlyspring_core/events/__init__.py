"""
Event System.

Provides the pub/sub event bus the engine uses to surface alarm, session
and habit score changes.
"""

from earlyspring_core.events.bus import EventBus
from earlyspring_core.events.types import (AlarmEvent, Event, EventType,
                                           HabitEvent, SessionEvent,
                                           WarningEvent)

__all__ = [
    "EventBus",
    "Event",
    "EventType",
    "AlarmEvent",
    "SessionEvent",
    "HabitEvent",
    "WarningEvent",
]

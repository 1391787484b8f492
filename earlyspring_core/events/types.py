"""
Event type definitions.

Defines the engine events surfaced to UI layers through the event bus.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Event type enumeration."""

    # Alarm events
    ALARM_SCHEDULED = "alarm.scheduled"
    ALARM_CANCELLED = "alarm.cancelled"
    ALARM_TRIGGERED = "alarm.triggered"

    # Session events
    SESSION_CONFIRMED = "session.confirmed"
    SESSION_SNOOZED = "session.snoozed"
    SESSION_IGNORED = "session.ignored"

    # Habit score events
    HABIT_UPDATED = "habit.updated"

    # Soft warnings and errors
    WARNING_OCCURRED = "warning.occurred"
    ERROR_OCCURRED = "error.occurred"

    # Engine events
    ENGINE_STARTED = "engine.started"
    ENGINE_STOPPED = "engine.stopped"


class Event(BaseModel):
    """
    Base event class.

    Attributes:
        event_id: Unique event identifier
        event_type: Type of event
        timestamp: Event timestamp (local time)
        data: Event payload
    """

    model_config = ConfigDict(use_enum_values=True)

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: EventType
    timestamp: datetime = Field(default_factory=datetime.now)
    data: Dict[str, Any] = Field(default_factory=dict)


class AlarmEvent(Event):
    """
    Alarm scheduling / firing event.

    Attributes:
        alarm_id: Alarm identifier
        label: Alarm label
        fire_at: Fire instant (scheduled or actual)
        session_id: Session started by a trigger
    """

    alarm_id: str
    label: Optional[str] = None
    fire_at: Optional[datetime] = None
    session_id: Optional[str] = None


class SessionEvent(Event):
    """
    Ringing session transition.

    Attributes:
        session_id: Session identifier
        alarm_id: Alarm identifier
        state: Resulting session state
        delta: Habit score delta applied
    """

    session_id: str
    alarm_id: str
    state: str
    delta: Optional[int] = None


class HabitEvent(Event):
    """
    Habit score change.

    Attributes:
        user_id: User identifier
        delta: Delta applied
        plant_health: Resulting score
        plant_level: Resulting tier
    """

    user_id: str
    delta: int
    plant_health: int
    plant_level: int


class WarningEvent(Event):
    """
    Soft warning for the UI (nothing in the engine is fatal).

    Attributes:
        component: Component that degraded
        message: Human readable warning
        session_id: Related session, if any
    """

    component: str
    message: str
    session_id: Optional[str] = None

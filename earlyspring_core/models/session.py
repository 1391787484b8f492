"""
Session models for earlyspring-core.

A TriggeredAlarmSession is the live, ringing instance of an alarm between
its fire time and the user's resolution. It holds runtime handles (audio,
background tasks), so it is a dataclass rather than a pydantic model.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.profile import Profile

if TYPE_CHECKING:
    from earlyspring_core.models.schedule import ScheduledOccurrence
    from earlyspring_core.trigger.audio import RingingAudio


class SessionState(str, Enum):
    """Lifecycle state of a ringing session."""

    RINGING = "ringing"
    SNOOZED = "snoozed"
    CONFIRMED = "confirmed"
    IGNORED = "ignored"
    REPLACED = "replaced"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        """Every state but RINGING ends the session."""
        return self is not SessionState.RINGING


class TriggerOrigin(str, Enum):
    """Where a firing came from."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"


@dataclass
class TriggeredAlarmSession:
    """
    In-progress ringing instance of an alarm.

    Attributes:
        alarm: Alarm snapshot taken at schedule time
        audio: Live audio handle (None until the pipeline attaches one)
        origin: Scheduler firing or manual test trigger
        taps_remaining: Confirmations still needed to ignore the alarm
        fired_at: Wall-clock instant the session started
        state: Current lifecycle state
        session_id: Unique session identifier
        tasks: Background tasks bound to this session
    """

    alarm: AlarmDefinition
    taps_remaining: int
    fired_at: datetime
    origin: TriggerOrigin = TriggerOrigin.SCHEDULED
    audio: Optional["RingingAudio"] = None
    state: SessionState = SessionState.RINGING
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    tasks: Set["asyncio.Task[Any]"] = field(default_factory=set)

    @property
    def alarm_id(self) -> str:
        """Id of the ringing alarm."""
        return self.alarm.id

    @property
    def is_active(self) -> bool:
        """True while the session is still ringing."""
        return self.state is SessionState.RINGING


class TransitionResult(BaseModel):
    """
    Outcome of a lifecycle call on a session.

    Attributes:
        session_id: Session the call targeted
        state: Session state after the call
        applied: False when the call was a no-op
        delta: Habit score delta applied, if any
        profile: Updated profile returned by the score service
        warning: Soft warning for the UI (e.g. score not saved)
        taps_remaining: Ignore taps still needed
        snooze_occurrence: Follow-up occurrence armed by a snooze
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    state: SessionState
    applied: bool = True
    delta: Optional[int] = None
    profile: Optional[Profile] = None
    warning: Optional[str] = None
    taps_remaining: Optional[int] = None
    snooze_occurrence: Optional[Any] = Field(
        default=None, description="ScheduledOccurrence armed by a snooze"
    )

"""
Schedule models for earlyspring-core.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from earlyspring_core.models.alarm import AlarmDefinition


@dataclass
class ScheduledOccurrence:
    """
    A concrete future instant at which an alarm is due to ring.

    Attributes:
        alarm: Alarm snapshot used when the timer expires
        fire_at: Absolute local fire instant
        handle: Loop timer handle (None once consumed or cancelled)
    """

    alarm: AlarmDefinition
    fire_at: datetime
    handle: Optional[asyncio.TimerHandle] = None

    @property
    def alarm_id(self) -> str:
        """Id of the scheduled alarm."""
        return self.alarm.id

    def cancel(self) -> None:
        """Cancel the timer; safe to call more than once."""
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None

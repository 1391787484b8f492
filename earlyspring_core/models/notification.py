"""
Notification models for earlyspring-core.
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class PermissionState(str, Enum):
    """Platform notification permission."""

    GRANTED = "granted"
    DENIED = "denied"


class NotificationAction(str, Enum):
    """Actions offered on an alarm notification."""

    SNOOZE = "snooze"
    DISMISS = "dismiss"


class AlarmNotification(BaseModel):
    """
    System notification emitted when an alarm fires.

    ``tag`` and ``session_id`` let a platform-level snooze/dismiss action be
    routed back to the ringing session.
    """

    title: str = Field(..., description="Notification title (alarm label)")
    body: str = Field(..., description="Notification body")
    tag: str = Field(..., description="Alarm id")
    session_id: str = Field(..., description="Ringing session id")
    fire_time: datetime = Field(..., description="Fire instant")
    require_interaction: bool = Field(default=True, description="Persist until acted on")
    actions: List[NotificationAction] = Field(
        default_factory=lambda: [NotificationAction.SNOOZE, NotificationAction.DISMISS]
    )

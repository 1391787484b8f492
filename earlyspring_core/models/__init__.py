"""
Data models package for earlyspring-core.

Pydantic models for alarm definitions, habit score profiles, configuration,
notifications and weather; dataclasses for records that hold live runtime
handles (scheduled occurrences, ringing sessions).

Modules:
    alarm: AlarmDefinition, Weekday, SnoozeConfig, SnoozeBehavior
    schedule: ScheduledOccurrence
    session: TriggeredAlarmSession, SessionState, TriggerOrigin, TransitionResult
    profile: Profile and habit score helpers
    notification: AlarmNotification, PermissionState, NotificationAction
    weather: WeatherReport
    config: Configuration models
"""

from earlyspring_core.models.alarm import (AlarmDefinition, SnoozeBehavior,
                                           SnoozeConfig, Weekday)
from earlyspring_core.models.config import (AudioConfig, EngineConfig,
                                            LifecycleConfig, SpeechConfig,
                                            VibrationConfig)
from earlyspring_core.models.notification import (AlarmNotification,
                                                  NotificationAction,
                                                  PermissionState)
from earlyspring_core.models.profile import (Profile, clamp_health,
                                             plant_level_for)
from earlyspring_core.models.schedule import ScheduledOccurrence
from earlyspring_core.models.session import (SessionState, TransitionResult,
                                             TriggeredAlarmSession,
                                             TriggerOrigin)
from earlyspring_core.models.weather import WeatherReport

__all__ = [
    # Alarm models
    "AlarmDefinition",
    "Weekday",
    "SnoozeConfig",
    "SnoozeBehavior",
    # Schedule / session models
    "ScheduledOccurrence",
    "TriggeredAlarmSession",
    "SessionState",
    "TriggerOrigin",
    "TransitionResult",
    # Profile
    "Profile",
    "clamp_health",
    "plant_level_for",
    # Notification models
    "AlarmNotification",
    "NotificationAction",
    "PermissionState",
    # Weather
    "WeatherReport",
    # Config models
    "EngineConfig",
    "AudioConfig",
    "VibrationConfig",
    "LifecycleConfig",
    "SpeechConfig",
]

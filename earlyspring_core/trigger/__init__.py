"""
Alarm triggering.

Modules:
    pipeline: TriggerPipeline - fires alarms into ringing sessions
    audio: RingingAudio - live audio handle with fallback and volume ramp
    announcement: Spoken wake-up announcement
"""

from earlyspring_core.trigger.announcement import (announce,
                                                   compose_announcement,
                                                   fetch_weather_summary)
from earlyspring_core.trigger.audio import SYNTHESIZED_TONE, RingingAudio
from earlyspring_core.trigger.pipeline import TriggerPipeline

__all__ = [
    "TriggerPipeline",
    "RingingAudio",
    "SYNTHESIZED_TONE",
    "announce",
    "compose_announcement",
    "fetch_weather_summary",
]

"""
Interface definitions for earlyspring-core.

This package contains abstract base classes (ABCs) for the platform
capabilities and external services the alarm engine calls into. Each has a
no-op default in ``earlyspring_core.base.ports`` for platforms lacking it.

Modules:
    audio: AudioPort, AudioSource - Alarm sound playback
    effects: VibrationPort, SpeechPort - Vibration and text-to-speech
    notification: NotificationPort - System notifications
    services: AlarmRepository, HabitScoreService, WeatherProvider
"""

from earlyspring_core.interfaces.audio import AudioPort, AudioSource
from earlyspring_core.interfaces.effects import SpeechPort, VibrationPort
from earlyspring_core.interfaces.notification import NotificationPort
from earlyspring_core.interfaces.services import (AlarmRepository,
                                                  HabitScoreService,
                                                  WeatherProvider)

__all__ = [
    "AudioPort",
    "AudioSource",
    "VibrationPort",
    "SpeechPort",
    "NotificationPort",
    "AlarmRepository",
    "HabitScoreService",
    "WeatherProvider",
]

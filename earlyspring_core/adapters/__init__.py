"""
Ready-made port implementations.

Modules:
    null: No-op ports for capabilities a platform lacks
    speech: FallbackSpeechPort - primary/secondary synthesizer chain
    weather: ReportWeatherProvider - weather report to spoken summary
"""

from earlyspring_core.adapters.null import (NullAudioPort,
                                            NullNotificationPort,
                                            NullSpeechPort,
                                            NullVibrationPort,
                                            NullWeatherProvider,
                                            SilentAudioSource)
from earlyspring_core.adapters.speech import FallbackSpeechPort
from earlyspring_core.adapters.weather import ReportWeatherProvider

__all__ = [
    "NullAudioPort",
    "NullNotificationPort",
    "NullSpeechPort",
    "NullVibrationPort",
    "NullWeatherProvider",
    "SilentAudioSource",
    "FallbackSpeechPort",
    "ReportWeatherProvider",
]

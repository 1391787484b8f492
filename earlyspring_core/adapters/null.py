"""
No-op platform ports.

Used for capabilities a platform lacks; every call succeeds and does nothing
so the trigger pipeline never has to branch on availability.
"""

from typing import List, Optional

from earlyspring_core.interfaces.audio import AudioPort, AudioSource
from earlyspring_core.interfaces.effects import SpeechPort, VibrationPort
from earlyspring_core.interfaces.notification import NotificationPort
from earlyspring_core.interfaces.services import WeatherProvider
from earlyspring_core.models.notification import AlarmNotification, PermissionState


class SilentAudioSource(AudioSource):
    """Audio source that plays nothing but tracks its state."""

    def __init__(self, sound_id: str = "silence"):
        self.sound_id = sound_id
        self.playing = False
        self.volume = 1.0

    async def play(self, loop: bool = True) -> None:
        self.playing = True

    def stop(self) -> None:
        self.playing = False

    def set_volume(self, volume: float) -> None:
        self.volume = volume


class NullAudioPort(AudioPort):
    """Audio backend for headless platforms."""

    async def load(self, sound_id: str) -> AudioSource:
        return SilentAudioSource(sound_id)

    async def synthesize_tone(self) -> AudioSource:
        return SilentAudioSource("tone")


class NullVibrationPort(VibrationPort):
    """Vibration backend for devices without a vibration motor."""

    def is_available(self) -> bool:
        return False

    def vibrate(self, pattern: List[int]) -> None:
        pass

    def cancel(self) -> None:
        pass


class NullSpeechPort(SpeechPort):
    """Speech backend that stays silent."""

    async def speak(self, text: str) -> None:
        pass


class NullNotificationPort(NotificationPort):
    """Notification backend that never gets permission."""

    async def request_permission(self) -> PermissionState:
        return PermissionState.DENIED

    async def show(self, notification: AlarmNotification) -> None:
        pass


class NullWeatherProvider(WeatherProvider):
    """Weather provider with no data."""

    async def get_current_weather_summary(self) -> Optional[str]:
        return None

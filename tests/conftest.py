"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Set

import pytest

from earlyspring_core.interfaces.audio import AudioPort, AudioSource
from earlyspring_core.interfaces.effects import SpeechPort, VibrationPort
from earlyspring_core.interfaces.notification import NotificationPort
from earlyspring_core.interfaces.services import HabitScoreService, WeatherProvider
from earlyspring_core.models.alarm import AlarmDefinition, Weekday
from earlyspring_core.models.config import AudioConfig, EngineConfig
from earlyspring_core.models.notification import AlarmNotification, PermissionState
from earlyspring_core.models.profile import Profile
from earlyspring_core.utils.exceptions import AudioError, PersistenceError, SpeechError

# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1)


# Controllable clock
class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# Mock Audio Implementation
class MockAudioSource(AudioSource):
    """Audio source recording what it was asked to do."""

    def __init__(self, sound_id: str, fail_play: bool = False):
        self.sound_id = sound_id
        self.fail_play = fail_play
        self.playing = False
        self.looping = False
        self.stop_count = 0
        self.volumes: List[float] = []

    async def play(self, loop: bool = True) -> None:
        if self.fail_play:
            raise AudioError("Playback failed", details={"sound": self.sound_id})
        self.playing = True
        self.looping = loop

    def stop(self) -> None:
        self.playing = False
        self.stop_count += 1

    def set_volume(self, volume: float) -> None:
        self.volumes.append(volume)


class MockAudioPort(AudioPort):
    """Audio port with configurable missing sounds."""

    def __init__(self, missing: Optional[Set[str]] = None, tone_fails: bool = False):
        self.missing = missing or set()
        self.tone_fails = tone_fails
        self.loaded: List[str] = []
        self.sources: List[MockAudioSource] = []

    async def load(self, sound_id: str) -> AudioSource:
        self.loaded.append(sound_id)
        if sound_id in self.missing:
            raise AudioError("Sound not found", details={"sound": sound_id})
        source = MockAudioSource(sound_id)
        self.sources.append(source)
        return source

    async def synthesize_tone(self) -> AudioSource:
        self.loaded.append("tone")
        if self.tone_fails:
            raise AudioError("No audio device")
        source = MockAudioSource("tone")
        self.sources.append(source)
        return source

    @property
    def playing(self) -> List[MockAudioSource]:
        return [s for s in self.sources if s.playing]


# Mock Effects Implementations
class MockVibrationPort(VibrationPort):
    """Vibration port recording patterns."""

    def __init__(self, available: bool = True):
        self.available = available
        self.patterns: List[List[int]] = []
        self.cancel_count = 0

    def is_available(self) -> bool:
        return self.available

    def vibrate(self, pattern: List[int]) -> None:
        if self.available:
            self.patterns.append(pattern)

    def cancel(self) -> None:
        self.cancel_count += 1


class MockSpeechPort(SpeechPort):
    """Speech port recording spoken text."""

    def __init__(self, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.spoken: List[str] = []
        self.cancel_count = 0

    async def speak(self, text: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise SpeechError("Synthesis failed")
        self.spoken.append(text)

    def cancel(self) -> None:
        self.cancel_count += 1


class MockNotificationPort(NotificationPort):
    """Notification port with a fixed permission answer."""

    def __init__(self, permission: PermissionState = PermissionState.GRANTED):
        self.permission = permission
        self.shown: List[AlarmNotification] = []

    async def request_permission(self) -> PermissionState:
        return self.permission

    async def show(self, notification: AlarmNotification) -> None:
        self.shown.append(notification)


class MockWeatherProvider(WeatherProvider):
    """Weather provider returning a fixed summary."""

    def __init__(self, summary: Optional[str] = "Sunny, 12 degrees."):
        self.summary = summary
        self.calls = 0

    async def get_current_weather_summary(self) -> Optional[str]:
        self.calls += 1
        return self.summary


# Mock Habit Score Implementations
class MockHabitScores(HabitScoreService):
    """In-memory habit score service recording every delta."""

    def __init__(self, initial: int = 100):
        self.initial = initial
        self.profiles: Dict[str, Profile] = {}
        self.deltas: List[int] = []

    async def adjust_health(self, user_id: str, delta: int) -> Profile:
        profile = self.profiles.get(user_id) or Profile(user_id=user_id, plant_health=self.initial)
        updated = profile.apply_delta(delta)
        self.profiles[user_id] = updated
        self.deltas.append(delta)
        return updated


class FailingHabitScores(HabitScoreService):
    """Habit score service whose store is unreachable."""

    def __init__(self):
        self.attempts = 0

    async def adjust_health(self, user_id: str, delta: int) -> Profile:
        self.attempts += 1
        raise PersistenceError("User not found", details={"user_id": user_id})


class PresentationRecorder:
    """Presentation port recording each ringing screen shown."""

    def __init__(self):
        self.calls = []

    def __call__(self, alarm, audio) -> None:
        self.calls.append((alarm, audio))


def make_alarm(**overrides) -> AlarmDefinition:
    """Build an alarm with test defaults."""
    data = {
        "id": "alarm-1",
        "user_id": "user-123",
        "time": "07:00",
        "label": "Morning run",
        "days": [Weekday.MON],
        "raise_volume_gradually": False,
    }
    data.update(overrides)
    return AlarmDefinition(**data)


# Pytest Fixtures
@pytest.fixture
def clock():
    """Clock set to Monday 06:00."""
    return FakeClock(MONDAY.replace(hour=6))


@pytest.fixture
def alarm():
    """Monday 07:00 alarm."""
    return make_alarm()


@pytest.fixture
def fast_config():
    """Engine config with a quick volume ramp."""
    return EngineConfig(audio=AudioConfig(volume_step_seconds=0.01))


@pytest.fixture
def audio_port():
    """Mock audio port."""
    return MockAudioPort()


@pytest.fixture
def vibration_port():
    """Mock vibration port."""
    return MockVibrationPort()


@pytest.fixture
def speech_port():
    """Mock speech port."""
    return MockSpeechPort()


@pytest.fixture
def notification_port():
    """Mock notification port (permission granted)."""
    return MockNotificationPort()


@pytest.fixture
def habit_scores():
    """In-memory habit scores."""
    return MockHabitScores()


@pytest.fixture
def presentation():
    """Recording presentation port."""
    return PresentationRecorder()

"""Tests for the trigger pipeline, ringing audio and announcement."""

import asyncio

import pytest

from earlyspring_core.adapters.null import NullWeatherProvider
from earlyspring_core.adapters.speech import FallbackSpeechPort
from earlyspring_core.adapters.weather import ReportWeatherProvider
from earlyspring_core.events.bus import EventBus
from earlyspring_core.events.types import EventType
from earlyspring_core.lifecycle.machine import LifecycleStateMachine
from earlyspring_core.models.config import AudioConfig, EngineConfig, SpeechConfig
from earlyspring_core.models.notification import NotificationAction, PermissionState
from earlyspring_core.models.session import SessionState, TriggerOrigin
from earlyspring_core.models.weather import WeatherReport
from earlyspring_core.scheduling.registry import TimerRegistry
from earlyspring_core.trigger.announcement import announce, compose_announcement
from earlyspring_core.trigger.audio import SYNTHESIZED_TONE, RingingAudio
from earlyspring_core.trigger.pipeline import TriggerPipeline
from earlyspring_core.utils.exceptions import SpeechError
from tests.conftest import (MockAudioPort, MockHabitScores, MockNotificationPort,
                            MockSpeechPort, MockWeatherProvider, make_alarm)


def build_pipeline(clock, **ports):
    registry = TimerRegistry(clock=clock)
    lifecycle = LifecycleStateMachine(
        registry,
        habit_scores=MockHabitScores(),
        user_id="user-123",
        clock=clock,
    )
    ports.setdefault("config", EngineConfig(audio=AudioConfig(volume_step_seconds=0.01)))
    pipeline = TriggerPipeline(lifecycle, clock=clock, **ports)
    lifecycle.attach_effects(pipeline)
    return pipeline, lifecycle


async def settle():
    """Let the session's background tasks run."""
    await asyncio.sleep(0.05)


@pytest.mark.asyncio
class TestTriggerPipeline:
    """Tests for TriggerPipeline.fire."""

    async def test_presentation_before_async_steps(self, clock, audio_port):
        """The ringing screen is shown before audio starts."""
        seen = []

        def present(alarm, audio):
            seen.append((alarm.id, audio.is_playing, audio_port.loaded[:]))

        pipeline, lifecycle = build_pipeline(clock, audio=audio_port, presentation=present)

        session = pipeline.fire(make_alarm())

        assert seen == [("alarm-1", False, [])]
        assert session.state is SessionState.RINGING
        assert lifecycle.session_for("alarm-1") is session
        await lifecycle.confirm(session)

    async def test_presentation_error_does_not_stop_ringing(self, clock, audio_port):
        """A crashing presentation callback is logged; audio still plays."""

        def present(alarm, audio):
            raise RuntimeError("UI gone")

        pipeline, lifecycle = build_pipeline(clock, audio=audio_port, presentation=present)

        session = pipeline.fire(make_alarm())
        await settle()

        assert session.audio.is_playing
        await lifecycle.confirm(session)

    async def test_vibration(self, clock, vibration_port):
        """Vibrating alarms issue the configured pattern once; the port repeats it until cancelled."""
        pipeline, lifecycle = build_pipeline(clock, vibration=vibration_port)

        session = pipeline.fire(make_alarm(vibrate=True))
        await settle()

        assert vibration_port.patterns == [[500, 250, 500, 250, 500]]
        assert vibration_port.cancel_count == 0
        await lifecycle.confirm(session)
        assert vibration_port.cancel_count == 1

    async def test_no_vibration_when_disabled(self, clock, vibration_port):
        """vibrate=False leaves the motor alone."""
        pipeline, lifecycle = build_pipeline(clock, vibration=vibration_port)

        session = pipeline.fire(make_alarm(vibrate=False))

        assert vibration_port.patterns == []
        await lifecycle.confirm(session)

    async def test_requested_sound_loops(self, clock, audio_port):
        """The alarm's own sound plays looped at full volume."""
        pipeline, lifecycle = build_pipeline(clock, audio=audio_port)

        session = pipeline.fire(make_alarm(sound="birds"))
        await settle()

        [source] = audio_port.playing
        assert source.sound_id == "birds"
        assert source.looping is True
        assert source.volumes == [1.0]
        assert session.audio.resolved_sound == "birds"

        await lifecycle.confirm(session)
        assert audio_port.playing == []

    async def test_falls_back_to_default_sound(self, clock):
        """A missing sound falls back to the default sound."""
        audio_port = MockAudioPort(missing={"birds"})
        pipeline, lifecycle = build_pipeline(clock, audio=audio_port)

        session = pipeline.fire(make_alarm(sound="birds"))
        await settle()

        assert audio_port.loaded == ["birds", "baby_waltz"]
        assert session.audio.resolved_sound == "baby_waltz"
        await lifecycle.confirm(session)

    async def test_falls_back_to_tone(self, clock):
        """With no loadable sound a synthesized tone plays."""
        audio_port = MockAudioPort(missing={"birds", "baby_waltz"})
        pipeline, lifecycle = build_pipeline(clock, audio=audio_port)

        session = pipeline.fire(make_alarm(sound="birds"))
        await settle()

        assert session.audio.resolved_sound == SYNTHESIZED_TONE
        assert audio_port.playing[0].sound_id == "tone"
        await lifecycle.confirm(session)

    async def test_no_audio_at_all_keeps_ringing(self, clock, presentation):
        """Total audio failure still leaves a ringing session on screen."""
        audio_port = MockAudioPort(missing={"baby_waltz"}, tone_fails=True)
        pipeline, lifecycle = build_pipeline(clock, audio=audio_port, presentation=presentation)

        session = pipeline.fire(make_alarm())
        await settle()

        assert session.audio.source is None
        assert session.state is SessionState.RINGING
        assert len(presentation.calls) == 1
        await lifecycle.confirm(session)

    async def test_notification_granted(self, clock, notification_port):
        """Granted permission shows a notification routed to the session."""
        pipeline, lifecycle = build_pipeline(clock, notifications=notification_port)

        session = pipeline.fire(make_alarm())
        await settle()

        [notification] = notification_port.shown
        assert notification.title == "Morning run"
        assert notification.tag == "alarm-1"
        assert notification.session_id == session.session_id
        assert notification.fire_time == clock.now
        assert notification.require_interaction is True
        assert notification.actions == [NotificationAction.SNOOZE, NotificationAction.DISMISS]
        await lifecycle.confirm(session)

    async def test_notification_denied(self, clock):
        """Denied permission skips the notification only."""
        notifications = MockNotificationPort(permission=PermissionState.DENIED)
        pipeline, lifecycle = build_pipeline(clock, notifications=notifications)

        session = pipeline.fire(make_alarm())
        await settle()

        assert notifications.shown == []
        assert session.state is SessionState.RINGING
        await lifecycle.confirm(session)

    async def test_announcement(self, clock, speech_port):
        """The label is announced."""
        pipeline, lifecycle = build_pipeline(clock, speech=speech_port)

        session = pipeline.fire(make_alarm())
        await settle()

        assert speech_port.spoken == ["Morning run. Time to wake up!"]
        await lifecycle.confirm(session)

    async def test_announcement_with_weather(self, clock, speech_port):
        """weather_alert appends the weather summary."""
        weather = MockWeatherProvider("Sunny, 12 degrees.")
        pipeline, lifecycle = build_pipeline(clock, speech=speech_port, weather=weather)

        session = pipeline.fire(make_alarm(weather_alert=True))
        await settle()

        assert speech_port.spoken == ["Morning run. Time to wake up! Sunny, 12 degrees."]
        await lifecycle.confirm(session)

    async def test_weather_not_fetched_without_alert(self, clock, speech_port):
        """Weather is only looked up for weather_alert alarms."""
        weather = MockWeatherProvider()
        pipeline, lifecycle = build_pipeline(clock, speech=speech_port, weather=weather)

        session = pipeline.fire(make_alarm(weather_alert=False))
        await settle()

        assert weather.calls == 0
        await lifecycle.confirm(session)

    async def test_speech_failure_keeps_ringing(self, clock, audio_port):
        """A failing synthesizer is logged; the alarm keeps ringing."""
        pipeline, lifecycle = build_pipeline(clock, audio=audio_port, speech=MockSpeechPort(fail=True))

        session = pipeline.fire(make_alarm())
        await settle()

        assert session.state is SessionState.RINGING
        assert session.audio.is_playing
        await lifecycle.confirm(session)

    async def test_publishes_triggered_event(self, clock):
        """Firing publishes alarm.triggered."""
        bus = EventBus(enable_history=True)
        pipeline, lifecycle = build_pipeline(clock, event_bus=bus)

        session = pipeline.fire(make_alarm())
        await bus.drain()

        [event] = bus.get_history(EventType.ALARM_TRIGGERED)
        assert event.alarm_id == "alarm-1"
        assert event.session_id == session.session_id
        await lifecycle.confirm(session)

    async def test_test_trigger_is_manual(self, clock):
        """test_trigger opens a manual session without arming timers."""
        pipeline, lifecycle = build_pipeline(clock)

        session = pipeline.test_trigger(make_alarm())

        assert session.origin is TriggerOrigin.MANUAL
        assert len(lifecycle.registry) == 0
        await lifecycle.confirm(session)

    async def test_stop_effects_cancels_tasks(self, clock, speech_port):
        """Ending a session stops speech and cancels pending work."""
        pipeline, lifecycle = build_pipeline(clock, speech=speech_port)

        session = pipeline.fire(make_alarm())
        tasks = list(session.tasks)
        await lifecycle.confirm(session)
        await asyncio.sleep(0.01)

        assert speech_port.cancel_count == 1
        assert all(task.done() for task in tasks)

    async def test_shared_effects_kept_while_another_session_rings(
        self, clock, audio_port, vibration_port, speech_port
    ):
        """Confirming one of two ringing alarms leaves the other's vibration and speech alone."""
        pipeline, lifecycle = build_pipeline(
            clock, audio=audio_port, vibration=vibration_port, speech=speech_port
        )
        first = pipeline.fire(make_alarm(id="alarm-1", vibrate=True))
        second = pipeline.fire(make_alarm(id="alarm-2", vibrate=True))
        await settle()

        await lifecycle.confirm(first)

        assert vibration_port.cancel_count == 0
        assert speech_port.cancel_count == 0
        assert not first.audio.is_playing
        assert second.audio.is_playing

        await lifecycle.confirm(second)

        assert vibration_port.cancel_count == 1
        assert speech_port.cancel_count == 1


@pytest.mark.asyncio
class TestRingingAudio:
    """Tests for RingingAudio."""

    async def test_gradual_volume_ramp(self):
        """Gradual alarms start at 10% and climb to 100% in 10% steps."""
        port = MockAudioPort()
        audio = RingingAudio(port, "birds", AudioConfig(volume_step_seconds=0.001), gradual=True)

        await asyncio.wait_for(audio.start(), timeout=2)

        [source] = port.sources
        assert source.volumes[0] == 0.1
        assert source.volumes[-1] == 1.0
        assert source.volumes == [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]
        audio.stop()

    async def test_stop_before_start(self):
        """A handle stopped before start() never plays."""
        port = MockAudioPort()
        audio = RingingAudio(port, None, AudioConfig())

        audio.stop()
        await audio.start()

        assert audio.source is None
        assert port.playing == []

    async def test_default_sound_not_tried_twice(self):
        """Requesting the default sound loads it once."""
        port = MockAudioPort(missing={"baby_waltz"})
        audio = RingingAudio(port, "baby_waltz", AudioConfig())

        await audio.start()

        assert port.loaded == ["baby_waltz", "tone"]
        audio.stop()


class TestComposeAnnouncement:
    """Tests for compose_announcement."""

    def test_label_only(self):
        assert compose_announcement("Gym") == "Gym. Time to wake up!"

    def test_no_label(self):
        assert compose_announcement(None) == "Time to wake up!"

    def test_with_weather(self):
        text = compose_announcement("Gym", "Light rain.")
        assert text == "Gym. Time to wake up! Light rain."


@pytest.mark.asyncio
class TestAnnounce:
    """Tests for announce."""

    async def test_returns_spoken_text(self, speech_port):
        text = await announce(make_alarm(label="Gym"), speech_port, None, SpeechConfig())

        assert text == "Gym. Time to wake up!"
        assert speech_port.spoken == [text]

    async def test_timed_out_speech_not_reported_as_spoken(self):
        """A synthesizer cut off by the timeout yields None."""
        slow = MockSpeechPort(delay=1.0)

        text = await announce(make_alarm(), slow, None, SpeechConfig(timeout_seconds=0.01))

        assert text is None
        assert slow.spoken == []


@pytest.mark.asyncio
class TestSpeechAndWeatherAdapters:
    """Tests for FallbackSpeechPort and ReportWeatherProvider."""

    async def test_fallback_speech(self):
        """The fallback synthesizer speaks when the primary fails."""
        primary = MockSpeechPort(fail=True)
        fallback = MockSpeechPort()
        speech = FallbackSpeechPort(primary, fallback)

        await speech.speak("Time to wake up!")

        assert fallback.spoken == ["Time to wake up!"]

    async def test_fallback_speech_both_fail(self):
        """The fallback's error propagates."""
        speech = FallbackSpeechPort(MockSpeechPort(fail=True), MockSpeechPort(fail=True))

        with pytest.raises(SpeechError):
            await speech.speak("Time to wake up!")

    async def test_report_weather_provider(self):
        """Raw reports are rendered for speech."""

        async def fetch():
            return {"temp": 9.6, "temp_min": 3, "temp_max": 12, "condition_id": 500,
                    "description": "light rain"}

        summary = await ReportWeatherProvider(fetch).get_current_weather_summary()

        assert summary.startswith("Current temperature is 10 degrees Celsius with light rain.")

    async def test_report_weather_provider_empty(self):
        """No report means no summary."""

        async def fetch():
            return None

        assert await ReportWeatherProvider(fetch).get_current_weather_summary() is None

    async def test_severe_weather_mentioned(self):
        """Severe conditions add a commute warning."""
        report = WeatherReport(temp=1, temp_min=-2, temp_max=3, condition_id=602, description="heavy snow")

        async def fetch():
            return report

        summary = await ReportWeatherProvider(fetch).get_current_weather_summary()

        assert summary.endswith("Expect weather that may affect your commute.")


@pytest.mark.asyncio
class TestNullPorts:
    """Tests for running without platform backends."""

    async def test_fire_without_ports(self, clock):
        """The default no-op ports ring silently."""
        pipeline, lifecycle = build_pipeline(clock)

        session = pipeline.fire(make_alarm(vibrate=True, weather_alert=True))
        await settle()

        assert session.audio.resolved_sound == "baby_waltz"
        assert session.audio.is_playing
        assert pipeline.vibration.is_available() is False

        result = await lifecycle.confirm(session)

        assert result.state is SessionState.CONFIRMED
        assert session.audio.is_playing is False

    async def test_null_weather(self, clock, speech_port):
        """A provider without data leaves the announcement plain."""
        pipeline, lifecycle = build_pipeline(clock, speech=speech_port, weather=NullWeatherProvider())

        session = pipeline.fire(make_alarm(weather_alert=True))
        await settle()

        assert speech_port.spoken == ["Morning run. Time to wake up!"]
        await lifecycle.confirm(session)

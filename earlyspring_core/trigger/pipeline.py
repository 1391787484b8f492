"""
Trigger Pipeline implementation.

Turns a timer expiry (or a manual test) into a ringing session: vibration,
ringing screen, looping audio, system notification and spoken announcement.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

from earlyspring_core.adapters.null import (NullAudioPort, NullNotificationPort,
                                           NullSpeechPort, NullVibrationPort)
from earlyspring_core.events.bus import EventBus
from earlyspring_core.events.types import AlarmEvent, EventType
from earlyspring_core.interfaces.audio import AudioPort
from earlyspring_core.interfaces.effects import SpeechPort, VibrationPort
from earlyspring_core.interfaces.notification import NotificationPort
from earlyspring_core.interfaces.services import WeatherProvider
from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.config import EngineConfig
from earlyspring_core.models.notification import AlarmNotification, PermissionState
from earlyspring_core.models.session import TriggeredAlarmSession, TriggerOrigin
from earlyspring_core.protocols.interfaces import PresentationPort
from earlyspring_core.trigger.announcement import announce
from earlyspring_core.trigger.audio import RingingAudio
from earlyspring_core.utils.async_utils import spawn
from earlyspring_core.utils.logging import get_logger, log_error

if TYPE_CHECKING:
    from earlyspring_core.lifecycle.machine import LifecycleStateMachine

logger = get_logger(__name__)


class TriggerPipeline:
    """
    Fires alarms.

    ``fire()`` is synchronous up to the point the ringing screen is shown:
    the session is opened, vibration started and the presentation port
    called before the first await anywhere. Audio, notification and speech
    then run as background tasks bound to the session; each is best-effort
    and a failure in one never stops the others.

    Example:
        >>> pipeline = TriggerPipeline(lifecycle, audio=my_audio_port)
        >>> registry.set_fire_callback(pipeline.fire)
    """

    def __init__(
        self,
        lifecycle: "LifecycleStateMachine",
        audio: Optional[AudioPort] = None,
        vibration: Optional[VibrationPort] = None,
        notifications: Optional[NotificationPort] = None,
        speech: Optional[SpeechPort] = None,
        weather: Optional[WeatherProvider] = None,
        presentation: Optional[PresentationPort] = None,
        config: Optional[EngineConfig] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize trigger pipeline.

        Missing platform ports default to no-op implementations.

        Args:
            lifecycle: State machine that owns ringing sessions
            audio: Audio backend
            vibration: Vibration backend
            notifications: Notification backend
            speech: Text-to-speech backend
            weather: Weather provider for announcements
            presentation: Ringing screen callback
            config: Engine configuration
            event_bus: Optional event bus
            clock: Source of local wall-clock time
        """
        self.lifecycle = lifecycle
        self.audio = audio or NullAudioPort()
        self.vibration = vibration or NullVibrationPort()
        self.notifications = notifications or NullNotificationPort()
        self.speech = speech or NullSpeechPort()
        self.weather = weather
        self.presentation = presentation
        self.config = config or EngineConfig()
        self.event_bus = event_bus
        self._clock = clock

        logger.info("trigger_pipeline_initialized")

    def set_presentation(self, presentation: Optional[PresentationPort]) -> None:
        """Register (or clear) the ringing screen callback."""
        self.presentation = presentation

    def fire(
        self,
        alarm: AlarmDefinition,
        origin: TriggerOrigin = TriggerOrigin.SCHEDULED,
    ) -> TriggeredAlarmSession:
        """
        Start ringing an alarm.

        Must be called from a running event loop; it is the timer callback
        of the registry.

        Args:
            alarm: Alarm snapshot to ring
            origin: Scheduler firing or manual test trigger

        Returns:
            The new ringing session
        """
        now = self._clock()
        audio = RingingAudio(
            self.audio,
            alarm.sound,
            self.config.audio,
            gradual=alarm.raise_volume_gradually,
        )
        session = self.lifecycle.open_session(alarm, audio=audio, origin=origin, fired_at=now)

        logger.info(
            "alarm_triggered",
            alarm_id=alarm.id,
            session_id=session.session_id,
            label=alarm.display_label,
            origin=origin.value,
        )

        if alarm.vibrate:
            self._start_vibration(alarm)

        self._present(alarm, audio)

        spawn(audio.start(), session.tasks, name=f"audio:{alarm.id}")
        spawn(self._notify(alarm, session), session.tasks, name=f"notify:{alarm.id}")
        spawn(
            announce(alarm, self.speech, self.weather, self.config.speech),
            session.tasks,
            name=f"announce:{alarm.id}",
        )

        if self.event_bus:
            self.event_bus.publish_nowait(
                AlarmEvent(
                    event_type=EventType.ALARM_TRIGGERED,
                    alarm_id=alarm.id,
                    label=alarm.display_label,
                    fire_at=now,
                    session_id=session.session_id,
                    data={"origin": origin.value},
                )
            )

        return session

    def test_trigger(self, alarm: AlarmDefinition) -> TriggeredAlarmSession:
        """Ring an alarm immediately without touching its schedule."""
        return self.fire(alarm, TriggerOrigin.MANUAL)

    def stop_effects(self, session: TriggeredAlarmSession) -> None:
        """
        Silence a session: audio, vibration, speech and background tasks.

        Vibration and speech are shared by every session, so they are only
        cancelled once no other session is ringing. Safe to call more than
        once.
        """
        if session.audio is not None:
            session.audio.stop()

        others = [s for s in self.lifecycle.active_sessions() if s.session_id != session.session_id]
        if not others:
            self._cancel_shared_effects()

        for task in list(session.tasks):
            if not task.done():
                task.cancel()

        logger.debug("session_effects_stopped", session_id=session.session_id, still_ringing=len(others))

    def _cancel_shared_effects(self) -> None:
        try:
            self.vibration.cancel()
        except Exception as e:
            logger.warning("vibration_cancel_failed", **log_error(e))

        try:
            self.speech.cancel()
        except Exception as e:
            logger.warning("speech_cancel_failed", **log_error(e))

    def _start_vibration(self, alarm: AlarmDefinition) -> None:
        try:
            self.vibration.vibrate(list(self.config.vibration.pattern))
        except Exception as e:
            logger.warning("vibration_failed", alarm_id=alarm.id, **log_error(e))

    def _present(self, alarm: AlarmDefinition, audio: RingingAudio) -> None:
        if self.presentation is None:
            logger.debug("no_presentation_registered", alarm_id=alarm.id)
            return

        try:
            self.presentation(alarm, audio)
        except Exception as e:
            logger.error("presentation_failed", alarm_id=alarm.id, **log_error(e))

    async def _notify(self, alarm: AlarmDefinition, session: TriggeredAlarmSession) -> None:
        try:
            permission = await self.notifications.request_permission()
        except Exception as e:
            logger.warning("notification_permission_failed", alarm_id=alarm.id, **log_error(e))
            return

        if permission is not PermissionState.GRANTED:
            logger.info("notification_skipped", alarm_id=alarm.id, reason="permission_denied")
            return

        notification = AlarmNotification(
            title=alarm.display_label,
            body=f"It's {session.fired_at.strftime('%H:%M')}! Time to wake up!",
            tag=alarm.id,
            session_id=session.session_id,
            fire_time=session.fired_at,
        )

        try:
            await self.notifications.show(notification)
        except Exception as e:
            logger.warning("notification_failed", alarm_id=alarm.id, **log_error(e))
            return

        logger.debug("notification_shown", alarm_id=alarm.id, session_id=session.session_id)

"""
Alarm Engine implementation.

Wires the timer registry, trigger pipeline and lifecycle state machine
together and routes alarm edits and notification actions to them.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from earlyspring_core.__version__ import __version__
from earlyspring_core.events.bus import EventBus
from earlyspring_core.events.types import AlarmEvent, Event, EventType
from earlyspring_core.interfaces.audio import AudioPort
from earlyspring_core.interfaces.effects import SpeechPort, VibrationPort
from earlyspring_core.interfaces.notification import NotificationPort
from earlyspring_core.interfaces.services import (AlarmRepository,
                                                  HabitScoreService,
                                                  WeatherProvider)
from earlyspring_core.lifecycle.machine import LifecycleStateMachine
from earlyspring_core.lifecycle.snooze import snooze_id_for
from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.config import EngineConfig
from earlyspring_core.models.notification import NotificationAction
from earlyspring_core.models.schedule import ScheduledOccurrence
from earlyspring_core.models.session import TransitionResult, TriggeredAlarmSession
from earlyspring_core.protocols.interfaces import PresentationPort
from earlyspring_core.scheduling.registry import TimerRegistry
from earlyspring_core.trigger.pipeline import TriggerPipeline
from earlyspring_core.utils.async_utils import cancel_tasks
from earlyspring_core.utils.exceptions import EarlySpringError
from earlyspring_core.utils.logging import get_logger, log_error
from earlyspring_core.utils.validation import validate_user_id

logger = get_logger(__name__)


class AlarmEngine:
    """
    The wake-up alarm engine.

    Owns one timer registry, one trigger pipeline and one lifecycle state
    machine. The host application persists alarms itself and tells the
    engine about changes; the engine only reads alarm snapshots.

    Attributes:
        registry: Armed timers
        pipeline: Fires alarms
        lifecycle: Ringing sessions
        event_bus: Engine events for UI layers
        user_id: User whose alarms are loaded
        started: Whether start() completed

    Example:
        >>> store = LocalAlarmStore(storage_path="./state")
        >>> engine = AlarmEngine(repository=store, habit_scores=store, audio=my_audio)
        >>> engine.set_presentation(show_ringing_screen)
        >>> await engine.start("user_123")
        >>> ...
        >>> await engine.shutdown()
    """

    def __init__(
        self,
        repository: Optional[AlarmRepository] = None,
        habit_scores: Optional[HabitScoreService] = None,
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
        Initialize alarm engine.

        Args:
            repository: Alarm storage read at start()
            habit_scores: Habit score service
            audio: Audio backend
            vibration: Vibration backend
            notifications: Notification backend
            speech: Text-to-speech backend
            weather: Weather provider for announcements
            presentation: Ringing screen callback
            config: Engine configuration
            event_bus: Event bus (a private one is created if omitted)
            clock: Source of local wall-clock time
        """
        self.config = config or EngineConfig()
        self.event_bus = event_bus or EventBus()
        self.repository = repository
        self.user_id: Optional[str] = None
        self.started = False

        self.registry = TimerRegistry(clock=clock)
        self.lifecycle = LifecycleStateMachine(
            self.registry,
            habit_scores=habit_scores,
            config=self.config.lifecycle,
            event_bus=self.event_bus,
            clock=clock,
        )
        self.pipeline = TriggerPipeline(
            self.lifecycle,
            audio=audio,
            vibration=vibration,
            notifications=notifications,
            speech=speech,
            weather=weather,
            presentation=presentation,
            config=self.config,
            event_bus=self.event_bus,
            clock=clock,
        )
        self.lifecycle.attach_effects(self.pipeline)
        self.registry.set_fire_callback(self.pipeline.fire)

        logger.info("alarm_engine_created", version=__version__)

    def set_presentation(self, presentation: Optional[PresentationPort]) -> None:
        """Register the ringing screen callback."""
        self.pipeline.set_presentation(presentation)

    async def start(self, user_id: str) -> List[ScheduledOccurrence]:
        """
        Load a user's alarms and arm their timers.

        Args:
            user_id: User identifier

        Returns:
            Occurrences armed

        Raises:
            ValidationError: If user_id is invalid
            PersistenceError: If the alarms cannot be loaded
        """
        user_id = validate_user_id(user_id)
        if self.started and self.user_id == user_id:
            logger.warning("engine_already_started", user_id=user_id)
            return self.registry.list_occurrences()

        if self.user_id is not None and self.user_id != user_id:
            closed = self.lifecycle.close_all()
            logger.info("user_switched", previous=self.user_id, user_id=user_id, sessions_closed=closed)

        self.user_id = user_id
        self.lifecycle.user_id = user_id

        alarms: List[AlarmDefinition] = []
        if self.repository is not None:
            try:
                alarms = await self.repository.get_alarms_for_user(user_id)
            except Exception as e:
                logger.error("alarm_load_failed", user_id=user_id, **log_error(e))
                raise

        armed = self.registry.reschedule_all(alarms)
        self.started = True

        logger.info("engine_started", user_id=user_id, alarms=len(alarms), armed=len(armed))
        self._publish(Event(
            event_type=EventType.ENGINE_STARTED,
            data={"user_id": user_id, "armed": len(armed)},
        ))
        return armed

    def schedule(self, alarm: AlarmDefinition) -> Optional[ScheduledOccurrence]:
        """
        Apply a created or edited alarm to the schedule.

        Disabled alarms are cancelled; unchanged alarms keep their timer.

        Returns:
            The armed occurrence, or None when nothing is scheduled
        """
        if not alarm.enabled:
            self.unschedule(alarm.id)
            return None

        occurrence = self.registry.schedule(alarm)

        if occurrence is not None:
            self._publish(AlarmEvent(
                event_type=EventType.ALARM_SCHEDULED,
                alarm_id=alarm.id,
                label=alarm.display_label,
                fire_at=occurrence.fire_at,
            ))
        return occurrence

    def unschedule(self, alarm_id: str) -> bool:
        """
        Cancel an alarm's timer and any pending snooze of it.

        Returns:
            True if anything was cancelled
        """
        cancelled = self.registry.cancel(alarm_id)
        cancelled = self.registry.cancel(snooze_id_for(alarm_id)) or cancelled

        if cancelled:
            self._publish(AlarmEvent(event_type=EventType.ALARM_CANCELLED, alarm_id=alarm_id))
        return cancelled

    async def set_enabled(self, alarm_id: str, enabled: bool) -> Optional[AlarmDefinition]:
        """
        Enable or disable an alarm through the repository and reschedule it.

        Returns:
            Updated alarm, or None if it does not exist

        Raises:
            EarlySpringError: If no repository is configured
            PersistenceError: If the update fails
        """
        repository = self._require_repository()
        alarm = await repository.update_alarm_enabled(alarm_id, enabled)
        if alarm is None:
            return None

        self.schedule(alarm)
        logger.info("alarm_toggled", alarm_id=alarm_id, enabled=enabled)
        return alarm

    async def delete_alarm(self, alarm_id: str) -> bool:
        """
        Delete an alarm through the repository and cancel its timers.

        Raises:
            EarlySpringError: If no repository is configured
            PersistenceError: If the delete fails
        """
        repository = self._require_repository()
        deleted = await repository.delete_alarm(alarm_id)
        self.unschedule(alarm_id)
        return deleted

    def test_trigger(self, alarm: AlarmDefinition) -> TriggeredAlarmSession:
        """Ring an alarm now, leaving its schedule untouched."""
        logger.info("alarm_test_trigger", alarm_id=alarm.id)
        return self.pipeline.test_trigger(alarm)

    async def confirm(self, session: TriggeredAlarmSession) -> TransitionResult:
        """Confirm the user woke up."""
        return await self.lifecycle.confirm(session)

    async def snooze(self, session: TriggeredAlarmSession) -> TransitionResult:
        """Snooze a ringing alarm."""
        return await self.lifecycle.snooze(session)

    async def ignore(self, session: TriggeredAlarmSession) -> TransitionResult:
        """Register one ignore tap."""
        return await self.lifecycle.ignore(session)

    async def handle_notification_action(
        self,
        session_id: str,
        action: NotificationAction,
    ) -> TransitionResult:
        """Route a snooze / dismiss action from a system notification."""
        return await self.lifecycle.handle_notification_action(session_id, action)

    async def shutdown(self) -> None:
        """
        Cancel every timer and silence every ringing session.

        Scores are left untouched. The engine can be started again.
        """
        logger.info("shutting_down_engine")

        tasks = [task for session in self.lifecycle.active_sessions() for task in session.tasks]
        cancelled = self.registry.cancel_all()
        closed = self.lifecycle.close_all()
        await cancel_tasks(*tasks)
        self.started = False

        await self.event_bus.publish(Event(
            event_type=EventType.ENGINE_STOPPED,
            data={"cancelled": cancelled, "closed": closed},
        ))
        await self.event_bus.drain()

        logger.info("engine_shutdown_complete", cancelled=cancelled, closed=closed)

    def health_check(self) -> Dict[str, Any]:
        """
        Report engine status and platform capabilities.

        Returns:
            Dict with status, capabilities and counters
        """
        try:
            can_vibrate = self.pipeline.vibration.is_available()
        except Exception as e:
            logger.warning("vibration_check_failed", **log_error(e))
            can_vibrate = False

        return {
            "status": "running" if self.started else "stopped",
            "user_id": self.user_id,
            "capabilities": {
                "vibration": can_vibrate,
                "presentation": self.pipeline.presentation is not None,
                "weather": self.pipeline.weather is not None,
            },
            "pending_alarms": len(self.registry),
            "ringing_sessions": len(self.lifecycle.active_sessions()),
        }

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get engine statistics.

        Returns:
            Dict with registry and event bus statistics
        """
        return {
            "version": __version__,
            "started": self.started,
            "registry": self.registry.get_statistics(),
            "events": self.event_bus.get_statistics(),
            "ringing_sessions": len(self.lifecycle.active_sessions()),
        }

    def _require_repository(self) -> AlarmRepository:
        if self.repository is None:
            raise EarlySpringError("No alarm repository configured")
        return self.repository

    def _publish(self, event: Event) -> None:
        self.event_bus.publish_nowait(event)

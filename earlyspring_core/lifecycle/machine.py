"""
Lifecycle State Machine implementation.

Resolves ringing sessions: wake-up confirmation, snooze or ignore, each
applying exactly one habit score delta.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from earlyspring_core.events.bus import EventBus
from earlyspring_core.events.types import (Event, EventType, HabitEvent,
                                           SessionEvent, WarningEvent)
from earlyspring_core.interfaces.services import HabitScoreService
from earlyspring_core.lifecycle.snooze import derive_snoozed_copy
from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.config import LifecycleConfig
from earlyspring_core.models.notification import NotificationAction
from earlyspring_core.models.profile import Profile
from earlyspring_core.models.schedule import ScheduledOccurrence
from earlyspring_core.models.session import (SessionState, TransitionResult,
                                             TriggeredAlarmSession,
                                             TriggerOrigin)
from earlyspring_core.scheduling.registry import TimerRegistry
from earlyspring_core.trigger.audio import RingingAudio
from earlyspring_core.utils.exceptions import EarlySpringError, SessionError
from earlyspring_core.utils.logging import get_logger, log_error

logger = get_logger(__name__)

SCORE_NOT_SAVED = "Your wake-up could not be recorded. Plant health was not updated."

_EVENT_FOR_STATE = {
    SessionState.CONFIRMED: EventType.SESSION_CONFIRMED,
    SessionState.SNOOZED: EventType.SESSION_SNOOZED,
    SessionState.IGNORED: EventType.SESSION_IGNORED,
}


class EffectsController(Protocol):
    """Stops the side effects of a ringing session."""

    def stop_effects(self, session: TriggeredAlarmSession) -> None:
        ...


class LifecycleStateMachine:
    """
    Owner of ringing sessions.

    A session starts Ringing and ends in exactly one terminal state:
    Confirmed, Snoozed or Ignored (Replaced and Closed end it without a
    score change). The terminal state is set before the first await of a
    transition, so a repeated or concurrent call on the same session finds
    it terminal and returns an unapplied result.

    Example:
        >>> lifecycle = LifecycleStateMachine(registry, habit_scores=store, user_id="u1")
        >>> result = await lifecycle.confirm(session)
        >>> result.profile.plant_health
        80
    """

    def __init__(
        self,
        registry: TimerRegistry,
        habit_scores: Optional[HabitScoreService] = None,
        user_id: Optional[str] = None,
        config: Optional[LifecycleConfig] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize lifecycle state machine.

        Args:
            registry: Timer registry used to arm snooze follow-ups
            habit_scores: Habit score service (None to skip scoring)
            user_id: User whose score is adjusted
            config: Lifecycle configuration
            event_bus: Optional event bus
            clock: Source of local wall-clock time
        """
        self.registry = registry
        self.habit_scores = habit_scores
        self.user_id = user_id
        self.config = config or LifecycleConfig()
        self.event_bus = event_bus
        self._clock = clock
        self._effects: Optional[EffectsController] = None
        self._sessions: Dict[str, TriggeredAlarmSession] = {}

        logger.info("lifecycle_initialized", ignore_taps=self.config.ignore_taps)

    def attach_effects(self, effects: EffectsController) -> None:
        """Register what silences a session on its terminal transition."""
        self._effects = effects

    def open_session(
        self,
        alarm: AlarmDefinition,
        audio: Optional[RingingAudio] = None,
        origin: TriggerOrigin = TriggerOrigin.SCHEDULED,
        fired_at: Optional[datetime] = None,
    ) -> TriggeredAlarmSession:
        """
        Start a Ringing session for an alarm.

        A session still ringing for the same alarm is replaced without a
        score change.

        Returns:
            The new session
        """
        previous = self.session_for(alarm.id)
        if previous is not None:
            self._end(previous, SessionState.REPLACED)
            logger.info("session_replaced", session_id=previous.session_id, alarm_id=alarm.id)

        session = TriggeredAlarmSession(
            alarm=alarm,
            taps_remaining=self.config.ignore_taps,
            fired_at=fired_at or self._clock(),
            origin=origin,
            audio=audio,
        )
        self._sessions[session.session_id] = session

        logger.info("session_opened", session_id=session.session_id, alarm_id=alarm.id)
        return session

    def get_session(self, session_id: str) -> Optional[TriggeredAlarmSession]:
        """Get a live session by id."""
        return self._sessions.get(session_id)

    def session_for(self, alarm_id: str) -> Optional[TriggeredAlarmSession]:
        """Get the live session of an alarm, if it is ringing."""
        for session in self._sessions.values():
            if session.alarm_id == alarm_id:
                return session
        return None

    def active_sessions(self) -> List[TriggeredAlarmSession]:
        """Sessions still ringing, oldest first."""
        return sorted(self._sessions.values(), key=lambda s: s.fired_at)

    async def confirm(self, session: TriggeredAlarmSession) -> TransitionResult:
        """
        Confirm the user is awake.

        Stops the effects and rewards the habit score.
        """
        if not self._is_live(session):
            return self._inert(session, "confirm")

        self._end(session, SessionState.CONFIRMED)
        logger.info("session_confirmed", session_id=session.session_id, alarm_id=session.alarm_id)

        return await self._score(session, self.config.confirm_delta)

    async def snooze(self, session: TriggeredAlarmSession) -> TransitionResult:
        """
        Snooze a ringing alarm.

        Stops the effects, arms a one-shot follow-up and penalizes the habit
        score. Refused (no state change) when the alarm has snooze disabled.
        """
        if not self._is_live(session):
            return self._inert(session, "snooze")

        alarm = session.alarm
        if not alarm.snooze.enabled:
            logger.warning("snooze_refused", session_id=session.session_id, alarm_id=alarm.id)
            return TransitionResult(
                session_id=session.session_id,
                state=session.state,
                applied=False,
                taps_remaining=session.taps_remaining,
                warning="Snooze is disabled for this alarm",
            )

        self._end(session, SessionState.SNOOZED)

        follow_up = derive_snoozed_copy(alarm, self._clock(), self.config)
        occurrence: Optional[ScheduledOccurrence] = None
        warning = None
        try:
            occurrence = self.registry.schedule(follow_up)
        except EarlySpringError as e:
            logger.error("snooze_schedule_failed", alarm_id=follow_up.id, **log_error(e))
            warning = "The snoozed alarm could not be scheduled"
            self._publish(WarningEvent(
                event_type=EventType.WARNING_OCCURRED,
                component="scheduling",
                message=warning,
                session_id=session.session_id,
            ))

        logger.info(
            "session_snoozed",
            session_id=session.session_id,
            alarm_id=alarm.id,
            snooze_id=follow_up.id,
            fire_at=follow_up.fire_at.isoformat(),
            next_snooze_minutes=follow_up.snooze.minutes,
        )

        result = await self._score(session, self.config.snooze_delta)
        updates = {"snooze_occurrence": occurrence}
        if warning and not result.warning:
            updates["warning"] = warning
        return result.model_copy(update=updates)

    async def ignore(self, session: TriggeredAlarmSession) -> TransitionResult:
        """
        Register one "I'm ignoring this" tap.

        The session ends as Ignored on the last of ``ignore_taps`` taps; until
        then the alarm keeps ringing.
        """
        if not self._is_live(session):
            return self._inert(session, "ignore")

        session.taps_remaining = max(0, session.taps_remaining - 1)
        if session.taps_remaining > 0:
            logger.debug(
                "ignore_tap_counted",
                session_id=session.session_id,
                taps_remaining=session.taps_remaining,
            )
            return TransitionResult(
                session_id=session.session_id,
                state=session.state,
                taps_remaining=session.taps_remaining,
            )

        self._end(session, SessionState.IGNORED)
        logger.info("session_ignored", session_id=session.session_id, alarm_id=session.alarm_id)

        return await self._score(session, self.config.ignore_delta)

    async def handle_notification_action(
        self,
        session_id: str,
        action: NotificationAction,
    ) -> TransitionResult:
        """
        Route a system notification action to its transition.

        ``snooze`` snoozes the session; ``dismiss`` confirms it.

        Raises:
            SessionError: If the action is unknown
        """
        session = self._sessions.get(session_id)
        if session is None:
            logger.info("notification_action_stale", session_id=session_id, action=str(action))
            return TransitionResult(session_id=session_id, state=SessionState.CLOSED, applied=False)

        try:
            action = NotificationAction(action)
        except ValueError as e:
            raise SessionError(
                f"Unknown notification action: {action}",
                details={"session_id": session_id},
                cause=e,
            )

        if action is NotificationAction.SNOOZE:
            return await self.snooze(session)
        return await self.confirm(session)

    def close_all(self) -> int:
        """
        Silence every ringing session without touching the habit score.

        Returns:
            Number of sessions closed
        """
        sessions = list(self._sessions.values())
        for session in sessions:
            self._end(session, SessionState.CLOSED)

        if sessions:
            logger.info("sessions_closed", count=len(sessions))
        return len(sessions)

    def _is_live(self, session: TriggeredAlarmSession) -> bool:
        return session.is_active and self._sessions.get(session.session_id) is session

    def _inert(self, session: TriggeredAlarmSession, call: str) -> TransitionResult:
        logger.debug("transition_ignored", session_id=session.session_id, call=call, state=session.state.value)
        return TransitionResult(
            session_id=session.session_id,
            state=session.state,
            applied=False,
            taps_remaining=session.taps_remaining,
        )

    def _end(self, session: TriggeredAlarmSession, state: SessionState) -> None:
        """Terminal transition: flip state, drop the session, stop effects. Never awaits."""
        session.state = state
        self._sessions.pop(session.session_id, None)

        if self._effects is not None:
            self._effects.stop_effects(session)
        elif session.audio is not None:
            session.audio.stop()

    async def _score(self, session: TriggeredAlarmSession, delta: int) -> TransitionResult:
        profile, warning = await self._apply_delta(session, delta)

        self._publish(SessionEvent(
            event_type=_EVENT_FOR_STATE[session.state],
            session_id=session.session_id,
            alarm_id=session.alarm_id,
            state=session.state.value,
            delta=delta,
        ))

        return TransitionResult(
            session_id=session.session_id,
            state=session.state,
            delta=delta,
            profile=profile,
            warning=warning,
            taps_remaining=session.taps_remaining,
        )

    async def _apply_delta(
        self,
        session: TriggeredAlarmSession,
        delta: int,
    ) -> Tuple[Optional[Profile], Optional[str]]:
        if self.habit_scores is None or not self.user_id:
            logger.debug("habit_score_skipped", session_id=session.session_id, delta=delta)
            return None, None

        try:
            profile = await self.habit_scores.adjust_health(self.user_id, delta)
        except Exception as e:
            logger.error(
                "habit_score_update_failed",
                session_id=session.session_id,
                delta=delta,
                **log_error(e),
            )
            self._publish(WarningEvent(
                event_type=EventType.WARNING_OCCURRED,
                component="habit_score",
                message=SCORE_NOT_SAVED,
                session_id=session.session_id,
            ))
            return None, SCORE_NOT_SAVED

        logger.info(
            "habit_score_updated",
            user_id=self.user_id,
            delta=delta,
            plant_health=profile.plant_health,
            plant_level=profile.plant_level,
        )
        self._publish(HabitEvent(
            event_type=EventType.HABIT_UPDATED,
            user_id=self.user_id,
            delta=delta,
            plant_health=profile.plant_health,
            plant_level=profile.plant_level,
        ))
        return profile, None

    def _publish(self, event: Event) -> None:
        if self.event_bus:
            self.event_bus.publish_nowait(event)

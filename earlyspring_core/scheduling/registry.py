"""
Timer Registry implementation.

Holds at most one live timer per alarm id and re-arms recurring alarms as
they fire.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.schedule import ScheduledOccurrence
from earlyspring_core.models.session import TriggerOrigin
from earlyspring_core.scheduling.resolver import format_time_remaining, next_occurrence
from earlyspring_core.utils.exceptions import EarlySpringError, SchedulingError
from earlyspring_core.utils.logging import get_logger, log_error

logger = get_logger(__name__)

FireCallback = Callable[[AlarmDefinition, TriggerOrigin], Any]


class TimerRegistry:
    """
    Process-wide table of armed alarm timers.

    Timers are callbacks on the running asyncio loop. No registry method
    awaits, so the id -> occurrence map is never observed half-updated and
    needs no lock.

    Features:
    - At most one pending timer per alarm id
    - Idempotent schedule() for unchanged definitions
    - Automatic re-arm of recurring alarms on expiry
    - Bulk cancel / reschedule for initial load and shutdown

    Example:
        >>> registry = TimerRegistry(on_fire=pipeline.fire)
        >>> registry.schedule(alarm)
        >>> registry.cancel(alarm.id)
        >>> registry.cancel_all()
    """

    def __init__(
        self,
        on_fire: Optional[FireCallback] = None,
        clock: Callable[[], datetime] = datetime.now,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize timer registry.

        Args:
            on_fire: Called with the alarm snapshot when a timer expires
            clock: Source of local wall-clock time
            loop: Event loop to arm timers on (default: the running loop)
        """
        self._on_fire = on_fire
        self._clock = clock
        self._loop = loop
        self._occurrences: Dict[str, ScheduledOccurrence] = {}

        self._stats = {
            "armed": 0,
            "cancelled": 0,
            "fired": 0,
            "unchanged": 0,
            "unresolved": 0,
        }

        logger.info("timer_registry_initialized")

    def set_fire_callback(self, on_fire: FireCallback) -> None:
        """Register the callback invoked when a timer expires."""
        self._on_fire = on_fire

    def schedule(
        self,
        alarm: AlarmDefinition,
        after: Optional[datetime] = None,
    ) -> Optional[ScheduledOccurrence]:
        """
        Arm (or re-arm) the next occurrence of an alarm.

        A disabled or unresolvable alarm is logged and left unscheduled; its
        previous occurrence, if any, is cancelled. Scheduling an unchanged
        definition whose next instant is already armed is a no-op apart from
        refreshing the stored snapshot.

        Args:
            alarm: Alarm definition
            after: Resolve relative to this instant when it is later than now

        Returns:
            The armed occurrence, or None when nothing was scheduled

        Raises:
            SchedulingError: If no event loop is available to arm the timer
        """
        if not alarm.enabled:
            logger.info("alarm_not_scheduled", alarm_id=alarm.id, reason="disabled")
            self.cancel(alarm.id)
            return None

        now = self._clock()
        reference = max(now, after) if after is not None else now
        fire_at = next_occurrence(alarm, reference)

        if fire_at is None:
            self._stats["unresolved"] += 1
            logger.warning("alarm_not_scheduled", alarm_id=alarm.id, reason="no_next_occurrence")
            self.cancel(alarm.id)
            return None

        existing = self._occurrences.get(alarm.id)
        if (
            existing is not None
            and existing.fire_at == fire_at
            and existing.alarm.schedule_key() == alarm.schedule_key()
        ):
            existing.alarm = alarm
            self._stats["unchanged"] += 1
            logger.debug("alarm_schedule_unchanged", alarm_id=alarm.id, fire_at=fire_at.isoformat())
            return existing

        loop = self._get_loop()

        if existing is not None:
            self._remove(alarm.id)

        delay = max(0.0, (fire_at - now).total_seconds())
        occurrence = ScheduledOccurrence(alarm=alarm, fire_at=fire_at)
        occurrence.handle = loop.call_later(delay, self._expire, occurrence)
        self._occurrences[alarm.id] = occurrence
        self._stats["armed"] += 1

        logger.info(
            "alarm_scheduled",
            alarm_id=alarm.id,
            label=alarm.display_label,
            fire_at=fire_at.isoformat(),
            delay_seconds=round(delay, 1),
        )
        return occurrence

    def cancel(self, alarm_id: str) -> bool:
        """
        Cancel the pending occurrence of an alarm.

        Safe when nothing is armed. A timer that is already queued on the
        loop but has not run yet will not invoke its callback.

        Args:
            alarm_id: Alarm identifier

        Returns:
            True if an occurrence was cancelled
        """
        if alarm_id not in self._occurrences:
            return False

        self._remove(alarm_id)
        logger.info("alarm_cancelled", alarm_id=alarm_id)
        return True

    def cancel_all(self) -> int:
        """
        Cancel every pending occurrence.

        Returns:
            Number of occurrences cancelled
        """
        count = len(self._occurrences)
        for alarm_id in list(self._occurrences):
            self._remove(alarm_id)

        if count:
            logger.info("all_alarms_cancelled", count=count)
        return count

    def reschedule_all(self, alarms: Iterable[AlarmDefinition]) -> List[ScheduledOccurrence]:
        """
        Replace every timer with a fresh schedule.

        Meant for initial load only; incremental edits go through
        schedule() / cancel() so unrelated timers are left alone. A failure on
        one alarm is logged and does not affect the others.

        Args:
            alarms: All alarm definitions of the user

        Returns:
            Occurrences armed
        """
        self.cancel_all()

        armed: List[ScheduledOccurrence] = []
        for alarm in alarms:
            if not alarm.enabled:
                continue
            try:
                occurrence = self.schedule(alarm)
            except EarlySpringError as e:
                logger.error("alarm_schedule_failed", alarm_id=alarm.id, **log_error(e))
                continue
            if occurrence is not None:
                armed.append(occurrence)

        logger.info("alarms_rescheduled", armed=len(armed))
        return armed

    def get(self, alarm_id: str) -> Optional[ScheduledOccurrence]:
        """Get the pending occurrence of an alarm."""
        return self._occurrences.get(alarm_id)

    def list_occurrences(self) -> List[ScheduledOccurrence]:
        """Pending occurrences, soonest first."""
        return sorted(self._occurrences.values(), key=lambda o: o.fire_at)

    def next_occurrence(self) -> Optional[ScheduledOccurrence]:
        """The soonest pending occurrence, if any."""
        occurrences = self.list_occurrences()
        return occurrences[0] if occurrences else None

    def time_until(self, alarm_id: str) -> Optional[str]:
        """Countdown text for an alarm's pending occurrence."""
        occurrence = self._occurrences.get(alarm_id)
        if occurrence is None:
            return None
        return format_time_remaining(occurrence.fire_at, self._clock())

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get registry statistics.

        Returns:
            Dict with counters and the number of pending occurrences
        """
        return {
            **self._stats,
            "pending": len(self._occurrences),
        }

    def __len__(self) -> int:
        return len(self._occurrences)

    def __contains__(self, alarm_id: object) -> bool:
        return alarm_id in self._occurrences

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulingError("No running event loop to arm alarm timers on", cause=e)

    def _remove(self, alarm_id: str) -> None:
        occurrence = self._occurrences.pop(alarm_id)
        occurrence.cancel()
        self._stats["cancelled"] += 1

    def _expire(self, occurrence: ScheduledOccurrence) -> None:
        """Timer callback: consume the occurrence, fire, re-arm."""
        # A superseded timer whose cancel raced the loop must not fire
        if self._occurrences.get(occurrence.alarm_id) is not occurrence:
            return

        del self._occurrences[occurrence.alarm_id]
        occurrence.handle = None
        self._stats["fired"] += 1

        alarm = occurrence.alarm
        logger.info("alarm_timer_expired", alarm_id=alarm.id, fire_at=occurrence.fire_at.isoformat())

        if self._on_fire is not None:
            try:
                self._on_fire(alarm, TriggerOrigin.SCHEDULED)
            except Exception as e:
                logger.error("alarm_fire_callback_failed", alarm_id=alarm.id, **log_error(e))

        if alarm.is_one_shot:
            return

        try:
            self.schedule(alarm, after=occurrence.fire_at)
        except EarlySpringError as e:
            logger.error("alarm_rearm_failed", alarm_id=alarm.id, **log_error(e))

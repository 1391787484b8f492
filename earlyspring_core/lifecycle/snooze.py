"""
Snooze follow-ups.

A snooze is a one-shot copy of the ringing alarm, armed ``minutes`` from
now under its own id so the original recurrence stays armed.
"""

import math
from datetime import datetime, timedelta

from earlyspring_core.models.alarm import (DEFAULT_LABEL, SNOOZED_SUFFIX,
                                           AlarmDefinition, SnoozeBehavior)
from earlyspring_core.models.config import LifecycleConfig
from earlyspring_core.utils.validation import format_time_of_day

SNOOZE_ID_SUFFIX = ":snooze"


def snooze_id_for(alarm_id: str) -> str:
    """
    Id of the snooze copy of an alarm.

    Snoozing a snooze copy reuses the same id, so at most one snooze
    follow-up per alarm is ever armed.

    Example:
        >>> snooze_id_for("a1")
        'a1:snooze'
        >>> snooze_id_for("a1:snooze")
        'a1:snooze'
    """
    if alarm_id.endswith(SNOOZE_ID_SUFFIX):
        return alarm_id
    return f"{alarm_id}{SNOOZE_ID_SUFFIX}"


def snoozed_label(label: str) -> str:
    """Append " (Snoozed)" unless the label already carries it."""
    base = label or DEFAULT_LABEL
    if base.endswith(SNOOZED_SUFFIX):
        return base
    return f"{base}{SNOOZED_SUFFIX}"


def shortened_minutes(minutes: int, config: LifecycleConfig) -> int:
    """
    Next snooze length under repeat_shorten.

    Example:
        >>> [shortened_minutes(m, LifecycleConfig()) for m in (10, 8, 6, 4, 3, 2, 1)]
        [8, 6, 4, 3, 2, 1, 1]
    """
    return max(config.min_snooze_minutes, math.floor(minutes * config.snooze_shorten_factor))


def derive_snoozed_copy(
    alarm: AlarmDefinition,
    now: datetime,
    config: LifecycleConfig,
) -> AlarmDefinition:
    """
    Build the one-shot follow-up for a snoozed alarm.

    The copy rings ``alarm.snooze.minutes`` after ``now``. Its own snooze
    settings carry the behavior forward: repeat_shorten shrinks the next
    snooze, once disables snoozing the copy.

    Args:
        alarm: Alarm that is ringing
        now: Snooze instant
        config: Lifecycle configuration

    Returns:
        The snooze copy
    """
    minutes = alarm.snooze.minutes or config.default_snooze_minutes
    fire_at = (now + timedelta(minutes=minutes)).replace(microsecond=0)

    snooze = alarm.snooze
    if snooze.behavior is SnoozeBehavior.REPEAT_SHORTEN:
        snooze = snooze.model_copy(update={"minutes": shortened_minutes(minutes, config)})
    elif snooze.behavior is SnoozeBehavior.ONCE:
        snooze = snooze.model_copy(update={"enabled": False})

    return alarm.model_copy(
        update={
            "id": snooze_id_for(alarm.id),
            "time": format_time_of_day(fire_at.hour, fire_at.minute),
            "label": snoozed_label(alarm.label or ""),
            "days": [],
            "enabled": True,
            "snooze": snooze,
            "fire_at": fire_at,
            "snoozed_from": alarm.snoozed_from or alarm.id,
        }
    )

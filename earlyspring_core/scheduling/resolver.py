"""
Occurrence resolution.

Maps an alarm definition and the current local time to the next instant the
alarm should ring. All computation is naive local wall-clock time; there is
no timezone conversion.
"""

from datetime import datetime, timedelta
from typing import Optional

from earlyspring_core.models.alarm import AlarmDefinition, Weekday


def next_occurrence(alarm: AlarmDefinition, now: datetime) -> Optional[datetime]:
    """
    Resolve the next fire instant of an alarm.

    If today is an active weekday and the time of day is still ahead, that is
    today's instant. Otherwise the next active weekday (scanning up to a week
    ahead) at the same time of day. A target equal to ``now`` counts as
    already passed, so the result is always strictly later than ``now``.

    One-shot alarms resolve to their ``fire_at`` while it is still ahead.

    Args:
        alarm: Alarm definition
        now: Current local time

    Returns:
        Next fire instant, or None when no weekday is active (or a one-shot
        instant has passed)

    Example:
        >>> alarm = AlarmDefinition(id="a1", time="07:00", days=[Weekday.MON])
        >>> next_occurrence(alarm, datetime(2024, 1, 1, 7, 0, 1))  # a Monday
        datetime.datetime(2024, 1, 8, 7, 0)
    """
    if alarm.is_one_shot:
        return alarm.fire_at if alarm.fire_at > now else None

    if not alarm.days:
        return None

    active = set(alarm.days)
    today_target = now.replace(hour=alarm.hour, minute=alarm.minute, second=0, microsecond=0)

    if Weekday.for_date(now) in active and today_target > now:
        return today_target

    for offset in range(1, 8):
        candidate = today_target + timedelta(days=offset)
        if Weekday.for_date(candidate) in active:
            return candidate

    return None


def format_time_remaining(fire_at: datetime, now: datetime) -> str:
    """
    Human readable countdown to an occurrence.

    Example:
        >>> format_time_remaining(datetime(2024, 1, 1, 9, 5), datetime(2024, 1, 1, 7, 0))
        '2h 5m remaining'
    """
    diff = fire_at - now
    if diff <= timedelta(0):
        return "Now"

    total_minutes = int(diff.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)

    if hours > 0:
        return f"{hours}h {minutes}m remaining"
    return f"{minutes}m remaining"

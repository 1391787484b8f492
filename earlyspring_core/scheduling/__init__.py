"""
Alarm scheduling.

Resolves weekly schedules to concrete fire instants and keeps one live timer
per alarm.
"""

from earlyspring_core.scheduling.registry import FireCallback, TimerRegistry
from earlyspring_core.scheduling.resolver import format_time_remaining, next_occurrence

__all__ = [
    "TimerRegistry",
    "FireCallback",
    "next_occurrence",
    "format_time_remaining",
]

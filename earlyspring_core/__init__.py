"""
EarlySpring Core - Wake-up alarm engine.

Resolves weekly alarm schedules to concrete fire times, keeps one live timer
per alarm, rings alarms through pluggable platform ports (sound, vibration,
spoken announcement, system notification) and turns the user's response
(wake up, snooze, ignore) into habit score ("plant health") changes.

Core Components:
    - Scheduling: Occurrence resolver and timer registry
    - Trigger: Alarm firing pipeline and ringing audio
    - Lifecycle: Ringing session state machine and snooze follow-ups
    - Interfaces: Abstract platform and service ports
    - Adapters: No-op and composite port implementations
    - Storage: Local JSON alarm and profile store
    - Events: Event bus for UI layers
    - Utils: Logging, config, validation

Example:
    >>> from earlyspring_core import AlarmEngine
    >>> from earlyspring_core.storage import LocalAlarmStore
    >>>
    >>> store = LocalAlarmStore(storage_path="./state")
    >>> engine = AlarmEngine(repository=store, habit_scores=store)
    >>> engine.set_presentation(lambda alarm, audio: print(f"Ringing: {alarm.display_label}"))
    >>> await engine.start("user_123")
"""

from earlyspring_core.__version__ import (
    __author__,
    __author_email__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_info__,
)
from earlyspring_core.base.engine import AlarmEngine

__all__ = [
    "AlarmEngine",
    "__version__",
    "__version_info__",
    "__title__",
    "__description__",
    "__author__",
    "__author_email__",
    "__license__",
    "__url__",
]

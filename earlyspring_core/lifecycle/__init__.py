"""
Post-fire lifecycle.

Modules:
    machine: LifecycleStateMachine - ringing session transitions and scoring
    snooze: Snooze follow-up derivation
"""

from earlyspring_core.lifecycle.machine import (SCORE_NOT_SAVED,
                                                EffectsController,
                                                LifecycleStateMachine)
from earlyspring_core.lifecycle.snooze import (derive_snoozed_copy,
                                               shortened_minutes,
                                               snooze_id_for, snoozed_label)

__all__ = [
    "LifecycleStateMachine",
    "EffectsController",
    "SCORE_NOT_SAVED",
    "derive_snoozed_copy",
    "shortened_minutes",
    "snooze_id_for",
    "snoozed_label",
]

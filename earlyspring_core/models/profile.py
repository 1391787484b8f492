"""
Habit score models for earlyspring-core.

The habit score ("plant health") is a bounded integer reflecting wake-up
consistency. Its display tier ("plant level") is derived, never stored
independently of the score.
"""

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

MIN_HEALTH = 0
MAX_HEALTH = 100
INITIAL_HEALTH = 100


def clamp_health(value: int) -> int:
    """Clamp a score into [0, 100]."""
    return max(MIN_HEALTH, min(MAX_HEALTH, value))


def plant_level_for(health: int) -> int:
    """
    Tier for a score: ceil(score / 20), kept within [1, 5].

    Example:
        >>> plant_level_for(80)
        4
        >>> plant_level_for(0)
        1
    """
    return max(1, min(5, math.ceil(clamp_health(health) / 20)))


class Profile(BaseModel):
    """
    User profile slice owned by the habit score service.

    Attributes:
        user_id: User identifier
        plant_health: Habit score in [0, 100]
        plant_level: Derived tier in [1, 5]
        updated_at: Last score change

    Example:
        >>> Profile(user_id="u1", plant_health=70).apply_delta(10).plant_level
        4
    """

    user_id: str = Field(..., min_length=1, description="User identifier")
    plant_health: int = Field(default=INITIAL_HEALTH, description="Habit score")
    plant_level: int = Field(default=5, ge=1, le=5, description="Derived tier")
    updated_at: Optional[datetime] = Field(default=None, description="Last score change")

    @model_validator(mode="after")
    def derive_level(self) -> "Profile":
        """Clamp the score and recompute the tier from it."""
        health = clamp_health(self.plant_health)
        self.plant_health = health
        self.plant_level = plant_level_for(health)
        return self

    def apply_delta(self, delta: int, now: Optional[datetime] = None) -> "Profile":
        """Return a copy with ``delta`` applied, clamped, tier recomputed."""
        return Profile(
            user_id=self.user_id,
            plant_health=self.plant_health + delta,
            updated_at=now or datetime.now(),
        )

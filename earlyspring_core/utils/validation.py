"""
Validation utilities for earlyspring-core.

Provides input validation helpers.
"""

import re
from typing import Tuple

from earlyspring_core.utils.exceptions import ValidationError

_TIME_OF_DAY = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(value: str) -> Tuple[int, int]:
    """
    Parse an "HH:MM" wall-clock time.

    Args:
        value: Time of day, 24h format

    Returns:
        (hour, minute) tuple

    Raises:
        ValidationError: If value is not a valid time of day

    Example:
        >>> parse_time_of_day("07:30")
        (7, 30)
    """
    match = _TIME_OF_DAY.match(value.strip()) if value else None
    if not match:
        raise ValidationError("Time of day must be HH:MM", details={"time": value})

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(
            "Time of day out of range",
            details={"time": value, "hour": hour, "minute": minute},
        )

    return hour, minute


def format_time_of_day(hour: int, minute: int) -> str:
    """Format hour and minute as zero-padded "HH:MM"."""
    return f"{hour:02d}:{minute:02d}"


def validate_user_id(user_id: str) -> str:
    """
    Validate user ID.

    Args:
        user_id: User ID to validate

    Returns:
        Validated user ID (stripped)

    Raises:
        ValidationError: If user_id is invalid
    """
    if not user_id or not user_id.strip():
        raise ValidationError("user_id cannot be empty")

    user_id = user_id.strip()

    if len(user_id) > 255:
        raise ValidationError(
            "user_id too long",
            details={"max_length": 255, "actual_length": len(user_id)},
        )

    return user_id


def validate_volume(volume: float) -> float:
    """
    Validate an audio amplitude.

    Raises:
        ValidationError: If volume is outside [0.0, 1.0]
    """
    if not 0.0 <= volume <= 1.0:
        raise ValidationError("Volume must be between 0.0 and 1.0", details={"volume": volume})
    return volume

"""
Wake-up announcement.

Composes the spoken announcement of a ringing alarm and speaks it, optionally
appending the current weather.
"""

from typing import Optional

from earlyspring_core.interfaces.effects import SpeechPort
from earlyspring_core.interfaces.services import WeatherProvider
from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.config import SpeechConfig
from earlyspring_core.utils.async_utils import run_with_timeout
from earlyspring_core.utils.logging import get_logger, log_error

logger = get_logger(__name__)

WAKE_UP_PHRASE = "Time to wake up!"

_TIMED_OUT = object()


def compose_announcement(label: Optional[str], weather: Optional[str] = None) -> str:
    """
    Build the announcement text.

    Example:
        >>> compose_announcement("Morning run", "It is 12 degrees and sunny.")
        'Morning run. Time to wake up! It is 12 degrees and sunny.'
        >>> compose_announcement(None)
        'Time to wake up!'
    """
    parts = []
    if label and label.strip():
        parts.append(f"{label.strip()}.")
    parts.append(WAKE_UP_PHRASE)
    if weather and weather.strip():
        parts.append(weather.strip())
    return " ".join(parts)


async def fetch_weather_summary(
    provider: Optional[WeatherProvider],
    timeout: float,
) -> Optional[str]:
    """Get the current weather summary, or None when unavailable."""
    if provider is None:
        return None

    try:
        return await run_with_timeout(provider.get_current_weather_summary(), timeout=timeout)
    except Exception as e:
        logger.warning("weather_unavailable", **log_error(e))
        return None


async def announce(
    alarm: AlarmDefinition,
    speech: SpeechPort,
    weather: Optional[WeatherProvider],
    config: SpeechConfig,
) -> Optional[str]:
    """
    Speak the announcement of a ringing alarm.

    Weather is only looked up for alarms with ``weather_alert`` set. Speech
    failures are logged; the alarm keeps ringing regardless.

    Returns:
        The text spoken, or None if speaking failed or timed out
    """
    summary = None
    if alarm.weather_alert:
        summary = await fetch_weather_summary(weather, config.timeout_seconds)

    text = compose_announcement(alarm.label, summary)

    try:
        result = await run_with_timeout(
            speech.speak(text), timeout=config.timeout_seconds, default=_TIMED_OUT
        )
    except Exception as e:
        logger.warning("announcement_failed", alarm_id=alarm.id, **log_error(e))
        return None

    if result is _TIMED_OUT:
        logger.warning("announcement_timed_out", alarm_id=alarm.id, timeout=config.timeout_seconds)
        return None

    logger.info("announcement_spoken", alarm_id=alarm.id, with_weather=summary is not None)
    return text

"""
Weather adapters.
"""

from typing import Any, Awaitable, Callable, Optional

from earlyspring_core.interfaces.services import WeatherProvider
from earlyspring_core.models.weather import WeatherReport
from earlyspring_core.utils.logging import get_logger

logger = get_logger(__name__)

ReportFetcher = Callable[[], Awaitable[Optional[Any]]]


class ReportWeatherProvider(WeatherProvider):
    """
    Turn a raw weather lookup into the spoken summary.

    The fetcher returns a ``WeatherReport`` or a dict of its fields (for
    example a trimmed OpenWeatherMap response), or None.

    Example:
        >>> provider = ReportWeatherProvider(fetch_openweather)
        >>> await provider.get_current_weather_summary()
        "Current temperature is 10 degrees Celsius with light rain. ..."
    """

    def __init__(self, fetch: ReportFetcher):
        self._fetch = fetch

    async def get_current_weather_summary(self) -> Optional[str]:
        raw = await self._fetch()
        if raw is None:
            logger.debug("weather_report_empty")
            return None

        report = raw if isinstance(raw, WeatherReport) else WeatherReport.model_validate(raw)
        return report.to_speech()

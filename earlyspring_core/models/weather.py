"""
Weather models for earlyspring-core.

Only what the spoken announcement needs: current conditions and the day's
range, as reported by an OpenWeatherMap-style provider.
"""

from typing import FrozenSet

from pydantic import BaseModel, Field

# Condition ids worth calling out (thunderstorm, heavy rain, snow, atmosphere)
ALERT_CONDITION_IDS: FrozenSet[int] = frozenset(
    [200, 201, 202, 210, 211, 212, 221, 230, 231, 232]
    + [502, 503, 504, 511, 520, 521, 522, 531]
    + [602, 611, 612, 613, 615, 616, 620, 621, 622]
    + [701, 711, 721, 731, 741, 751, 761, 762, 771, 781]
)


class WeatherReport(BaseModel):
    """
    Current weather conditions.

    Attributes:
        temp: Current temperature (Celsius)
        temp_min: Today's low
        temp_max: Today's high
        condition_id: Provider condition code
        description: Human readable condition, e.g. "light rain"
    """

    temp: float = Field(..., description="Current temperature")
    temp_min: float = Field(..., description="Today's low")
    temp_max: float = Field(..., description="Today's high")
    condition_id: int = Field(default=800, description="Condition code")
    description: str = Field(default="clear sky", description="Condition description")

    @property
    def is_severe(self) -> bool:
        """True when the condition may affect the commute."""
        return self.condition_id in ALERT_CONDITION_IDS

    def to_speech(self) -> str:
        """
        Render as a spoken sentence.

        Example:
            >>> WeatherReport(temp=9.6, temp_min=3, temp_max=12, description="light rain").to_speech()
            "Current temperature is 10 degrees Celsius with light rain. Today's high will be 12 and the low will be 3 degrees."
        """
        text = (
            f"Current temperature is {round(self.temp)} degrees Celsius with {self.description}. "
            f"Today's high will be {round(self.temp_max)} and the low will be {round(self.temp_min)} degrees."
        )
        if self.is_severe:
            text += " Expect weather that may affect your commute."
        return text

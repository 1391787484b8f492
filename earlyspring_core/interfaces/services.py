"""
Service Interfaces - Persistence, habit score and weather contracts.

These are the external collaborators the engine calls into. The engine only
reads alarm snapshots at scheduling time; it never owns persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.profile import Profile


class AlarmRepository(ABC):
    """
    Abstract interface for alarm document storage.

    Example:
        >>> alarms = await repository.get_alarms_for_user("user_123")
    """

    @abstractmethod
    async def get_alarms_for_user(self, user_id: str) -> List[AlarmDefinition]:
        """
        Get all alarms of a user, sorted by time of day.

        Args:
            user_id: User identifier

        Returns:
            Alarm definitions

        Raises:
            PersistenceError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def update_alarm_enabled(self, alarm_id: str, enabled: bool) -> Optional[AlarmDefinition]:
        """
        Enable or disable an alarm.

        Args:
            alarm_id: Alarm identifier
            enabled: New enabled flag

        Returns:
            Updated definition, or None if the alarm does not exist

        Raises:
            PersistenceError: If the update fails
        """
        pass

    @abstractmethod
    async def delete_alarm(self, alarm_id: str) -> bool:
        """
        Delete an alarm.

        Args:
            alarm_id: Alarm identifier

        Returns:
            True if an alarm was deleted

        Raises:
            PersistenceError: If the delete fails
        """
        pass


class HabitScoreService(ABC):
    """
    Abstract interface for the habit score ("plant health") owner.

    Implementations clamp the score to [0, 100] and derive the tier.

    Example:
        >>> profile = await scores.adjust_health("user_123", +10)
        >>> profile.plant_level
        4
    """

    @abstractmethod
    async def adjust_health(self, user_id: str, delta: int) -> Profile:
        """
        Apply a score delta.

        Args:
            user_id: User identifier
            delta: Points to add (negative to subtract)

        Returns:
            Updated profile

        Raises:
            PersistenceError: If the profile cannot be loaded or saved
        """
        pass


class WeatherProvider(ABC):
    """
    Abstract interface for current weather, consumed by the announcement.

    Example:
        >>> summary = await weather.get_current_weather_summary()
    """

    @abstractmethod
    async def get_current_weather_summary(self) -> Optional[str]:
        """
        Get a spoken-style weather summary.

        Returns:
            Summary text, or None when no weather is available
        """
        pass

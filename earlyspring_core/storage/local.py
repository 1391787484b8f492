"""
Local Alarm Store implementation.

Single-device persistence for alarms and habit scores on top of the
local state store.
"""

from datetime import datetime
from typing import Callable, List, Optional

from earlyspring_core.interfaces.services import AlarmRepository, HabitScoreService
from earlyspring_core.models.alarm import AlarmDefinition
from earlyspring_core.models.profile import Profile
from earlyspring_core.storage.state import LocalStateStore
from earlyspring_core.utils.exceptions import EarlySpringError, PersistenceError
from earlyspring_core.utils.logging import get_logger
from earlyspring_core.utils.validation import validate_user_id

logger = get_logger(__name__)

ALARMS_NAMESPACE = "alarms"
PROFILES_NAMESPACE = "profiles"


class LocalAlarmStore(AlarmRepository, HabitScoreService):
    """
    Alarm repository and habit score service in one local store.

    Alarms are stored as camelCase documents keyed by alarm id; profiles
    are keyed by user id and created at full health on first use.

    Example:
        >>> store = LocalAlarmStore(use_memory=True)
        >>> await store.save_alarm(AlarmDefinition(id="a1", user_id="u1", time="07:00"))
        >>> profile = await store.adjust_health("u1", -5)
        >>> profile.plant_health
        95
    """

    def __init__(
        self,
        storage_path: Optional[str] = None,
        use_memory: bool = False,
        state: Optional[LocalStateStore] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize local alarm store.

        Args:
            storage_path: Storage directory (ignored when ``state`` is given)
            use_memory: Keep everything in memory
            state: Existing state store to use
            clock: Source of local wall-clock time for profile updates
        """
        self.state = state or LocalStateStore(storage_path=storage_path, use_memory=use_memory)
        self._clock = clock

    async def save_alarm(self, alarm: AlarmDefinition) -> AlarmDefinition:
        """
        Create or replace an alarm.

        Raises:
            PersistenceError: If the alarm cannot be stored
        """
        await self.state.set_state(ALARMS_NAMESPACE, alarm.id, alarm.to_document())
        logger.info("alarm_saved", alarm_id=alarm.id, user_id=alarm.user_id)
        return alarm

    async def get_alarm(self, alarm_id: str) -> Optional[AlarmDefinition]:
        """Get one alarm, or None if it does not exist."""
        doc = await self.state.get_state(ALARMS_NAMESPACE, alarm_id)
        if doc is None:
            return None
        return AlarmDefinition.from_document(doc)

    async def get_alarms_for_user(self, user_id: str) -> List[AlarmDefinition]:
        """
        Get all alarms of a user, sorted by time of day.

        A stored document that no longer validates is logged and skipped.
        """
        alarms = []
        for alarm_id in await self.state.list_keys(ALARMS_NAMESPACE):
            doc = await self.state.get_state(ALARMS_NAMESPACE, alarm_id)
            if doc is None or doc.get("userId") != user_id:
                continue
            try:
                alarms.append(AlarmDefinition.from_document(doc))
            except EarlySpringError as e:
                logger.warning("alarm_document_invalid", alarm_id=alarm_id, error=e.message)

        return sorted(alarms, key=lambda a: a.time)

    async def update_alarm_enabled(self, alarm_id: str, enabled: bool) -> Optional[AlarmDefinition]:
        """Enable or disable an alarm; None if it does not exist."""
        alarm = await self.get_alarm(alarm_id)
        if alarm is None:
            logger.warning("alarm_not_found", alarm_id=alarm_id)
            return None

        updated = alarm.model_copy(update={"enabled": enabled})
        await self.save_alarm(updated)
        return updated

    async def delete_alarm(self, alarm_id: str) -> bool:
        """Delete an alarm; False if it does not exist."""
        deleted = await self.state.delete_state(ALARMS_NAMESPACE, alarm_id)
        if deleted:
            logger.info("alarm_deleted", alarm_id=alarm_id)
        return deleted

    async def get_profile(self, user_id: str) -> Profile:
        """
        Get a user's profile, creating it at full health on first use.

        Raises:
            PersistenceError: If the profile cannot be read or created
        """
        validate_user_id(user_id)

        data = await self.state.get_state(PROFILES_NAMESPACE, user_id)
        if data is not None:
            try:
                return Profile.model_validate(data)
            except ValueError as e:
                raise PersistenceError(
                    "Stored profile is corrupt",
                    details={"user_id": user_id},
                    cause=e,
                )

        profile = Profile(user_id=user_id, updated_at=self._clock())
        await self._save_profile(profile)
        logger.info("profile_created", user_id=user_id, plant_health=profile.plant_health)
        return profile

    async def adjust_health(self, user_id: str, delta: int) -> Profile:
        """
        Apply a habit score delta, clamped to [0, 100].

        Raises:
            PersistenceError: If the profile cannot be loaded or saved
        """
        profile = await self.get_profile(user_id)
        updated = profile.apply_delta(delta, now=self._clock())
        await self._save_profile(updated)

        logger.debug(
            "health_adjusted",
            user_id=user_id,
            delta=delta,
            plant_health=updated.plant_health,
        )
        return updated

    async def _save_profile(self, profile: Profile) -> None:
        await self.state.set_state(
            PROFILES_NAMESPACE,
            profile.user_id,
            profile.model_dump(mode="json"),
        )

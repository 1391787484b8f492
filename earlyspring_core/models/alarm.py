"""
Alarm models for earlyspring-core.

Defines the alarm definition edited by the user and the snooze settings it
carries. Persisted alarm documents use camelCase keys; ``from_document`` and
``to_document`` translate between the two shapes.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from pydantic import field_validator

from earlyspring_core.utils.exceptions import EarlySpringError, ValidationError
from earlyspring_core.utils.validation import parse_time_of_day

DEFAULT_LABEL = "Alarm"
SNOOZED_SUFFIX = " (Snoozed)"

_DOCUMENT_KEYS = frozenset({"_id", "userId", "isEnabled", "snoozeTime", "isSnoozeEnabled"})


class Weekday(str, Enum):
    """Day of the week, in ``date.weekday()`` order."""

    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @property
    def index(self) -> int:
        """Monday-based index matching ``date.weekday()``."""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def for_date(cls, day: date) -> "Weekday":
        """Return the weekday of a date or datetime."""
        return _WEEKDAY_ORDER[day.weekday()]


_WEEKDAY_ORDER: Tuple[Weekday, ...] = tuple(Weekday)


class SnoozeBehavior(str, Enum):
    """How repeated snoozes behave."""

    REPEAT = "repeat"
    REPEAT_SHORTEN = "repeat_shorten"
    ONCE = "once"


class SnoozeConfig(BaseModel):
    """
    Snooze settings of an alarm.

    Attributes:
        enabled: Whether snoozing is offered
        minutes: Snooze length in minutes
        behavior: repeat, repeat_shorten or once
    """

    enabled: bool = Field(default=True, description="Snooze offered")
    minutes: int = Field(default=10, ge=1, description="Snooze length (minutes)")
    behavior: SnoozeBehavior = Field(
        default=SnoozeBehavior.REPEAT_SHORTEN, description="Repeat behavior"
    )


class AlarmDefinition(BaseModel):
    """
    A user-defined alarm.

    Recurring alarms ring at ``time`` on each weekday in ``days``. Snooze
    follow-ups are one-shot alarms: they carry an explicit ``fire_at``
    instant and point back at the alarm that spawned them.

    Attributes:
        id: Alarm identifier
        user_id: Owner
        time: Time of day, "HH:MM"
        label: Optional label, spoken and shown when ringing
        days: Active weekdays
        enabled: Whether the alarm is armed
        sound: Sound id, None for the default sound
        vibrate: Vibrate while ringing
        raise_volume_gradually: Ramp volume from 10% to 100%
        snooze: Snooze settings
        weather_alert: Append a weather summary to the announcement
        fire_at: One-shot fire instant (snooze follow-ups)
        snoozed_from: Id of the alarm a snooze copy was derived from

    Example:
        >>> alarm = AlarmDefinition(id="a1", time="07:00", days=[Weekday.MON])
        >>> alarm.hour, alarm.minute
        (7, 0)
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Alarm identifier")
    user_id: Optional[str] = Field(default=None, description="Owner user id")
    time: str = Field(..., description="Time of day (HH:MM)")
    label: Optional[str] = Field(default=None, description="Alarm label")
    days: List[Weekday] = Field(default_factory=list, description="Active weekdays")
    enabled: bool = Field(default=True, description="Alarm armed")
    sound: Optional[str] = Field(default=None, description="Sound id")
    vibrate: bool = Field(default=True, description="Vibrate while ringing")
    raise_volume_gradually: bool = Field(default=True, description="Ramp volume up")
    snooze: SnoozeConfig = Field(default_factory=SnoozeConfig, description="Snooze settings")
    weather_alert: bool = Field(default=False, description="Announce weather")
    fire_at: Optional[datetime] = Field(default=None, description="One-shot fire instant")
    snoozed_from: Optional[str] = Field(default=None, description="Origin alarm of a snooze")

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Normalize to zero-padded HH:MM."""
        try:
            hour, minute = parse_time_of_day(v)
        except EarlySpringError as e:
            raise ValueError(e.message) from e
        return f"{hour:02d}:{minute:02d}"

    @field_validator("days")
    @classmethod
    def normalize_days(cls, v: List[Weekday]) -> List[Weekday]:
        """De-duplicate and sort weekdays Monday first."""
        return sorted(set(v), key=lambda d: d.index)

    @property
    def hour(self) -> int:
        """Hour of the time of day."""
        return int(self.time.split(":")[0])

    @property
    def minute(self) -> int:
        """Minute of the time of day."""
        return int(self.time.split(":")[1])

    @property
    def is_one_shot(self) -> bool:
        """True for alarms that ring once at ``fire_at``."""
        return self.fire_at is not None

    @property
    def display_label(self) -> str:
        """Label, or the generic "Alarm" when none is set."""
        return self.label or DEFAULT_LABEL

    def schedule_key(self) -> Tuple[Any, ...]:
        """
        Fields that determine when the alarm rings.

        Two definitions with the same key resolve to the same occurrences.
        """
        return (self.id, self.time, tuple(self.days), self.enabled, self.fire_at)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "AlarmDefinition":
        """
        Build a definition from a persisted alarm document.

        Accepts the camelCase document shape (``_id``, ``isEnabled``,
        ``snoozeTime``...) as well as this model's own field names.

        Raises:
            ValidationError: If the document is malformed
        """
        if not _DOCUMENT_KEYS.intersection(doc):
            data = dict(doc)
        else:
            data = {
                "id": doc.get("_id", doc.get("id")),
                "user_id": doc.get("userId"),
                "time": doc.get("time"),
                "label": doc.get("label"),
                "days": doc.get("days", []),
                "enabled": doc.get("isEnabled", True),
                "sound": doc.get("sound"),
                "vibrate": doc.get("vibrate", True),
                "raise_volume_gradually": doc.get("raiseVolumeGradually", True),
                "snooze": {
                    "enabled": doc.get("isSnoozeEnabled", True),
                    "minutes": doc.get("snoozeTime") or 10,
                    "behavior": doc.get("snoozeBehavior") or SnoozeBehavior.REPEAT_SHORTEN,
                },
                "weather_alert": doc.get("weatherAlert", False),
            }
            if data["id"] is not None:
                data["id"] = str(data["id"])

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid alarm document",
                details={"alarm_id": data.get("id"), "errors": e.error_count()},
                cause=e,
            )

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the persisted camelCase document shape."""
        doc: Dict[str, Any] = {
            "_id": self.id,
            "userId": self.user_id,
            "time": self.time,
            "label": self.label,
            "days": [d.value for d in self.days],
            "isEnabled": self.enabled,
            "sound": self.sound,
            "vibrate": self.vibrate,
            "raiseVolumeGradually": self.raise_volume_gradually,
            "isSnoozeEnabled": self.snooze.enabled,
            "snoozeTime": self.snooze.minutes,
            "snoozeBehavior": self.snooze.behavior.value,
            "weatherAlert": self.weather_alert,
        }
        return {k: v for k, v in doc.items() if v is not None}

"""
Configuration models for earlyspring-core.

Defines configuration structures for engine components.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class AudioConfig(BaseModel):
    """
    Configuration for alarm audio playback.

    Attributes:
        default_sound: Sound used when the alarm's own sound cannot be loaded
        initial_volume: Starting amplitude for gradual-volume alarms
        volume_step: Amplitude added on each ramp step
        volume_step_seconds: Seconds between ramp steps

    Example:
        >>> config = AudioConfig(default_sound="birds", volume_step_seconds=2.0)
    """

    default_sound: str = Field(default="baby_waltz", min_length=1, description="Fallback sound id")
    initial_volume: float = Field(default=0.1, gt=0.0, le=1.0, description="Ramp start amplitude")
    volume_step: float = Field(default=0.1, gt=0.0, le=1.0, description="Ramp step amplitude")
    volume_step_seconds: float = Field(default=3.0, gt=0.0, description="Seconds between steps")


class VibrationConfig(BaseModel):
    """Vibration pattern in milliseconds, alternating on/off."""

    pattern: List[int] = Field(
        default_factory=lambda: [500, 250, 500, 250, 500],
        min_length=1,
        description="Vibration pattern (ms on, ms off, ...)",
    )

    @field_validator("pattern")
    @classmethod
    def pattern_non_negative(cls, v: List[int]) -> List[int]:
        """Reject negative durations."""
        if any(ms < 0 for ms in v):
            raise ValueError("vibration pattern durations must be >= 0")
        return v


class LifecycleConfig(BaseModel):
    """
    Configuration for the post-fire state machine and habit scoring.

    Attributes:
        ignore_taps: Discrete confirmations needed to ignore a ringing alarm
        confirm_delta: Score delta for waking up
        snooze_delta: Score delta for snoozing
        ignore_delta: Score delta for ignoring
        snooze_shorten_factor: Multiplier for repeat_shorten snoozes
        min_snooze_minutes: Floor for shortened snoozes
        default_snooze_minutes: Snooze length when an alarm does not set one
    """

    ignore_taps: int = Field(default=50, ge=1, description="Taps required to ignore")
    confirm_delta: int = Field(default=10, description="Score delta on wake-up")
    snooze_delta: int = Field(default=-5, description="Score delta on snooze")
    ignore_delta: int = Field(default=-10, description="Score delta on ignore")
    snooze_shorten_factor: float = Field(
        default=0.8, gt=0.0, le=1.0, description="repeat_shorten multiplier"
    )
    min_snooze_minutes: int = Field(default=1, ge=1, description="Shortened snooze floor")
    default_snooze_minutes: int = Field(default=10, ge=1, description="Default snooze length")


class SpeechConfig(BaseModel):
    """Voice settings passed to speech synthesizers."""

    language: str = Field(default="en-US", description="Voice language")
    rate: float = Field(default=1.0, gt=0.0, le=10.0, description="Speaking rate")
    pitch: float = Field(default=1.1, gt=0.0, le=2.0, description="Voice pitch")
    prefer_female: bool = Field(default=True, description="Prefer a female voice if available")
    timeout_seconds: float = Field(default=30.0, gt=0.0, description="Announcement timeout")


class EngineConfig(BaseModel):
    """
    Complete engine configuration.

    Attributes:
        audio: Audio configuration
        vibration: Vibration configuration
        lifecycle: Lifecycle and scoring configuration
        speech: Speech configuration
        storage_path: Directory for the local JSON store (None for in-memory)
        log_level: Logging level
        log_format: Log format (json, text)

    Example:
        >>> config = EngineConfig(lifecycle=LifecycleConfig(ignore_taps=20))
    """

    audio: AudioConfig = Field(default_factory=AudioConfig, description="Audio configuration")
    vibration: VibrationConfig = Field(
        default_factory=VibrationConfig, description="Vibration configuration"
    )
    lifecycle: LifecycleConfig = Field(
        default_factory=LifecycleConfig, description="Lifecycle configuration"
    )
    speech: SpeechConfig = Field(default_factory=SpeechConfig, description="Speech configuration")
    storage_path: Optional[str] = Field(default=None, description="Local store directory")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="text", description="Log format")

    @field_validator("log_level")
    @classmethod
    def log_level_uppercase(cls, v: str) -> str:
        """Convert log level to uppercase."""
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in ["json", "text"]:
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

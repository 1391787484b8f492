"""
Custom exceptions for earlyspring-core.

Every engine failure degrades a single feature, so most of these are caught
and logged close to where they are raised. They still carry structured
details so that the log line (and any surfaced UI warning) says what broke.
"""

from typing import Any, Dict, Optional


class EarlySpringError(Exception):
    """
    Base exception for all EarlySpring errors.

    Attributes:
        message: Error message
        details: Additional error details
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """
        Initialize EarlySpring error.

        Args:
            message: Error message
            details: Additional error details
            cause: Original exception
        """
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation of error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message='{self.message}', details={self.details})"


class ConfigError(EarlySpringError):
    """
    Configuration-related errors.

    Example:
        >>> raise ConfigError("Unsupported config file format", details={"path": "engine.toml"})
    """

    pass


class ValidationError(EarlySpringError):
    """
    Validation errors.

    Raised when an alarm definition or other input is malformed.

    Example:
        >>> raise ValidationError("Invalid time of day", details={"time": "25:00"})
    """

    pass


class SchedulingError(EarlySpringError):
    """Timer registry errors (e.g. scheduling outside a running event loop)."""

    pass


class AudioError(EarlySpringError):
    """
    Audio loading or playback errors.

    Example:
        >>> raise AudioError("Sound not found", details={"sound": "birds"})
    """

    pass


class SpeechError(EarlySpringError):
    """Speech synthesis errors."""

    pass


class NotificationError(EarlySpringError):
    """Platform notification errors."""

    pass


class PersistenceError(EarlySpringError):
    """
    Persistence errors (alarm documents, user profile).

    Example:
        >>> raise PersistenceError("User not found", details={"user_id": "u1"})
    """

    pass


class SessionError(EarlySpringError):
    """Ringing session errors."""

    pass


class EventError(EarlySpringError):
    """Event system errors."""

    pass

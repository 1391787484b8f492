"""
Utility modules for earlyspring-core.

Provides common utilities used throughout the alarm engine.

Modules:
    exceptions: Custom exception hierarchy
    logging: Structured logging configuration
    validation: Input validation helpers
    async_utils: Async/await utilities
    config: Configuration loading and management
"""

from earlyspring_core.utils.async_utils import cancel_tasks, run_with_timeout, spawn
from earlyspring_core.utils.config import load_config, merge_configs, save_config
from earlyspring_core.utils.exceptions import (
    AudioError,
    ConfigError,
    EarlySpringError,
    EventError,
    NotificationError,
    PersistenceError,
    SchedulingError,
    SessionError,
    SpeechError,
    ValidationError,
)
from earlyspring_core.utils.logging import get_logger, log_error, setup_logging
from earlyspring_core.utils.validation import (
    format_time_of_day,
    parse_time_of_day,
    validate_user_id,
    validate_volume,
)

__all__ = [
    # Exceptions
    "EarlySpringError",
    "ConfigError",
    "ValidationError",
    "SchedulingError",
    "AudioError",
    "SpeechError",
    "NotificationError",
    "PersistenceError",
    "SessionError",
    "EventError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_error",
    # Validation
    "parse_time_of_day",
    "format_time_of_day",
    "validate_user_id",
    "validate_volume",
    # Async
    "run_with_timeout",
    "spawn",
    "cancel_tasks",
    # Config
    "load_config",
    "save_config",
    "merge_configs",
]

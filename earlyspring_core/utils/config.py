"""
Configuration utilities for earlyspring-core.

Provides configuration loading, saving, and management.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from earlyspring_core.models.config import EngineConfig
from earlyspring_core.utils.exceptions import ConfigError

ENV_PREFIX = "EARLYSPRING_"

# Environment variable suffix -> (config path, converter)
_ENV_OVERRIDES: Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]] = {
    "DEFAULT_SOUND": (("audio", "default_sound"), str),
    "INITIAL_VOLUME": (("audio", "initial_volume"), float),
    "VOLUME_STEP": (("audio", "volume_step"), float),
    "VOLUME_STEP_SECONDS": (("audio", "volume_step_seconds"), float),
    "IGNORE_TAPS": (("lifecycle", "ignore_taps"), int),
    "CONFIRM_DELTA": (("lifecycle", "confirm_delta"), int),
    "SNOOZE_DELTA": (("lifecycle", "snooze_delta"), int),
    "IGNORE_DELTA": (("lifecycle", "ignore_delta"), int),
    "SPEECH_LANGUAGE": (("speech", "language"), str),
    "SPEECH_RATE": (("speech", "rate"), float),
    "SPEECH_PITCH": (("speech", "pitch"), float),
    "STORAGE_PATH": (("storage_path",), str),
    "LOG_LEVEL": (("log_level",), str),
    "LOG_FORMAT": (("log_format",), str),
}


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> EngineConfig:
    """
    Load engine configuration from file.

    Supports YAML and JSON formats. Environment variables override file values.

    Args:
        config_path: Path to config file (YAML or JSON)
        env_file: Path to .env file for environment variables

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If configuration cannot be loaded

    Example:
        >>> config = load_config("earlyspring.yaml")
        >>> config = load_config(env_file=".env")
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    config_dict: Dict[str, Any] = {}

    if config_path:
        config_path_obj = Path(config_path)

        if not config_path_obj.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        if not config_path.endswith((".yaml", ".yml", ".json")):
            raise ConfigError(f"Unsupported config file format: {config_path}")

        try:
            with open(config_path_obj, "r", encoding="utf-8") as f:
                if config_path.endswith(".json"):
                    config_dict = json.load(f)
                else:
                    config_dict = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Failed to load configuration from {config_path}",
                cause=e,
            )

        if not isinstance(config_dict, dict):
            raise ConfigError(f"Configuration root must be a mapping: {config_path}")

    config_dict = _apply_env_overrides(config_dict)

    try:
        return EngineConfig(**config_dict)
    except ValueError as e:
        raise ConfigError("Invalid configuration", cause=e)


def save_config(config: EngineConfig, config_path: str, format: str = "yaml") -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save to
        format: Format ("yaml" or "json")

    Raises:
        ConfigError: If configuration cannot be saved

    Example:
        >>> save_config(config, "earlyspring.yaml", format="yaml")
    """
    if format not in ("yaml", "json"):
        raise ConfigError(f"Unsupported format: {format}")

    config_dict = config.model_dump(mode="json", exclude_none=True)

    try:
        config_path_obj = Path(config_path)
        config_path_obj.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path_obj, "w", encoding="utf-8") as f:
            if format == "yaml":
                yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)
    except OSError as e:
        raise ConfigError(f"Failed to save configuration to {config_path}", cause=e)


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries.

    Override values take precedence over base values.

    Example:
        >>> base = {"audio": {"default_sound": "birds"}}
        >>> override = {"audio": {"volume_step": 0.2}}
        >>> merge_configs(base, override)
        {'audio': {'default_sound': 'birds', 'volume_step': 0.2}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables are in format: EARLYSPRING_<NAME>
    e.g., EARLYSPRING_IGNORE_TAPS, EARLYSPRING_LOG_LEVEL

    Raises:
        ConfigError: If an override has the wrong type
    """
    overrides: Dict[str, Any] = {}

    for name, (path, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(f"{ENV_PREFIX}{name}")
        if not raw:
            continue

        try:
            value = convert(raw)
        except ValueError as e:
            raise ConfigError(
                f"Invalid value for {ENV_PREFIX}{name}",
                details={"value": raw},
                cause=e,
            )

        target = overrides
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = value

    return merge_configs(config, overrides)

"""
FILE: tickoff/config.py
PURPOSE: Runtime settings from environment variables and CLI overrides
EXPORTS:
  - Settings (dataclass)
  - default_data_dir() -> Path
  - load_settings(**overrides) -> Settings
DEPENDENCIES:
  - typer (get_app_dir for the per-platform application directory)
  - tickoff.core.constants (backend names, defaults)
  - tickoff.core.exceptions (ConfigError)
NOTES:
  - Environment: TICKOFF_BACKEND, TICKOFF_DATA_DIR, TICKOFF_LOG_LEVEL, TICKOFF_SOUND
  - Explicit overrides (CLI options) win over the environment
  - None overrides are ignored so CLI options can default to None
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from .core.constants import APP_NAME, DEFAULT_BACKEND, VALID_BACKENDS
from .core.exceptions import ConfigError


DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class Settings:
    backend: str
    data_dir: Path
    log_level: int = logging.WARNING
    sound: bool = True


def default_data_dir() -> Path:
    """Per-platform application directory (e.g. ~/.config/tickoff on Linux)."""
    return Path(typer.get_app_dir(APP_NAME))


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be one of: {', '.join(_TRUE_VALUES + _FALSE_VALUES)}")


def _parse_log_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Invalid log level '{value}'")
    return level


def load_settings(
    backend: Optional[str] = None,
    data_dir: Optional[Path] = None,
    log_level: Optional[str] = None,
    sound: Optional[bool] = None,
) -> Settings:
    """
    Build Settings from the environment plus explicit overrides.

    Raises:
        ConfigError: If a backend, log level or boolean value is invalid
    """
    env = os.environ

    backend = (backend or env.get("TICKOFF_BACKEND") or DEFAULT_BACKEND).strip().lower()
    if backend not in VALID_BACKENDS:
        raise ConfigError(
            f"Invalid backend '{backend}'. Must be one of: {', '.join(VALID_BACKENDS)}"
        )

    if data_dir is None:
        env_dir = env.get("TICKOFF_DATA_DIR")
        data_dir = Path(env_dir).expanduser() if env_dir else default_data_dir()

    level = _parse_log_level(log_level or env.get("TICKOFF_LOG_LEVEL") or DEFAULT_LOG_LEVEL)

    if sound is None:
        env_sound = env.get("TICKOFF_SOUND")
        sound = _parse_bool("TICKOFF_SOUND", env_sound) if env_sound else True

    return Settings(backend=backend, data_dir=Path(data_dir), log_level=level, sound=sound)

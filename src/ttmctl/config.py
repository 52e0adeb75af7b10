# src/ttmctl/config.py

"""
User settings for the ttmctl command line.

Settings live in an optional YAML file (`.ttmctl.yml` in the working
directory unless --config points elsewhere):

    color: true
    format: text        # text | yaml
    log_level: WARNING  # DEBUG | INFO | WARNING | ERROR

Unknown keys are ignored so older binaries can read newer files.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional

import yaml


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

CONFIG_FILE_NAME: Final[str] = ".ttmctl.yml"

OUTPUT_FORMATS: Final[tuple[str, ...]] = ("text", "yaml")
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigError(Exception):
    """
    Raised when a settings file cannot be read or holds invalid values.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Config:
    color: bool = True
    format: str = "text"
    log_level: str = "WARNING"


def load_config(path: Optional[str | Path] = None, *, cwd: Optional[Path] = None) -> Config:
    """
    Load settings from `path`, or from the default file if it exists.

    An explicit path must exist; a missing default file yields defaults.
    """
    if path is None:
        p = (cwd or Path.cwd()) / CONFIG_FILE_NAME
        if not p.is_file():
            return Config()
    else:
        p = Path(path)
        if not p.is_file():
            raise ConfigError(str(p), "Config file does not exist")

    data = _read_yaml(p)

    return Config(
        color=_optional_bool_field(str(p), data, "color", default=True),
        format=_optional_choice_field(str(p), data, "format", OUTPUT_FORMATS, default="text"),
        log_level=_optional_choice_field(
            str(p), data, "log_level", LOG_LEVELS, default="WARNING", upper=True
        ),
    )


# ---------------------------------------------------------------------
# YAML helpers
# ---------------------------------------------------------------------

def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(str(path), f"Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "YAML root must be a mapping/dictionary")

    return data


def _optional_bool_field(path: str, data: dict[str, Any], key: str, *, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(path, f"YAML key '{key}' must be true or false")
    return value


def _optional_choice_field(
    path: str,
    data: dict[str, Any],
    key: str,
    choices: tuple[str, ...],
    *,
    default: str,
    upper: bool = False,
) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(path, f"YAML key '{key}' must be a string")

    value = value.strip().upper() if upper else value.strip().lower()
    if value not in choices:
        allowed = ", ".join(choices)
        raise ConfigError(path, f"Invalid {key} '{value}' (allowed: {allowed})")

    return value

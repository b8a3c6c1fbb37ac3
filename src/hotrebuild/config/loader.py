"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the TOML config
file (`.hotrebuild.toml` by default) into a ``RawConfig`` layer.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from ..models.config import HOOK_STAGES, RawConfig
from ..validation import (
    ConfigError,
    ValidationError,
    validate_argv,
    validate_argv_list,
    validate_bool,
    validate_non_empty_string,
    validate_positive_integer,
    validate_string_list,
)
from .defaults import DEFAULT_CONFIG_FILENAME

logger = logging.getLogger(__name__)


def _validate_debounce(value: Any, field_name: str) -> int:
    return validate_positive_integer(value, min_value=0, field_name=field_name, strict=True)


# Validator for each RawConfig field, keyed by its TOML name.
FIELD_VALIDATORS: Dict[str, Callable[[Any, str], Any]] = {
    "watch": validate_string_list,
    "ignore": validate_string_list,
    "include_ext": validate_string_list,
    "exclude_ext": validate_string_list,
    "debounce_ms": _validate_debounce,
    "clear": validate_bool,
    "build": validate_argv,
    "run": validate_argv,
    "manifest_path": validate_non_empty_string,
    "package": validate_non_empty_string,
    "bin": validate_non_empty_string,
    "features": validate_string_list,
    "all_features": validate_bool,
    "no_default_features": validate_bool,
    "workspace": validate_bool,
    "release": validate_bool,
}
FIELD_VALIDATORS.update({stage: validate_argv_list for stage in HOOK_STAGES})


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        ConfigError: If the file is missing, unreadable, or malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"{description} not found: {file_path}", field_name=str(file_path)) from e
    except OSError as e:
        raise ConfigError(f"cannot read {description} {file_path}: {e}", field_name=str(file_path)) from e
    except tomllib.TOMLDecodeError as e:
        # Reported once by the caller.
        raise ConfigError(f"cannot parse {description} {file_path}: {e}", field_name=str(file_path)) from e


def parse_raw_config(data: Mapping[str, Any], source: str = "configuration") -> RawConfig:
    """
    Build a validated ``RawConfig`` layer from a parsed mapping.

    Unknown keys are reported and ignored.

    Raises:
        ConfigError: If any known key holds a value of the wrong shape
    """
    values: Dict[str, Any] = {}
    for key, value in data.items():
        validator = FIELD_VALIDATORS.get(key)
        if validator is None:
            logger.warning(f"Unknown key '{key}' in {source} (ignored)")
            continue
        try:
            values[key] = validator(value, f"{source}: {key}")
        except ValidationError as e:
            raise ConfigError(str(e), field_name=key, value=value) from e
    return RawConfig(**values)


def load_config_file(path: Path) -> RawConfig:
    """
    Load one configuration layer from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        The file's RawConfig layer

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated
    """
    data = load_toml_file(Path(path), "config file")
    return parse_raw_config(data, source=str(path))


def find_default_config(cwd: Optional[Path] = None) -> Optional[Path]:
    """Return the default config file in ``cwd`` if it exists."""
    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    if candidate.is_file():
        logger.debug(f"Found default config file: {candidate}")
        return candidate
    return None

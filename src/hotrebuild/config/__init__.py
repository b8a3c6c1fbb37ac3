"""
Configuration management for the hotrebuild package.

This module loads configuration layers (TOML file, command line, files mode)
and resolves them into the single effective policy.
"""

from .defaults import DEFAULT_CONFIG_FILENAME, SUPERVISED_ENV_VAR
from .files_mode import files_mode_config
from .loader import find_default_config, load_config_file, load_toml_file, parse_raw_config
from .resolver import (
    default_watch_roots,
    merge_configs,
    resolve_config,
    synthesize_build_argv,
)

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "SUPERVISED_ENV_VAR",
    "default_watch_roots",
    "files_mode_config",
    "find_default_config",
    "load_config_file",
    "load_toml_file",
    "merge_configs",
    "parse_raw_config",
    "resolve_config",
    "synthesize_build_argv",
]

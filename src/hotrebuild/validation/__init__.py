"""
Validation and error handling for the hotrebuild package.

This module provides input validation and the supervisor's error taxonomy,
with consistent error reporting across the application.
"""

from .exceptions import (
    BuildFailure,
    ConfigError,
    ErrorSeverity,
    HookError,
    HookStageFailure,
    RecoverableError,
    ResolutionError,
    SpawnError,
    SupervisorError,
    ValidationError,
    WatchChannelError,
    handle_cli_error,
    handle_error,
    handle_subprocess_error,
)

from .validators import (
    validate_argv,
    validate_argv_list,
    validate_bool,
    validate_glob_pattern,
    validate_non_empty_string,
    validate_positive_integer,
    validate_string_list,
)

__all__ = [
    # Errors
    "BuildFailure",
    "ConfigError",
    "ErrorSeverity",
    "HookError",
    "HookStageFailure",
    "RecoverableError",
    "ResolutionError",
    "SpawnError",
    "SupervisorError",
    "ValidationError",
    "WatchChannelError",
    "handle_cli_error",
    "handle_error",
    "handle_subprocess_error",
    # Validators
    "validate_argv",
    "validate_argv_list",
    "validate_bool",
    "validate_glob_pattern",
    "validate_non_empty_string",
    "validate_positive_integer",
    "validate_string_list",
]

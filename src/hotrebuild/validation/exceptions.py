"""
Exception types and error management.

This module defines the supervisor's error taxonomy and the small family of
``handle_*`` helpers used for consistent error logging across the application.

Fatal errors (``ConfigError``, ``HookError``, ``SpawnError`` and a terminal
``WatchChannelError``) propagate to the CLI. ``RecoverableError`` subclasses
abort only the current pipeline run.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class SupervisorError(Exception):
    """Base class for all errors raised by the supervisor."""

    default_severity = ErrorSeverity.ERROR

    def __init__(self, message: str, context: Optional[str] = None,
                 severity: Optional[ErrorSeverity] = None):
        super().__init__(message)
        self.context = context
        self.severity = severity or self.default_severity


class ValidationError(SupervisorError):
    """
    Exception raised when validation fails.

    Carries the offending field name and value for error messages.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: Optional[ErrorSeverity] = None):
        super().__init__(message, context=field_name, severity=severity)
        self.field_name = field_name
        self.value = value


class ConfigError(ValidationError):
    """A configuration layer is unreadable, unparseable, or holds invalid values."""

    default_severity = ErrorSeverity.CRITICAL


class HookError(SupervisorError):
    """A hook entry cannot be executed at all (empty argv, missing executable)."""


class SpawnError(SupervisorError):
    """A command that must start could not be launched."""

    default_severity = ErrorSeverity.CRITICAL


class WatchChannelError(SupervisorError):
    """A change notification failed, or the notification channel itself died."""


class RecoverableError(SupervisorError):
    """A failure that aborts the current pipeline run but keeps the loop alive."""

    default_severity = ErrorSeverity.WARNING


class BuildFailure(RecoverableError):
    """The build command exited with a non-zero status."""

    def __init__(self, message: str, returncode: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.returncode = returncode


class HookStageFailure(RecoverableError):
    """A hook in a fail-fast stage (pre_build, post_build, pre_run) failed."""

    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, context=stage, **kwargs)
        self.stage = stage


class ResolutionError(RecoverableError):
    """The run command could not be determined."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a fatal CLI error and exit."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)

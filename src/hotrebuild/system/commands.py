"""
Command execution utilities.

This module provides the two ways the supervisor runs external commands:
captured (for tool queries like ``cargo metadata``) and inherited (for
builds and hooks, whose output goes straight to the terminal).
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..validation import handle_subprocess_error

logger = logging.getLogger(__name__)


def format_argv(argv: Sequence[str]) -> str:
    """Render an argv as a shell-quoted string for log messages."""
    return " ".join(shlex.quote(arg) for arg in argv)


def run_command(
    argv: Sequence[str], cwd: Optional[Path] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output with robust error handling.

    Args:
        argv: Program and arguments to execute.
        cwd: Working directory for command execution (default: current).

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 for execution errors.

    Note:
        Uses UTF-8 encoding with error replacement for robust text handling.
    """
    logger.debug(f"Executing command: '{format_argv(argv)}' in '{cwd or Path.cwd()}'")
    try:
        process = subprocess.run(
            list(argv),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        logger.error(f"Command not found: {argv[0]}: {type(e).__name__}: {e}")
        return -1, "", f"Error: Command not found '{argv[0]}'"
    except OSError as e:
        handle_subprocess_error(e, format_argv(argv), reraise=False, logger=logger)
        return -1, "", f"An unexpected error occurred: {e}"


def run_inherited(argv: Sequence[str], cwd: Optional[Path] = None) -> int:
    """Run a command to completion with the supervisor's stdin/stdout/stderr.

    Blocks without a timeout.

    Returns:
        The command's exit code.

    Raises:
        OSError: If the command cannot be launched (e.g. executable not found).
    """
    logger.debug(f"Running: {format_argv(argv)}")
    process = subprocess.run(list(argv), cwd=cwd, check=False)
    return process.returncode

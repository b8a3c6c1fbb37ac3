"""
Hook execution.

A hook list is an ordered sequence of argv commands. Commands run one after
another with the supervisor's standard streams and the list stops at the
first non-zero exit.
"""

import logging
from typing import Callable, Sequence

from ..system.commands import format_argv, run_inherited
from ..validation import ErrorSeverity, HookError, handle_error

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], int]


def run_hooks(label: str, hooks: Sequence[Sequence[str]],
              runner: CommandRunner = run_inherited) -> bool:
    """
    Run a hook list, fail-fast.

    Args:
        label: Stage name used in log and error messages
        hooks: Commands to run, in order
        runner: Executes one argv and returns its exit code

    Returns:
        True if the list is empty or every command exited zero, False at the
        first command that exited non-zero (later commands are not run)

    Raises:
        HookError: If a hook's argv is empty or its program cannot be launched
    """
    for i, argv in enumerate(hooks):
        if not argv:
            raise HookError(f"hook {label}[{i}] argv is empty", context=label)

        logger.info(f"hook {label}[{i}]: {format_argv(argv)}")
        try:
            returncode = runner(argv)
        except OSError as e:
            raise HookError(f"hook {label}[{i}]: {format_argv(argv)}: {e}", context=label) from e

        if returncode != 0:
            logger.warning(f"hook {label}[{i}] exited with code {returncode}")
            return False
    return True


def run_hooks_best_effort(label: str, hooks: Sequence[Sequence[str]],
                          runner: CommandRunner = run_inherited) -> bool:
    """Run a hook list whose failure must not affect the pipeline."""
    try:
        ok = run_hooks(label, hooks, runner=runner)
    except HookError as e:
        handle_error(e, f"{label} hooks (ignored)", severity=ErrorSeverity.WARNING,
                     reraise=False, logger=logger)
        return False
    if not ok:
        logger.warning(f"{label} hook failed (ignored)")
    return ok

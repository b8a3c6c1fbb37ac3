"""
Orchestration of the build-run pipeline.

- hooks: fail-fast hook list execution
- process_manager: process-group spawn/replace/kill for the managed app
- supervisor: the pipeline state machine and watch loop
- signal_handler: SIGINT/SIGTERM to graceful shutdown
"""

from .hooks import run_hooks, run_hooks_best_effort
from .process_manager import (
    ProcessGroupManager,
    TerminationTimeouts,
    is_already_supervised,
    supervised_environment,
)
from .signal_handler import SignalHandler
from .supervisor import BuildRunSupervisor

__all__ = [
    "run_hooks",
    "run_hooks_best_effort",
    "ProcessGroupManager",
    "TerminationTimeouts",
    "is_already_supervised",
    "supervised_environment",
    "SignalHandler",
    "BuildRunSupervisor",
]

"""
Runtime data models.

This module contains the data structures that exist while the supervisor is
running: change notifications, the managed process handle, and the pipeline
stage machine's states and results.
"""

import subprocess
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class ChangeEvent:
    """
    A single filesystem notification.

    A notification that failed inside the watch primitive carries the failure
    in ``error`` and no paths.
    """

    paths: Tuple[Path, ...] = ()
    kind: str = "modified"
    error: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass
class ManagedProcess:
    """
    Ownership handle for the running application instance.

    The process is the root of its own process group, so ``pgid`` addresses
    the whole tree on POSIX systems.
    """

    popen: subprocess.Popen
    argv: Tuple[str, ...]
    pgid: Optional[int] = None
    started_at: float = field(default_factory=time.time)

    @property
    def pid(self) -> int:
        return self.popen.pid

    def is_running(self) -> bool:
        return self.popen.poll() is None


class PipelineStage(Enum):
    """States of the build-run state machine, in execution order."""

    IDLE = "idle"
    PRE_BUILD = "pre_build"
    BUILDING = "building"
    POST_BUILD = "post_build"
    PRE_RUN = "pre_run"
    RESOLVING = "resolving"
    RESTARTING = "restarting"
    RUNNING = "running"


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    # Last stage that was entered.
    stage: PipelineStage
    completed: bool
    error: Optional[Exception] = None
    run_argv: Optional[Tuple[str, ...]] = None

    @property
    def aborted(self) -> bool:
        return not self.completed

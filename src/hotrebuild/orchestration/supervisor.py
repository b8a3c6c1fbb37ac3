"""
The build-run supervisor.

Every admitted change (and the initial start) runs the same pipeline:

    PRE_BUILD -> BUILDING -> POST_BUILD -> PRE_RUN -> RESOLVING -> RESTARTING -> RUNNING

A failing stage aborts the rest of the run. Recoverable failures (build
failure, a failing fail-fast hook, an unresolvable run command) leave the
previously started process running and the watch loop alive; fatal errors
propagate to the caller.
"""

import logging
import sys
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from ..models.config import EffectiveConfig
from ..models.runtime import PipelineResult, PipelineStage
from ..system.cargo import build_default_run_argv
from ..system.commands import format_argv, run_inherited
from ..system.terminal import clear_terminal
from ..validation import (
    BuildFailure,
    HookStageFailure,
    RecoverableError,
    ResolutionError,
    SpawnError,
    handle_error,
)
from .hooks import run_hooks, run_hooks_best_effort
from .process_manager import ProcessGroupManager

logger = logging.getLogger(__name__)


class BuildRunSupervisor:
    """
    Runs the hook/build/run pipeline and owns the running application.

    Args:
        config: The effective configuration
        process_manager: Owner of the managed process group
        command_runner: Runs one argv with inherited streams and returns its
            exit code (builds and hooks)
        run_argv_resolver: Produces the run argv when none is configured
        screen_clearer: Called before each spawn when ``config.clear`` is set
        shutdown_event: When set, no further stages or runs start
    """

    def __init__(
        self,
        config: EffectiveConfig,
        process_manager: Optional[ProcessGroupManager] = None,
        command_runner: Callable[[Sequence[str]], int] = run_inherited,
        run_argv_resolver: Callable[[EffectiveConfig], Sequence[str]] = build_default_run_argv,
        screen_clearer: Callable[[], None] = clear_terminal,
        shutdown_event: Optional[threading.Event] = None,
    ):
        self.config = config
        self.process_manager = process_manager or ProcessGroupManager()
        self._run_command = command_runner
        self._resolve_default_run_argv = run_argv_resolver
        self._clear_screen = screen_clearer
        self.shutdown_event = shutdown_event or threading.Event()

        self.stage = PipelineStage.IDLE
        self.run_count = 0
        self._run_argv: Optional[Tuple[str, ...]] = None

    def _stages(self) -> List[Tuple[PipelineStage, Callable[[], None]]]:
        return [
            (PipelineStage.PRE_BUILD, self._pre_build),
            (PipelineStage.BUILDING, self._build),
            (PipelineStage.POST_BUILD, self._post_build),
            (PipelineStage.PRE_RUN, self._pre_run),
            (PipelineStage.RESOLVING, self._resolve_run_argv),
            (PipelineStage.RESTARTING, self._restart),
            (PipelineStage.RUNNING, self._post_run),
        ]

    def run_pipeline(self) -> PipelineResult:
        """
        Execute one full pipeline run.

        Returns:
            The run's result; ``completed`` is False if a stage aborted it

        Raises:
            HookError: A fail-fast hook entry could not be executed
            SpawnError: The build command or the application could not be launched
        """
        self.run_count += 1
        self._run_argv = None
        logger.info(f"--- Pipeline run #{self.run_count} ---")

        for stage, action in self._stages():
            if self.shutdown_event.is_set():
                logger.info(f"Shutdown requested, stopping before {stage.value}")
                return self._abort(stage, None)

            self.stage = stage
            logger.debug(f"Entering stage: {stage.value}")
            try:
                action()
            except RecoverableError as e:
                handle_error(e, f"{stage.value} stage", severity=e.severity,
                             reraise=False, logger=logger)
                return self._abort(stage, e)

        return PipelineResult(stage=PipelineStage.RUNNING, completed=True, run_argv=self._run_argv)

    def _abort(self, stage: PipelineStage, error: Optional[Exception]) -> PipelineResult:
        # The previous process, if any, keeps running.
        self.stage = PipelineStage.RUNNING if self.process_manager.current else PipelineStage.IDLE
        return PipelineResult(stage=stage, completed=False, error=error)

    # --- Stages ---

    def _run_hook_stage(self, name: str, abort_message: str) -> None:
        if not run_hooks(name, self.config.hooks_for(name), runner=self._run_command):
            raise HookStageFailure(abort_message, stage=name)

    def _pre_build(self) -> None:
        self._run_hook_stage("pre_build", "pre_build failed; skipping build")

    def _build(self) -> None:
        argv = self.config.build
        logger.info(f"build: {format_argv(argv)}")
        try:
            returncode = self._run_command(argv)
        except OSError as e:
            raise SpawnError(f"build: {format_argv(argv)}: {e}", context="build") from e

        if returncode != 0:
            run_hooks_best_effort("on_build_fail", self.config.on_build_fail, runner=self._run_command)
            raise BuildFailure(f"build failed with exit code {returncode}; keeping existing process",
                               returncode=returncode, context="build")

    def _post_build(self) -> None:
        self._run_hook_stage("post_build", "post_build failed; keeping existing process")

    def _pre_run(self) -> None:
        self._run_hook_stage("pre_run", "pre_run failed; keeping existing process")

    def _resolve_run_argv(self) -> None:
        if self.config.run is not None:
            self._run_argv = tuple(self.config.run)
            return
        try:
            self._run_argv = tuple(self._resolve_default_run_argv(self.config))
        except OSError as e:
            raise ResolutionError(f"cannot determine run command: {e}", context="run") from e

    def _restart(self) -> None:
        before_spawn = self._clear_screen if self.config.clear else None
        self.process_manager.replace(self._run_argv, before_spawn=before_spawn)

    def _post_run(self) -> None:
        run_hooks_best_effort("post_run", self.config.post_run, runner=self._run_command)

    # --- Loop ---

    def watch(self, source, gate, poll_interval: float = 0.5) -> None:
        """
        Run the initial pipeline, then one pipeline per admitted change.

        Args:
            source: Change source with ``get(timeout)`` (see ``FileWatcher``)
            gate: ``EventGate`` deciding which notifications trigger a run
            poll_interval: Seconds between shutdown checks while idle

        Raises:
            WatchChannelError: If the change source fails terminally
        """
        self.run_pipeline()

        while not self.shutdown_event.is_set():
            event = source.get(timeout=poll_interval)
            if event is None:
                continue
            if not gate.should_trigger(event):
                continue
            self.run_pipeline()
            sys.stdout.flush()

    def shutdown(self) -> None:
        """Stop the managed process group."""
        self.shutdown_event.set()
        self.process_manager.kill()
        self.stage = PipelineStage.IDLE

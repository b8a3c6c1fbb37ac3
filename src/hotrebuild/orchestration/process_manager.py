"""
Process group management for the supervised application.

The application is started as the leader of a new process group (a new
session on POSIX) so that it and everything it spawns can be terminated as
one unit. The manager owns at most one ``ManagedProcess`` and replaces it
kill-first.
"""

import logging
import os
import signal
import subprocess
import threading
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import psutil

from ..config.defaults import SUPERVISED_ENV_VAR
from ..models.runtime import ManagedProcess
from ..system.commands import format_argv
from ..validation import SpawnError

logger = logging.getLogger(__name__)

_IS_POSIX = os.name == "posix"
_SIGKILL = getattr(signal, "SIGKILL", signal.SIGTERM)


class TerminationTimeouts:
    """Seconds to wait in each termination phase."""
    GRACEFUL = 3.0
    FORCE = 2.0


def is_already_supervised(environ: Mapping[str, str]) -> bool:
    """True if ``environ`` carries the marker set for supervised processes."""
    return SUPERVISED_ENV_VAR in environ


def supervised_environment(extra: Optional[Mapping[str, str]] = None,
                           base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Environment for a managed process: ``base`` + ``extra`` + the marker."""
    env = dict(os.environ if base is None else base)
    if extra:
        env.update(extra)
    env[SUPERVISED_ENV_VAR] = "1"
    return env


class ProcessGroupManager:
    """
    Owns the single running application instance.

    All access to the tracked handle goes through a lock, so a replace is
    observed as one step: the old group is gone before the new handle is
    installed.
    """

    def __init__(self, graceful_timeout: float = TerminationTimeouts.GRACEFUL,
                 force_timeout: float = TerminationTimeouts.FORCE):
        self.graceful_timeout = graceful_timeout
        self.force_timeout = force_timeout
        self._current: Optional[ManagedProcess] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[ManagedProcess]:
        with self._lock:
            return self._current

    def spawn(self, argv: Sequence[str], env: Optional[Mapping[str, str]] = None) -> ManagedProcess:
        """
        Launch ``argv`` as the root of a new process group.

        The handle is returned but not tracked; use ``replace`` to install it.

        Raises:
            SpawnError: If argv is empty or the program cannot be launched
        """
        if not argv:
            raise SpawnError("run command argv cannot be empty", context="run")

        logger.info(f"run: {format_argv(argv)}")
        kwargs = {}
        if _IS_POSIX:
            kwargs["start_new_session"] = True
        else:
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP

        try:
            popen = subprocess.Popen(list(argv), env=supervised_environment(env), **kwargs)
        except OSError as e:
            raise SpawnError(f"run: {format_argv(argv)}: {e}", context="run") from e

        # New session: the leader's pid is the group id.
        pgid = popen.pid if _IS_POSIX else None
        logger.info(f"Started process group with PID: {popen.pid}")
        return ManagedProcess(popen=popen, argv=tuple(argv), pgid=pgid)

    def kill(self, handle: Optional[ManagedProcess] = None) -> None:
        """
        Terminate a process group and wait for it.

        Without ``handle`` the tracked process is killed; no-op if none.
        """
        with self._lock:
            if handle is None or handle is self._current:
                handle, self._current = self._current, None
            if handle is not None:
                self.terminate(handle)

    def replace(self, argv: Sequence[str], env: Optional[Mapping[str, str]] = None,
                before_spawn: Optional[Callable[[], None]] = None) -> ManagedProcess:
        """
        Kill the tracked process (if any), then spawn and track ``argv``.

        Args:
            argv: Command for the new process
            env: Extra environment variables
            before_spawn: Called after the old group is gone and before the
                new one starts (e.g. to clear the screen)

        Raises:
            SpawnError: If the new process cannot be launched; nothing is
                tracked afterwards
        """
        with self._lock:
            if self._current is not None:
                logger.info("stopping previous process")
                self.terminate(self._current)
                self._current = None
            if before_spawn is not None:
                before_spawn()
            self._current = self.spawn(argv, env)
            return self._current

    # --- Termination ---

    def terminate(self, handle: ManagedProcess) -> None:
        """
        Terminate a process group and block until the leader is reaped.

        SIGTERM goes to the group first; whatever survives the grace period
        gets SIGKILL. Descendants that moved to another group are found
        through psutil beforehand and signalled individually.
        """
        popen = handle.popen
        descendants = self._collect_descendants(handle.pid)
        logger.debug(f"Terminating PID {handle.pid} with {len(descendants)} descendants")

        self._signal_group(handle, signal.SIGTERM)
        self._signal_processes(descendants, force=False)

        try:
            returncode = popen.wait(timeout=self.graceful_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"PID {handle.pid} did not exit after SIGTERM, killing")
            self._signal_group(handle, _SIGKILL)
            popen.kill()
            returncode = popen.wait()

        # The leader is reaped; make sure the rest of the tree is gone too.
        remaining = self._wait_for_termination(descendants, self.graceful_timeout)
        if self._group_alive(handle):
            self._signal_group(handle, _SIGKILL)
        if remaining:
            self._signal_processes(remaining, force=True)
            remaining = self._wait_for_termination(remaining, self.force_timeout)
            for process in remaining:
                logger.error(f"Stubborn process survived termination: PID {process.pid}")

        logger.info(f"Process {handle.pid} exited with code {returncode}")

    def _collect_descendants(self, pid: int) -> List[psutil.Process]:
        try:
            return psutil.Process(pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return []

    def _group_alive(self, handle: ManagedProcess) -> bool:
        """True if the process group still has members (POSIX only)."""
        if not _IS_POSIX or handle.pgid is None:
            return False
        try:
            os.killpg(handle.pgid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return False
        return True

    def _signal_group(self, handle: ManagedProcess, sig: int) -> None:
        if _IS_POSIX and handle.pgid is not None:
            try:
                os.killpg(handle.pgid, sig)
            except ProcessLookupError:
                pass
            except PermissionError:
                logger.debug(f"No permission to signal process group {handle.pgid}")
        elif handle.popen.poll() is None:
            if sig == signal.SIGTERM:
                handle.popen.terminate()
            else:
                handle.popen.kill()

    def _signal_processes(self, processes: List[psutil.Process], force: bool) -> None:
        for process in processes:
            try:
                if force:
                    process.kill()
                else:
                    process.terminate()
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                logger.warning(f"Access denied signalling PID {process.pid}")

    def _wait_for_termination(self, processes: List[psutil.Process],
                              timeout: float) -> List[psutil.Process]:
        """Wait for processes to exit and return those still alive."""
        if not processes:
            return []
        _, still_alive = psutil.wait_procs(processes, timeout=timeout)
        alive = []
        for process in still_alive:
            try:
                if process.status() != psutil.STATUS_ZOMBIE:
                    alive.append(process)
            except psutil.NoSuchProcess:
                continue
        return alive

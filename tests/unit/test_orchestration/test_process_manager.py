"""
Unit tests for process group termination signalling.

The process tree is mocked; the integration suite covers real processes.
"""

import signal
from unittest.mock import Mock, patch

import pytest

from hotrebuild.models.runtime import ManagedProcess
from hotrebuild.orchestration import process_manager
from hotrebuild.orchestration.process_manager import ProcessGroupManager

SIGKILL = process_manager._SIGKILL


def make_handle(pid: int = 4242) -> ManagedProcess:
    popen = Mock(pid=pid)
    popen.wait.return_value = 0
    return ManagedProcess(popen=popen, argv=("app",), pgid=pid)


class FakeKillpg:
    """Records signals sent to a group whose membership the test controls."""

    def __init__(self, members_after_leader: bool):
        self.members_after_leader = members_after_leader
        self.signals = []

    def __call__(self, pgid: int, sig: int) -> None:
        if sig == 0:
            if not self.members_after_leader:
                raise ProcessLookupError(pgid)
            return
        self.signals.append(sig)


@pytest.fixture
def manager():
    manager = ProcessGroupManager(graceful_timeout=0.1, force_timeout=0.1)
    with patch.object(manager, "_collect_descendants", return_value=[]):
        yield manager


@pytest.mark.unit
class TestTerminateSignalling:

    def test_empty_group_is_not_killed_after_leader_exits(self, manager):
        killpg = FakeKillpg(members_after_leader=False)

        with patch.object(process_manager, "_IS_POSIX", True), \
                patch.object(process_manager.os, "killpg", killpg, create=True):
            manager.terminate(make_handle())

        assert killpg.signals == [signal.SIGTERM]

    def test_surviving_group_members_are_killed(self, manager):
        killpg = FakeKillpg(members_after_leader=True)

        with patch.object(process_manager, "_IS_POSIX", True), \
                patch.object(process_manager.os, "killpg", killpg, create=True):
            manager.terminate(make_handle())

        assert killpg.signals == [signal.SIGTERM, SIGKILL]

    def test_leader_is_reaped(self, manager):
        handle = make_handle()

        with patch.object(process_manager, "_IS_POSIX", True), \
                patch.object(process_manager.os, "killpg", FakeKillpg(False), create=True):
            manager.terminate(handle)

        handle.popen.wait.assert_called_once_with(timeout=0.1)

"""
Unit tests for graceful shutdown signal handling.
"""

import logging
import signal
import threading

import pytest

from hotrebuild.orchestration import SignalHandler


@pytest.mark.unit
class TestSignalHandler:

    def test_signal_sets_shutdown_event(self):
        event = threading.Event()
        handler = SignalHandler(event)

        handler._handle_signal(signal.SIGINT, None)

        assert event.is_set()

    def test_second_signal_warns(self, caplog):
        event = threading.Event()
        handler = SignalHandler(event)
        handler._handle_signal(signal.SIGTERM, None)

        with caplog.at_level(logging.WARNING):
            handler._handle_signal(signal.SIGTERM, None)

        assert "Shutdown already in progress" in caplog.text

    def test_context_manager_restores_handlers(self):
        original = signal.getsignal(signal.SIGINT)

        with SignalHandler(threading.Event()) as handler:
            assert signal.getsignal(signal.SIGINT) == handler._handle_signal

        assert signal.getsignal(signal.SIGINT) == original

    def test_setup_outside_main_thread_is_tolerated(self, caplog):
        handler = SignalHandler(threading.Event())
        thread = threading.Thread(target=handler.setup_signal_handlers)

        thread.start()
        thread.join()

        assert not handler._signal_handlers_set
        assert "Failed to set up signal handlers" in caplog.text

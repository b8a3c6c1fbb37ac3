"""
Signal handling for graceful shutdown.

SIGINT and SIGTERM set the supervisor's shutdown event instead of raising
inside whatever subprocess wait happens to be running. The watch loop then
exits and the CLI kills the managed process group.
"""

import logging
import signal
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class SignalHandler:
    """Routes SIGINT/SIGTERM to a shutdown event and restores prior handlers."""

    def __init__(self, shutdown_event: threading.Event):
        self.shutdown_event = shutdown_event
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def _handle_signal(self, signum: int, frame: Optional[object]) -> None:
        if self.shutdown_event.is_set():
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.info(f"Signal {signal.Signals(signum).name} received. Initiating graceful shutdown...")
        self.shutdown_event.set()

    def setup_signal_handlers(self) -> None:
        """Install the handlers; must be called from the main thread."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._handle_signal)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._handle_signal)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up")
        except ValueError as e:
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if not self._signal_handlers_set:
            return
        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def __enter__(self) -> "SignalHandler":
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup_signal_handlers()

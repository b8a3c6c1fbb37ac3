"""
Debounce gate for change notifications.

The gate keeps one timestamp, ``last_trigger``. A notification arriving less
than one debounce window after ``last_trigger`` is dropped unseen. Otherwise
the timestamp advances to "now" *before* the notification's paths are
checked, so an irrelevant notification still uses up the window. A relevant
change arriving shortly after an irrelevant one can therefore be dropped.
"""

import logging
import time
from typing import Callable, Optional

from ..models.runtime import ChangeEvent
from ..validation import ErrorSeverity, WatchChannelError, handle_error
from .filters import PathFilter

logger = logging.getLogger(__name__)


class EventGate:
    """
    Decides, per notification, whether to trigger a pipeline run.

    Args:
        debounce: Window length in seconds
        path_filter: Ignore/relevance filter for the notification's paths
        clock: Monotonic time source, injectable for tests
    """

    def __init__(self, debounce: float, path_filter: PathFilter,
                 clock: Callable[[], float] = time.monotonic):
        self.debounce = debounce
        self.path_filter = path_filter
        self._clock = clock
        self.last_trigger = clock() - debounce
        # The first notification passes regardless of float rounding above.
        self._primed = False

    def passes_time_gate(self, now: Optional[float] = None) -> bool:
        """
        Time check only. Advances ``last_trigger`` when the window has elapsed.
        """
        now = self._clock() if now is None else now
        if self._primed and now - self.last_trigger < self.debounce:
            return False
        self._primed = True
        self.last_trigger = now
        return True

    def should_trigger(self, event: ChangeEvent) -> bool:
        """Return True if ``event`` should start a pipeline run."""
        if not self.passes_time_gate():
            logger.debug(f"Debounced change: {[str(p) for p in event.paths]}")
            return False

        if event.is_error:
            handle_error(
                WatchChannelError(str(event.error), context="watch"),
                context="watch notification",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return False

        if not self.path_filter.matches(event.paths):
            return False

        logger.info(f"Change detected: {', '.join(str(p) for p in event.paths)}")
        return True

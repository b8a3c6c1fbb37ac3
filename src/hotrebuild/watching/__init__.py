"""
Change detection for the supervisor.

- filters: ignore-pattern and extension relevance checks
- event_gate: the debounce gate in front of the supervisor
- watcher: watchdog-based producer of change notifications
"""

from .event_gate import EventGate
from .filters import (
    PathFilter,
    compile_ignore_spec,
    expand_braces,
    is_relevant_path,
    normalize_extension,
)
from .watcher import ChangeQueueHandler, FileWatcher

__all__ = [
    "EventGate",
    "PathFilter",
    "compile_ignore_spec",
    "expand_braces",
    "is_relevant_path",
    "normalize_extension",
    "ChangeQueueHandler",
    "FileWatcher",
]

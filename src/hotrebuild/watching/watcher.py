"""
Filesystem watching on top of watchdog.

The watchdog observer thread is the single producer: every filesystem event
becomes a ``ChangeEvent`` on a queue that the supervisor's main thread
consumes. Directory roots are watched recursively; file roots (such as
``Cargo.toml``) are watched through their parent directory, restricted to
the named files.
"""

import logging
import os
import queue
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..models.runtime import ChangeEvent
from ..validation import ConfigError, WatchChannelError

logger = logging.getLogger(__name__)

# Access notifications that do not change anything on disk.
_NON_CHANGE_EVENTS = frozenset({"opened", "closed_no_write"})


class ChangeQueueHandler(FileSystemEventHandler):
    """
    Forwards watchdog events to a queue as ``ChangeEvent`` objects.

    Args:
        event_queue: Destination queue
        only_names: If given, only events touching these file names are
            forwarded (used for single-file roots)
    """

    def __init__(self, event_queue: "queue.Queue[ChangeEvent]",
                 only_names: Optional[Set[str]] = None):
        super().__init__()
        self.event_queue = event_queue
        self.only_names = only_names

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _NON_CHANGE_EVENTS:
            return

        paths = [Path(os.fsdecode(event.src_path))]
        dest_path = getattr(event, "dest_path", None)
        if dest_path:
            paths.append(Path(os.fsdecode(dest_path)))

        if self.only_names is not None:
            paths = [p for p in paths if p.name in self.only_names]
            if not paths:
                return

        self.event_queue.put(ChangeEvent(paths=tuple(paths), kind=event.event_type))


class FileWatcher:
    """
    Watches a set of roots and exposes their changes as a queue.

    Args:
        roots: Files or directories to watch
        event_queue: Queue to publish on (a new one if omitted)
        observer: watchdog observer, injectable for tests
    """

    def __init__(self, roots: Iterable[Path],
                 event_queue: Optional["queue.Queue[ChangeEvent]"] = None,
                 observer=None):
        self.roots = [Path(r) for r in roots]
        self.event_queue = event_queue if event_queue is not None else queue.Queue()
        self.observer = observer if observer is not None else Observer()
        self.watched: List[Path] = []
        self._started = False

    def _schedule(self) -> None:
        file_roots: Dict[Path, Set[str]] = defaultdict(set)

        for root in self.roots:
            if not root.exists():
                logger.warning(f"watch path missing (skipped): {root}")
                continue
            if root.is_dir():
                self.observer.schedule(ChangeQueueHandler(self.event_queue), str(root), recursive=True)
                logger.info(f"Watching directory: {root}")
            else:
                parent = root.parent if str(root.parent) else Path(".")
                file_roots[parent].add(root.name)
                logger.info(f"Watching file: {root}")
            self.watched.append(root)

        for parent, names in file_roots.items():
            handler = ChangeQueueHandler(self.event_queue, only_names=names)
            self.observer.schedule(handler, str(parent), recursive=False)

        if not self.watched:
            raise ConfigError("no watch paths exist",
                              field_name="watch", value=[str(r) for r in self.roots])

    def start(self) -> None:
        """
        Schedule every existing root and start the observer thread.

        Raises:
            ConfigError: If none of the roots exists
            WatchChannelError: If the observer cannot be started
        """
        self._schedule()
        try:
            self.observer.start()
        except OSError as e:
            raise WatchChannelError(f"cannot start filesystem watcher: {e}", context="watch") from e
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self.observer.stop()
        self.observer.join(timeout=5.0)
        self._started = False
        logger.debug("Filesystem watcher stopped")

    def is_alive(self) -> bool:
        return self._started and self.observer.is_alive()

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """
        Return the next change, or None if ``timeout`` elapses first.

        Raises:
            WatchChannelError: If the observer thread has died
        """
        try:
            return self.event_queue.get(timeout=timeout)
        except queue.Empty:
            if self._started and not self.observer.is_alive():
                raise WatchChannelError("filesystem watcher thread terminated", context="watch recv")
            return None

    def __enter__(self) -> "FileWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

"""
File system watch source.

Uses the watchdog library to monitor the watched root recursively. The
observer thread only enqueues raw events; a single consumer drains the
queue in arrival order through EventSource iteration.
"""

import queue
import threading
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from filecourier.errors import FatalConfigError, SourceError
from filecourier.watchers.filter import RawItem


class QueueEventHandler(FileSystemEventHandler):
    """Watchdog handler that forwards every raw event to a FIFO queue."""

    def __init__(self, events: "queue.Queue[RawItem]"):
        super().__init__()
        self.events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        self.events.put(event)


class EventSource:
    """Iterable stream of raw events for one recursively watched root."""

    def __init__(
        self,
        watch_root: Path,
        poll_interval: float = 1.0,
        observer: Optional[Observer] = None,
    ):
        """
        Initialize event source.

        Args:
            watch_root: Canonical directory to watch
            poll_interval: Seconds between checks for shutdown while idle
            observer: Observer to use, defaults to the platform's best one
        """
        self.watch_root = watch_root
        self.poll_interval = poll_interval
        self.events: "queue.Queue[RawItem]" = queue.Queue()
        self.handler = QueueEventHandler(self.events)
        self.observer = observer if observer is not None else Observer()
        self._closed = threading.Event()

    def start(self) -> None:
        """
        Start watching.

        Raises:
            FatalConfigError: the watch could not be established
        """
        try:
            self.observer.schedule(self.handler, str(self.watch_root), recursive=True)
            self.observer.start()
        except OSError as e:
            raise FatalConfigError(f"cannot watch {self.watch_root}: {e}") from e

        logger.info(f"Watching {self.watch_root} using {type(self.observer).__name__}")

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Make iteration end at the next poll. Safe to call from a signal handler."""
        self._closed.set()

    def stop(self) -> None:
        """Close the stream and stop the observer."""
        self.close()
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        logger.info("File system observer stopped")

    def _watch_failure(self) -> Optional[str]:
        """Describe a dead watch thread, or None while everything runs."""
        if not self.observer.is_alive():
            return "watch observer stopped unexpectedly"

        # each emitter reads the OS notifications on its own thread and
        # dies on its first error while the observer keeps running
        for emitter in getattr(self.observer, "emitters", ()):
            if not emitter.is_alive():
                return f"watch emitter for {emitter.watch.path} stopped unexpectedly"

        return None

    def __iter__(self) -> Iterator[RawItem]:
        while not self._closed.is_set():
            try:
                item = self.events.get(timeout=self.poll_interval)
            except queue.Empty:
                if self._closed.is_set():
                    return
                failure = self._watch_failure()
                if failure is not None:
                    yield SourceError(failure)
                    return
                continue

            yield item

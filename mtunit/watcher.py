"""Watch mode: regenerate the aggregate file whenever the Test folder changes."""

from __future__ import annotations

import os
import queue
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from .compiler import SuiteCompiler
from .config import MTUnitConfig, load_config
from .errors import MissingInputError, MTUnitError
from .logging import get_logger
from .models import WatchSet
from .scanner import find_test_files

_MEMBERSHIP_EVENTS = {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}

logger = get_logger("watcher")


class _QueueingHandler(FileSystemEventHandler):
    """Forwards every notification into the loop's event channel."""

    def __init__(self, events: "queue.Queue[FileSystemEvent]") -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._events.put(event)


class WatchLoop:
    """Keeps MTUnitAllTests in sync with the Test folder.

    ``start`` subscribes to the test directory (Idle -> Watching). ``run``
    then receives notifications one at a time and runs the pipeline to
    completion before receiving the next, until ``stop_event`` is set.
    Files are added to the watch set as they appear and never removed;
    events for files that vanished are ignored.
    """

    def __init__(
        self,
        root: str | Path,
        compiler: SuiteCompiler | None = None,
        *,
        config: MTUnitConfig | None = None,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.config = config or load_config(self.root)
        self.compiler = compiler or SuiteCompiler()
        self.events: "queue.Queue[FileSystemEvent]" = queue.Queue()
        self.watch_set: Optional[WatchSet] = None
        self._observer_factory = observer_factory
        self._observer: Optional[BaseObserver] = None

    @property
    def watching(self) -> bool:
        return self._observer is not None

    def start(self) -> WatchSet:
        """Subscribe to the test directory and the test files it holds."""
        if self.watch_set is not None and self._observer is not None:
            return self.watch_set

        directory = self.config.test_dir
        if not directory.is_dir():
            raise MissingInputError(f"Test directory not found: {directory}")

        self.watch_set = WatchSet(directory=directory)
        self._track_new_files(self.watch_set)

        observer = self._observer_factory()
        observer.schedule(_QueueingHandler(self.events), str(directory), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Watching Directory: %s", directory)
        return self.watch_set

    def stop(self) -> None:
        """Unsubscribe and return to Idle."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join()
        logger.info("Stopped watching %s", self.config.test_dir)

    def run(
        self,
        stop_event: threading.Event | None = None,
        poll_interval: float | None = None,
    ) -> None:
        """Receive and dispatch notifications until ``stop_event`` is set."""
        stop_event = stop_event or threading.Event()
        interval = poll_interval or self.config.watch.poll_interval
        self.start()
        try:
            while not stop_event.is_set():
                try:
                    event = self.events.get(timeout=interval)
                except queue.Empty:
                    continue
                self.handle(event)
        finally:
            self.stop()

    def handle(self, event: FileSystemEvent) -> bool:
        """Dispatch one notification; return True when the pipeline was run."""
        watch_set = self.watch_set
        if watch_set is None:
            raise RuntimeError("WatchLoop.start() must be called before handling events")

        path = Path(os.fsdecode(event.src_path))
        if _is_membership_change(event, path, watch_set.directory):
            added = self._track_new_files(watch_set)
            for new_file in added:
                logger.debug("Now watching %s", new_file)
            return self._run_pipeline()

        if event.event_type == EVENT_TYPE_MODIFIED and path in watch_set:
            if not path.exists():
                logger.debug("Ignoring change for vanished file %s", path)
                return False
            return self._run_pipeline()

        return False

    def _track_new_files(self, watch_set: WatchSet) -> list[Path]:
        directory = watch_set.directory
        try:
            names = find_test_files(directory, self.config.paths.file_pattern)
        except MissingInputError as exc:
            logger.error("%s", exc)
            return []
        return [
            directory / name for name in names if watch_set.add(directory / name)
        ]

    def _run_pipeline(self) -> bool:
        try:
            self.compiler.run(self.root, config=self.config)
        except MTUnitError as exc:
            logger.error("Error regenerating %s: %s", self.config.paths.output_name, exc)
        return True


def _is_membership_change(event: FileSystemEvent, path: Path, directory: Path) -> bool:
    if event.event_type in _MEMBERSHIP_EVENTS:
        return True
    return (
        event.event_type == EVENT_TYPE_MODIFIED
        and event.is_directory
        and path == directory
    )


__all__ = ["WatchLoop"]

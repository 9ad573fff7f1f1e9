"""A file watcher notifying of relevant changes in the watched paths."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Iterable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# access events carry no change
_IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


def _real(path: Any) -> str:
    return os.path.realpath(os.fsdecode(path))


class _Handler(FileSystemEventHandler):
    def __init__(self, watcher: Watcher, only: Optional[str] = None) -> None:
        super().__init__()
        self._watcher = watcher
        self._only = only

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._watcher._on_event(event, self._only)


class Watcher:
    """Watches paths and lets callers wait for a relevant change.

    The ignorer, when given, must have an `excludes_all_pathbufs(paths)` method
    telling whether all the changed paths are to be ignored.
    """

    def __init__(self, paths_to_watch: Iterable[Path], ignorer: Any = None) -> None:
        paths = [Path(p) for p in paths_to_watch]
        logger.info("watcher on %r", paths)
        self._ignorer = ignorer
        self._changed = threading.Event()
        self._observer = Observer()
        try:
            for path in paths:
                if not path.exists():
                    logger.warning("watch path doesn't exist: %s", path)
                    continue
                if path.is_dir():
                    logger.debug("add watch dir %s", path)
                    self._observer.schedule(_Handler(self), str(path), recursive=True)
                elif path.is_file():
                    logger.debug("add watch file %s", path)
                    handler = _Handler(self, only=_real(path))
                    self._observer.schedule(handler, str(path.absolute().parent), recursive=False)
            self._observer.start()
        except Exception:
            self._observer.unschedule_all()
            raise

    def _on_event(self, event: FileSystemEvent, only: Optional[str]) -> None:
        if event.event_type in _IGNORED_EVENT_TYPES:
            logger.debug("ignoring access event: %r", event)
            return
        if event.is_directory and event.event_type == "modified":
            logger.debug("ignoring directory metadata change")
            return
        raw_paths = [event.src_path, getattr(event, "dest_path", "")]
        paths = [Path(os.fsdecode(p)) for p in raw_paths if p]
        if only is not None and not any(_real(p) == only for p in paths):
            return
        logger.info("notify event: %r", event)
        if self._ignorer is not None:
            try:
                if self._ignorer.excludes_all_pathbufs(paths):
                    logger.debug("all excluded")
                    return
            except Exception as e:  # the ignorer's failure mustn't hide changes
                logger.warning("exclusion check failed: %s", e)
        self._changed.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for a change; return whether one happened before the timeout."""
        changed = self._changed.wait(timeout)
        if changed:
            self._changed.clear()
        return changed

    def stop(self) -> None:
        """Stop watching."""
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join()

    def __enter__(self) -> Watcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
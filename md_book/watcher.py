"""Forward filesystem changes from watchdog observers to the orchestrator."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from md_book.orchestrator import RebuildOrchestrator

logger = logging.getLogger(__name__)

RELEVANT_EVENT_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}
)


def _as_text(path: str | bytes) -> str:
    return path.decode() if isinstance(path, bytes) else path


class ChangeHandler(FileSystemEventHandler):
    """Pass content-changing events to a callback, skipping ignored trees.

    Open and close notifications are dropped so a build reading its own
    sources does not schedule another build.
    """

    def __init__(
        self,
        notify: cabc.Callable[[Path], None],
        ignore: cabc.Sequence[Path] = (),
    ) -> None:
        super().__init__()
        self.notify = notify
        self.ignore = tuple(path.resolve() for path in ignore)

    def is_ignored(self, path: Path) -> bool:
        """Return ``True`` when ``path`` lies under an ignored directory."""
        resolved = path.resolve()
        return any(resolved.is_relative_to(root) for root in self.ignore)

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Forward relevant events whose path is not ignored."""
        if event.event_type not in RELEVANT_EVENT_TYPES:
            return
        path = Path(_as_text(event.src_path))
        if self.is_ignored(path):
            return
        self.notify(path)


class ChangeWatcher:
    """Watch source directories recursively and feed the rebuild queue."""

    def __init__(
        self, paths: cabc.Sequence[Path], *, ignore: cabc.Sequence[Path] = ()
    ) -> None:
        self.paths = [path for path in paths if path.is_dir()]
        self.ignore = tuple(ignore)
        self.observer: typ.Any = None

    async def start(self, orchestrator: RebuildOrchestrator) -> None:
        """Schedule observers, then run the debounce loop until cancelled.

        Raises
        ------
        OSError
            If an observer cannot be registered for a watched path.
        """
        handler = ChangeHandler(orchestrator.notify_change, self.ignore)
        observer = Observer()
        for path in self.paths:
            observer.schedule(handler, str(path), recursive=True)
            logger.info("Watching %s for changes", path)
        observer.start()
        self.observer = observer
        try:
            await orchestrator.debounce_loop()
        finally:
            observer.stop()
            observer.join()


__all__ = ["ChangeHandler", "ChangeWatcher", "RELEVANT_EVENT_TYPES"]

"""Drive the initial build and the optional watch/serve loop.

The orchestrator owns the rebuild lifecycle. Watching and serving are
capability objects (:class:`Service`) chosen at startup; with none selected
:meth:`RebuildOrchestrator.run` performs a single build and returns.

Change notifications arrive from watcher threads through
:meth:`RebuildOrchestrator.notify_change`. The debounce loop drains them once
per interval and runs at most one rebuild per drained batch, in a worker
thread so the event loop keeps serving requests. A successful rebuild
publishes a reload to every live-reload subscriber.

Example
-------
>>> from md_book.orchestrator import RebuildOrchestrator
>>> orchestrator = RebuildOrchestrator(builder.run)  # doctest: +SKIP
>>> orchestrator.run()  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import enum
import logging
import typing as typ

from md_book._constants import DEFAULT_DEBOUNCE_SECONDS, RELOAD_MESSAGE
from md_book.errors import MdBookError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from md_book.generator.models import BuildResult

logger = logging.getLogger(__name__)


class BuildState(enum.Enum):
    """Lifecycle states of the orchestrator."""

    IDLE = "idle"
    BUILDING = "building"
    WATCHING = "watching"
    TERMINATED = "terminated"


class Service(typ.Protocol):
    """Long-running capability started alongside the debounce loop."""

    async def start(self, orchestrator: RebuildOrchestrator) -> None:
        """Run until cancelled."""
        ...


class ReloadBroadcaster:
    """Fan out reload messages to every connected subscriber.

    Publishing is fire-and-forget: with no subscribers the message is dropped,
    and each subscriber receives messages through its own unbounded queue.
    """

    def __init__(self) -> None:
        self._subscribers: set[asyncio.Queue[str]] = set()

    @property
    def subscriber_count(self) -> int:
        """Return the number of connected subscribers."""
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[str]:
        """Register and return a new subscriber queue."""
        queue: asyncio.Queue[str] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[str]) -> None:
        """Remove ``queue``; unknown queues are ignored."""
        self._subscribers.discard(queue)

    def publish(self, message: str = RELOAD_MESSAGE) -> int:
        """Queue ``message`` for every subscriber and return how many got it."""
        for queue in self._subscribers:
            queue.put_nowait(message)
        return len(self._subscribers)


class RebuildOrchestrator:
    """Coordinate builds, change notifications, and reload broadcasts."""

    def __init__(
        self,
        build: cabc.Callable[[], BuildResult],
        *,
        services: cabc.Sequence[Service] = (),
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        """Initialize the orchestrator.

        Parameters
        ----------
        build : Callable[[], BuildResult]
            Performs one complete build pass; usually ``BookBuilder.run``.
        services : Sequence[Service], optional
            Watch and serve capabilities to run after the initial build.
        debounce : float, optional
            Seconds between change-queue drains.
        """
        self.build = build
        self.services = tuple(services)
        self.debounce = debounce
        self.state = BuildState.IDLE
        self.broadcaster = ReloadBroadcaster()
        self.last_result: BuildResult | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._changes: asyncio.Queue[Path] | None = None

    def initial_build(self) -> BuildResult:
        """Run the first build synchronously; any failure propagates."""
        self.state = BuildState.BUILDING
        try:
            result = self.build()
        except BaseException:
            self.state = BuildState.TERMINATED
            raise
        self.last_result = result
        self.state = BuildState.IDLE
        return result

    def run(self) -> None:
        """Build once, then run the configured services until interrupted."""
        if self.state is BuildState.IDLE and self.last_result is None:
            self.initial_build()
        if not self.services:
            self.state = BuildState.TERMINATED
            return
        try:
            asyncio.run(self.serve_forever())
        finally:
            self.state = BuildState.TERMINATED

    async def serve_forever(self) -> None:
        """Start every service concurrently on the running loop."""
        self.bind_loop()
        self.state = BuildState.WATCHING
        await asyncio.gather(*(service.start(self) for service in self.services))

    def bind_loop(self) -> None:
        """Attach the change queue to the currently running event loop."""
        self._loop = asyncio.get_running_loop()
        self._changes = asyncio.Queue()

    def notify_change(self, path: Path) -> None:
        """Record a filesystem change; safe to call from any thread."""
        if self._loop is None or self._changes is None:
            logger.debug("Ignoring change to %s before the loop started", path)
            return
        self._loop.call_soon_threadsafe(self._changes.put_nowait, path)

    async def tick(self) -> bool:
        """Drain pending changes and rebuild once if any arrived.

        Returns
        -------
        bool
            ``True`` when a rebuild was attempted.
        """
        if self._changes is None:
            return False
        changed: list[Path] = []
        while not self._changes.empty():
            changed.append(self._changes.get_nowait())
        if not changed:
            return False
        logger.info("Change detected in %s", changed[0])
        await self.rebuild()
        return True

    async def rebuild(self) -> bool:
        """Run one rebuild in a worker thread, logging failures.

        Returns
        -------
        bool
            ``True`` when the rebuild succeeded and a reload was published.
        """
        self.state = BuildState.BUILDING
        logger.info("Rebuilding")
        try:
            result = await asyncio.to_thread(self.build)
        except (MdBookError, OSError) as exc:
            logger.error("Rebuild failed: %s", exc)  # noqa: TRY400
            return False
        except Exception:
            logger.exception("Rebuild failed unexpectedly")
            return False
        finally:
            self.state = BuildState.WATCHING
        self.last_result = result
        delivered = self.broadcaster.publish(RELOAD_MESSAGE)
        logger.debug("Reload sent to %d clients", delivered)
        return True

    async def debounce_loop(self) -> None:
        """Drain the change queue every ``debounce`` seconds until cancelled."""
        if self._changes is None:
            self.bind_loop()
        while True:
            await asyncio.sleep(self.debounce)
            await self.tick()


__all__ = ["BuildState", "RebuildOrchestrator", "ReloadBroadcaster", "Service"]

"""Serve the generated site over HTTP with a live-reload WebSocket.

Requests map onto files under the output directory. Directory requests
resolve to their ``index.html``; unknown paths fall back to the root
``index.html`` so client-side links still land somewhere useful. Paths that
resolve outside the output directory are rejected with 404.

Browsers connect to ``/live-reload`` and receive a ``"reload"`` text frame
after every successful rebuild.
"""

from __future__ import annotations

import asyncio
import logging
import typing as typ

from aiohttp import web

from md_book._constants import DEFAULT_PORT, INDEX_OUTPUT, LIVE_RELOAD_ROUTE
from md_book.orchestrator import ReloadBroadcaster

if typ.TYPE_CHECKING:
    from pathlib import Path

    from md_book.orchestrator import RebuildOrchestrator

logger = logging.getLogger(__name__)

BROADCASTER_KEY = web.AppKey("broadcaster", ReloadBroadcaster)


def resolve_request_path(root: Path, tail: str) -> Path | None:
    """Return the file serving ``tail`` under ``root``, or ``None`` for 404.

    Parameters
    ----------
    root : Path
        Resolved output directory.
    tail : str
        Request path without the leading slash.
    """
    candidate = (root / tail).resolve()
    if not candidate.is_relative_to(root):
        return None
    if candidate.is_dir():
        candidate /= INDEX_OUTPUT
    if candidate.is_file():
        return candidate
    fallback = root / INDEX_OUTPUT
    return fallback if fallback.is_file() else None


async def _forward(queue: asyncio.Queue[str], ws: web.WebSocketResponse) -> None:
    while True:
        message = await queue.get()
        try:
            await ws.send_str(message)
        except ConnectionResetError:
            return


async def _live_reload(request: web.Request) -> web.WebSocketResponse:
    broadcaster = request.app[BROADCASTER_KEY]
    ws = web.WebSocketResponse()
    # Subscribe before the handshake completes so no reload is missed.
    queue = broadcaster.subscribe()
    try:
        await ws.prepare(request)
        sender = asyncio.create_task(_forward(queue, ws))
        try:
            async for _message in ws:
                pass
        finally:
            sender.cancel()
    finally:
        broadcaster.unsubscribe(queue)
    return ws


class LiveReloadServer:
    """aiohttp application serving ``output_dir`` on ``host:port``."""

    def __init__(
        self,
        output_dir: Path,
        *,
        port: int = DEFAULT_PORT,
        host: str = "127.0.0.1",
    ) -> None:
        self.output_dir = output_dir
        self.port = port
        self.host = host

    async def _serve_file(self, request: web.Request) -> web.StreamResponse:
        root = self.output_dir.resolve()
        path = resolve_request_path(root, request.match_info["tail"])
        if path is None:
            raise web.HTTPNotFound
        return web.FileResponse(path)

    def build_app(self, broadcaster: ReloadBroadcaster) -> web.Application:
        """Return the aiohttp application wired to ``broadcaster``."""
        app = web.Application()
        app[BROADCASTER_KEY] = broadcaster
        app.router.add_get(LIVE_RELOAD_ROUTE, _live_reload)
        app.router.add_get("/{tail:.*}", self._serve_file)
        return app

    async def start(self, orchestrator: RebuildOrchestrator) -> None:
        """Bind the listener and serve until cancelled.

        Raises
        ------
        OSError
            If the address cannot be bound.
        """
        runner = web.AppRunner(self.build_app(orchestrator.broadcaster))
        await runner.setup()
        try:
            site = web.TCPSite(runner, self.host, self.port)
            await site.start()
            logger.info(
                "Serving %s at http://%s:%d", self.output_dir, self.host, self.port
            )
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()


__all__ = ["BROADCASTER_KEY", "LiveReloadServer", "resolve_request_path"]

"""Tests for forwarding watchdog events into rebuild notifications."""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

from watchdog.events import (
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from md_book.generator.models import BuildResult
from md_book.orchestrator import RebuildOrchestrator
from md_book.watcher import ChangeHandler, ChangeWatcher


def test_handler_forwards_content_changes(tmp_path: Path) -> None:
    seen: list[Path] = []
    handler = ChangeHandler(seen.append)
    source = tmp_path / "page.md"
    handler.dispatch(FileModifiedEvent(str(source)))
    handler.dispatch(FileCreatedEvent(str(source)))
    handler.dispatch(FileDeletedEvent(str(source)))
    handler.dispatch(FileMovedEvent(str(source), str(tmp_path / "renamed.md")))
    assert seen == [source, source, source, source]


def test_handler_ignores_close_events(tmp_path: Path) -> None:
    seen: list[Path] = []
    handler = ChangeHandler(seen.append)
    handler.dispatch(FileClosedEvent(str(tmp_path / "page.md")))
    assert seen == []


def test_handler_ignores_output_tree(tmp_path: Path) -> None:
    seen: list[Path] = []
    output = tmp_path / "book"
    output.mkdir()
    handler = ChangeHandler(seen.append, ignore=[output])
    handler.dispatch(FileModifiedEvent(str(output / "index.html")))
    handler.dispatch(FileModifiedEvent(str(tmp_path / "src" / "a.md")))
    assert seen == [tmp_path / "src" / "a.md"]


def test_watcher_skips_missing_directories(tmp_path: Path) -> None:
    watcher = ChangeWatcher([tmp_path, tmp_path / "missing"])
    assert watcher.paths == [tmp_path]


def test_watcher_triggers_rebuild_on_file_change(tmp_path: Path) -> None:
    source = tmp_path / "src"
    source.mkdir()
    builds: list[int] = []

    def build() -> BuildResult:
        builds.append(1)
        return BuildResult(written=[], index_path=tmp_path / "index.html", page_count=0)

    orchestrator = RebuildOrchestrator(build, debounce=0.05)
    watcher = ChangeWatcher([source])

    async def scenario() -> None:
        orchestrator.bind_loop()
        task = asyncio.create_task(watcher.start(orchestrator))
        for _ in range(100):
            await asyncio.sleep(0.05)
            if watcher.observer is not None and watcher.observer.is_alive():
                break
        (source / "new.md").write_text("# New\n", encoding="utf-8")
        for _ in range(100):
            await asyncio.sleep(0.05)
            if builds:
                break
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert builds
    assert not watcher.observer.is_alive()

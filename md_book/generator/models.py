"""Shared dataclasses used by the book generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path, PurePosixPath


@dc.dataclass(frozen=True, slots=True)
class PageInfo:
    """Navigation entry for one generated page.

    Attributes
    ----------
    title : str
        Title from the first level-one heading, the file stem, or ``"Untitled"``.
    path : str
        Site-root relative URL with a leading ``/`` and ``.html`` suffix.
    """

    title: str
    path: str


@dc.dataclass(frozen=True, slots=True)
class SourcePage:
    """A collected Markdown file and the navigation entry derived from it.

    Attributes
    ----------
    source : Path
        Absolute or input-relative filesystem path of the Markdown file.
    relative : PurePosixPath
        Path relative to the input root, used for output placement and grouping.
    text : str
        Raw Markdown source.
    info : PageInfo
        Title and output URL for navigation.
    """

    source: Path
    relative: PurePosixPath
    text: str
    info: PageInfo

    @property
    def output_relative(self) -> PurePosixPath:
        """Return the output path relative to the output root."""
        return self.relative.with_suffix(".html")

    @property
    def section_key(self) -> str:
        """Return the immediate parent directory, ``""`` for root pages."""
        parent = self.relative.parent.as_posix()
        return "" if parent == "." else parent


@dc.dataclass(slots=True)
class Section:
    """Named group of pages shown in the sidebar."""

    title: str
    pages: list[PageInfo]


@dc.dataclass(slots=True)
class PageData:
    """Template payload for a single rendered page.

    Attributes
    ----------
    title : str
        Page title.
    content : str
        Rendered HTML body.
    sections : list[Section]
        Full navigation tree, shared by every page in the pass.
    previous : PageInfo | None
        Preceding page in the global order.
    next : PageInfo | None
        Following page in the global order.
    meta : dict[str, Any]
        Parsed front matter, empty when absent.
    """

    title: str
    content: str
    sections: list[Section]
    previous: PageInfo | None
    next: PageInfo | None
    meta: dict[str, typ.Any] = dc.field(default_factory=dict)


@dc.dataclass(slots=True)
class BuildResult:
    """Summary of a completed build pass."""

    written: list[Path]
    index_path: Path
    page_count: int


__all__ = ["BuildResult", "PageData", "PageInfo", "Section", "SourcePage"]

r"""Collect Markdown sources from the input tree.

The collector walks the input directory recursively, keeps ``.md`` files,
sorts them by path so navigation is deterministic between runs, and derives a
:class:`~md_book.generator.models.PageInfo` for each one.

Example
-------
>>> from md_book.generator.collector import extract_title
>>> extract_title("# Getting Started\nBody")
'Getting Started'
>>> extract_title("## Only a subheading") is None
True
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from md_book._constants import HTML_SUFFIX, MARKDOWN_SUFFIX, UNTITLED
from md_book.errors import InputError
from md_book.generator.models import PageInfo, SourcePage

logger = logging.getLogger(__name__)


def extract_title(markdown_text: str) -> str | None:
    """Return the text of the first line starting with ``# ``, if any."""
    for line in markdown_text.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    return None


def _fallback_title(path: Path) -> str:
    return path.stem or UNTITLED


def collect_pages(input_dir: Path) -> list[SourcePage]:
    """Return every Markdown page under ``input_dir`` sorted by path.

    Parameters
    ----------
    input_dir : Path
        Root of the Markdown source tree.

    Returns
    -------
    list[SourcePage]
        Collected pages in sorted path order.

    Raises
    ------
    InputError
        If ``input_dir`` does not exist or a file cannot be read as UTF-8.
    """
    if not input_dir.is_dir():
        msg = f"Input directory '{input_dir}' does not exist or is not a directory."
        raise InputError(msg)

    sources = sorted(
        path
        for path in input_dir.rglob("*")
        if path.suffix == MARKDOWN_SUFFIX and path.is_file()
    )

    pages: list[SourcePage] = []
    for source in sources:
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read '{source}': {exc}"
            raise InputError(msg) from exc
        relative = PurePosixPath(source.relative_to(input_dir).as_posix())
        info = PageInfo(
            title=extract_title(text) or _fallback_title(source),
            path=f"/{relative.with_suffix(HTML_SUFFIX).as_posix()}",
        )
        pages.append(SourcePage(source=source, relative=relative, text=text, info=info))

    logger.debug("Collected %d markdown files from %s", len(pages), input_dir)
    return pages


__all__ = ["collect_pages", "extract_title"]

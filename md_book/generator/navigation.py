"""Assemble sidebar sections and previous/next links for collected pages.

Sections are keyed by each page's immediate parent directory, so
``chapter1/sub/page.md`` lands in a ``chapter1/sub`` section rather than
``chapter1``. Root-level pages form a leading ``Guide`` section. Previous and
next links follow the single global page order, so they can cross section
boundaries.
"""

from __future__ import annotations

import typing as typ

from md_book._constants import ROOT_SECTION_TITLE
from md_book.generator.models import PageInfo, Section

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from md_book.generator.models import SourcePage


def build_sections(pages: cabc.Sequence[SourcePage]) -> list[Section]:
    """Group pages by parent directory into ordered navigation sections.

    Parameters
    ----------
    pages : Sequence[SourcePage]
        Pages in global sorted order.

    Returns
    -------
    list[Section]
        The ``Guide`` section first (when root pages exist), then one section
        per distinct parent directory in sorted key order. Page order within a
        section follows the input order.
    """
    root_pages: list[PageInfo] = []
    buckets: dict[str, list[PageInfo]] = {}
    for page in pages:
        key = page.section_key
        if key:
            buckets.setdefault(key, []).append(page.info)
        else:
            root_pages.append(page.info)

    sections: list[Section] = []
    if root_pages:
        sections.append(Section(title=ROOT_SECTION_TITLE, pages=root_pages))
    sections.extend(Section(title=key, pages=buckets[key]) for key in sorted(buckets))
    return sections


def neighbours(
    pages: cabc.Sequence[SourcePage], index: int
) -> tuple[PageInfo | None, PageInfo | None]:
    """Return the previous and next page entries for ``pages[index]``."""
    previous = pages[index - 1].info if index > 0 else None
    following = pages[index + 1].info if index + 1 < len(pages) else None
    return previous, following


__all__ = ["build_sections", "neighbours"]

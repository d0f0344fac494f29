"""Exception hierarchy shared by the md-book build pipeline.

Every fatal condition raised by the builder derives from :class:`MdBookError`
so the CLI can report it as a single ``Error: ...`` line and exit non-zero.
Search indexing failures live in :mod:`md_book.search` and are never allowed
to escape a build.
"""

from __future__ import annotations


class MdBookError(RuntimeError):
    """Base class for errors that abort a build pass."""


class InputError(MdBookError):
    """Raised when the input tree is missing or a source file is unreadable."""


class RenderError(MdBookError):
    """Raised when Markdown conversion, templating, or a page write fails."""


class AssetError(MdBookError):
    """Raised when copying static assets into the output tree fails."""


__all__ = ["AssetError", "InputError", "MdBookError", "RenderError"]

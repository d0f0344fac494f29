"""Render the site root ``index.html``.

When the book has a root ``index.md`` its content becomes the landing page;
otherwise the template lists every section as a card. The index is written
after the regular pages so it replaces the page rendering of ``index.md``.
"""

from __future__ import annotations

import logging
import typing as typ

from md_book._constants import (
    FALLBACK_INDEX_TITLE,
    INDEX_OUTPUT,
    INDEX_PAGE_PATH,
    INDEX_TEMPLATE,
)
from md_book.errors import RenderError
from md_book.generator.templating import write_template

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

    from md_book.config.models import BookConfig
    from md_book.generator.models import Section, SourcePage
    from md_book.generator.renderer import HtmlContentRenderer

logger = logging.getLogger(__name__)


class IndexPageBuilder:
    """Write the landing page for a book."""

    def __init__(
        self, env: Environment, renderer: HtmlContentRenderer, config: BookConfig
    ) -> None:
        self.env = env
        self.renderer = renderer
        self.config = config

    def run(
        self,
        pages: cabc.Sequence[SourcePage],
        sections: list[Section],
        output_dir: Path,
        *,
        year: int,
        watch_enabled: bool = False,
    ) -> Path:
        """Render ``index.html`` into ``output_dir`` and return its path."""
        index_page = next(
            (page for page in pages if page.info.path == INDEX_PAGE_PATH), None
        )
        context: dict[str, typ.Any] = {
            "year": year,
            "config": self.config,
            "sections": sections,
            "current_path": INDEX_OUTPUT,
            "watch_enabled": watch_enabled,
        }
        if index_page is None:
            context |= {
                "has_index": False,
                "title": FALLBACK_INDEX_TITLE,
                "content": "",
            }
        else:
            try:
                content, _meta = self.renderer.render(index_page.text)
            except RenderError as exc:
                msg = f"Failed to render '{index_page.source}': {exc}"
                raise RenderError(msg) from exc
            context |= {
                "has_index": True,
                "title": index_page.info.title,
                "content": content,
            }
        path = write_template(
            self.env, INDEX_TEMPLATE, context, output_dir / INDEX_OUTPUT
        )
        logger.debug("Wrote index page %s (has_index=%s)", path, context["has_index"])
        return path


__all__ = ["IndexPageBuilder"]

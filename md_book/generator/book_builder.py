"""High-level orchestration for one book build pass.

:class:`BookBuilder` collects the Markdown tree, assembles navigation,
renders every page through the shared templates, writes the landing page and
redirects, publishes static assets, and finally triggers search indexing.
Each call to :meth:`BookBuilder.run` re-derives everything from disk.

Example
-------
>>> from pathlib import Path
>>> from md_book.config import load_config
>>> from md_book.generator import BookBuilder
>>> builder = BookBuilder(load_config(), Path("docs"), Path("book"))  # doctest: +SKIP
>>> builder.run().page_count  # doctest: +SKIP
12
"""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ
from pathlib import Path

from md_book._constants import PAGE_TEMPLATE
from md_book.errors import RenderError
from md_book.generator.assets import publish_static_assets
from md_book.generator.collector import collect_pages
from md_book.generator.index_page import IndexPageBuilder
from md_book.generator.models import BuildResult, PageData
from md_book.generator.navigation import build_sections, neighbours
from md_book.generator.redirects import write_redirects
from md_book.generator.renderer import HtmlContentRenderer
from md_book.generator.templating import build_environment, write_template
from md_book.search import run_search_index

if typ.TYPE_CHECKING:
    from jinja2 import Environment

    from md_book.config.models import BookConfig
    from md_book.generator.models import Section, SourcePage

logger = logging.getLogger(__name__)


class BookBuilder:
    """Render a Markdown tree into a static HTML site."""

    def __init__(
        self,
        config: BookConfig,
        input_dir: Path,
        output_dir: Path,
        *,
        watch_enabled: bool = False,
        year: int | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : BookConfig
            Loaded book configuration.
        input_dir : Path
            Root of the Markdown sources.
        output_dir : Path
            Destination for the generated site; created if missing.
        watch_enabled : bool, optional
            Inject the live-reload client into every page.
        year : int, optional
            Copyright year shown in the footer; defaults to the current UTC
            year. Fixing it makes repeated builds byte-identical.
        templates_dir : Path, optional
            Template and asset overrides; defaults to ``config.paths.templates``.
        """
        self.config = config
        self.input_dir = input_dir
        self.output_dir = output_dir
        self.watch_enabled = watch_enabled
        self.year = year
        self.templates_dir = templates_dir or Path(config.paths.templates)

    @property
    def watch_paths(self) -> list[Path]:
        """Return the directories whose changes should trigger a rebuild."""
        paths = [self.input_dir]
        if self.templates_dir.is_dir():
            paths.append(self.templates_dir)
        return paths

    def run(self) -> BuildResult:
        """Perform one complete build pass.

        Returns
        -------
        BuildResult
            Written paths (pages first, then redirects, then the index), the
            index path, and the number of Markdown pages.

        Raises
        ------
        InputError
            If the input tree is missing or a source cannot be read.
        RenderError
            If conversion, templating, or a write fails.
        AssetError
            If static assets cannot be copied.
        ConfigError
            If the configured Pygments style is unknown.
        """
        pages = collect_pages(self.input_dir)
        year = self.year or dt.datetime.now(dt.UTC).year
        renderer = HtmlContentRenderer(self.config)
        env = build_environment(self.templates_dir)

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Failed to create output directory '{self.output_dir}': {exc}"
            raise RenderError(msg) from exc
        publish_static_assets(self.templates_dir, self.output_dir, renderer)

        sections = build_sections(pages)
        written = [
            self._render_page(env, renderer, pages, index, sections, year)
            for index in range(len(pages))
        ]
        written.extend(
            write_redirects(env, self.config.output.html.redirect, self.output_dir)
        )
        index_path = IndexPageBuilder(env, renderer, self.config).run(
            pages,
            sections,
            self.output_dir,
            year=year,
            watch_enabled=self.watch_enabled,
        )
        written.append(index_path)
        logger.info("Generated %d pages into %s", len(pages), self.output_dir)

        run_search_index(self.output_dir, self.config.output.html.search)
        return BuildResult(
            written=written, index_path=index_path, page_count=len(pages)
        )

    def _render_page(
        self,
        env: Environment,
        renderer: HtmlContentRenderer,
        pages: list[SourcePage],
        index: int,
        sections: list[Section],
        year: int,
    ) -> Path:
        page = pages[index]
        try:
            content, meta = renderer.render(page.text)
        except RenderError as exc:
            msg = f"Failed to render '{page.source}': {exc}"
            raise RenderError(msg) from exc
        previous, following = neighbours(pages, index)
        data = PageData(
            title=page.info.title,
            content=content,
            sections=sections,
            previous=previous,
            next=following,
            meta=meta,
        )
        context = {
            "year": year,
            "page": data,
            "config": self.config,
            "current_path": page.output_relative.as_posix(),
            "watch_enabled": self.watch_enabled,
        }
        output_path = self.output_dir / page.output_relative
        return write_template(env, PAGE_TEMPLATE, context, output_path)


__all__ = ["BookBuilder"]

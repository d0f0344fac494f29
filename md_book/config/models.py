"""Typed dataclasses describing md-book configuration structures."""

from __future__ import annotations

import dataclasses as dc

from md_book.errors import MdBookError

MARKDOWN_FORMATS = frozenset({"markdown", "gfm", "mdx"})


class ConfigError(MdBookError, ValueError):
    """Raised when the book configuration is invalid or cannot be read."""


@dc.dataclass(slots=True)
class BookMetadata:
    """Descriptive metadata shown in page headers and the landing page."""

    title: str = ""
    description: str | None = None
    authors: list[str] = dc.field(default_factory=list)
    language: str = "en"
    base_url: str | None = None
    logo: str = "/img/default_logo.svg"


@dc.dataclass(slots=True)
class MarkdownConfig:
    """Markdown dialect selection.

    Attributes
    ----------
    format : str
        One of ``"markdown"``, ``"gfm"`` or ``"mdx"``.
    frontmatter : bool
        Strip and parse a leading ``---`` YAML block before conversion.
    """

    format: str = "markdown"
    frontmatter: bool = False


@dc.dataclass(slots=True)
class RustConfig:
    """Rust playground settings exposed to templates."""

    edition: str = "2021"


@dc.dataclass(slots=True)
class PlaygroundConfig:
    """Code playground affordances for highlighted blocks."""

    editable: bool = False
    line_numbers: bool = False


@dc.dataclass(slots=True)
class SearchConfig:
    """Search indexing switch plus tuning values handed to the search UI."""

    enable: bool = True
    indexer: str = "pagefind"
    limit_results: int = 20
    use_boolean_and: bool = False
    boost_title: int = 2
    boost_hierarchy: int = 2
    boost_paragraph: int = 1
    expand: bool = False
    heading_split_level: int = 2


@dc.dataclass(slots=True)
class HtmlOutputConfig:
    """HTML output flags."""

    mathjax_support: bool = False
    allow_html: bool = False
    syntax_highlighting: bool = True
    pygments_style: str = "solarized-light"
    playground: PlaygroundConfig = dc.field(default_factory=PlaygroundConfig)
    search: SearchConfig = dc.field(default_factory=SearchConfig)
    redirect: dict[str, str] = dc.field(default_factory=dict)


@dc.dataclass(slots=True)
class OutputConfig:
    """Container for per-renderer output settings."""

    html: HtmlOutputConfig = dc.field(default_factory=HtmlOutputConfig)


@dc.dataclass(slots=True)
class PathsConfig:
    """Filesystem locations used by the build."""

    templates: str = "templates"


@dc.dataclass(slots=True)
class BookConfig:
    """Fully layered configuration for one build invocation."""

    book: BookMetadata = dc.field(default_factory=BookMetadata)
    markdown: MarkdownConfig = dc.field(default_factory=MarkdownConfig)
    rust: RustConfig = dc.field(default_factory=RustConfig)
    output: OutputConfig = dc.field(default_factory=OutputConfig)
    paths: PathsConfig = dc.field(default_factory=PathsConfig)


__all__ = [
    "MARKDOWN_FORMATS",
    "BookConfig",
    "BookMetadata",
    "ConfigError",
    "HtmlOutputConfig",
    "MarkdownConfig",
    "OutputConfig",
    "PathsConfig",
    "PlaygroundConfig",
    "RustConfig",
    "SearchConfig",
]

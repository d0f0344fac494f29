"""Load and validate layered configuration for md-book builds.

This subpackage reads ``book.toml`` from the working directory, an optional
explicit TOML or JSON override, and ``MDBOOK_``-prefixed environment
variables, then produces strongly typed dataclasses (:class:`BookConfig` and
its nested sections) that the build pipeline consumes read-only. The primary
entry point is :func:`load_config`.

Examples
--------
>>> from pathlib import Path
>>> from md_book.config import load_config
>>> config = load_config(Path("book.toml"))  # doctest: +SKIP
>>> config.output.html.search.limit_results  # doctest: +SKIP
20
"""

from .loader import DEFAULT_CONFIG_FILENAME, load_config
from .models import (
    MARKDOWN_FORMATS,
    BookConfig,
    BookMetadata,
    ConfigError,
    HtmlOutputConfig,
    MarkdownConfig,
    OutputConfig,
    PathsConfig,
    PlaygroundConfig,
    RustConfig,
    SearchConfig,
)

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
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
    "load_config",
]

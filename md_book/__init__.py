"""Render a directory of Markdown files into a navigable static HTML book.

This package exposes the ``md-book`` console script along with the builder
and configuration loader it is made of.

Exports
-------
- ``app``: Cyclopts application behind the console script.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``BookBuilder``: One-shot build of a Markdown tree into HTML.
- ``load_config``: Layered ``book.toml``/JSON/environment configuration.

Examples
--------
>>> from md_book import main
>>> main(["--input", "docs", "--output", "book"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .config import load_config
from .generator import BookBuilder

__version__ = "0.1.0"

__all__ = ["BookBuilder", "__version__", "app", "load_config", "main"]

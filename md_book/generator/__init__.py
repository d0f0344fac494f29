"""Utilities for collecting, rendering, and publishing md-book pages."""

from .book_builder import BookBuilder
from .code_blocks import CodeBlockExtension
from .collector import collect_pages, extract_title
from .index_page import IndexPageBuilder
from .models import BuildResult, PageData, PageInfo, Section, SourcePage
from .navigation import build_sections, neighbours
from .renderer import HtmlContentRenderer

__all__ = [
    "BookBuilder",
    "BuildResult",
    "CodeBlockExtension",
    "HtmlContentRenderer",
    "IndexPageBuilder",
    "PageData",
    "PageInfo",
    "Section",
    "SourcePage",
    "build_sections",
    "collect_pages",
    "extract_title",
    "neighbours",
]

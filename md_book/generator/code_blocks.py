"""Splice syntax-highlighted HTML in place of fenced code blocks."""

from __future__ import annotations

import re
import typing as typ

from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

if typ.TYPE_CHECKING:
    from markdown import Markdown

    from md_book.generator.renderer import HtmlContentRenderer
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    HtmlContentRenderer = typ.Any

FENCED_BLOCK_PATTERN = re.compile(
    r"(?P<fence>^(?:~{3,}|`{3,}))[ ]*\.?(?P<lang>[\w#.+-]*)[^\n]*\n"
    r"(?P<code>.*?)(?<=\n)(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)


class CodeBlockExtension(Extension):
    """Replace fenced code blocks with output from :class:`HtmlContentRenderer`.

    Text between blocks is left untouched for the regular Markdown pipeline;
    each block is rendered by the renderer's ``code_block`` and stored in the
    HTML stash so later stages (including raw HTML escaping) never see it.
    """

    def __init__(self, renderer: HtmlContentRenderer) -> None:
        super().__init__()
        self.renderer = renderer

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the fenced block preprocessor ahead of ``html_block``."""
        md.registerExtension(self)
        processor = CodeBlockPreprocessor(md, self.renderer)
        md.preprocessors.register(processor, "md_book_code_blocks", 25)


class CodeBlockPreprocessor(Preprocessor):
    """Swap each fenced block for a stash placeholder."""

    def __init__(self, md: Markdown, renderer: HtmlContentRenderer) -> None:
        super().__init__(md)
        self.renderer = renderer

    def run(self, lines: list[str]) -> list[str]:
        """Return ``lines`` with every fenced block replaced by a placeholder."""
        text = "\n".join(lines)
        while match := FENCED_BLOCK_PATTERN.search(text):
            code = match.group("code").removesuffix("\n")
            language = match.group("lang") or None
            html = self.renderer.code_block(code, language)
            placeholder = self.md.htmlStash.store(html)
            text = f"{text[: match.start()]}\n{placeholder}\n{text[match.end() :]}"
        return text.split("\n")


__all__ = ["FENCED_BLOCK_PATTERN", "CodeBlockExtension", "CodeBlockPreprocessor"]

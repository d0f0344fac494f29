"""Utilities for rendering markdown and syntax-highlighted code snippets."""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from md_book._constants import EDITABLE_MARKER
from md_book.config.models import ConfigError
from md_book.errors import RenderError
from md_book.generator.code_blocks import CodeBlockExtension
from md_book.generator.extensions import EscapeHtmlExtension, GfmExtension

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension

    from md_book.config.models import BookConfig
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any
    BookConfig = typ.Any

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')

_DIALECT_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "markdown": (),
    "gfm": ("tables",),
    "mdx": ("tables", "md_in_html", "attr_list"),
}


class HtmlContentRenderer:
    """Render markdown and code snippets according to a book configuration."""

    def __init__(self, config: BookConfig) -> None:
        """Initialize a renderer from ``config``.

        Parameters
        ----------
        config : BookConfig
            Loaded configuration; ``markdown`` selects the dialect and front
            matter handling, ``output.html`` the raw HTML policy and code
            highlighting options.

        Raises
        ------
        ConfigError
            If ``output.html.pygments_style`` names an unknown Pygments style.
        """
        html = config.output.html
        self.markdown_format = config.markdown.format
        self.frontmatter = config.markdown.frontmatter
        self.allow_html = html.allow_html
        self.syntax_highlighting = html.syntax_highlighting
        self.pygments_style = html.pygments_style
        try:
            self._formatter = HtmlFormatter(
                style=html.pygments_style,
                cssclass="codehilite",
                wrapcode=True,
                linenos="table" if html.playground.line_numbers else False,
            )
        except ClassNotFound as exc:
            msg = f"Unknown pygments style '{html.pygments_style}'"
            raise ConfigError(msg) from exc
        self._yaml = YAML(typ="safe")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def render(self, text: str) -> tuple[str, dict[str, typ.Any]]:
        """Render a page source into HTML and its front matter mapping.

        Raises
        ------
        RenderError
            If the front matter block is not valid YAML.
        """
        meta: dict[str, typ.Any] = {}
        if self.frontmatter:
            meta, text = self.split_frontmatter(text)
        return self.markdown(text), meta

    def split_frontmatter(self, text: str) -> tuple[dict[str, typ.Any], str]:
        """Separate a leading ``---`` block from the Markdown body."""
        match = FRONTMATTER_PATTERN.match(text)
        if match is None:
            return {}, text
        try:
            data = self._yaml.load(match.group(1))
        except YAMLError as exc:
            msg = f"Invalid front matter: {exc}"
            raise RenderError(msg) from exc
        body = text[match.end() :]
        if data is None:
            return {}, body
        if not isinstance(data, dict):
            msg = "Front matter must be a mapping"
            raise RenderError(msg)
        return data, body

    def markdown(self, text: str) -> str:
        """Render markdown into HTML using the configured extensions."""
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        md = Markdown(extensions=self._extensions(), output_format="html")
        return md.convert(normalized)

    def _extensions(self) -> list[Extension | str]:
        extensions: list[Extension | str] = ["sane_lists"]
        if self.syntax_highlighting:
            extensions.append(CodeBlockExtension(self))
        else:
            extensions.append("fenced_code")
        extensions.extend(_DIALECT_EXTENSIONS[self.markdown_format])
        if self.markdown_format == "gfm":
            extensions.append(GfmExtension())
        if not self.allow_html:
            extensions.append(EscapeHtmlExtension())
        return extensions

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails. ``mermaid`` blocks are emitted
            verbatim for client-side rendering, and ``rust`` blocks containing
            the editable marker gain an ``editable`` class.

        Returns
        -------
        str
            HTML containing the highlighted block with ``data-language``
            metadata applied.
        """
        lang = language or "text"
        if lang == "mermaid":
            return (
                '<pre class="code"><code class="language-mermaid">'
                f"{escape(code, quote=False)}</code></pre>"
            )
        classes = ["codehilite"]
        if lang == "rust" and EDITABLE_MARKER in code:
            code = f"{code}\n// {EDITABLE_MARKER}"
            classes.append("editable")
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang, " ".join(classes))

    @staticmethod
    def _attach_language_attribute(
        html: str, language: str, css_class: str = "codehilite"
    ) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)
        safe_class = escape(css_class, quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="{safe_class}" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = ["HtmlContentRenderer"]

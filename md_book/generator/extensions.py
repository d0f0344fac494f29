"""Python-Markdown extensions selecting the dialect and raw HTML handling."""

from __future__ import annotations

import re
import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.inlinepatterns import SimpleTagInlineProcessor
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

STRIKETHROUGH_PATTERN = r"(~{2})(.+?)~{2}"
TASK_ITEM_PATTERN = re.compile(r"^\[(?P<state>[ xX])\]\s+")


class EscapeHtmlExtension(Extension):
    """Escape raw HTML in the source instead of passing it through.

    Removing the ``html_block`` preprocessor and the inline ``html`` pattern
    leaves tags as ordinary text, which the serializer then escapes. Register
    this extension last so dialect extensions that replace ``html_block``
    (``md_in_html``) are covered too.
    """

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Deregister the raw HTML processors from ``md``."""
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)


class GfmExtension(Extension):
    """GitHub-flavoured additions missing from core Python-Markdown.

    Adds ``~~strikethrough~~`` and ``- [ ]`` / ``- [x]`` task list items.
    Tables come from the bundled ``tables`` extension.
    """

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the strikethrough pattern and task list treeprocessor."""
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_PATTERN, "del"),
            "md_book_strikethrough",
            175,
        )
        md.treeprocessors.register(
            TaskListTreeprocessor(md), "md_book_task_list", 15
        )


class TaskListTreeprocessor(Treeprocessor):
    """Turn list items starting with ``[ ]`` or ``[x]`` into checkboxes."""

    def run(self, root: Element) -> Element:
        """Rewrite task list markers in every ``li`` element under ``root``."""
        for item in root.iter("li"):
            target = item
            if not (item.text or "").strip() and len(item) and item[0].tag == "p":
                target = item[0]
            text = target.text or ""
            match = TASK_ITEM_PATTERN.match(text)
            if not match:
                continue
            checkbox = etree.Element(
                "input", {"type": "checkbox", "disabled": "disabled"}
            )
            if match.group("state") in "xX":
                checkbox.set("checked", "checked")
            checkbox.tail = " " + text[match.end() :]
            target.text = None
            target.insert(0, checkbox)
            item.set("class", "task-list-item")
        return root


__all__ = [
    "EscapeHtmlExtension",
    "GfmExtension",
    "TaskListTreeprocessor",
]

"""Utility helpers shared by the md-book configuration loader."""

from __future__ import annotations

import re
import typing as typ

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

ENV_PREFIX = "MDBOOK_"
ENV_NESTING = "__"
_INT_PATTERN = re.compile(r"^-?\d+$")
_TRUE_WORDS = frozenset({"true", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "no", "off"})


def _env_layer(
    environ: typ.Mapping[str, str], prefix: str = ENV_PREFIX
) -> dict[str, typ.Any]:
    """Return a nested mapping built from ``PREFIX_SECTION__KEY`` variables.

    Un-nested names such as ``MDBOOK_INPUT`` belong to the CLI and are skipped.
    Values stay strings; the typed getters convert them per field.
    """
    layer: dict[str, typ.Any] = {}
    for name, value in sorted(environ.items()):
        if not name.startswith(prefix):
            continue
        parts = [part.lower() for part in name[len(prefix) :].split(ENV_NESTING)]
        if len(parts) < 2 or not all(parts):
            continue
        target = layer
        for part in parts[:-1]:
            nested = target.setdefault(part, {})
            if not isinstance(nested, dict):
                nested = target[part] = {}
            target = nested
        target[parts[-1]] = value
    return layer


def _deep_merge(
    base: dict[str, typ.Any], override: typ.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Merge ``override`` into ``base`` in place, recursing into mappings."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, typ.Mapping):
            _deep_merge(current, value)
        elif isinstance(value, typ.Mapping):
            base[key] = _deep_merge({}, value)
        else:
            base[key] = value
    return base


def _table(payload: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the nested table ``key`` or an empty mapping when absent."""
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, typ.Mapping):
        msg = f"Configuration key '{key}' must be a table."
        raise ConfigError(msg)
    return value


def _as_bool(value: object, key: str) -> bool:
    """Return ``value`` as a bool, accepting environment words like ``on``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
    msg = f"Configuration key '{key}' must be a boolean, got {value!r}."
    raise ConfigError(msg)


def _as_int(value: object, key: str) -> int:
    """Return ``value`` as an int, accepting decimal strings."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_PATTERN.match(value.strip()):
        return int(value.strip())
    msg = f"Configuration key '{key}' must be an integer, got {value!r}."
    raise ConfigError(msg)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _authors(value: object) -> list[str]:
    """Normalize authors given as a list or a comma-separated string."""
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    if isinstance(value, list):
        return [str(name).strip() for name in value if str(name).strip()]
    msg = f"Configuration key 'book.authors' must be a list, got {value!r}."
    raise ConfigError(msg)


def _build_book_metadata(payload: typ.Mapping[str, typ.Any]) -> BookMetadata:
    base = BookMetadata()
    return BookMetadata(
        title=str(payload.get("title", base.title)),
        description=_optional_str(payload.get("description")),
        authors=_authors(payload.get("authors", base.authors)),
        language=str(payload.get("language", base.language)),
        base_url=_optional_str(payload.get("base_url")),
        logo=str(payload.get("logo", base.logo)),
    )


def _build_markdown_config(payload: typ.Mapping[str, typ.Any]) -> MarkdownConfig:
    base = MarkdownConfig()
    fmt = str(payload.get("format", base.format)).lower()
    if fmt not in MARKDOWN_FORMATS:
        known = ", ".join(sorted(MARKDOWN_FORMATS))
        msg = f"Unknown markdown format '{fmt}'. Expected one of: {known}."
        raise ConfigError(msg)
    return MarkdownConfig(
        format=fmt,
        frontmatter=_as_bool(
            payload.get("frontmatter", base.frontmatter), "markdown.frontmatter"
        ),
    )


def _build_search_config(payload: typ.Mapping[str, typ.Any]) -> SearchConfig:
    base = SearchConfig()
    prefix = "output.html.search"
    return SearchConfig(
        enable=_as_bool(payload.get("enable", base.enable), f"{prefix}.enable"),
        indexer=str(payload.get("indexer", base.indexer)),
        limit_results=_as_int(
            payload.get("limit_results", base.limit_results),
            f"{prefix}.limit_results",
        ),
        use_boolean_and=_as_bool(
            payload.get("use_boolean_and", base.use_boolean_and),
            f"{prefix}.use_boolean_and",
        ),
        boost_title=_as_int(
            payload.get("boost_title", base.boost_title), f"{prefix}.boost_title"
        ),
        boost_hierarchy=_as_int(
            payload.get("boost_hierarchy", base.boost_hierarchy),
            f"{prefix}.boost_hierarchy",
        ),
        boost_paragraph=_as_int(
            payload.get("boost_paragraph", base.boost_paragraph),
            f"{prefix}.boost_paragraph",
        ),
        expand=_as_bool(payload.get("expand", base.expand), f"{prefix}.expand"),
        heading_split_level=_as_int(
            payload.get("heading_split_level", base.heading_split_level),
            f"{prefix}.heading_split_level",
        ),
    )


def _build_html_config(payload: typ.Mapping[str, typ.Any]) -> HtmlOutputConfig:
    base = HtmlOutputConfig()
    playground_raw = _table(payload, "playground")
    base_playground = PlaygroundConfig()
    playground = PlaygroundConfig(
        editable=_as_bool(
            playground_raw.get("editable", base_playground.editable),
            "output.html.playground.editable",
        ),
        line_numbers=_as_bool(
            playground_raw.get("line_numbers", base_playground.line_numbers),
            "output.html.playground.line_numbers",
        ),
    )
    redirect = {
        str(source): str(target)
        for source, target in _table(payload, "redirect").items()
    }
    return HtmlOutputConfig(
        mathjax_support=_as_bool(
            payload.get("mathjax_support", base.mathjax_support),
            "output.html.mathjax_support",
        ),
        allow_html=_as_bool(
            payload.get("allow_html", base.allow_html), "output.html.allow_html"
        ),
        syntax_highlighting=_as_bool(
            payload.get("syntax_highlighting", base.syntax_highlighting),
            "output.html.syntax_highlighting",
        ),
        pygments_style=str(payload.get("pygments_style", base.pygments_style)),
        playground=playground,
        search=_build_search_config(_table(payload, "search")),
        redirect=redirect,
    )


def _build_book_config(raw: typ.Mapping[str, typ.Any]) -> BookConfig:
    """Build a BookConfig from a merged mapping, applying defaults."""
    output_raw = _table(raw, "output")
    return BookConfig(
        book=_build_book_metadata(_table(raw, "book")),
        markdown=_build_markdown_config(_table(raw, "markdown")),
        rust=RustConfig(
            edition=str(_table(raw, "rust").get("edition", RustConfig().edition))
        ),
        output=OutputConfig(html=_build_html_config(_table(output_raw, "html"))),
        paths=PathsConfig(
            templates=str(
                _table(raw, "paths").get("templates", PathsConfig().templates)
            )
        ),
    )


__all__ = [
    "ENV_NESTING",
    "ENV_PREFIX",
    "_as_bool",
    "_as_int",
    "_build_book_config",
    "_deep_merge",
    "_env_layer",
]

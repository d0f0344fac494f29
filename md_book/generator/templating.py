"""Jinja environment construction and template-to-file rendering."""

from __future__ import annotations

import typing as typ

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    TemplateError,
    select_autoescape,
)

from md_book._constants import PACKAGE_TEMPLATES_DIR
from md_book.errors import RenderError

if typ.TYPE_CHECKING:
    from pathlib import Path


def build_environment(templates_dir: Path | None = None) -> Environment:
    """Return a Jinja environment for one build pass.

    Templates in ``templates_dir`` shadow the bundled ones of the same name;
    anything missing falls through to ``md_book/templates``.
    """
    loaders = []
    if templates_dir is not None and templates_dir.is_dir():
        loaders.append(FileSystemLoader(str(templates_dir)))
    loaders.append(FileSystemLoader(str(PACKAGE_TEMPLATES_DIR)))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def write_template(
    env: Environment, template_name: str, context: dict[str, typ.Any], path: Path
) -> Path:
    """Render ``template_name`` with ``context`` and write the result to ``path``.

    Raises
    ------
    RenderError
        If the template cannot be loaded or rendered, or the file cannot be
        written.
    """
    try:
        html = env.get_template(template_name).render(**context)
    except TemplateError as exc:
        msg = f"Failed to render template '{template_name}' for '{path}': {exc}"
        raise RenderError(msg) from exc
    except Exception as exc:  # noqa: BLE001
        msg = (
            f"Failed to render template '{template_name}' for '{path}': "
            f"{type(exc).__name__}: {exc}"
        )
        raise RenderError(msg) from exc
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write '{path}': {exc}"
        raise RenderError(msg) from exc
    return path


__all__ = ["build_environment", "write_template"]

"""Publish static assets alongside the generated pages.

Bundled defaults ship in ``md_book/templates``; a book's own templates
directory is copied over them so local ``css``, ``js``, and ``img`` files win.
The web component scripts are always refreshed from the package copies.

Example
-------
>>> from pathlib import Path
>>> from md_book.generator.assets import publish_static_assets
>>> publish_static_assets(Path("templates"), Path("book"))  # doctest: +SKIP
[PosixPath('book/css/styles.css'), ...]
"""

from __future__ import annotations

import logging
import shutil
import typing as typ

from md_book._constants import (
    ASSET_DIRECTORIES,
    COMPONENT_SCRIPTS,
    COMPONENTS_DIR,
    PACKAGE_TEMPLATES_DIR,
    SYNTAX_STYLESHEET,
)
from md_book.errors import AssetError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from md_book.generator.renderer import HtmlContentRenderer

logger = logging.getLogger(__name__)


def _copy_tree(source_root: Path, target_root: Path) -> list[Path]:
    copied: list[Path] = []
    for source in sorted(source_root.rglob("*")):
        if not source.is_file():
            continue
        destination = target_root / source.relative_to(source_root)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as exc:
            msg = f"Failed to copy asset '{source}' to '{destination}': {exc}"
            raise AssetError(msg) from exc
        copied.append(destination)
    return copied


def _write_text(path: Path, text: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write asset '{path}': {exc}"
        raise AssetError(msg) from exc
    return path


def publish_static_assets(
    templates_dir: Path | None,
    output_dir: Path,
    renderer: HtmlContentRenderer | None = None,
) -> list[Path]:
    """Copy static assets into ``output_dir``.

    Parameters
    ----------
    templates_dir : Path, optional
        Book templates directory whose ``css``, ``js`` and ``img``
        subdirectories override the bundled defaults. Missing directories are
        skipped.
    output_dir : Path
        Root of the generated site.
    renderer : HtmlContentRenderer, optional
        When supplied with highlighting enabled, its Pygments stylesheet is
        written to ``css/syntax.css``.

    Returns
    -------
    list[Path]
        Every file written, in copy order.

    Raises
    ------
    AssetError
        If a directory cannot be created or a file cannot be copied.
    """
    written: list[Path] = []
    for name in ASSET_DIRECTORIES:
        target = output_dir / name
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Failed to create asset directory '{target}': {exc}"
            raise AssetError(msg) from exc
        sources = [PACKAGE_TEMPLATES_DIR / name]
        if templates_dir is not None:
            sources.append(templates_dir / name)
        for source_root in sources:
            if source_root.is_dir():
                written.extend(_copy_tree(source_root, target))

    bundled_components = PACKAGE_TEMPLATES_DIR / COMPONENTS_DIR
    for script in COMPONENT_SCRIPTS:
        text = (bundled_components / script).read_text(encoding="utf-8")
        written.append(_write_text(output_dir / COMPONENTS_DIR / script, text))

    if renderer is not None and renderer.syntax_highlighting:
        written.append(_write_text(output_dir / SYNTAX_STYLESHEET, renderer.stylesheet))

    logger.debug("Published %d static assets to %s", len(written), output_dir)
    return written


__all__ = ["publish_static_assets"]

"""Write meta-refresh pages for ``output.html.redirect`` entries.

Each key is an old site path and each value the URL it should forward to:

>>> redirect_target("/old/page.html")
PurePosixPath('old/page.html')
>>> redirect_target("/old/")
PurePosixPath('old/index.html')
"""

from __future__ import annotations

import typing as typ
from pathlib import PurePosixPath

from md_book._constants import INDEX_OUTPUT, REDIRECT_TEMPLATE
from md_book.errors import RenderError
from md_book.generator.templating import write_template

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment


def redirect_target(old_path: str) -> PurePosixPath:
    """Return the output-relative file that serves ``old_path``.

    Raises
    ------
    RenderError
        If the path is empty or would escape the output directory.
    """
    relative = PurePosixPath(old_path.lstrip("/"))
    if old_path.endswith("/") or relative == PurePosixPath("."):
        relative /= INDEX_OUTPUT
    if ".." in relative.parts:
        msg = f"Redirect source '{old_path}' escapes the output directory"
        raise RenderError(msg)
    return relative


def write_redirects(
    env: Environment, redirects: cabc.Mapping[str, str], output_dir: Path
) -> list[Path]:
    """Write one redirect page per mapping entry, sorted by source path."""
    written: list[Path] = []
    for old_path in sorted(redirects):
        target = output_dir / redirect_target(old_path)
        context = {"url": redirects[old_path]}
        written.append(write_template(env, REDIRECT_TEMPLATE, context, target))
    return written


__all__ = ["redirect_target", "write_redirects"]

"""Cyclopts CLI entrypoint for building md-book sites.

The ``md-book`` console script renders a directory of Markdown files into a
static HTML site. With ``--watch`` it rebuilds when sources or templates
change; with ``--serve`` it serves the output over HTTP and, combined with
``--watch``, pushes live-reload notifications to open browser tabs.

Examples
--------
Build once:

>>> from md_book.cli import main
>>> main(["--input", "docs", "--output", "book"])  # doctest: +SKIP

Serve with live reload on a custom port:

>>> main(
...     ["-i", "docs", "-o", "book", "--watch", "--serve", "--port", "8080"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter, validators

from ._constants import DEFAULT_PORT
from .config import load_config
from .errors import MdBookError
from .generator import BookBuilder
from .orchestrator import RebuildOrchestrator
from .server import LiveReloadServer
from .watcher import ChangeWatcher

if typ.TYPE_CHECKING:
    from .orchestrator import Service

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = App(
    name="md-book",
    help="Render a Markdown directory into a static HTML book.",
    config=cyclopts.config.Env("MDBOOK_", command=False),  # type: ignore[unknown-argument]
)

logger = logging.getLogger(__name__)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@app.default
def build(
    *,
    input_dir: typ.Annotated[
        Path,
        Parameter(
            name=["--input", "-i"],
            help="Directory containing the Markdown sources",
            env_var="MDBOOK_INPUT",
        ),
    ],
    output_dir: typ.Annotated[
        Path,
        Parameter(
            name=["--output", "-o"],
            help="Directory receiving the generated site",
            env_var="MDBOOK_OUTPUT",
        ),
    ],
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to a book.toml or JSON config", env_var="MDBOOK_CONFIG"),
    ] = None,
    watch: typ.Annotated[
        bool, Parameter(help="Rebuild when sources or templates change")
    ] = False,
    serve: typ.Annotated[
        bool, Parameter(help="Serve the output directory over HTTP")
    ] = False,
    port: typ.Annotated[
        int,
        Parameter(
            help="Port used by --serve",
            env_var="MDBOOK_PORT",
            validator=validators.Number(gte=0, lte=65535),
        ),
    ] = DEFAULT_PORT,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Build the book and optionally keep watching and serving it.

    Parameters
    ----------
    input_dir : Path
        Root of the Markdown tree.
    output_dir : Path
        Destination directory; created when missing.
    config : Path or None, optional
        Explicit configuration file layered over ``book.toml``.
    watch : bool, optional
        Rebuild on changes to the input and templates directories.
    serve : bool, optional
        Serve the output with a live-reload endpoint.
    port : int, optional
        Listening port for ``--serve``; must lie within 0-65535.
    verbose : bool, optional
        Log at debug level.

    Raises
    ------
    MdBookError
        If configuration loading or the initial build fails.

    Notes
    -----
    Pages embed the live-reload client (the templates' ``watch_enabled`` flag)
    only when both ``--watch`` and ``--serve`` are given: reloads are published
    after watched rebuilds, and only the server delivers them.
    """
    _configure_logging(verbose=verbose)
    book_config = load_config(config)
    builder = BookBuilder(
        book_config, input_dir, output_dir, watch_enabled=watch and serve
    )

    services: list[Service] = []
    if serve:
        services.append(LiveReloadServer(output_dir, port=port))
    if watch:
        services.append(ChangeWatcher(builder.watch_paths, ignore=(output_dir,)))

    orchestrator = RebuildOrchestrator(builder.run, services=services)
    result = orchestrator.initial_build()
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    orchestrator.run()


def main(argv: list[str] | None = None) -> None:
    """Invoke the Cyclopts application that powers the ``md-book`` command.

    Fatal build errors are reported as a single ``Error: ...`` line on stderr
    followed by exit status 1.

    Examples
    --------
    >>> main(["--input", "docs", "--output", "book"])  # doctest: +SKIP
    """
    try:
        app(argv)
    except (MdBookError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

"""Run the external search indexer over a generated site.

Indexing happens after every successful HTML pass. The indexer is an
external program (``pagefind`` by default) invoked as
``<binary> --site <output_dir>``. Nothing here is allowed to abort a build:
:func:`run_search_index` logs failures as warnings and returns.

Example
-------
>>> from pathlib import Path
>>> from md_book.search import SearchIndexer
>>> indexer = SearchIndexer.initialize(Path("book"))  # doctest: +SKIP
>>> indexer.run_index()  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import subprocess
import time
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from md_book.config.models import SearchConfig

logger = logging.getLogger(__name__)

INDEXER_CONFIG_FILENAMES = (
    "pagefind.toml",
    "pagefind.yml",
    "pagefind.yaml",
    "pagefind.json",
)


class SearchIndexError(RuntimeError):
    """Base class for search indexing failures."""


class SourceNotFoundError(SearchIndexError):
    """Raised when the site directory to index does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Source path does not exist: {path}")
        self.path = path


class MultipleConfigsError(SearchIndexError):
    """Raised when more than one indexer configuration file is present."""

    def __init__(self, files: list[str]) -> None:
        joined = ", ".join(files)
        super().__init__(
            f"Multiple config files found: {joined}. Please ensure only one exists"
        )
        self.files = files


class IndexingFailedError(SearchIndexError):
    """Raised when the indexer cannot be launched or exits non-zero."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Indexing failed: {detail}")
        self.detail = detail


@dc.dataclass(slots=True)
class SearchIndexer:
    """Invoke an external search indexer over a site directory."""

    site_dir: Path
    binary: str = "pagefind"

    @classmethod
    def initialize(
        cls,
        output_dir: Path,
        *,
        binary: str = "pagefind",
        config_dir: Path | None = None,
    ) -> SearchIndexer:
        """Validate the site directory and indexer configuration.

        Parameters
        ----------
        output_dir : Path
            Generated site to index.
        binary : str, optional
            Indexer executable name or path.
        config_dir : Path, optional
            Directory searched for indexer configuration files; defaults to
            the current working directory.

        Raises
        ------
        SourceNotFoundError
            If ``output_dir`` does not exist.
        MultipleConfigsError
            If more than one indexer configuration file is found.
        """
        if not output_dir.exists():
            raise SourceNotFoundError(output_dir)
        search_dir = config_dir or Path.cwd()
        found = [
            name for name in INDEXER_CONFIG_FILENAMES if (search_dir / name).is_file()
        ]
        if len(found) > 1:
            raise MultipleConfigsError(found)
        return cls(site_dir=output_dir, binary=binary)

    def run_index(self) -> None:
        """Run the indexer and log the elapsed time.

        Raises
        ------
        IndexingFailedError
            If the process cannot be started or exits with a non-zero status.
        """
        started = time.perf_counter()
        try:
            result = subprocess.run(  # noqa: S603
                [self.binary, "--site", str(self.site_dir)],
                check=False,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            detail = f"Failed to run {self.binary}: {exc}"
            raise IndexingFailedError(detail) from exc
        if result.returncode != 0:
            stderr = result.stderr.strip() or f"exit status {result.returncode}"
            detail = f"{self.binary} exited with status {result.returncode}: {stderr}"
            raise IndexingFailedError(detail)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("Search indexing completed in %.0fms", elapsed_ms)


def run_search_index(
    output_dir: Path,
    search: SearchConfig,
    *,
    config_dir: Path | None = None,
) -> bool:
    """Index ``output_dir`` when search is enabled, logging any failure.

    Returns
    -------
    bool
        ``True`` when the indexer ran successfully, ``False`` when search is
        disabled or indexing failed.
    """
    if not search.enable:
        logger.debug("Search indexing disabled")
        return False
    try:
        indexer = SearchIndexer.initialize(
            output_dir, binary=search.indexer, config_dir=config_dir
        )
        indexer.run_index()
    except SearchIndexError as exc:
        logger.warning("Search indexing skipped: %s", exc)
        return False
    return True


__all__ = [
    "INDEXER_CONFIG_FILENAMES",
    "IndexingFailedError",
    "MultipleConfigsError",
    "SearchIndexError",
    "SearchIndexer",
    "SourceNotFoundError",
    "run_search_index",
]

"""Behaviour tests for building a book from a small Markdown tree.

The scenarios in ``book_build.feature`` write ``a.md`` and ``sub/b.md`` into a
temporary source tree, run :class:`md_book.generator.BookBuilder`, and check
the generated pages, sidebar sections and previous/next links. A second
scenario swaps the search indexer for a stub executable that always fails and
asserts the build still completes.

Usage
-----
Run ``pytest tests/bdd/test_book_build.py -v``. No external indexer needs to
be installed; the failing indexer is a throwaway script using the current
interpreter.
"""

from __future__ import annotations

import logging
import stat
import sys
import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from md_book.config import load_config
from md_book.generator import BookBuilder

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "book_build.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {"environ": {"MDBOOK_OUTPUT__HTML__SEARCH__ENABLE": "false"}}


def _soup(scenario_state: dict[str, object], relative: str) -> BeautifulSoup:
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    html = (output_dir / relative).read_text(encoding="utf-8")
    return BeautifulSoup(html, "html.parser")


@given(
    parsers.parse(
        'a source tree with "{first}" titled "{first_title}" '
        'and "{second}" titled "{second_title}"'
    )
)
def given_source_tree(
    tmp_path: Path,
    scenario_state: dict[str, object],
    first: str,
    first_title: str,
    second: str,
    second_title: str,
) -> None:
    """Write two Markdown pages into a fresh source directory."""
    source = tmp_path / "src"
    for relative, title in ((first, first_title), (second, second_title)):
        path = source / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"# {title}\nBody of {title}.\n", encoding="utf-8")
    scenario_state["source_dir"] = source
    scenario_state["output_dir"] = tmp_path / "out"


@given("the search indexer always exits with an error")
def given_failing_indexer(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Point the indexer setting at a script that exits non-zero."""
    script = tmp_path / "broken-indexer"
    script.write_text(
        f"#!{sys.executable}\nimport sys\nsys.stderr.write('no site')\nsys.exit(2)\n",
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    environ = typ.cast("dict[str, str]", scenario_state["environ"])
    environ["MDBOOK_OUTPUT__HTML__SEARCH__ENABLE"] = "true"
    environ["MDBOOK_OUTPUT__HTML__SEARCH__INDEXER"] = str(script)


@when("I build the book")
def when_build(
    tmp_path: Path,
    scenario_state: dict[str, object],
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Run a full build pass with the scenario configuration."""
    environ = typ.cast("dict[str, str]", scenario_state["environ"])
    config = load_config(cwd=tmp_path, environ=environ)
    builder = BookBuilder(
        config,
        typ.cast("Path", scenario_state["source_dir"]),
        typ.cast("Path", scenario_state["output_dir"]),
        year=2024,
        templates_dir=tmp_path / "templates",
    )
    with caplog.at_level(logging.WARNING, logger="md_book.search"):
        scenario_state["result"] = builder.run()
    scenario_state["log"] = caplog.text


@then(
    parsers.parse('the output contains "{first}", "{second}" and "{third}"')
)
def then_output_contains(
    scenario_state: dict[str, object], first: str, second: str, third: str
) -> None:
    """Check each named file exists under the output directory."""
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    for relative in (first, second, third):
        assert (output_dir / relative).is_file(), f"missing {relative}"


@then(parsers.parse('the sidebar lists the sections "{first}" then "{second}"'))
def then_sidebar_sections(
    scenario_state: dict[str, object], first: str, second: str
) -> None:
    """Verify the sidebar section order on the first page."""
    soup = _soup(scenario_state, "a.html")
    titles = [node.get_text() for node in soup.select(".sidebar__title")]
    assert titles == [first, second]


@then(parsers.parse('"{page}" links forward to "{href}"'))
def then_next_link(scenario_state: dict[str, object], page: str, href: str) -> None:
    """Verify the page's next link and the absence of a previous link."""
    soup = _soup(scenario_state, page)
    link = soup.select_one("a[rel=next]")
    assert link is not None
    assert link["href"] == href
    assert soup.select_one("a[rel=prev]") is None


@then(parsers.parse('"{page}" links back to "{href}"'))
def then_previous_link(
    scenario_state: dict[str, object], page: str, href: str
) -> None:
    """Verify the page's previous link and the absence of a next link."""
    soup = _soup(scenario_state, page)
    link = soup.select_one("a[rel=prev]")
    assert link is not None
    assert link["href"] == href
    assert soup.select_one("a[rel=next]") is None


@then("a search indexing warning is logged")
def then_search_warning(scenario_state: dict[str, object]) -> None:
    """Confirm the indexer failure was reported rather than raised."""
    log = typ.cast("str", scenario_state["log"])
    assert "Search indexing skipped" in log
    assert "no site" in log

"""End-to-end tests for a full md-book build pass.

The fixtures write small Markdown trees into ``tmp_path`` and run
:class:`md_book.generator.BookBuilder` with search indexing disabled, then
inspect the written HTML with BeautifulSoup.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from md_book.config import load_config
from md_book.errors import InputError, RenderError
from md_book.generator import BookBuilder

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pytest_mock import MockerFixture

    from md_book.config import BookConfig

FIXED_YEAR = 2024


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


@pytest.fixture
def make_config(tmp_path: Path) -> cabc.Callable[..., BookConfig]:
    """Return a config factory with search indexing switched off."""

    def _make(**environ: str) -> BookConfig:
        merged = {"MDBOOK_OUTPUT__HTML__SEARCH__ENABLE": "false", **environ}
        return load_config(cwd=tmp_path, environ=merged)

    return _make


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    _write(root, "a.md", "# A\nHello from A.\n")
    _write(root, "sub/b.md", "# B\nHello from B.\n")
    return root


def _builder(
    config: BookConfig, source: Path, tmp_path: Path, **kwargs: typ.Any
) -> BookBuilder:
    return BookBuilder(
        config,
        source,
        tmp_path / "out",
        year=FIXED_YEAR,
        templates_dir=tmp_path / "templates",
        **kwargs,
    )


def test_two_page_book(make_config: typ.Any, source_dir: Path, tmp_path: Path) -> None:
    result = _builder(make_config(), source_dir, tmp_path).run()
    out = tmp_path / "out"

    assert result.page_count == 2
    assert (out / "a.html").is_file()
    assert (out / "sub" / "b.html").is_file()
    assert result.index_path == out / "index.html"

    page_a = _soup(out / "a.html")
    sections = [h.get_text() for h in page_a.select(".sidebar__title")]
    assert sections == ["Guide", "sub"]
    next_link = page_a.select_one("a[rel=next]")
    assert next_link is not None
    assert next_link["href"] == "/sub/b.html"
    assert page_a.select_one("a[rel=prev]") is None

    page_b = _soup(out / "sub" / "b.html")
    prev_link = page_b.select_one("a[rel=prev]")
    assert prev_link is not None
    assert prev_link["href"] == "/a.html"
    assert page_b.select_one("a[rel=next]") is None
    active = page_b.select_one(".sidebar a.active")
    assert active is not None
    assert active["href"] == "/sub/b.html"


def test_html_count_is_markdown_count_plus_index(
    make_config: typ.Any, tmp_path: Path
) -> None:
    root = tmp_path / "src"
    for name in ("one.md", "two.md", "deep/three.md", "deep/er/four.md"):
        _write(root, name, f"# {name}\n")
    _builder(make_config(), root, tmp_path).run()
    out = tmp_path / "out"
    html_files = [
        path for path in out.rglob("*.html") if "pagefind" not in path.parts
    ]
    assert len(html_files) == 4 + 1


def test_build_is_idempotent(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    builder = _builder(make_config(), source_dir, tmp_path)
    builder.run()
    out = tmp_path / "out"
    first = {p: p.read_bytes() for p in sorted(out.rglob("*")) if p.is_file()}
    builder.run()
    second = {p: p.read_bytes() for p in sorted(out.rglob("*")) if p.is_file()}
    assert first == second


def test_footer_uses_fixed_year(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _builder(make_config(), source_dir, tmp_path).run()
    footer = _soup(tmp_path / "out" / "a.html").select_one(".site-footer")
    assert footer is not None
    assert str(FIXED_YEAR) in footer.get_text()


def test_fallback_index_lists_sections(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _builder(make_config(), source_dir, tmp_path).run()
    index = _soup(tmp_path / "out" / "index.html")
    assert index.find("h1").get_text() == "Documentation"
    cards = index.select("simple-block.card")
    assert [card.select_one("h2").get_text() for card in cards] == ["Guide", "sub"]
    links = [a["href"] for a in index.select("simple-block.card a")]
    assert links == ["/a.html", "/sub/b.html"]


def test_index_markdown_becomes_landing_page(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _write(source_dir, "index.md", "# Welcome\nLanding text.\n")
    result = _builder(make_config(), source_dir, tmp_path).run()
    assert result.page_count == 3
    assert result.written[-1] == result.index_path
    index = _soup(result.index_path)
    article = index.select_one("article.page--index")
    assert article is not None
    assert "Landing text." in article.get_text()
    assert index.select("simple-block.card") == []


def test_raw_html_escaped_in_generated_page(
    make_config: typ.Any, tmp_path: Path
) -> None:
    root = tmp_path / "src"
    _write(root, "page.md", "# Page\n\n<div class=\"raw\">x</div>\n")
    _builder(make_config(), root, tmp_path).run()
    html = (tmp_path / "out" / "page.html").read_text(encoding="utf-8")
    assert "&lt;div" in html
    assert _soup(tmp_path / "out" / "page.html").select_one("div.raw") is None


def test_raw_html_kept_when_allowed(make_config: typ.Any, tmp_path: Path) -> None:
    root = tmp_path / "src"
    _write(root, "page.md", "# Page\n\n<div class=\"raw\">x</div>\n")
    config = make_config(MDBOOK_OUTPUT__HTML__ALLOW_HTML="true")
    _builder(config, root, tmp_path).run()
    assert _soup(tmp_path / "out" / "page.html").select_one("div.raw") is not None


def test_static_assets_are_published(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    templates = tmp_path / "templates"
    _write(templates, "css/extra.css", "body { color: red; }\n")
    _write(templates, "css/styles.css", "/* custom */\n")
    _write(templates, "img/nested/logo.svg", "<svg/>")
    _builder(make_config(), source_dir, tmp_path).run()
    out = tmp_path / "out"
    assert (out / "css" / "extra.css").is_file()
    assert (out / "css" / "styles.css").read_text(encoding="utf-8") == "/* custom */\n"
    assert (out / "img" / "nested" / "logo.svg").is_file()
    assert (out / "img" / "default_logo.svg").is_file()
    assert (out / "js").is_dir()
    for script in ("doc-toc.js", "simple-block.js", "search-modal.js"):
        assert (out / "components" / script).is_file()
    assert ".codehilite" in (out / "css" / "syntax.css").read_text(encoding="utf-8")


def test_syntax_css_skipped_without_highlighting(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    config = make_config(MDBOOK_OUTPUT__HTML__SYNTAX_HIGHLIGHTING="false")
    _builder(config, source_dir, tmp_path).run()
    assert not (tmp_path / "out" / "css" / "syntax.css").exists()


def test_user_template_overrides_bundled_one(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _write(
        tmp_path / "templates",
        "page.html.jinja",
        "<p id=\"custom\">{{ page.title }}|{{ current_path }}</p>\n",
    )
    _builder(make_config(), source_dir, tmp_path).run()
    custom = _soup(tmp_path / "out" / "sub" / "b.html").select_one("#custom")
    assert custom is not None
    assert custom.get_text() == "B|sub/b.html"


def test_template_error_is_a_render_error(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _write(tmp_path / "templates", "page.html.jinja", "{% if %}\n")
    with pytest.raises(RenderError, match=r"page\.html\.jinja"):
        _builder(make_config(), source_dir, tmp_path).run()


def test_runtime_template_failure_is_a_render_error(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _write(tmp_path / "templates", "page.html.jinja", "{{ page.title + 1 }}\n")
    with pytest.raises(RenderError, match=r"page\.html\.jinja.*TypeError"):
        _builder(make_config(), source_dir, tmp_path).run()


def test_frontmatter_reaches_template(make_config: typ.Any, tmp_path: Path) -> None:
    root = tmp_path / "src"
    _write(root, "page.md", "---\nsummary: Short\n---\n# Page\nBody\n")
    _write(
        tmp_path / "templates",
        "page.html.jinja",
        "<p id=\"meta\">{{ page.meta.summary }}</p>{{ page.content | safe }}\n",
    )
    config = make_config(MDBOOK_MARKDOWN__FRONTMATTER="true")
    _builder(config, root, tmp_path).run()
    soup = _soup(tmp_path / "out" / "page.html")
    assert soup.select_one("#meta").get_text() == "Short"
    assert "summary:" not in soup.get_text()


def test_invalid_frontmatter_names_the_page(
    make_config: typ.Any, tmp_path: Path
) -> None:
    root = tmp_path / "src"
    _write(root, "broken.md", "---\nsummary: [oops\n---\n# Page\n")
    config = make_config(MDBOOK_MARKDOWN__FRONTMATTER="true")
    with pytest.raises(RenderError, match=r"broken\.md"):
        _builder(config, root, tmp_path).run()


def test_redirect_pages_are_written(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    (tmp_path / "book.toml").write_text(
        '[output.html.redirect]\n"/old/page.html" = "/a.html"\n', encoding="utf-8"
    )
    _builder(make_config(), source_dir, tmp_path).run()
    redirect = _soup(tmp_path / "out" / "old" / "page.html")
    refresh = redirect.find("meta", attrs={"http-equiv": "refresh"})
    assert refresh is not None
    assert refresh["content"] == "0; url=/a.html"


def test_live_reload_script_only_when_watching(
    make_config: typ.Any, source_dir: Path, tmp_path: Path
) -> None:
    _builder(make_config(), source_dir, tmp_path).run()
    assert "/live-reload" not in (tmp_path / "out" / "a.html").read_text("utf-8")
    _builder(make_config(), source_dir, tmp_path, watch_enabled=True).run()
    assert "/live-reload" in (tmp_path / "out" / "a.html").read_text("utf-8")


def test_missing_input_directory(make_config: typ.Any, tmp_path: Path) -> None:
    with pytest.raises(InputError, match="does not exist"):
        _builder(make_config(), tmp_path / "missing", tmp_path).run()
    assert not (tmp_path / "out").exists()


def test_search_runs_after_pages(
    make_config: typ.Any,
    source_dir: Path,
    tmp_path: Path,
    mocker: MockerFixture,
) -> None:
    run_search = mocker.patch("md_book.generator.book_builder.run_search_index")
    config = make_config(MDBOOK_OUTPUT__HTML__SEARCH__ENABLE="true")
    _builder(config, source_dir, tmp_path).run()
    run_search.assert_called_once_with(tmp_path / "out", config.output.html.search)
    assert (tmp_path / "out" / "index.html").is_file()

"""Common literal values used across md_book.

These constants keep filenames and markers centralized so templates,
generators, and tests can import the same values without drifting. Intended
for internal use within the md_book package.

Examples
--------
>>> from md_book import _constants
>>> _constants.INDEX_OUTPUT
'index.html'
>>> "search-modal.js" in _constants.COMPONENT_SCRIPTS
True
"""

from pathlib import Path

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
MARKDOWN_SUFFIX = ".md"
HTML_SUFFIX = ".html"
INDEX_OUTPUT = "index.html"
INDEX_PAGE_PATH = "/index.html"
ROOT_SECTION_TITLE = "Guide"
FALLBACK_INDEX_TITLE = "Documentation"
UNTITLED = "Untitled"
EDITABLE_MARKER = "<--editable-->"
ASSET_DIRECTORIES = ("css", "js", "img")
COMPONENTS_DIR = "components"
COMPONENT_SCRIPTS = ("doc-toc.js", "simple-block.js", "search-modal.js")
SYNTAX_STYLESHEET = "css/syntax.css"
PAGE_TEMPLATE = "page.html.jinja"
INDEX_TEMPLATE = "index.html.jinja"
REDIRECT_TEMPLATE = "redirect.html.jinja"
DEFAULT_PORT = 3000
DEFAULT_DEBOUNCE_SECONDS = 0.5
LIVE_RELOAD_ROUTE = "/live-reload"
RELOAD_MESSAGE = "reload"

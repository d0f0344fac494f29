"""Load layered book configuration into typed dataclasses."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json
import tomlkit
from tomlkit.exceptions import TOMLKitError

from .helpers import _build_book_config, _deep_merge, _env_layer
from .models import BookConfig, ConfigError

DEFAULT_CONFIG_FILENAME = "book.toml"


def load_config(
    path: Path | None = None,
    *,
    cwd: Path | None = None,
    environ: typ.Mapping[str, str] | None = None,
) -> BookConfig:
    """Load the book configuration from files and the environment.

    Layers are applied lowest precedence first: built-in defaults,
    ``book.toml`` in the working directory, the explicit ``path`` override,
    then ``MDBOOK_``-prefixed environment variables.

    Parameters
    ----------
    path : Path, optional
        Explicit configuration file (``.toml`` or ``.json``).
    cwd : Path, optional
        Directory searched for ``book.toml``; defaults to the process cwd.
    environ : Mapping[str, str], optional
        Environment mapping; defaults to :data:`os.environ`.

    Returns
    -------
    BookConfig
        Fully merged configuration.

    Raises
    ------
    ConfigError
        If the explicit file is missing, has an unsupported extension, cannot
        be parsed, or contains values of the wrong type.

    Examples
    --------
    >>> from md_book.config import load_config
    >>> config = load_config(environ={"MDBOOK_BOOK__TITLE": "Guide"})
    >>> config.book.title
    'Guide'
    """
    base_dir = cwd or Path.cwd()
    merged: dict[str, typ.Any] = {}

    default_file = base_dir / DEFAULT_CONFIG_FILENAME
    if default_file.is_file():
        _deep_merge(merged, _read_config_file(default_file))

    if path is not None:
        if not path.exists():
            msg = f"Configuration file '{path}' not found."
            raise ConfigError(msg)
        _deep_merge(merged, _read_config_file(path))

    _deep_merge(merged, _env_layer(os.environ if environ is None else environ))
    return _build_book_config(merged)


def _read_config_file(path: Path) -> dict[str, typ.Any]:
    """Parse a TOML or JSON config file into a plain mapping."""
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to read configuration file '{path}': {exc}"
        raise ConfigError(msg) from exc

    if suffix == ".toml":
        try:
            loaded: object = tomlkit.parse(text).unwrap()
        except TOMLKitError as exc:
            msg = f"Invalid TOML in '{path}': {exc}"
            raise ConfigError(msg) from exc
    elif suffix == ".json":
        try:
            loaded = msgspec_json.decode(text)
        except msgspec.DecodeError as exc:
            msg = f"Invalid JSON in '{path}': {exc}"
            raise ConfigError(msg) from exc
    else:
        msg = f"Unsupported config file type: {path}"
        raise ConfigError(msg)

    if not isinstance(loaded, dict):
        msg = f"Top-level structure of '{path}' must be a mapping."
        raise ConfigError(msg)
    return loaded


__all__ = ["DEFAULT_CONFIG_FILENAME", "load_config"]

# topmark:header:start
#
#   project      : Plugline
#   file         : io.py
#   file_relpath : src/plugline/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight TOML I/O helpers for Plugline configuration.

This module centralizes **pure** helpers for reading and writing TOML used by
the configuration layer, keeping the model classes small and free of I/O.

Typical flow:
    1. Load defaults from the packaged resource (``load_defaults_dict``).
    2. Load project files (``load_toml_dict``).
    3. Inspect values with the typed getters (``get_table_value``, ...).
    4. Serialize back to TOML when needed (``to_toml``), optionally nested
       under ``[tool.plugline]`` for inclusion in ``pyproject.toml``
       (``nest_toml_under_section``).

Notes:
    - Parsing uses `toml`; `tomlkit` is used where the document layout must be
      preserved (nesting a document under a section).
"""

from __future__ import annotations

from importlib.resources import files
from typing import TYPE_CHECKING, Any, TypeGuard

import toml
import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from plugline.config.logging import get_logger
from plugline.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from plugline.config.logging import PluglineLogger

logger: PluglineLogger = get_logger(__name__)

TomlTable = dict[str, Any]

DEFAULT_TOML_CONFIG_PACKAGE = "plugline.config"
DEFAULT_TOML_CONFIG_NAME = "plugline-default.toml"

__all__: list[str] = [
    "TomlTable",
    "is_toml_table",
    "get_table_value",
    "get_string_value_or_none",
    "get_bool_value_or_none",
    "get_list_value",
    "load_defaults_dict",
    "load_toml_dict",
    "to_toml",
    "nest_toml_under_section",
]


def is_toml_table(val: Any) -> TypeGuard[TomlTable]:
    """Type guard for a TOML table-like mapping.

    Args:
        val (Any): Value to test.

    Returns:
        TypeGuard[TomlTable]: ``True`` if ``val`` is a ``dict``.
    """
    return isinstance(val, dict)


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Extract a sub-table, or an empty dict when missing or not a table."""
    value: Any | None = table.get(key)
    return value if is_toml_table(value) else {}


def get_string_value_or_none(table: TomlTable, key: str) -> str | None:
    """Extract an optional string value.

    Numbers are coerced with ``str()``; booleans and other types yield ``None``.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        str | None: The string value, or ``None`` when absent or not coercible.
    """
    value: Any | None = table.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def get_bool_value_or_none(table: TomlTable, key: str) -> bool | None:
    """Extract an optional boolean value (integers are coerced with ``bool()``)."""
    value: Any | None = table.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    return None


def get_list_value(table: TomlTable, key: str, default: list[Any] | None = None) -> list[Any]:
    """Extract a list value, or ``default`` (``[]``) when missing or not a list."""
    value: Any | None = table.get(key)
    if isinstance(value, list):
        return value
    return default or []


def load_defaults_dict() -> TomlTable:
    """Return the packaged default configuration as a Python dict.

    Raises:
        RuntimeError: If the bundled resource cannot be read or parsed.
    """
    resource = files(DEFAULT_TOML_CONFIG_PACKAGE).joinpath(DEFAULT_TOML_CONFIG_NAME)
    logger.debug("Loading defaults from package resource: %s", resource)
    try:
        text: str = resource.read_text(encoding="utf8")
    except OSError as exc:
        raise RuntimeError(f"Cannot read bundled default config {DEFAULT_TOML_CONFIG_NAME!r}: {exc}") from exc
    try:
        return toml.loads(text)
    except toml.TomlDecodeError as exc:
        raise RuntimeError(f"Bundled default config {DEFAULT_TOML_CONFIG_NAME!r} is invalid TOML: {exc}") from exc


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file.

    Args:
        path (Path): Path to a TOML document (``plugline.toml`` or ``pyproject.toml``).

    Returns:
        TomlTable: The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        return toml.load(path)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def to_toml(toml_dict: TomlTable) -> str:
    """Serialize a TOML mapping to a string."""
    return toml.dumps(toml_dict)


def nest_toml_under_section(toml_doc: str, section_keys: str) -> str:
    """Return ``toml_doc`` nested under a dotted section such as ``"tool.plugline"``.

    Uses `tomlkit` so that comments and ordering of the original document are
    preserved: the leading comment block stays at the top of the new document.

    Raises:
        ValueError: If ``section_keys`` has empty segments or ``toml_doc`` is invalid.
    """
    keys: list[str] = section_keys.split(".")
    if not all(keys):
        raise ValueError(f"Invalid section path: {section_keys!r}")
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(toml_doc)
    except TomlkitParseError as exc:
        raise ValueError(f"Invalid TOML document: {exc}") from exc

    first_keyed: int = next((i for i, (key, _) in enumerate(doc.body) if key is not None), len(doc.body))

    new_doc: tomlkit.TOMLDocument = tomlkit.document()
    new_doc.body.extend(doc.body[:first_keyed])
    current: Any = new_doc
    for key in keys:
        current.add(key, tomlkit.table())
        current = current[key]

    # Keyed items keep their own trivia (inline comments, formatting)
    for item_key, item_value in doc.items():
        current.add(item_key, item_value)
    return new_doc.as_string()

"""
Config stores backing ``config:`` references.

A store answers one question: what string is configured under a key?
Keys are dotted paths into nested tables, so ``config:database.url``
reads::

    [database]
    url = "postgres://app@db/app"

Examples:
    >>> store = DictConfigStore({"database": {"url": "sqlite:///dev.db"}})
    >>> store.get_string("database.url")
    'sqlite:///dev.db'
    >>> store.get_string("database.missing") is None
    True

Tags:
    configuration, toml, config-store, dburl
"""

from __future__ import annotations

import threading
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dburl.errors import DburlError, ErrorCategory, ErrorContext
from dburl.logging import get_logger

logger = get_logger(__name__)


class ConfigStoreError(DburlError):
    """The config source exists but cannot be parsed."""

    default_category = ErrorCategory.CONFIG


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    """Find *key* in *data*, as a flat key first, then as a dotted path.

    A leading ``:`` anchors the key at the root and is ignored.
    """
    key = key.removeprefix(":")
    if key in data:
        return data[key]

    node: Any = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def _as_string(value: Any) -> str | None:
    if value is None or isinstance(value, (Mapping, list)):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class ConfigStore(ABC):
    """Abstract base for config stores."""

    @abstractmethod
    def get_string(self, key: str) -> str | None:
        """Return the string configured under *key*, or None if absent."""
        ...


class DictConfigStore(ConfigStore):
    """In-memory config store.

    Accepts flat (``{"database.url": ...}``) or nested
    (``{"database": {"url": ...}}``) mappings.
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values) if values else {}

    def get_string(self, key: str) -> str | None:
        return _as_string(_lookup(self._values, key))


class TomlConfigStore(ConfigStore):
    """Config store reading a TOML file.

    The file is parsed on first lookup and cached.  A missing file is an
    empty store; a file that cannot be read or parsed raises
    :class:`ConfigStoreError`.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] | None = None
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        with self._lock:
            if self._data is None:
                self._data = self._read()
            return self._data

    def _read(self) -> dict[str, Any]:
        try:
            if not self.path.is_file():
                logger.debug("config_file_missing", path=str(self.path))
                return {}
            return tomllib.loads(self.path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigStoreError(
                f"Invalid TOML in {self.path}: {e}",
                context=ErrorContext(source="config", key=str(self.path)),
                cause=e,
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigStoreError(
                f"Failed to read {self.path}: {e}",
                context=ErrorContext(source="config", key=str(self.path)),
                cause=e,
            ) from e

    def get_string(self, key: str) -> str | None:
        return _as_string(_lookup(self._load(), key))

    def reload(self) -> None:
        """Drop the cached file contents."""
        with self._lock:
            self._data = None


__all__ = [
    "ConfigStore",
    "ConfigStoreError",
    "DictConfigStore",
    "TomlConfigStore",
]

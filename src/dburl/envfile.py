"""
``.env`` file discovery and loading.

Manifesto:
    A ``dotenv:`` reference asks for the project's ``.env`` files to be
    loaded into the process environment before the variable is read.
    The load order is strict and predictable::

        .env.base  →  .env.{tier}  →  .env.local  →  .env

    Later files override earlier ones.  Variables already present in the
    process environment win over every file unless ``override=True``.

All parsing is pure-Python (no ``python-dotenv`` dependency).

Tags:
    dburl, env-files, dotenv, cascading, loader

Doc-Types:
    api-reference
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from pathlib import Path

from dburl.errors import CapabilityUnavailableError, DotenvError
from dburl.logging import get_logger
from dburl.result import Err, Ok, Result

logger = get_logger(__name__)

_VAR_RE = re.compile(
    r"""
    ^                         # start of line
    \s*                       # optional leading whitespace
    (?:export\s+)?            # optional "export " prefix
    (?P<key>[A-Za-z_]\w*)     # variable name
    \s*=\s*                   # equals with optional whitespace
    (?P<value>.*)             # everything after =
    $                         # end of line
    """,
    re.VERBOSE,
)


def find_project_root(start: Path | None = None) -> Path:
    """Walk upward from *start* to find the project root.

    Recognised root markers (checked in order):

    * ``pyproject.toml``
    * ``.git`` directory
    * ``setup.py``

    Falls back to *start* (or cwd) when no marker is found.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / "pyproject.toml").exists():
            return directory
        if (directory / ".git").exists():
            return directory
        if (directory / "setup.py").exists():
            return directory
    return current


def discover_env_files(
    project_root: Path | None = None,
    tier: str | None = None,
) -> list[Path]:
    """Return an ordered list of ``.env`` files that exist on disk.

    Parameters
    ----------
    project_root:
        Directory to search in.  Defaults to :func:`find_project_root`.
    tier:
        Explicit tier name (``"dev"``, ``"test"``, ``"prod"``...).
        If *None*, falls back to the ``DBURL_TIER`` environment variable.
    """
    root = (project_root or find_project_root()).resolve()
    tier = tier or os.environ.get("DBURL_TIER")

    candidates: list[Path] = [root / ".env.base"]
    if tier:
        candidates.append(root / f".env.{tier}")
    candidates.append(root / ".env.local")
    candidates.append(root / ".env")

    return [p for p in candidates if p.is_file()]


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a single ``.env`` file into a ``{key: value}`` mapping.

    Handles:
    * blank/comment lines
    * ``export VAR=value``
    * quoted values (single or double)
    * inline ``# comments`` outside of quotes

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8
    """
    result: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _VAR_RE.match(line)
        if match is None:
            continue
        key = match.group("key")
        value = match.group("value").strip()

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]
        elif " #" in value:
            value = value[: value.index(" #")].rstrip()

        result[key] = value
    return result


def load_env_files(files: list[Path]) -> dict[str, str]:
    """Parse and merge several ``.env`` files.

    Later files override earlier values.

    Raises:
        DotenvError: If any file cannot be read
    """
    merged: dict[str, str] = {}
    for path in files:
        try:
            merged.update(parse_env_file(path))
        except (OSError, UnicodeDecodeError) as e:
            raise DotenvError(f"Failed to read {path}: {e}", path=str(path), cause=e) from e
    return merged


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


class DotenvLoader(ABC):
    """Populate the process environment from ``.env``-style files."""

    @abstractmethod
    def load(self) -> Result[None]:
        """Load variables into the environment.

        Returns:
            ``Ok(None)`` on success (including "no files found"),
            ``Err`` describing why loading was not possible.
        """
        ...


class EnvFileLoader(DotenvLoader):
    """Load the cascading ``.env`` files of a project.

    Args:
        project_root: Directory holding the files.  Discovered with
            :func:`find_project_root` at load time when omitted.
        tier: Tier name selecting ``.env.{tier}``.
        override: Replace variables already set in the environment.
        environ: Mapping to populate (defaults to ``os.environ``).
    """

    def __init__(
        self,
        project_root: Path | str | None = None,
        tier: str | None = None,
        *,
        override: bool = False,
        environ: MutableMapping[str, str] | None = None,
    ):
        self.project_root = Path(project_root) if project_root is not None else None
        self.tier = tier
        self.override = override
        self._environ = environ

    @property
    def environ(self) -> MutableMapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def discover(self) -> list[Path]:
        return discover_env_files(self.project_root, self.tier)

    def load(self) -> Result[None]:
        try:
            files = self.discover()
            values = load_env_files(files)
        except DotenvError as e:
            return Err(e)
        except OSError as e:
            return Err(DotenvError(f"Failed to locate .env files: {e}", cause=e))

        environ = self.environ
        applied = 0
        for key, value in values.items():
            if self.override or key not in environ:
                environ[key] = value
                applied += 1

        logger.debug(
            "dotenv_loaded",
            files=[str(p) for p in files],
            variables=len(values),
            applied=applied,
        )
        return Ok(None)


class UnavailableDotenvLoader(DotenvLoader):
    """Stand-in used when the dotenv capability is disabled."""

    def load(self) -> Result[None]:
        return Err(CapabilityUnavailableError("dotenv"))


__all__ = [
    "DotenvLoader",
    "EnvFileLoader",
    "UnavailableDotenvLoader",
    "discover_env_files",
    "find_project_root",
    "load_env_files",
    "parse_env_file",
]

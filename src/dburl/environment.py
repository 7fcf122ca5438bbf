"""
Process environment lookup.

The ``env:`` strategy reads exactly one variable.  Failures are returned
as ``Err`` so the resolver can hand them straight back to its caller.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from dburl.errors import EnvVarNotFoundError, EnvVarNotUnicodeError
from dburl.result import Err, Ok, Result


def _is_valid_text(value: str) -> bool:
    # Undecodable bytes reach os.environ as lone surrogates
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class EnvironmentLookup:
    """Read named variables from the process environment.

    Args:
        environ: Mapping to read from.  Defaults to ``os.environ``, looked
            up on every call so later mutations (``.env`` loading,
            ``monkeypatch.setenv``) are visible.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def get(self, name: str) -> Result[str]:
        """Look up *name*.

        Returns:
            ``Ok(value)`` when set, ``Err(EnvVarNotFoundError)`` when unset,
            ``Err(EnvVarNotUnicodeError)`` when the value is not valid text.
        """
        # Names with NUL or '=' can never be set
        if not name or "\x00" in name or "=" in name:
            return Err(EnvVarNotFoundError(name))

        value = self.environ.get(name)
        if value is None:
            return Err(EnvVarNotFoundError(name))
        if not _is_valid_text(value):
            return Err(EnvVarNotUnicodeError(name))
        return Ok(value)


__all__ = ["EnvironmentLookup"]

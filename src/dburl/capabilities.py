"""Capability flags for the optional lookup strategies.

``dotenv:`` and ``config:`` references depend on optional collaborators.
Each is guarded by a boolean capability flag so a deployment can switch a
strategy off without code changes.

Resolution order for a flag value:

1. Runtime override (``Capabilities.set()`` / ``Capabilities.override()``)
2. Environment variable ``DBURL_FF_<NAME>`` (``true``/``1``/``yes``/``on``)
3. Default from registration

Examples:
    >>> from dburl.capabilities import Capabilities, DOTENV
    >>> Capabilities.is_enabled(DOTENV)
    True
    >>> with Capabilities.override(DOTENV, False):
    ...     assert not Capabilities.is_enabled(DOTENV)

Tags:
    feature-flags, capabilities, configuration, dburl
"""

from __future__ import annotations

import os
import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass

# Environment variable prefix for capability overrides
ENV_PREFIX = "DBURL_FF_"

DOTENV = "dotenv"
CONFIG = "config"


@dataclass(frozen=True)
class CapabilityDefinition:
    """Definition of a capability flag.

    Attributes:
        name: Capability identifier (snake_case, also the reference prefix)
        default: Whether the capability is enabled when nothing overrides it
        description: Human-readable description
    """

    name: str
    default: bool = True
    description: str = ""

    @property
    def env_var(self) -> str:
        return f"{ENV_PREFIX}{self.name.upper()}"

    @property
    def prefix(self) -> str:
        return f"{self.name}:"


def parse_flag(env_value: str) -> bool:
    """Parse an environment variable string into a boolean."""
    return env_value.strip().lower() in ("true", "1", "yes", "on")


class CapabilityNotFoundError(Exception):
    """Raised when accessing an unregistered capability."""

    def __init__(self, name: str):
        super().__init__(f"Capability not registered: {name}")
        self.name = name


class CapabilityRegistry:
    """Thread-safe registry of capability flags.

    Use the :class:`Capabilities` static interface instead of this directly.
    """

    def __init__(self):
        self._capabilities: dict[str, CapabilityDefinition] = {}
        self._overrides: dict[str, bool] = {}
        self._lock = threading.RLock()

    def register(self, name: str, default: bool = True, description: str = "") -> CapabilityDefinition:
        """Register a capability.

        Raises:
            ValueError: If name is invalid or already registered
        """
        if not re.match(r"^[a-z][a-z0-9_]*$", name):
            raise ValueError(f"Capability name must be snake_case: {name}")

        with self._lock:
            if name in self._capabilities:
                raise ValueError(f"Capability already registered: {name}")
            definition = CapabilityDefinition(name=name, default=default, description=description)
            self._capabilities[name] = definition
            return definition

    def is_enabled(self, name: str) -> bool:
        """Get the current state of a capability.

        The environment is read on every call, so a resolver built after
        ``DBURL_FF_<NAME>`` changes sees the new value.  Resolvers that are
        already built keep the collaborators they were wired with.
        """
        with self._lock:
            if name not in self._capabilities:
                raise CapabilityNotFoundError(name)

            if name in self._overrides:
                return self._overrides[name]

            definition = self._capabilities[name]
            env_value = os.environ.get(definition.env_var)
            if env_value is not None:
                return parse_flag(env_value)
            return definition.default

    def set(self, name: str, enabled: bool) -> None:
        with self._lock:
            if name not in self._capabilities:
                raise CapabilityNotFoundError(name)
            self._overrides[name] = bool(enabled)

    def reset(self, name: str) -> None:
        with self._lock:
            if name not in self._capabilities:
                raise CapabilityNotFoundError(name)
            self._overrides.pop(name, None)

    def reset_all(self) -> None:
        """Remove all runtime overrides."""
        with self._lock:
            self._overrides.clear()

    def has_override(self, name: str) -> bool:
        with self._lock:
            return name in self._overrides

    def get_override(self, name: str) -> bool | None:
        with self._lock:
            return self._overrides.get(name)

    def list_capabilities(self) -> list[CapabilityDefinition]:
        """List all registered capabilities."""
        with self._lock:
            return list(self._capabilities.values())


# Global registry instance
_registry = CapabilityRegistry()
_registry.register(DOTENV, default=True, description="Load .env files for 'dotenv:' references")
_registry.register(CONFIG, default=True, description="Look up 'config:' references in the config store")


class Capabilities:
    """Static interface for capability flag operations."""

    @staticmethod
    def is_enabled(name: str) -> bool:
        """Check whether a capability is enabled.

        Example:
            >>> if Capabilities.is_enabled(CONFIG):
            ...     store = TomlConfigStore("dburl.toml")
        """
        return _registry.is_enabled(name)

    @staticmethod
    def set(name: str, enabled: bool) -> None:
        """Set a runtime override for a capability."""
        _registry.set(name, enabled)

    @staticmethod
    def reset(name: str) -> None:
        """Remove the runtime override for a capability."""
        _registry.reset(name)

    @staticmethod
    def reset_all() -> None:
        """Remove all runtime overrides."""
        _registry.reset_all()

    @staticmethod
    @contextmanager
    def override(name: str, enabled: bool):
        """Temporarily override a capability.

        Example:
            >>> with Capabilities.override(CONFIG, False):
            ...     assert extract_database_url("config:database.url").is_err()
        """
        had_override = _registry.has_override(name)
        old_value = _registry.get_override(name)

        _registry.set(name, enabled)
        try:
            yield
        finally:
            if had_override:
                _registry.set(name, bool(old_value))
            else:
                _registry.reset(name)

    @staticmethod
    def list_capabilities() -> list[CapabilityDefinition]:
        return _registry.list_capabilities()


__all__ = [
    "CONFIG",
    "DOTENV",
    "ENV_PREFIX",
    "Capabilities",
    "CapabilityDefinition",
    "CapabilityNotFoundError",
    "CapabilityRegistry",
    "parse_flag",
]

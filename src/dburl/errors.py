"""
Error hierarchy for database URL resolution.

Manifesto:
    A resolution failure is reported to the caller as a single readable
    message.  Wrapping that message in a small exception hierarchy keeps
    the text stable while letting callers tell "variable unset" apart from
    "capability disabled" without string matching.

    - **Message is the contract:** ``str(error)`` is exactly the text a
      user sees.
    - **Category for routing:** every error carries an ``ErrorCategory``.
    - **Context for logging:** ``ErrorContext`` records the key or variable
      that failed, never the resolved value.

Architecture:
    ::

        DburlError
        ├── ResolutionError
        │   ├── EnvVarError
        │   │   ├── EnvVarNotFoundError
        │   │   └── EnvVarNotUnicodeError
        │   ├── ConfigError
        │   │   └── ConfigKeyError
        │   └── CapabilityUnavailableError
        └── DotenvError

Examples:
    >>> err = EnvVarNotFoundError("DATABASE_URL")
    >>> str(err)
    'Failed to load environment variable DATABASE_URL: environment variable not found'
    >>> err.category
    <ErrorCategory.ENVIRONMENT: 'ENVIRONMENT'>

Tags:
    errors, exceptions, error-handling, dburl
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories used to classify resolution failures."""

    CONFIG = "CONFIG"                # Config store lookups
    ENVIRONMENT = "ENVIRONMENT"      # Process environment lookups
    CAPABILITY = "CAPABILITY"        # Optional capability disabled
    SOURCE = "SOURCE"                # .env files and other inputs
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        source: Lookup strategy that failed (``env``, ``config``, ``dotenv``)
        key: Variable name or configuration key
        candidate: The string that was being resolved
        metadata: Additional key-value pairs
    """

    source: str | None = None
    key: str | None = None
    candidate: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["source", "key", "candidate"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DburlError(Exception):
    """
    Base exception for all dburl errors.

    Subclasses set ``default_category`` so the category does not have to
    be passed at every raise site.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DburlError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(ConfigKeyError(key).with_context(candidate=url))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# RESOLUTION ERRORS
# =============================================================================


class ResolutionError(DburlError):
    """A database URL reference could not be resolved."""


class EnvVarError(ResolutionError):
    """An environment variable lookup failed."""

    default_category = ErrorCategory.ENVIRONMENT
    description = "environment variable lookup failed"

    def __init__(self, name: str, description: str | None = None):
        self.name = name
        self.description = description or self.description
        super().__init__(
            f"Failed to load environment variable {name}: {self.description}",
            context=ErrorContext(source="env", key=name),
        )


class EnvVarNotFoundError(EnvVarError):
    """The environment variable is not set."""

    description = "environment variable not found"

    def __init__(self, name: str):
        super().__init__(name)


class EnvVarNotUnicodeError(EnvVarError):
    """The environment variable holds bytes that are not valid text."""

    description = "environment variable was not valid unicode"

    def __init__(self, name: str):
        super().__init__(name)


class ConfigError(ResolutionError):
    """A config store lookup failed."""

    default_category = ErrorCategory.CONFIG


class ConfigKeyError(ConfigError):
    """The configuration property has no value."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"configuration property {key} is not defined",
            context=ErrorContext(source="config", key=key),
        )


class CapabilityUnavailableError(ResolutionError):
    """An optional capability is required but disabled."""

    default_category = ErrorCategory.CAPABILITY

    def __init__(self, capability: str, prefix: str | None = None):
        self.capability = capability
        self.prefix = prefix or f"{capability}:"
        super().__init__(
            f"The {capability} feature is required to use strings starting with '{self.prefix}'",
            context=ErrorContext(source=capability),
        )


class DotenvError(DburlError):
    """A ``.env`` file could not be loaded."""

    default_category = ErrorCategory.SOURCE

    def __init__(self, message: str, *, path: str | None = None, cause: Exception | None = None):
        super().__init__(
            message,
            context=ErrorContext(source="dotenv", key=path),
            cause=cause,
        )


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DburlError",
    "ResolutionError",
    "EnvVarError",
    "EnvVarNotFoundError",
    "EnvVarNotUnicodeError",
    "ConfigError",
    "ConfigKeyError",
    "CapabilityUnavailableError",
    "DotenvError",
]

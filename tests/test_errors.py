"""Tests for dburl.errors: messages, categories and context."""

from __future__ import annotations

from dburl.errors import (
    CapabilityUnavailableError,
    ConfigKeyError,
    DburlError,
    DotenvError,
    EnvVarNotFoundError,
    EnvVarNotUnicodeError,
    ErrorCategory,
    ErrorContext,
    ResolutionError,
)


class TestMessages:
    def test_env_not_found(self):
        err = EnvVarNotFoundError("DATABASE_URL")
        assert str(err) == (
            "Failed to load environment variable DATABASE_URL: environment variable not found"
        )
        assert err.message == str(err)

    def test_env_not_unicode(self):
        assert str(EnvVarNotUnicodeError("X")).endswith("environment variable was not valid unicode")

    def test_config_key(self):
        assert str(ConfigKeyError("database.url")) == "configuration property database.url is not defined"

    def test_capability_unavailable(self):
        assert str(CapabilityUnavailableError("config")) == (
            "The config feature is required to use strings starting with 'config:'"
        )


class TestHierarchy:
    def test_resolution_errors(self):
        for err in (
            EnvVarNotFoundError("X"),
            EnvVarNotUnicodeError("X"),
            ConfigKeyError("k"),
            CapabilityUnavailableError("config"),
        ):
            assert isinstance(err, ResolutionError)
            assert isinstance(err, DburlError)

    def test_dotenv_error_is_not_a_resolution_error(self):
        assert not isinstance(DotenvError("x"), ResolutionError)

    def test_categories(self):
        assert EnvVarNotFoundError("X").category == ErrorCategory.ENVIRONMENT
        assert ConfigKeyError("k").category == ErrorCategory.CONFIG
        assert CapabilityUnavailableError("dotenv").category == ErrorCategory.CAPABILITY
        assert DotenvError("x").category == ErrorCategory.SOURCE


class TestContext:
    def test_context_records_key(self):
        err = ConfigKeyError("database.url")
        assert err.context.to_dict() == {"source": "config", "key": "database.url"}

    def test_with_context(self):
        err = EnvVarNotFoundError("X").with_context(candidate="env:X", attempt=1)
        assert err.context.candidate == "env:X"
        assert err.context.metadata == {"attempt": 1}

    def test_to_dict(self):
        cause = OSError("denied")
        err = DotenvError("Failed to read .env", path=".env", cause=cause)
        payload = err.to_dict()
        assert payload["error_type"] == "DotenvError"
        assert payload["category"] == "SOURCE"
        assert payload["context"] == {"source": "dotenv", "key": ".env"}
        assert payload["cause"] == "denied"
        assert err.__cause__ is cause

    def test_empty_context(self):
        assert ErrorContext().to_dict() == {}
        assert "context" not in DburlError("plain").to_dict()

"""
Settings controlling how references are resolved.

:class:`DburlSettings` gathers the knobs of the default resolver in one
validated place: where the project root is, which ``.env`` tier to load,
which TOML file backs ``config:`` references, and how to log.

All fields can be set via ``DBURL_*`` environment variables, e.g.
``DBURL_CONFIG_FILE=/etc/app/dburl.toml``.

Tags:
    configuration, settings, pydantic, dburl

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DburlSettings(BaseSettings):
    """Configuration of the default resolver."""

    model_config = SettingsConfigDict(
        env_prefix="DBURL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── .env loading ─────────────────────────────────────────────
    project_root: Path | None = Field(
        default=None,
        description="Directory holding .env files (auto-detected when unset)",
    )
    tier: str = Field(default="", description="Selects .env.{tier} in the cascade")
    dotenv_override: bool = Field(
        default=False,
        description="Let .env values replace variables already in the environment",
    )

    # ── Config store ─────────────────────────────────────────────
    config_file: Path = Field(default=Path("dburl.toml"))

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {value!r}")
        return value

    def resolve_config_file(self) -> Path:
        """Config file path, relative paths anchored at ``project_root``."""
        if self.config_file.is_absolute() or self.project_root is None:
            return self.config_file
        return self.project_root / self.config_file


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, DburlSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DburlSettings:
    """Load, validate, and cache a :class:`DburlSettings` instance.

    Parameters
    ----------
    _force_reload:
        Bypass cache and reload from the environment.
    """
    cache_key = str(Path.cwd())
    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    settings = DburlSettings()
    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "DburlSettings",
    "clear_settings_cache",
    "get_settings",
]

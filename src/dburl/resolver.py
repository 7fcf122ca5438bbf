"""Database URL resolution.

Turns a configured "database URL" into the actual connection string.  The
configured value is either the URL itself or a reference telling the
resolver where to find it.

Manifesto:
    Connection strings carry credentials and differ per environment, so
    they rarely belong in the file that names them.  A reference prefix
    keeps the indirection explicit and greppable:

    - ``env:DATABASE_URL`` reads an environment variable
    - ``dotenv:DATABASE_URL`` loads the project's ``.env`` files first,
      then reads the variable
    - ``config:database.url`` reads a key from the config store
    - anything else is returned unchanged

Architecture:
    ::

        candidate ──► prefix dispatch
                        ├── "dotenv:"  → DotenvLoader.load()  (failure ignored)
                        │                └─► resolve(candidate[3:])  == "env:..."
                        ├── "env:"     → EnvironmentLookup.get(name)
                        ├── "config:"  → ConfigStore.get_string(key)
                        └── otherwise  → Ok(candidate)

Examples:
    >>> import os
    >>> os.environ["lolvar"] = "lololol"
    >>> extract_database_url("env:lolvar")
    Ok('lololol')
    >>> extract_database_url("postgres://localhost/app")
    Ok('postgres://localhost/app')

    Without a config store:

    >>> DatabaseUrlResolver(config=None).resolve("config:database.url").error.message
    "The config feature is required to use strings starting with 'config:'"

Guardrails:
    ❌ DON'T: Log the resolved value (it usually contains a password)
    ✅ DO: Log the branch and the variable name or key

Tags:
    database-url, resolver, env-vars, dotenv, configuration, dburl
"""

from __future__ import annotations

from dburl.capabilities import CONFIG, DOTENV, Capabilities
from dburl.config_store import ConfigStore, ConfigStoreError, TomlConfigStore
from dburl.envfile import DotenvLoader, EnvFileLoader, UnavailableDotenvLoader
from dburl.environment import EnvironmentLookup
from dburl.errors import CapabilityUnavailableError, ConfigKeyError, DburlError
from dburl.logging import get_logger
from dburl.result import Err, Ok, Result, from_optional
from dburl.settings import DburlSettings, get_settings

logger = get_logger(__name__)

DOTENV_PREFIX = "dotenv:"
ENV_PREFIX = "env:"
CONFIG_PREFIX = "config:"

# Only "dot" is stripped so the remainder is dispatched as an "env:" reference
_DOTENV_STRIP = 3

# The ":" separator stays on the key; config stores read it as the root
_CONFIG_STRIP = 6


class DatabaseUrlResolver:
    """Prefix-routed database URL resolver.

    Args:
        environment: Environment lookup used by ``env:`` references.
        dotenv: Loader run by ``dotenv:`` references.  ``None`` means the
            dotenv capability is unavailable; loading then fails silently.
        config: Store consulted by ``config:`` references.  ``None`` means
            the config capability is unavailable.
    """

    def __init__(
        self,
        environment: EnvironmentLookup | None = None,
        dotenv: DotenvLoader | None = None,
        config: ConfigStore | None = None,
    ):
        self.environment = environment or EnvironmentLookup()
        self.dotenv = dotenv or UnavailableDotenvLoader()
        self.config = config

    def resolve(self, candidate: str) -> Result[str]:
        """Resolve *candidate* to a database URL.

        Returns:
            ``Ok(url)`` or ``Err(ResolutionError)``.  The error message names
            the variable or key that could not be read, and its context
            records the candidate.
        """
        result = self._dispatch(candidate)
        if isinstance(result, Err) and isinstance(result.error, DburlError):
            result.error.with_context(candidate=candidate)
        return result

    def _dispatch(self, candidate: str) -> Result[str]:
        if candidate.startswith(DOTENV_PREFIX):
            logger.debug("database_url_resolving", branch="dotenv")
            self._load_dotenv()
            return self.resolve(candidate[_DOTENV_STRIP:])

        if candidate.startswith(ENV_PREFIX):
            name = candidate[len(ENV_PREFIX):]
            logger.debug("database_url_resolving", branch="env", name=name)
            return self.environment.get(name)

        if candidate.startswith(CONFIG_PREFIX):
            key = candidate[_CONFIG_STRIP:]
            logger.debug("database_url_resolving", branch="config", key=key)
            return self._from_config(key)

        return Ok(candidate)

    def resolve_or_raise(self, candidate: str) -> str:
        """Like :meth:`resolve` but raises the error instead of returning it."""
        return self.resolve(candidate).unwrap()

    def _load_dotenv(self) -> None:
        # Best effort: a failed load must not stop the lookup that follows
        result = self.dotenv.load()
        if result.is_err():
            logger.debug("dotenv_load_skipped", reason=str(result.error))

    def _from_config(self, key: str) -> Result[str]:
        if self.config is None:
            return Err(CapabilityUnavailableError(CONFIG))
        try:
            value = self.config.get_string(key)
        except ConfigStoreError as e:
            return Err(e)
        return from_optional(value, ConfigKeyError(key))


def build_default_resolver(settings: DburlSettings | None = None) -> DatabaseUrlResolver:
    """Wire a resolver from settings and the capability flags.

    - ``dotenv`` enabled → :class:`EnvFileLoader` over the project's ``.env`` files
    - ``config`` enabled → :class:`TomlConfigStore` over ``settings.config_file``
    """
    settings = settings or get_settings()

    dotenv: DotenvLoader | None = None
    if Capabilities.is_enabled(DOTENV):
        dotenv = EnvFileLoader(
            settings.project_root,
            settings.tier or None,
            override=settings.dotenv_override,
        )

    config: ConfigStore | None = None
    if Capabilities.is_enabled(CONFIG):
        config = TomlConfigStore(settings.resolve_config_file())

    return DatabaseUrlResolver(dotenv=dotenv, config=config)


# ---------------------------------------------------------------------------
# Global resolver
# ---------------------------------------------------------------------------

_default_resolver: DatabaseUrlResolver | None = None


def get_resolver() -> DatabaseUrlResolver:
    """Get the global resolver, building it on first use."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = build_default_resolver()
    return _default_resolver


def set_resolver(resolver: DatabaseUrlResolver | None) -> None:
    """Replace the global resolver (``None`` rebuilds it on next use)."""
    global _default_resolver
    _default_resolver = resolver


def extract_database_url(url: str) -> Result[str]:
    """Resolve *url* with the global resolver.

    Example:
        >>> match extract_database_url("dotenv:DATABASE_URL"):
        ...     case Ok(url):
        ...         engine = create_engine(url)
        ...     case Err(error):
        ...         raise SystemExit(str(error))
    """
    return get_resolver().resolve(url)


__all__ = [
    "CONFIG_PREFIX",
    "DOTENV_PREFIX",
    "ENV_PREFIX",
    "DatabaseUrlResolver",
    "build_default_resolver",
    "extract_database_url",
    "get_resolver",
    "set_resolver",
]

"""
dburl: resolve database URL references.

A database URL setting may hold the URL itself or a reference to where the
URL lives::

    postgres://app@db/app       literal, returned unchanged
    env:DATABASE_URL            process environment variable
    dotenv:DATABASE_URL         load .env files, then the environment variable
    config:database.url         key in the TOML config store

Quick start::

    from dburl import extract_database_url, Ok, Err

    match extract_database_url("dotenv:DATABASE_URL"):
        case Ok(url):
            engine = create_engine(url)
        case Err(error):
            raise SystemExit(str(error))

Architecture::

    resolver.py       DatabaseUrlResolver + extract_database_url()
    environment.py    EnvironmentLookup (env: references)
    envfile.py        .env discovery + EnvFileLoader (dotenv: references)
    config_store.py   ConfigStore, TomlConfigStore (config: references)
    capabilities.py   dotenv/config capability flags (DBURL_FF_*)
    settings.py       DburlSettings (pydantic-settings, DBURL_*)
    result.py         Ok / Err envelope
    errors.py         DburlError hierarchy
    logging.py        structlog configuration
    cli/              Typer CLI
"""

from dburl.capabilities import CONFIG, DOTENV, Capabilities
from dburl.config_store import ConfigStore, DictConfigStore, TomlConfigStore
from dburl.envfile import DotenvLoader, EnvFileLoader, UnavailableDotenvLoader
from dburl.environment import EnvironmentLookup
from dburl.errors import (
    CapabilityUnavailableError,
    ConfigKeyError,
    DburlError,
    DotenvError,
    EnvVarNotFoundError,
    EnvVarNotUnicodeError,
    ResolutionError,
)
from dburl.resolver import (
    DatabaseUrlResolver,
    build_default_resolver,
    extract_database_url,
    get_resolver,
    set_resolver,
)
from dburl.result import Err, Ok, Result

__version__ = "0.1.0"

__all__ = [
    # Resolver
    "DatabaseUrlResolver",
    "build_default_resolver",
    "extract_database_url",
    "get_resolver",
    "set_resolver",
    # Collaborators
    "EnvironmentLookup",
    "DotenvLoader",
    "EnvFileLoader",
    "UnavailableDotenvLoader",
    "ConfigStore",
    "DictConfigStore",
    "TomlConfigStore",
    # Capabilities
    "Capabilities",
    "CONFIG",
    "DOTENV",
    # Result
    "Ok",
    "Err",
    "Result",
    # Errors
    "DburlError",
    "ResolutionError",
    "EnvVarNotFoundError",
    "EnvVarNotUnicodeError",
    "ConfigKeyError",
    "CapabilityUnavailableError",
    "DotenvError",
]

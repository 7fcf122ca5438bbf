"""
CLI layer for dburl.

Provides a Typer application that resolves database URL references from
the shell.  Resolution logic lives in :mod:`dburl.resolver`; this package
handles only argument parsing and terminal output.

Entry point::

    dburl --help
"""

from dburl.cli.app import app

__all__ = ["app"]

"""
Root Typer application for the dburl CLI.

Commands::

    dburl resolve "dotenv:DATABASE_URL"     # print the resolved URL
    dburl capabilities                      # show capability flags
    dburl env                               # show .env files in load order
"""

from __future__ import annotations

import json
from contextlib import ExitStack
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dburl.capabilities import CONFIG, DOTENV, Capabilities
from dburl.envfile import discover_env_files, find_project_root
from dburl.logging import configure_logging
from dburl.resolver import build_default_resolver
from dburl.settings import get_settings

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="dburl",
    help="dburl: resolve database URL references (env:, dotenv:, config:).",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("dburl")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"dburl {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override DBURL_LOG_LEVEL."),
) -> None:
    """dburl CLI: resolve and inspect database URL references."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_format == "json",
    )


@app.command("resolve")
def resolve(
    candidate: str = typer.Argument(..., help="Literal URL or env:/dotenv:/config: reference."),
    as_json: bool = typer.Option(False, "--json", help="Print the result envelope as JSON."),
    no_dotenv: bool = typer.Option(False, "--no-dotenv", help="Disable the dotenv capability."),
    no_config: bool = typer.Option(False, "--no-config", help="Disable the config capability."),
    config_file: Path | None = typer.Option(None, "--config-file", "-c", help="TOML file backing config: keys."),
) -> None:
    """Resolve CANDIDATE and print the database URL."""
    settings = get_settings()
    if config_file is not None:
        settings = settings.model_copy(update={"config_file": config_file})

    with ExitStack() as stack:
        if no_dotenv:
            stack.enter_context(Capabilities.override(DOTENV, False))
        if no_config:
            stack.enter_context(Capabilities.override(CONFIG, False))
        result = build_default_resolver(settings).resolve(candidate)

    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        if result.is_err():
            raise typer.Exit(code=1)
        return

    if result.is_err():
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(result.error))}", highlight=False)
        raise typer.Exit(code=1)

    console.print(result.unwrap(), markup=False, highlight=False, soft_wrap=True)


@app.command("capabilities")
def capabilities() -> None:
    """Show capability flags and whether they are enabled."""
    table = Table()
    table.add_column("Capability")
    table.add_column("Prefix")
    table.add_column("Enabled")
    table.add_column("Env Override")
    for definition in Capabilities.list_capabilities():
        enabled = Capabilities.is_enabled(definition.name)
        table.add_row(
            definition.name,
            definition.prefix,
            "[green]yes[/green]" if enabled else "[red]no[/red]",
            definition.env_var,
        )
    console.print(table)


@app.command("env")
def show_env_files(
    tier: str | None = typer.Option(None, "--tier", "-t", help="Tier selecting .env.{tier}."),
) -> None:
    """Show which .env files a dotenv: reference would load."""
    settings = get_settings()
    root = settings.project_root or find_project_root()
    files = discover_env_files(root, tier or settings.tier or None)

    console.print(f"[bold]Project Root:[/bold] {root}", soft_wrap=True)
    if not files:
        console.print("[dim]No .env files found.[/dim]")
        return
    console.print("[bold]Files (in load order):[/bold]")
    for f in files:
        console.print(f"  ✓ {f}", soft_wrap=True)

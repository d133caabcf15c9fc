"""Main Typer application — imports and registers all CLI commands.

Entry point: ``devrefresh`` (configured via pyproject.toml console_scripts).

The callback loads ``Settings`` once, configures logging and builds the
``RefreshServices`` every command receives through ``ctx.obj``. A caller
that already passes ``obj`` (tests, wrappers) keeps its own services.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from devrefresh.cli.commands.frontend import frontend_dev_disable_cmd, frontend_dev_enable_cmd
from devrefresh.cli.commands.refresh import (
    database_download_cmd,
    database_refresh_local_cmd,
    database_refresh_remote_multi_cmd,
    dev_refresh_cmd,
)
from devrefresh.cli.commands.site import login_cmd, uri_cmd
from devrefresh.config import load_settings
from devrefresh.core.services import RefreshServices
from devrefresh.errors import ConfigurationError

app = typer.Typer(
    name="devrefresh",
    help="Refresh a local multi-site Drupal environment from the latest database snapshot.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

_err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Project config file (defaults to ./devrefresh.yml).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """devrefresh: local environment refresh for multi-site Drupal projects."""
    if isinstance(ctx.obj, RefreshServices):
        return

    try:
        settings = load_settings(config)
    except ConfigurationError as exc:
        _err_console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = RefreshServices(settings)


# Register subcommands
app.command(name="dev-refresh", help="Completely refresh a development environment.")(dev_refresh_cmd)
app.command(name="magic", hidden=True)(dev_refresh_cmd)
app.command(name="database-download", help="Download the latest database dump.")(database_download_cmd)
app.command(name="database-refresh-local", help="Refresh a site database in Lando.")(
    database_refresh_local_cmd
)
app.command(name="database-refresh-remote-multi", help="Refresh every site database on Tugboat.")(
    database_refresh_remote_multi_cmd
)
app.command(name="uri", help="Print the detected Lando URI for a site.")(uri_cmd)
app.command(name="login", help="Generate a Drupal login link.")(login_cmd)
app.command(name="frontend-dev-enable", help="Enable front-end development mode.")(
    frontend_dev_enable_cmd
)
app.command(name="fede", hidden=True)(frontend_dev_enable_cmd)
app.command(name="frontend-dev-disable", help="Disable front-end development mode.")(
    frontend_dev_disable_cmd
)
app.command(name="fedd", hidden=True)(frontend_dev_disable_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

"""``devrefresh uri`` and ``devrefresh login``."""

from __future__ import annotations

import typer
from rich.console import Console

from devrefresh.core.services import RefreshServices
from devrefresh.errors import DevRefreshError
from devrefresh.models.sites import DEFAULT_SITE

console = Console()


def uri_cmd(
    ctx: typer.Context,
    site_id: str = typer.Argument(DEFAULT_SITE, help="The Drupal site directory name."),
) -> None:
    """Print the URI Lando serves a site on."""
    services: RefreshServices = ctx.obj
    resolution = services.uri_resolver.try_resolve(site_id)
    if not resolution.ok:
        console.print(f"[bold red]Unable to resolve URI:[/bold red] {resolution.error}")
        raise typer.Exit(code=1)
    # Plain print so the URI can be captured by scripts.
    typer.echo(resolution.unwrap())


def login_cmd(
    ctx: typer.Context,
    site_id: str = typer.Argument(DEFAULT_SITE, help="The Drupal site directory name."),
    lando: bool = typer.Option(
        True,
        "--lando/--no-lando",
        help="Call drush through Lando with the detected URI, or call drush directly.",
    ),
) -> None:
    """Generate a one-time Drupal login link."""
    services: RefreshServices = ctx.obj
    try:
        if lando:
            uri = services.uri_resolver.resolve_uri(site_id)
            console.print(f"Lando URI detected: [bold]{uri}[/bold]")
            services.tools.login_link(site_id, uri)
        else:
            services.tools.login_link(site_id)
    except DevRefreshError as exc:
        console.print(f"[bold red]Login link failed:[/bold red] {exc.with_context(site_id=site_id)}")
        raise typer.Exit(code=1)

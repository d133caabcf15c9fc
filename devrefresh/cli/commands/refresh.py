"""Database refresh commands.

``dev-refresh``                  — full local refresh, ending in a login link.
``database-download``            — fetch the newest dump and print its path.
``database-refresh-local``       — download, import, clean up, deploy.
``database-refresh-remote-multi`` — reload every site on the preview host.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.rule import Rule

from devrefresh.cli.render import exit_for, print_multi_site_report, print_pipeline_report
from devrefresh.core.pipeline import RefreshPipeline
from devrefresh.core.services import RefreshServices
from devrefresh.models.sites import DEFAULT_SITE

console = Console()

SITE_ARGUMENT = typer.Argument(DEFAULT_SITE, help="The Drupal site directory name.")


def dev_refresh_cmd(ctx: typer.Context, site_id: str = SITE_ARGUMENT) -> None:
    """Completely refresh a development environment.

    Runs composer install, starts Lando, downloads and imports the latest
    database dump, runs drush deploy, builds front-end assets, enables
    front-end development mode and prints a login link.
    """
    services: RefreshServices = ctx.obj
    console.print(Rule("[bold]developer magic.[/bold]"))
    report = RefreshPipeline(services).dev_refresh(site_id)
    print_pipeline_report(console, report)
    exit_for(report.outcome)


def database_download_cmd(ctx: typer.Context, site_id: str = SITE_ARGUMENT) -> None:
    """Download the latest database dump for a site and print its path."""
    services: RefreshServices = ctx.obj
    console.print(Rule("[bold]database download.[/bold]"))
    report = RefreshPipeline(services).database_download(site_id)
    if report.succeeded:
        console.print(f"Database dump file downloaded >>> [bold]{report.result['path']}[/bold]")
        return
    print_pipeline_report(console, report)
    exit_for(report.outcome)


def database_refresh_local_cmd(ctx: typer.Context, site_id: str = SITE_ARGUMENT) -> None:
    """Refresh a site database in Lando and run drush deploy."""
    services: RefreshServices = ctx.obj
    console.print(Rule("[bold]database refresh.[/bold]"))
    report = RefreshPipeline(services).database_refresh_local(site_id)
    print_pipeline_report(console, report)
    exit_for(report.outcome)


def database_refresh_remote_multi_cmd(ctx: typer.Context) -> None:
    """Refresh every configured site's database on Tugboat.

    Sites without a snapshot are skipped with a warning.
    """
    services: RefreshServices = ctx.obj
    console.print(Rule("[bold]refresh tugboat databases.[/bold]"))
    report = RefreshPipeline(services).refresh_remote_sites()
    print_multi_site_report(console, report)
    exit_for(report.outcome)

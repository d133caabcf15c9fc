"""``devrefresh frontend-dev-enable`` / ``frontend-dev-disable``.

Both commands are destructive: they overwrite or delete the site's
``settings.local.php`` and ``fe.development.services.yml``. They ask first
unless ``--yes`` is given.
"""

from __future__ import annotations

import typer
from rich.console import Console

from devrefresh.core.services import RefreshServices
from devrefresh.errors import DevRefreshError, OperationCancelled
from devrefresh.models.options import DevModeOptions
from devrefresh.models.sites import DEFAULT_SITE

console = Console()

SITE_ARGUMENT = typer.Argument(DEFAULT_SITE, help="The Drupal site directory name.")
YES_OPTION = typer.Option(False, "--yes", "-y", help="Default answers to yes.")


def frontend_dev_enable_cmd(
    ctx: typer.Context,
    site_id: str = SITE_ARGUMENT,
    yes: bool = YES_OPTION,
) -> None:
    """Enable front-end development mode (Twig debug on, render caches off)."""
    services: RefreshServices = ctx.obj
    try:
        paths = services.dev_mode.enable(site_id, DevModeOptions(assume_yes=yes))
    except OperationCancelled as exc:
        console.print(f"[bold yellow]Cancelled:[/bold yellow] {exc.reason}")
        return
    except DevRefreshError as exc:
        console.print(f"[bold red]Enable failed:[/bold red] {exc.with_context(site_id=site_id)}")
        raise typer.Exit(code=1)
    except OSError as exc:
        console.print(f"[bold red]Enable failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print("[bold green]Front-end development mode enabled.[/bold green]")
    for path in paths:
        console.print(f"  [dim]wrote[/dim] {path}")


def frontend_dev_disable_cmd(
    ctx: typer.Context,
    site_id: str = SITE_ARGUMENT,
    yes: bool = YES_OPTION,
) -> None:
    """Disable front-end development mode by removing the override files."""
    services: RefreshServices = ctx.obj
    try:
        removed = services.dev_mode.disable(site_id, DevModeOptions(assume_yes=yes))
    except OperationCancelled as exc:
        console.print(f"[bold yellow]Cancelled:[/bold yellow] {exc.reason}")
        return
    except OSError as exc:
        console.print(f"[bold red]Disable failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print("[bold green]Front-end development mode disabled.[/bold green]")
    for path in removed:
        console.print(f"  [dim]removed[/dim] {path}")

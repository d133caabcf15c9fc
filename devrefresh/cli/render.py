"""Rich output for pipeline reports.

Color scheme
------------
- green     : PASSED
- red       : FAILED
- yellow    : RUNNING / CANCELLED
- dim       : NOT_STARTED
- magenta   : SKIPPED
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from devrefresh.models.results import MultiSiteReport, PipelineReport
from devrefresh.models.stages import Outcome, StageState

_STATE_ICONS: dict[StageState, str] = {
    StageState.PASSED: "[green]PASSED[/green]",
    StageState.FAILED: "[bold red]FAILED[/bold red]",
    StageState.RUNNING: "[yellow]RUNNING[/yellow]",
    StageState.CANCELLED: "[yellow]CANCELLED[/yellow]",
    StageState.NOT_STARTED: "[dim]NOT STARTED[/dim]",
    StageState.SKIPPED: "[magenta]SKIPPED[/magenta]",
}


def _state_table(title: str, first_column: str, states: dict[str, StageState]) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column(first_column, style="cyan")
    table.add_column("State", justify="center")
    for name, state in states.items():
        table.add_row(name, _STATE_ICONS.get(state, state.value))
    return table


def print_pipeline_report(console: Console, report: PipelineReport) -> None:
    console.print()
    console.print(
        _state_table(f"{report.pipeline} ({report.site_id})", "Stage", report.stage_states)
    )
    _print_outcome(console, report.outcome, report.error)


def print_multi_site_report(console: Console, report: MultiSiteReport) -> None:
    console.print()
    console.print(_state_table("database-refresh-remote-multi", "Site", report.site_states))
    for warning in report.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")
    _print_outcome(console, report.outcome, report.error)


def _print_outcome(console: Console, outcome: Outcome, error: str | None) -> None:
    if outcome == Outcome.SUCCEEDED:
        console.print("[bold green]Done.[/bold green]")
    elif outcome == Outcome.CANCELLED:
        console.print(f"[bold yellow]Cancelled:[/bold yellow] {error or 'operation cancelled.'}")
    else:
        console.print(f"[bold red]Failed:[/bold red] {error}")


def exit_for(outcome: Outcome) -> None:
    """Exit non-zero only when the run failed; cancelling is not an error."""
    if outcome == Outcome.FAILED:
        raise typer.Exit(code=1)

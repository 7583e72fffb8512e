"""Common CLI option factories and helpers.

It provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- Shared option type aliases
- Report rendering shared by the GitHub and GitLab commands
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from dev_activity.activity import ActivityReport, OutputFormat, RepoStatus

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def require(value: str, env_var: str) -> str:
    """Return ``value`` or exit with an error naming the missing variable."""
    if not value:
        console.print(f"[red]Error:[/red] {env_var} not set in environment")
        raise typer.Exit(1)
    return value


# Typer options as Annotated aliases so commands share flags and help text.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

RepoLimitOption = Annotated[
    int | None,
    typer.Option(
        "--limit",
        "-l",
        min=1,
        help="Maximum repositories to process (default: REPO_LIMIT)",
    ),
]

UserArgument = Annotated[
    str | None,
    typer.Argument(
        help="Username (default: from environment)",
    ),
]


def _status_cell(status: RepoStatus) -> str:
    match status:
        case RepoStatus.OK:
            return "[green]ok[/green]"
        case RepoStatus.SKIPPED:
            return "[yellow]skipped[/yellow]"
        case RepoStatus.FAILED:
            return "[red]failed[/red]"
        case _:
            return str(status)


def _fmt(value: int | None) -> str:
    return "N/A" if value is None else str(value)


def print_report(
    report: ActivityReport,
    output_format: OutputFormat,
    *,
    lines: bool = False,
) -> None:
    """Render an activity report as JSON or a Rich table."""
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(report.to_dict()))
        return

    table = Table(title=f"{report.provider.value} activity for {report.username}")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Status")
    if lines:
        table.add_column("Branch")
        table.add_column("Lines", justify="right")
    else:
        table.add_column("Commits", justify="right")
        table.add_column("Stars", justify="right")
        table.add_column("Forks", justify="right")
        table.add_column("Views", justify="right")

    for repo in report.repos:
        row = [str(repo.repo_id), repo.full_name or repo.name, _status_cell(repo.status)]
        if lines:
            row += [repo.branch or "", _fmt(repo.lines)]
        else:
            row += [_fmt(repo.commits), _fmt(repo.stars), _fmt(repo.forks), _fmt(repo.views)]
        table.add_row(*row)

    console.print(table)
    _print_footer(report)


def print_scores(report: ActivityReport, output_format: OutputFormat) -> None:
    """Render a contribution score report."""
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(report.to_dict()))
        return

    table = Table(title=f"Contribution Score Summary for {report.username}")
    table.add_column("Repository", style="cyan")
    table.add_column("RIS", justify="right")
    table.add_column("CQS", justify="right")
    table.add_column("PPB", justify="right")
    table.add_column("Score", justify="right", style="bold")

    for entry in report.scores:
        if entry.score is None:
            table.add_row(entry.full_name, "", "", "", f"[red]{entry.error or 'error'}[/red]")
            continue
        table.add_row(
            entry.full_name,
            f"{entry.score.ris:.2f}",
            f"{entry.score.cqs:.2f}",
            f"{entry.score.ppb:.0f}",
            f"{entry.score.score} points",
        )

    console.print(table)
    console.print(f"  Total score: [bold]{report.total_score}[/bold]")
    _print_footer(report)


def _print_footer(report: ActivityReport) -> None:
    if report.aborted:
        console.print(f"[red]Run stopped early:[/red] {report.abort_reason}")
    console.print(
        f"  Total API requests made: {report.stats.requests} "
        f"(rate limited: {report.stats.rate_limited}, "
        f"waited: {report.stats.waited_seconds:.0f}s)"
    )

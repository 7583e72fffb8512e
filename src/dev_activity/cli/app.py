"""Main CLI application for dev-activity."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from dev_activity import __version__
from dev_activity.cli import github as github_cmd
from dev_activity.cli import gitlab as gitlab_cmd
from dev_activity.config import get_settings
from dev_activity.logging import setup_logging

app = typer.Typer(
    name="devactivity",
    help="Summarize a developer's public activity on GitHub and GitLab.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"devactivity version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """dev-activity - commits, stars, forks, views and scores per repository."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.add_typer(github_cmd.app, name="github")
app.add_typer(gitlab_cmd.app, name="gitlab")


if __name__ == "__main__":
    app()

"""GitLab activity commands."""

import typer

from dev_activity.activity import ActivityReport, GitLabActivityOrchestrator, OutputFormat
from dev_activity.api import GitLabActivityService, gitlab_client
from dev_activity.cli.common import (
    OutputFormatOption,
    RepoLimitOption,
    UserArgument,
    print_report,
    require,
    run_async_command,
)
from dev_activity.config import get_settings

app = typer.Typer(help="GitLab activity commands")


@app.command("activity")
def show_activity(
    user: UserArgument = None,
    limit: RepoLimitOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Commits, stars and forks for projects the user pushed to.

    Examples:
        devactivity gitlab activity someone
    """
    settings = get_settings()
    username = user or require(settings.gitlab_user, "GITLAB_USER")
    repo_limit = limit or settings.repo_limit

    async def _collect() -> ActivityReport:
        async with gitlab_client(settings) as client:
            service = GitLabActivityService(client, per_page=settings.per_page)
            return await GitLabActivityOrchestrator(service).collect_activity(
                username, repo_limit
            )

    report = run_async_command(_collect(), error_prefix="GitLab query failed")
    print_report(report, output_format)
    if report.aborted and not report.repos:
        raise typer.Exit(1)

"""GitHub activity commands."""

import typer
from rich.table import Table

from dev_activity.activity import ActivityReport, GitHubActivityOrchestrator, OutputFormat
from dev_activity.api import (
    GitHubActivityService,
    RateLimitPool,
    RateLimitStatus,
    github_client,
)
from dev_activity.cli.common import (
    OutputFormatOption,
    RepoLimitOption,
    UserArgument,
    console,
    print_report,
    print_scores,
    require,
    run_async_command,
)
from dev_activity.config import get_settings

app = typer.Typer(help="GitHub activity commands")


@app.command("repos")
def list_repos(
    user: UserArgument = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List a user's public repositories.

    Examples:
        devactivity github repos octocat
    """
    settings = get_settings()
    username = user or require(settings.github_user, "GITHUB_USER")

    async def _list() -> None:
        async with github_client(settings) as client:
            service = GitHubActivityService(client, per_page=settings.per_page)
            repos = await service.list_user_repos(username)

        if output_format == OutputFormat.JSON:
            console.print_json(data=[r.model_dump() for r in repos])
            return

        table = Table(title=f"Repositories of {username}")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Default branch")
        table.add_column("Stars", justify="right")
        table.add_column("Forks", justify="right")
        for repo in repos:
            table.add_row(
                str(repo.id),
                repo.full_name,
                repo.default_branch or "",
                str(repo.stargazers_count),
                str(repo.forks_count),
            )
        console.print(table)
        console.print(f"  {len(repos)} repo(s), {client.request_count} API request(s)")

    run_async_command(_list())


@app.command("activity")
def show_activity(
    user: UserArgument = None,
    limit: RepoLimitOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Commits, stars, forks and views for repos the user committed to.

    Examples:
        devactivity github activity octocat
        devactivity github activity octocat --limit 10 --format json
    """
    settings = get_settings()
    username = user or require(settings.github_user, "GITHUB_USER")
    repo_limit = limit or settings.repo_limit

    async def _collect() -> ActivityReport:
        async with github_client(settings) as client:
            service = GitHubActivityService(client, per_page=settings.per_page)
            return await GitHubActivityOrchestrator(service).collect_activity(
                username, repo_limit
            )

    report = run_async_command(_collect(), error_prefix="GitHub query failed")
    print_report(report, output_format)
    if report.aborted and not report.repos:
        raise typer.Exit(1)


@app.command("score")
def show_score(
    user: UserArgument = None,
    limit: RepoLimitOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Contribution score per repository.

    Examples:
        devactivity github score octocat --limit 3
    """
    settings = get_settings()
    username = user or require(settings.github_user, "GITHUB_USER")
    repo_limit = limit or settings.repo_limit

    async def _collect() -> ActivityReport:
        async with github_client(settings) as client:
            service = GitHubActivityService(client, per_page=settings.per_page)
            return await GitHubActivityOrchestrator(service).collect_scores(username, repo_limit)

    report = run_async_command(_collect(), error_prefix="Scoring failed")
    print_scores(report, output_format)
    if report.aborted and not report.scores:
        raise typer.Exit(1)


@app.command("lines")
def show_lines(
    user: UserArgument = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Lines of code in the user's repositories that contain their commits.

    Examples:
        devactivity github lines octocat
    """
    settings = get_settings()
    username = user or require(settings.github_user, "GITHUB_USER")

    async def _collect() -> ActivityReport:
        async with github_client(settings) as client:
            service = GitHubActivityService(client, per_page=settings.per_page)
            return await GitHubActivityOrchestrator(service).collect_line_counts(username)

    report = run_async_command(_collect(), error_prefix="Line count failed")
    print_report(report, output_format, lines=True)
    if report.aborted and not report.repos:
        raise typer.Exit(1)


def _get_status_style(status: RateLimitStatus) -> str:
    """Get rich style for status."""
    match status:
        case RateLimitStatus.HEALTHY:
            return "[green]HEALTHY[/green]"
        case RateLimitStatus.WARNING:
            return "[yellow]WARNING[/yellow]"
        case RateLimitStatus.CRITICAL:
            return "[red]CRITICAL[/red]"
        case RateLimitStatus.EXHAUSTED:
            return "[bold red]EXHAUSTED[/bold red]"
        case _:
            return str(status)


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


@app.command("rate-limit")
def show_rate_limit() -> None:
    """Show current GitHub API rate limit status.

    Examples:
        devactivity github rate-limit
    """
    settings = get_settings()
    thresholds = settings.rate_limit

    async def _check() -> None:
        async with github_client(settings) as client:
            snapshot = await client.fetch_rate_limit()

        table = Table(title="GitHub API Rate Limits")
        table.add_column("Pool", style="bold")
        table.add_column("Status")
        table.add_column("Remaining", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Used %", justify="right")
        table.add_column("Resets In", justify="right")

        for pool in RateLimitPool:
            pool_limit = snapshot.get_pool(pool)
            if pool_limit is None:
                continue
            status = pool_limit.get_status(
                thresholds.healthy_threshold_pct,
                thresholds.warning_threshold_pct,
            )
            table.add_row(
                pool.value,
                _get_status_style(status),
                str(pool_limit.remaining),
                str(pool_limit.limit),
                f"{pool_limit.usage_percent:.1f}%",
                _format_time_remaining(pool_limit.seconds_until_reset),
            )

        console.print(table)

        core = snapshot.get_core()
        if core is not None and core.remaining == 0:
            console.print(
                f"\n[red]Rate limit exhausted![/red] "
                f"Wait {_format_time_remaining(core.seconds_until_reset)} before making API calls."
            )

    run_async_command(_check())

"""Activity orchestration - collect per-repository metrics for one user.

Repositories are processed strictly one after another. A failure on one
repository is recorded and the run moves on. Persistent rate limiting
(retries exhausted) ends the run early, and so does any error while
discovering the repositories to process.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from dev_activity.api.exceptions import ApiClientError, ApiHttpError, ApiRateLimitError
from dev_activity.api.github import PRODUCTION_PREFIXES
from dev_activity.logging import bind_repo, get_logger
from dev_activity.scoring import ContributionMetrics, score_contribution

from .enums import Provider
from .results import ActivityReport, RepoActivity, RepoScore

if TYPE_CHECKING:
    from dev_activity.api.github import GitHubActivityService
    from dev_activity.api.gitlab import GitLabActivityService
    from dev_activity.schemas import GitHubRepository

logger = get_logger(__name__)


def _discovery_failed(report: ActivityReport, error: Exception, start: float) -> ActivityReport:
    """End a run whose repository discovery failed; no repository was attempted."""
    logger.error("Repository discovery failed for {}: {}", report.username, error)
    report.abort(error)
    report.duration_seconds = time.monotonic() - start
    return report


class GitHubActivityOrchestrator:
    """Collects GitHub activity reports for a user.

    Usage:
        async with github_client() as client:
            orchestrator = GitHubActivityOrchestrator(GitHubActivityService(client))
            report = await orchestrator.collect_activity("octocat", repo_limit=5)
    """

    def __init__(self, service: GitHubActivityService) -> None:
        self._service = service

    def _new_report(self, username: str) -> ActivityReport:
        return ActivityReport(
            provider=Provider.GITHUB,
            username=username,
            stats=self._service.client.stats,
        )

    async def collect_activity(self, username: str, repo_limit: int) -> ActivityReport:
        """Commits, stars, forks and views for repositories the user committed to.

        Repositories are discovered through commit search and processed in
        name order.
        """
        start = time.monotonic()
        report = self._new_report(username)

        try:
            found = await self._service.search_commit_repositories(username, repo_limit)
        except ApiClientError as e:
            return _discovery_failed(report, e, start)
        logger.info("Found {} repo(s) with commits by {}", len(found), username)

        for repo in sorted(found, key=lambda r: r.name.casefold()):
            log = bind_repo(repo.full_name, repo_id=repo.id)
            try:
                info = await self._service.get_repository(repo.id)
                if info is None:
                    report.repos.append(
                        RepoActivity.from_skipped(repo.id, repo.name, "no data", repo.full_name)
                    )
                    continue
                owner = info.owner.login
                commits = await self._count_commits(owner, info.name, username)
                views = None
                # Traffic data is only visible to users with push access
                if owner.casefold() == username.casefold():
                    views = await self._service.get_traffic_views(owner, info.name)
            except ApiRateLimitError as e:
                log.error("Rate limit persisted, stopping run: {}", e)
                report.repos.append(RepoActivity.from_error(repo.id, repo.name, e, repo.full_name))
                report.abort(e)
                break
            except ApiClientError as e:
                log.warning("Skipping repo after error: {}", e)
                report.repos.append(RepoActivity.from_error(repo.id, repo.name, e, repo.full_name))
                continue

            report.repos.append(
                RepoActivity(
                    repo_id=info.id,
                    name=info.name,
                    full_name=info.full_name,
                    commits=commits,
                    stars=info.stargazers_count,
                    forks=info.forks_count,
                    views=views,
                )
            )
            log.info(
                "Commits by {}: {}, Stars: {}, Forks: {}, Views: {}",
                username,
                commits,
                info.stargazers_count,
                info.forks_count,
                views if views is not None else "N/A",
            )

        report.duration_seconds = time.monotonic() - start
        logger.info("Total API requests made: {}", report.stats.requests)
        return report

    async def collect_scores(self, username: str, repo_limit: int) -> ActivityReport:
        """Contribution score per repository the user committed to."""
        start = time.monotonic()
        report = self._new_report(username)

        try:
            found = await self._service.search_commit_repositories(username, repo_limit)
        except ApiClientError as e:
            return _discovery_failed(report, e, start)
        for repo in found[:repo_limit]:
            log = bind_repo(repo.full_name, repo_id=repo.id)
            try:
                metrics = await self._collect_metrics(repo, username)
            except ApiRateLimitError as e:
                log.error("Rate limit persisted, stopping run: {}", e)
                report.scores.append(RepoScore(full_name=repo.full_name, error=str(e)))
                report.abort(e)
                break
            except ApiClientError as e:
                log.warning("Skipping repo after error: {}", e)
                report.scores.append(RepoScore(full_name=repo.full_name, error=str(e)))
                continue

            score = score_contribution(metrics)
            log.info(
                "RIS={:.2f} CQS={:.2f} PPB={:.0f} score={}",
                score.ris,
                score.cqs,
                score.ppb,
                score.score,
            )
            report.scores.append(RepoScore(full_name=repo.full_name, metrics=metrics, score=score))

        report.duration_seconds = time.monotonic() - start
        return report

    async def _count_commits(self, owner: str, repo: str, username: str) -> int | None:
        """Commit count, or None when the commits endpoint answers with an HTTP error.

        The repository metadata was already fetched, so its stars and forks
        are still reported.
        """
        try:
            return await self._service.count_user_commits(owner, repo, username)
        except ApiHttpError as e:
            logger.warning("Commit count unavailable for {}/{}: HTTP {}", owner, repo, e.status)
            return None

    async def _collect_metrics(self, repo: GitHubRepository, username: str) -> ContributionMetrics:
        owner, name = repo.owner.login, repo.name
        info = await self._service.get_repository_by_name(owner, name)
        if info is None or info.default_branch is None:
            return ContributionMetrics()

        contributors = await self._service.count_contributors(owner, name)
        commits = await self._service.list_user_commits(owner, name, info.default_branch, username)

        total_additions = 0
        production_commits = 0
        for commit in commits:
            detail = await self._service.get_commit_stats(owner, name, commit.sha)
            total_additions += detail.stats.additions
            if detail.touches_any(PRODUCTION_PREFIXES):
                production_commits += 1

        return ContributionMetrics(
            stars=info.stargazers_count,
            forks=info.forks_count,
            contributors=contributors,
            commits_by_user=len(commits),
            total_additions=total_additions,
            production_commits=production_commits,
        )

    async def collect_line_counts(self, username: str) -> ActivityReport:
        """Lines of code in the user's own repositories that contain their commits."""
        start = time.monotonic()
        report = self._new_report(username)

        try:
            repos = await self._service.list_user_repos(username)
        except ApiClientError as e:
            return _discovery_failed(report, e, start)
        for repo in repos:
            log = bind_repo(repo.full_name, repo_id=repo.id)
            branch = repo.default_branch
            if not branch:
                log.info("Skipping repo (no default branch)")
                report.repos.append(
                    RepoActivity.from_skipped(
                        repo.id, repo.name, "no default branch", repo.full_name
                    )
                )
                continue
            try:
                has_commits = await self._service.user_has_commits_on_branch(
                    repo.full_name, branch, username
                )
                if has_commits is None:
                    log.info("Skipping repo (empty or missing branch)")
                    report.repos.append(
                        RepoActivity.from_skipped(
                            repo.id, repo.name, "empty or missing branch", repo.full_name
                        )
                    )
                    continue
                if not has_commits:
                    continue
                lines = await self._service.count_lines_in_repo(repo.full_name, branch)
            except ApiRateLimitError as e:
                log.error("Rate limit persisted, stopping run: {}", e)
                report.repos.append(RepoActivity.from_error(repo.id, repo.name, e, repo.full_name))
                report.abort(e)
                break
            except ApiClientError as e:
                log.warning("Error counting lines: {}", e)
                report.repos.append(RepoActivity.from_error(repo.id, repo.name, e, repo.full_name))
                continue

            log.info("Lines in {} (branch: {}): {}", repo.full_name, branch, lines)
            report.repos.append(
                RepoActivity(
                    repo_id=repo.id,
                    name=repo.name,
                    full_name=repo.full_name,
                    stars=repo.stargazers_count,
                    forks=repo.forks_count,
                    lines=lines,
                    branch=branch,
                )
            )

        report.duration_seconds = time.monotonic() - start
        return report


class GitLabActivityOrchestrator:
    """Collects GitLab activity reports for a user."""

    def __init__(self, service: GitLabActivityService) -> None:
        self._service = service

    async def collect_activity(self, username: str, repo_limit: int) -> ActivityReport:
        """Commits, stars and forks for projects the user pushed to.

        GitLab exposes no public view counts, so ``views`` is always None.
        """
        start = time.monotonic()
        report = ActivityReport(
            provider=Provider.GITLAB,
            username=username,
            stats=self._service.client.stats,
        )

        try:
            user_id = await self._service.find_user_id(username)
            if user_id is None:
                report.aborted = True
                report.abort_reason = f"User '{username}' not found on GitLab"
                report.duration_seconds = time.monotonic() - start
                return report
            pushed = await self._service.pushed_projects(user_id, repo_limit)
        except ApiClientError as e:
            return _discovery_failed(report, e, start)

        projects = sorted(pushed.projects.values(), key=lambda p: p.name.casefold())
        logger.info("Projects identified for user '{}': {}", username, len(projects))

        for project in projects:
            log = bind_repo(project.path_with_namespace or project.name, repo_id=project.id)
            try:
                commits = 0
                if pushed.author_name:
                    commits = await self._service.count_commits(project.id, pushed.author_name)
            except ApiRateLimitError as e:
                log.error("Rate limit persisted, stopping run: {}", e)
                report.repos.append(
                    RepoActivity.from_error(
                        project.id, project.name, e, project.path_with_namespace
                    )
                )
                report.abort(e)
                break
            except ApiClientError as e:
                log.warning("Error fetching commits: {}", e)
                report.repos.append(
                    RepoActivity.from_error(
                        project.id, project.name, e, project.path_with_namespace
                    )
                )
                continue

            log.info(
                "Commits by {}: {}, Stars: {}, Forks: {}",
                pushed.author_name or username,
                commits,
                project.star_count,
                project.forks_count,
            )
            report.repos.append(
                RepoActivity(
                    repo_id=project.id,
                    name=project.name,
                    full_name=project.path_with_namespace,
                    commits=commits,
                    stars=project.star_count,
                    forks=project.forks_count,
                )
            )

        report.duration_seconds = time.monotonic() - start
        logger.info("Total API requests made: {}", report.stats.requests)
        return report

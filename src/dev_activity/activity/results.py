"""Result objects for activity collection.

Structured results provide consistent interfaces for logging, error
accounting, and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from dev_activity.api.client import RequestStats
from dev_activity.scoring import ContributionMetrics, ContributionScore

from .enums import Provider, RepoStatus


@dataclass
class RepoActivity:
    """Metrics collected for one repository (or why they are missing)."""

    repo_id: int
    """Stable repository/project ID from the API."""

    name: str
    """Repository name."""

    full_name: str = ""
    """owner/name (GitHub) or namespace/project (GitLab)."""

    status: RepoStatus = RepoStatus.OK

    commits: int | None = None
    """Commits authored by the user."""

    stars: int | None = None
    forks: int | None = None

    views: int | None = None
    """Views over the last 14 days (None when the API does not expose them)."""

    lines: int | None = None
    """Lines of code/text at the default branch head."""

    branch: str | None = None

    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status is not RepoStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.repo_id,
            "name": self.name,
            "full_name": self.full_name,
            "status": self.status.value,
            "commits": self.commits,
            "stars": self.stars,
            "forks": self.forks,
            "views": self.views,
        }
        if self.lines is not None:
            result["lines"] = self.lines
            result["branch"] = self.branch
        if self.error:
            result["error"] = self.error
        return result

    @classmethod
    def from_error(
        cls, repo_id: int, name: str, error: Exception, full_name: str = ""
    ) -> RepoActivity:
        """Create a result representing a failed repository."""
        return cls(
            repo_id=repo_id,
            name=name,
            full_name=full_name,
            status=RepoStatus.FAILED,
            error=f"{type(error).__name__}: {error}",
        )

    @classmethod
    def from_skipped(
        cls, repo_id: int, name: str, reason: str, full_name: str = ""
    ) -> RepoActivity:
        """Create a result for a repository without data."""
        return cls(
            repo_id=repo_id,
            name=name,
            full_name=full_name,
            status=RepoStatus.SKIPPED,
            error=reason,
        )


@dataclass
class RepoScore:
    """Contribution score for one repository."""

    full_name: str
    metrics: ContributionMetrics | None = None
    score: ContributionScore | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"repo": self.full_name}
        if self.metrics is not None:
            result["metrics"] = self.metrics.model_dump()
        if self.score is not None:
            result.update(self.score.model_dump())
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class ActivityReport:
    """Result of one collection run for a single user.

    Aggregates per-repository results; a run is ``aborted`` when the API
    kept rate limiting past the retry ceiling, or repository discovery
    failed, and the remaining repositories were not attempted.
    """

    provider: Provider
    username: str

    repos: list[RepoActivity] = field(default_factory=list)

    scores: list[RepoScore] = field(default_factory=list)

    aborted: bool = False
    abort_reason: str | None = None

    stats: RequestStats = field(default_factory=RequestStats)
    """API request counters of the client that produced this report."""

    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.repos if r.status is RepoStatus.OK)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.repos if r.status is RepoStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.repos if r.status is RepoStatus.FAILED)

    @property
    def total_score(self) -> int:
        return sum(s.score.score for s in self.scores if s.score is not None)

    def abort(self, error: Exception) -> None:
        self.aborted = True
        self.abort_reason = str(error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "summary": {
                "provider": self.provider.value,
                "username": self.username,
                "total_repos": len(self.repos) or len(self.scores),
                "succeeded": self.succeeded,
                "skipped": self.skipped,
                "failed": self.failed,
                "aborted": self.aborted,
                "api_requests": self.stats.requests,
                "rate_limited": self.stats.rate_limited,
                "waited_seconds": round(self.stats.waited_seconds, 2),
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "repositories": [r.to_dict() for r in self.repos],
        }
        if self.abort_reason:
            result["summary"]["abort_reason"] = self.abort_reason
        if self.scores:
            result["summary"]["total_score"] = self.total_score
            result["scores"] = [s.to_dict() for s in self.scores]
        return result

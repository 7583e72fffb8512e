"""Tests for activity result objects."""

from dev_activity.activity import ActivityReport, Provider, RepoActivity, RepoScore, RepoStatus
from dev_activity.api import ApiHttpError, ApiRateLimitError, RequestStats
from dev_activity.scoring import ContributionMetrics, score_contribution


class TestRepoActivity:
    def test_from_error(self) -> None:
        error = ApiHttpError("https://api.test/repos/o/r", 500)

        result = RepoActivity.from_error(1, "r", error, "o/r")

        assert result.status is RepoStatus.FAILED
        assert not result.success
        assert result.error == "ApiHttpError: Failed to fetch https://api.test/repos/o/r: 500"

    def test_from_skipped(self) -> None:
        result = RepoActivity.from_skipped(1, "r", "no default branch")

        assert result.status is RepoStatus.SKIPPED
        assert result.success
        assert result.error == "no default branch"

    def test_to_dict_omits_lines_when_not_counted(self) -> None:
        result = RepoActivity(repo_id=1, name="r", full_name="o/r", commits=4, stars=2, forks=0)

        data = result.to_dict()

        assert data == {
            "id": 1,
            "name": "r",
            "full_name": "o/r",
            "status": "ok",
            "commits": 4,
            "stars": 2,
            "forks": 0,
            "views": None,
        }

    def test_to_dict_with_lines(self) -> None:
        result = RepoActivity(repo_id=1, name="r", lines=120, branch="main")

        data = result.to_dict()

        assert data["lines"] == 120
        assert data["branch"] == "main"


class TestActivityReport:
    def test_counts(self) -> None:
        report = ActivityReport(provider=Provider.GITHUB, username="octocat")
        report.repos = [
            RepoActivity(repo_id=1, name="a"),
            RepoActivity.from_skipped(2, "b", "no data"),
            RepoActivity.from_error(3, "c", ValueError("x")),
        ]

        assert report.succeeded == 1
        assert report.skipped == 1
        assert report.failed == 1

    def test_abort(self) -> None:
        report = ActivityReport(provider=Provider.GITLAB, username="someone")

        report.abort(ApiRateLimitError("https://api.test/x", 429))

        assert report.aborted
        assert "max retries" in (report.abort_reason or "")

    def test_to_dict_summary(self) -> None:
        stats = RequestStats(requests=12, rate_limited=2, waited_seconds=6.0)
        report = ActivityReport(provider=Provider.GITHUB, username="octocat", stats=stats)
        report.repos = [RepoActivity(repo_id=1, name="a", commits=3)]

        data = report.to_dict()

        summary = data["summary"]
        assert summary["provider"] == "github"
        assert summary["api_requests"] == 12
        assert summary["rate_limited"] == 2
        assert summary["waited_seconds"] == 6.0
        assert summary["total_repos"] == 1
        assert "abort_reason" not in summary
        assert "scores" not in data
        assert data["repositories"][0]["commits"] == 3

    def test_scores_total(self) -> None:
        metrics = ContributionMetrics(stars=3, forks=1, contributors=2, commits_by_user=3)
        report = ActivityReport(provider=Provider.GITHUB, username="octocat")
        report.scores = [
            RepoScore(full_name="o/a", metrics=metrics, score=score_contribution(metrics)),
            RepoScore(full_name="o/b", error="boom"),
        ]

        data = report.to_dict()

        assert report.total_score == score_contribution(metrics).score
        assert data["summary"]["total_score"] == report.total_score
        assert data["scores"][0]["repo"] == "o/a"
        assert data["scores"][1] == {"repo": "o/b", "error": "boom"}

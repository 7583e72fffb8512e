"""Tests for contribution score arithmetic."""

import math

import pytest

from dev_activity.scoring import (
    ContributionMetrics,
    contribution_quality,
    production_bonus,
    repository_importance,
    score_contribution,
)


class TestComponents:
    def test_repository_importance(self) -> None:
        # log2(4)*2 + log2(2)*1.5 + 2*0.5
        assert repository_importance(stars=3, forks=1, contributors=2) == 6.5

    def test_repository_importance_of_empty_repo(self) -> None:
        assert repository_importance(0, 0, 0) == 0.0

    def test_contribution_quality(self) -> None:
        assert contribution_quality(commits=3, additions=250) == 8.5

    def test_production_bonus(self) -> None:
        assert production_bonus(2) == 10.0


class TestScoreContribution:
    def test_score(self) -> None:
        metrics = ContributionMetrics(
            stars=3,
            forks=1,
            contributors=2,
            commits_by_user=3,
            total_additions=250,
            production_commits=1,
        )

        result = score_contribution(metrics)

        assert result.ris == 6.5
        assert result.cqs == 8.5
        assert result.ppb == 5.0
        # 6.5 * 13.5 = 87.75
        assert result.score == 88

    @pytest.mark.parametrize(("additions", "expected"), [(50, 1), (250, 3)])
    def test_halves_round_up(self, additions: int, expected: int) -> None:
        """0.5 -> 1 and 2.5 -> 3."""
        metrics = ContributionMetrics(contributors=2, total_additions=additions)

        assert score_contribution(metrics).score == expected

    def test_no_importance_means_zero(self) -> None:
        metrics = ContributionMetrics(commits_by_user=40, total_additions=10_000)

        assert score_contribution(metrics).score == 0

    def test_large_repository(self) -> None:
        metrics = ContributionMetrics(stars=1023, forks=0, contributors=0, commits_by_user=1)

        result = score_contribution(metrics)

        assert math.isclose(result.ris, 20.0)
        assert result.score == 40

    def test_negative_metrics_rejected(self) -> None:
        with pytest.raises(ValueError):
            ContributionMetrics(stars=-1)

"""Contribution score arithmetic.

score = RIS * (CQS + PPB), rounded, where
- RIS (Repository Importance Score) = log2(stars+1)*2 + log2(forks+1)*1.5 + contributors*0.5
- CQS (Contribution Quality Score) = commits*2 + additions/100
- PPB (Production Participation Bonus) = production_commits*5
"""

import math

from pydantic import BaseModel, Field


class ContributionMetrics(BaseModel):
    """Inputs to the contribution score for one repository."""

    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    contributors: int = Field(default=0, ge=0)
    commits_by_user: int = Field(default=0, ge=0)
    total_additions: int = Field(default=0, ge=0)
    production_commits: int = Field(default=0, ge=0, description="Commits touching src/ or lib/")


class ContributionScore(BaseModel):
    """Score breakdown for one repository."""

    ris: float
    cqs: float
    ppb: float
    score: int


def repository_importance(stars: int, forks: int, contributors: int) -> float:
    return math.log2(stars + 1) * 2 + math.log2(forks + 1) * 1.5 + contributors * 0.5


def contribution_quality(commits: int, additions: int) -> float:
    return commits * 2 + additions / 100


def production_bonus(production_commits: int) -> float:
    return production_commits * 5.0


def score_contribution(metrics: ContributionMetrics) -> ContributionScore:
    ris = repository_importance(metrics.stars, metrics.forks, metrics.contributors)
    cqs = contribution_quality(metrics.commits_by_user, metrics.total_additions)
    ppb = production_bonus(metrics.production_commits)
    # Half-up rounding, not Python's round-half-to-even
    score = math.floor(ris * (cqs + ppb) + 0.5)
    return ContributionScore(ris=ris, cqs=cqs, ppb=ppb, score=score)

"""Pydantic schemas for dev-activity.

This module provides the boundary models for GitHub and GitLab payloads.
"""

from .github_api import (
    GitHubBlob,
    GitHubCommitDetail,
    GitHubCommitFile,
    GitHubCommitRef,
    GitHubCommitSearchItem,
    GitHubCommitStats,
    GitHubOwner,
    GitHubRepository,
    GitHubTrafficViews,
    GitHubTree,
    GitHubTreeEntry,
)
from .gitlab_api import (
    GitLabEvent,
    GitLabEventAuthor,
    GitLabProject,
    GitLabUser,
)

__all__ = [
    # GitHub API
    "GitHubBlob",
    "GitHubCommitDetail",
    "GitHubCommitFile",
    "GitHubCommitRef",
    "GitHubCommitSearchItem",
    "GitHubCommitStats",
    "GitHubOwner",
    "GitHubRepository",
    "GitHubTrafficViews",
    "GitHubTree",
    "GitHubTreeEntry",
    # GitLab API
    "GitLabEvent",
    "GitLabEventAuthor",
    "GitLabProject",
    "GitLabUser",
]

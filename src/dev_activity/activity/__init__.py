"""Per-user activity collection across repositories."""

from .enums import OutputFormat, Provider, RepoStatus
from .orchestrator import GitHubActivityOrchestrator, GitLabActivityOrchestrator
from .results import ActivityReport, RepoActivity, RepoScore

__all__ = [
    "ActivityReport",
    "GitHubActivityOrchestrator",
    "GitLabActivityOrchestrator",
    "OutputFormat",
    "Provider",
    "RepoActivity",
    "RepoScore",
    "RepoStatus",
]

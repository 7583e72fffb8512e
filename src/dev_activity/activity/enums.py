"""Enums for activity collection."""

from enum import Enum


class Provider(str, Enum):
    """Source forge of an activity report."""

    GITHUB = "github"
    GITLAB = "gitlab"


class RepoStatus(str, Enum):
    """Outcome of processing one repository."""

    OK = "ok"
    """All metrics collected."""

    SKIPPED = "skipped"
    """Repository has no data (empty, missing branch, or not visible)."""

    FAILED = "failed"
    """An API error prevented collection; the run continued."""


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""

"""Developer activity aggregation and contribution scoring for GitHub and GitLab."""

__version__ = "0.1.0"

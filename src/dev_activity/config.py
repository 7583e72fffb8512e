"""Configuration settings for dev-activity."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiClientConfig(BaseModel):
    """Configuration for the resilient REST client.

    Controls endpoints, per-attempt timeout, and retry/pagination bounds.
    """

    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    gitlab_api_url: str = Field(
        default="https://gitlab.com/api/v4",
        description="Base URL of the GitLab REST API",
    )

    timeout_ms: int = Field(
        default=20000,
        ge=1,
        description="Milliseconds to wait for a response before aborting an attempt",
    )
    max_retries: int = Field(
        default=5,
        ge=0,
        description="Retries allowed after a rate-limited response (attempts = retries + 1)",
    )
    max_pages: int = Field(
        default=10,
        ge=1,
        description="Upper bound on pages fetched by a single pagination run",
    )


class RateLimitConfig(BaseModel):
    """Thresholds used to classify rate limit health.

    Only used for reporting; the client itself reacts to response
    headers, not to these percentages.
    """

    healthy_threshold_pct: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is HEALTHY",
    )
    warning_threshold_pct: float = Field(
        default=20.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is WARNING (below healthy)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Accounts
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    github_user: str = Field(
        default="",
        description="GitHub username whose activity is collected",
    )
    gitlab_token: str = Field(
        default="",
        description="GitLab personal access token",
    )
    gitlab_user: str = Field(
        default="",
        description="GitLab username whose activity is collected",
    )

    # --------------------------------------------------------------------------
    # Collection limits
    # --------------------------------------------------------------------------
    repo_limit: int = Field(
        default=5,
        ge=1,
        description="Maximum number of repositories to process per run",
    )
    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Page size for list endpoints (GitHub caps this at 100)",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Nested sections
    # --------------------------------------------------------------------------
    api: ApiClientConfig = Field(
        default_factory=ApiClientConfig,
        description="REST client configuration",
    )
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Rate limit reporting thresholds",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

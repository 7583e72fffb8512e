"""Tests for configuration settings."""

import pytest

from dev_activity.config import ApiClientConfig, RateLimitConfig, Settings, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self, monkeypatch):
        for var in ("GITHUB_TOKEN", "GITHUB_USER", "GITLAB_TOKEN", "GITLAB_USER", "REPO_LIMIT"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.github_token == ""
        assert settings.gitlab_user == ""
        assert settings.repo_limit == 5
        assert settings.per_page == 100
        assert settings.api.github_api_url == "https://api.github.com"
        assert settings.api.gitlab_api_url == "https://gitlab.com/api/v4"

    def test_client_defaults(self):
        """20 s per attempt, 5 retries (6 attempts), 10 pages."""
        config = ApiClientConfig()

        assert config.timeout_ms == 20000
        assert config.max_retries == 5
        assert config.max_pages == 10

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
        monkeypatch.setenv("GITHUB_USER", "octocat")
        monkeypatch.setenv("REPO_LIMIT", "12")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.github_token == "ghp_test"
        assert settings.github_user == "octocat"
        assert settings.repo_limit == 12
        assert settings.log_level == "DEBUG"

    def test_nested_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("API__MAX_RETRIES", "2")
        monkeypatch.setenv("API__TIMEOUT_MS", "500")
        monkeypatch.setenv("LOGGING__SERIALIZE", "true")

        settings = Settings(_env_file=None)

        assert settings.api.max_retries == 2
        assert settings.api.timeout_ms == 500
        assert settings.logging.serialize is True

    def test_rate_limit_thresholds_from_env(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT__WARNING_THRESHOLD_PCT", "30")

        settings = Settings(_env_file=None)

        assert settings.rate_limit.warning_threshold_pct == 30
        assert settings.rate_limit.healthy_threshold_pct == 50
        assert set(RateLimitConfig.model_fields) == {
            "healthy_threshold_pct",
            "warning_threshold_pct",
        }

    def test_settings_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("gitlab_token", "glpat_lower")

        settings = Settings(_env_file=None)

        assert settings.gitlab_token == "glpat_lower"

    def test_settings_log_level_validation(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    @pytest.mark.parametrize("per_page", ["0", "101"])
    def test_per_page_bounds(self, monkeypatch, per_page):
        monkeypatch.setenv("PER_PAGE", per_page)

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_reads_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITHUB_USER", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("GITHUB_USER=from-file\n")

        settings = Settings(_env_file=env_file)

        assert settings.github_user == "from-file"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_settings(self):
        assert isinstance(get_settings(), Settings)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

"""Unit tests for configuration settings."""
from __future__ import annotations

from src.config.settings import Settings, settings


class TestScoringSettings:
    """Tests for scoring configuration."""

    def test_weights_sum_to_100(self):
        """Aggregator weights are integer percentages summing to 100."""
        assert sum(settings.scoring.weights.values()) == 100

    def test_weights_cover_seven_categories(self):
        """Every category should have a weight and an improvement threshold."""
        scoring = settings.scoring
        assert len(scoring.weights) == 7
        assert set(scoring.weights) == set(scoring.improvement_thresholds)

    def test_status_bands(self):
        """Status band cut-offs should be 85/70/50/25."""
        scoring = settings.scoring
        assert (
            scoring.excellent_threshold,
            scoring.good_threshold,
            scoring.needs_improvement_threshold,
            scoring.poor_threshold,
        ) == (85, 70, 50, 25)


class TestEnvironmentOverrides:
    """Tests for environment variable overrides."""

    def test_defaults(self, monkeypatch):
        """Without env vars the defaults apply."""
        for name in ("AI_GRADER_DEBUG", "AI_GRADER_REQUEST_TIMEOUT", "AI_GRADER_LOG_LEVEL", "AI_GRADER_LOG_JSON"):
            monkeypatch.delenv(name, raising=False)
        fresh = Settings()
        assert fresh.debug is False
        assert fresh.fetcher.request_timeout == 15
        assert fresh.logging.level == "INFO"
        assert fresh.logging.json_output is False

    def test_request_timeout_override(self, monkeypatch):
        """AI_GRADER_REQUEST_TIMEOUT should override the fetch timeout."""
        monkeypatch.setenv("AI_GRADER_REQUEST_TIMEOUT", "30")
        assert Settings().fetcher.request_timeout == 30

    def test_pagespeed_key_override(self, monkeypatch):
        """GOOGLE_PAGESPEED_API_KEY should configure the performance lookup."""
        monkeypatch.setenv("GOOGLE_PAGESPEED_API_KEY", "secret")
        assert Settings().performance.api_key == "secret"

    def test_cache_ttl_override(self, monkeypatch):
        """AI_GRADER_CACHE_TTL should override the cache lifetime."""
        monkeypatch.setenv("AI_GRADER_CACHE_TTL", "60")
        assert Settings().performance.cache_ttl == 60

    def test_logging_overrides(self, monkeypatch):
        """Log level and JSON toggle should come from the environment."""
        monkeypatch.delenv("AI_GRADER_DEBUG", raising=False)
        monkeypatch.setenv("AI_GRADER_LOG_LEVEL", "warning")
        monkeypatch.setenv("AI_GRADER_LOG_JSON", "true")
        fresh = Settings()
        assert fresh.logging.level == "WARNING"
        assert fresh.logging.json_output is True

    def test_debug_forces_debug_logging(self, monkeypatch):
        """AI_GRADER_DEBUG should switch logging to DEBUG."""
        monkeypatch.setenv("AI_GRADER_DEBUG", "1")
        monkeypatch.setenv("AI_GRADER_LOG_LEVEL", "ERROR")
        fresh = Settings()
        assert fresh.debug is True
        assert fresh.logging.level == "DEBUG"

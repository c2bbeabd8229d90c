"""Centralized configuration settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class FetcherSettings:
    """Settings for HTML and robots.txt fetching."""
    request_timeout: int = 15
    max_response_size: int = 10 * 1024 * 1024  # 10 MB
    max_redirects: int = 5
    user_agent: str = "AI-Readiness-Grader/1.0 (+https://github.com/ai-readiness-grader)"
    robots_timeout: int = 10


@dataclass
class PerformanceSettings:
    """Settings for the PageSpeed Insights lookup."""
    api_key: str = ""
    api_url: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    strategy: str = "mobile"
    cache_ttl: int = 300  # seconds
    cache_size: int = 256
    timeout: int = 30


@dataclass
class NLPSettings:
    """Settings for NLP processing."""
    # spaCy model preference order
    # Will try each model in order until one loads successfully
    spacy_models: list[str] = field(default_factory=lambda: [
        "en_core_web_sm",  # English (default, fast)
        "xx_ent_wiki_sm",  # Multilingual entities
    ])
    # Entity labels mapped onto persons / organizations / locations / brands
    entity_labels: tuple[str, ...] = ("PERSON", "PER", "ORG", "GPE", "LOC", "FAC", "PRODUCT")
    # Enable CJK-specific processing
    enable_cjk_fallback: bool = True
    max_entities: int = 100


@dataclass
class ScoringSettings:
    """Settings for category scoring and aggregation."""
    # Aggregator weights as integer percentages (sum to 100)
    weights: dict[str, int] = field(default_factory=lambda: {
        "ai_optimization": 25,
        "content_quality": 18,
        "technical_crawlability": 16,
        "eeat_signals": 12,
        "mobile_optimization": 12,
        "schema_analysis": 10,
        "technical_seo": 7,
    })

    # A sub-metric below this value emits a finding + recommendation
    recommendation_threshold: int = 70

    # Category score below which content improvements are generated
    improvement_thresholds: dict[str, int] = field(default_factory=lambda: {
        "ai_optimization": 70,
        "content_quality": 75,
        "technical_seo": 80,
        "eeat_signals": 70,
        "technical_crawlability": 75,
        "mobile_optimization": 75,
        "schema_analysis": 70,
    })

    # Status bands
    excellent_threshold: int = 85
    good_threshold: int = 70
    needs_improvement_threshold: int = 50
    poor_threshold: int = 25

    # Improvement priority cut-offs
    high_priority_below: int = 50
    medium_priority_below: int = 70

    # Overall score below which the "Overall Strategy" entry is appended
    overall_strategy_below: int = 70

    # Technical crawlability
    no_robots_txt_score: int = 80
    ai_bot_block_penalty: int = 12
    noindex_penalty: int = 30

    # Schema validation
    schema_error_penalty: int = 25


@dataclass
class SeoSettings:
    """Settings for SEO checker thresholds."""
    title_min_length: int = 30
    title_max_length: int = 60

    description_optimal_min: int = 120
    description_optimal_max: int = 160

    min_content_words: int = 300  # Thin content threshold
    descriptive_anchor_ratio: float = 0.8


@dataclass
class LoggingSettings:
    """Settings for structlog output."""
    level: str = "INFO"
    json_output: bool = False


@dataclass
class Settings:
    """Main application settings container."""
    fetcher: FetcherSettings = field(default_factory=FetcherSettings)
    performance: PerformanceSettings = field(default_factory=PerformanceSettings)
    nlp: NLPSettings = field(default_factory=NLPSettings)
    scoring: ScoringSettings = field(default_factory=ScoringSettings)
    seo: SeoSettings = field(default_factory=SeoSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Application settings
    debug: bool = False

    def __post_init__(self):
        """Load settings from environment variables."""
        # Override with environment variables if present
        self.debug = os.environ.get("AI_GRADER_DEBUG", "").lower() in ("true", "1", "yes")

        # Fetcher overrides
        if timeout := os.environ.get("AI_GRADER_REQUEST_TIMEOUT"):
            self.fetcher.request_timeout = int(timeout)

        # Performance overrides
        if api_key := os.environ.get("GOOGLE_PAGESPEED_API_KEY"):
            self.performance.api_key = api_key
        if cache_ttl := os.environ.get("AI_GRADER_CACHE_TTL"):
            self.performance.cache_ttl = int(cache_ttl)

        # Logging overrides
        if log_level := os.environ.get("AI_GRADER_LOG_LEVEL"):
            self.logging.level = log_level.upper()
        if log_json := os.environ.get("AI_GRADER_LOG_JSON"):
            self.logging.json_output = log_json.lower() in ("true", "1", "yes")
        if self.debug:
            self.logging.level = "DEBUG"


# Global settings instance
settings = Settings()

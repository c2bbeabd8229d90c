"""Category scores and the final analysis report."""
from __future__ import annotations

from typing import Literal

from pydantic import Field

from src.models.content import ExtractedContent, FrozenModel, Score

Status = Literal["excellent", "good", "needs-improvement", "poor", "critical"]
Priority = Literal["high", "medium", "low"]


class Recommendation(FrozenModel):
    """Structured recommendation attached to a category score."""

    text: str
    priority: Priority
    category: str
    implementation: str = ""
    expected_impact: str = ""
    time_to_implement: str = ""


class CategoryScore(FrozenModel):
    """Shared shape of the seven category scores."""

    score: Score
    status: Status
    findings: list[str] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)


class TechnicalSEO(CategoryScore):
    heading_structure: Score
    meta_info: Score
    alt_text: Score
    links: Score
    schema_markup: Score
    page_speed: Score


class ContentQuality(CategoryScore):
    comprehensive_coverage: Score
    relevance_to_user_intent: Score
    accuracy_and_currency: Score
    long_tail_keywords: Score
    natural_language: Score


class AIOptimization(CategoryScore):
    semantic_structure: Score
    answer_potential: Score
    content_clarity: Score
    chunkability: Score
    qa_format: Score
    entity_recognition: Score
    factual_density: Score
    semantic_clarity: Score
    content_structure_for_ai: Score = Field(..., alias="contentStructureForAI")
    contextual_relevance: Score


class EEATSignals(CategoryScore):
    expertise_experience: Score
    authoritativeness: Score
    trustworthiness: Score
    factual_accuracy: Score


class TechnicalCrawlability(CategoryScore):
    robots_access: Score
    bot_accessibility: Score
    content_delivery: Score
    javascript_dependency: Score
    load_speed: Score


class MobileOptimization(CategoryScore):
    mobile_page_speed: Score
    touch_targets: Score
    viewport_configuration: Score
    mobile_usability: Score
    responsive_design: Score


class SchemaAnalysis(CategoryScore):
    schema_presence: Score
    schema_validation: Score
    rich_snippet_potential: Score
    structured_data_completeness: Score
    json_ld_implementation: Score


class ContentImprovement(FrozenModel):
    section: str
    current: str
    improved: str
    reasoning: str
    priority: Priority
    implementation: str = ""
    estimated_impact: str = ""


class DebugInfo(FrozenModel):
    """Diagnostics about one run. Holds no timings so output stays deterministic."""

    source: Literal["crawled", "manual"]
    html_size: int = 0
    heading_count: int = 0
    paragraph_count: int = 0
    image_count: int = 0
    link_count: int = 0
    schema_block_count: int = 0
    robots_source: str = "manual"
    performance_source: str = "estimated"
    markdown_length: int = 0
    entity_backend: str = "patterns"
    patterns_version: str = ""
    scorers: list[str] = Field(default_factory=list)


class WebsiteAnalysis(FrozenModel):
    """Final report of one analysis."""

    url: str
    title: str
    overall_score: Score
    timestamp: str
    technical_seo: TechnicalSEO
    content_quality: ContentQuality
    ai_optimization: AIOptimization
    eeat_signals: EEATSignals
    technical_crawlability: TechnicalCrawlability
    mobile_optimization: MobileOptimization
    schema_analysis: SchemaAnalysis
    content_improvements: list[ContentImprovement] = Field(default_factory=list)
    extracted_content: ExtractedContent
    debug_info: DebugInfo

    def category_scores(self) -> dict[str, CategoryScore]:
        """Return the seven category scores keyed by scorer id."""
        return {
            "technical_seo": self.technical_seo,
            "content_quality": self.content_quality,
            "ai_optimization": self.ai_optimization,
            "eeat_signals": self.eeat_signals,
            "technical_crawlability": self.technical_crawlability,
            "mobile_optimization": self.mobile_optimization,
            "schema_analysis": self.schema_analysis,
        }

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize with camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=indent)

"""Extracted page content and the signal records attached to it."""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

AI_BOTS: tuple[str, ...] = (
    "GPTBot",
    "Google-Extended",
    "ChatGPT-User",
    "Claude-Web",
    "Bingbot",
    "CCBot",
    "PerplexityBot",
)

BotDirective = Literal["allowed", "disallowed", "unspecified"]
Score = Annotated[int, Field(ge=0, le=100)]


def _unspecified_directives() -> dict[str, BotDirective]:
    return {bot: "unspecified" for bot in AI_BOTS}


class FrozenModel(BaseModel):
    """Immutable model serialized with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# === Page primitives ===


class Heading(FrozenModel):
    level: int = Field(..., ge=1, le=6)
    text: str


class Image(FrozenModel):
    src: str
    alt: str = ""


class Link(FrozenModel):
    href: str
    text: str
    internal: bool


# === Robots policy (crawled | manual) ===


class CrawledRobots(FrozenModel):
    """robots.txt as fetched for the page's host."""

    source: Literal["crawled"] = "crawled"
    has_robots_txt: bool = False
    allows_all_bots: bool = True
    has_specific_bot_rules: bool = False
    sitemap_declared: bool = False
    sitemaps: list[str] = Field(default_factory=list)
    ai_bot_directives: dict[str, BotDirective] = Field(default_factory=_unspecified_directives)
    x_robots_tag: str = ""


class ManualRobots(FrozenModel):
    """Placeholder for manual input: nothing HTTP-derived is known."""

    source: Literal["manual"] = "manual"


RobotsPolicy = Annotated[Union[CrawledRobots, ManualRobots], Field(discriminator="source")]


# === Performance (measured | estimated) ===


class MeasuredPerformance(FrozenModel):
    """Core Web Vitals reported by PageSpeed Insights."""

    source: Literal["measured"] = "measured"
    lcp: int = Field(..., ge=0, description="Largest Contentful Paint (ms)")
    fid: int = Field(..., ge=0, description="Max potential First Input Delay (ms)")
    cls: float = Field(..., ge=0, description="Cumulative Layout Shift")
    score: Score
    accessibility_score: Score | None = None


class EstimatedPerformance(FrozenModel):
    """Neutral placeholder used when no measurement is available."""

    source: Literal["estimated"] = "estimated"
    lcp: int = 2500
    fid: int = 100
    cls: float = 0.1
    score: Score = 75
    accessibility_score: Score | None = None


PerformanceMetrics = Annotated[
    Union[MeasuredPerformance, EstimatedPerformance], Field(discriminator="source")
]


# === Signal records ===


class TechnicalSignals(FrozenModel):
    canonical: str = ""
    lang: str = ""
    hreflang_count: int = 0
    has_open_graph: bool = False
    has_twitter_card: bool = False
    robots_meta: str = ""
    has_sitemap_reference: bool = False
    html_size: int = 0
    script_count: int = 0
    javascript_dependent: bool = False
    has_noscript_content: bool = False
    estimated_load_time: float = 0.5  # seconds
    content_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    semantic_elements: list[str] = Field(default_factory=list)
    flesch_reading_ease: float | None = None
    flesch_kincaid_grade: float | None = None


class MobileSignals(FrozenModel):
    has_viewport_meta: bool = False
    viewport_content: str = ""
    has_touchable_elements: bool = False
    uses_responsive_images: bool = False
    mobile_optimized_css: bool = False
    has_touch_icon: bool = False
    fixed_width_layout: bool = False
    uses_plugins: bool = False


class SchemaEntity(FrozenModel):
    type: str
    properties: list[str] = Field(default_factory=list)
    source: Literal["json-ld", "microdata", "rdfa"] = "json-ld"


class StructuredDataSignals(FrozenModel):
    json_ld_count: int = 0
    microdata_count: int = 0
    rdfa_count: int = 0
    schema_types: list[str] = Field(default_factory=list)
    validation_errors: list[str] = Field(default_factory=list)
    ai_friendly_schemas: list[str] = Field(default_factory=list)
    conversational_elements: int = 0
    has_schema_org_context: bool = False
    entities: list[SchemaEntity] = Field(default_factory=list)


class UXSignals(FrozenModel):
    has_navigation: bool = False
    navigation_labels: list[str] = Field(default_factory=list)
    form_count: int = 0
    form_fields: list[str] = Field(default_factory=list)
    has_search_box: bool = False
    has_contact_form: bool = False
    accessibility_features: list[str] = Field(default_factory=list)
    interactive_elements_count: int = 0
    has_loading_indicators: bool = False
    has_social_proof: bool = False
    social_elements: list[str] = Field(default_factory=list)
    has_breadcrumbs: bool = False


class EntitySignals(FrozenModel):
    persons: list[str] = Field(default_factory=list)
    organizations: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    brands: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.persons) + len(self.organizations) + len(self.locations) + len(self.brands)


class AnswerFormats(FrozenModel):
    qa_count: int = 0
    list_count: int = 0
    step_by_step_count: int = 0
    definition_count: int = 0
    table_count: int = 0


class AuthoritySignals(FrozenModel):
    author_bylines: list[str] = Field(default_factory=list)
    publication_dates: list[str] = Field(default_factory=list)
    last_modified: str | None = None
    credential_mentions: list[str] = Field(default_factory=list)
    authority_links: list[str] = Field(default_factory=list)


class FactualSignals(FrozenModel):
    citations: int = 0
    statistics: int = 0
    dates: int = 0
    sources: list[str] = Field(default_factory=list)
    external_links: int = 0


class BotSimulation(FrozenModel):
    content_extracted: bool = False
    priority_content_found: bool = False
    structured_data_present: bool = False
    accessibility_score: Score = 0


class BotAccessibility(FrozenModel):
    ai_bot_directives: dict[str, BotDirective] = Field(default_factory=_unspecified_directives)
    meta_robots_ai: str = ""
    content_availability: Literal["full", "partial", "js-dependent"] = "partial"
    bot_simulation: BotSimulation = Field(default_factory=BotSimulation)


class VoiceSearchSignals(FrozenModel):
    natural_language_patterns: int = 0
    conversational_content: int = 0
    question_formats: int = 0
    speakable_content: bool = False


class AISignals(FrozenModel):
    entities: EntitySignals = Field(default_factory=EntitySignals)
    answer_formats: AnswerFormats = Field(default_factory=AnswerFormats)
    authority: AuthoritySignals = Field(default_factory=AuthoritySignals)
    factual: FactualSignals = Field(default_factory=FactualSignals)
    bot_accessibility: BotAccessibility = Field(default_factory=BotAccessibility)
    voice_search: VoiceSearchSignals = Field(default_factory=VoiceSearchSignals)
    entity_backend: Literal["spacy", "patterns"] = "patterns"


# === Page snapshot ===


class ExtractedContent(FrozenModel):
    """Immutable snapshot of one page, created once per analysis."""

    url: str = ""
    source: Literal["crawled", "manual"] = "crawled"
    title: str = ""
    meta_description: str = ""
    headings: list[Heading] = Field(default_factory=list)
    paragraphs: list[str] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    lists: list[list[str]] = Field(default_factory=list)
    table_count: int = 0
    word_count: int = 0
    schema_blocks: list[str] = Field(default_factory=list)
    html: str = Field(default="", exclude=True, repr=False)

    technical: TechnicalSignals = Field(default_factory=TechnicalSignals)
    robots_policy: RobotsPolicy = Field(default_factory=ManualRobots)
    performance: PerformanceMetrics = Field(default_factory=EstimatedPerformance)
    mobile_signals: MobileSignals = Field(default_factory=MobileSignals)
    structured_data_signals: StructuredDataSignals = Field(default_factory=StructuredDataSignals)
    ux_signals: UXSignals = Field(default_factory=UXSignals)
    ai_signals: AISignals = Field(default_factory=AISignals)
    markdown_representation: str = ""

    @property
    def text(self) -> str:
        """All paragraph text joined with single spaces."""
        return " ".join(self.paragraphs)

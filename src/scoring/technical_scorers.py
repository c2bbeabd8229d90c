"""Technical category scorers: Technical SEO, Crawlability, Mobile, Schema."""
from __future__ import annotations

from src.config.patterns import RICH_RESULT_TYPES
from src.config.settings import settings
from src.models.analysis import (
    MobileOptimization,
    SchemaAnalysis,
    TechnicalCrawlability,
    TechnicalSEO,
)
from src.models.content import CrawledRobots, ExtractedContent, Heading, Image, Link, MeasuredPerformance
from src.scoring.base import (
    BaseScorer,
    MetricAdvice,
    clamp,
    load_time_band,
    mean,
    page_speed_score,
    status_for,
)

# Anchor texts that say nothing about the target
GENERIC_ANCHORS = frozenset({"click here", "here", "link", "read more", "more", "learn more", "this"})

# Properties a rich-result parser expects for common schema types
REQUIRED_PROPERTIES: dict[str, tuple[str, ...]] = {
    "Organization": ("name", "url", "logo"),
    "LocalBusiness": ("name", "address", "telephone"),
    "Person": ("name",),
    "Article": ("headline", "author", "datePublished"),
    "NewsArticle": ("headline", "author", "datePublished"),
    "BlogPosting": ("headline", "author", "datePublished"),
    "FAQPage": ("mainEntity",),
    "QAPage": ("mainEntity",),
    "HowTo": ("name", "step"),
    "Product": ("name", "offers"),
    "WebSite": ("name", "url"),
    "BreadcrumbList": ("itemListElement",),
    "Event": ("name", "startDate", "location"),
    "Recipe": ("name", "recipeIngredient"),
    "Review": ("itemReviewed", "author"),
}


# === Technical SEO ===


def heading_structure_score(headings: list[Heading]) -> int:
    """Exactly one H1, no skipped levels, at least three headings."""
    if not headings:
        return 0
    h1_count = sum(1 for heading in headings if heading.level == 1)
    if h1_count != 1:
        return 40

    skips = 0
    previous = 0
    for heading in headings:
        if heading.level > previous + 1:
            skips += 1
        previous = heading.level

    score = 100 - 15 * skips
    if len(headings) < 3:
        score -= 10
    return clamp(score)


def meta_info_score(title: str, description: str) -> int:
    seo = settings.seo
    score = 0
    if title:
        score += 40
        if seo.title_min_length <= len(title) <= seo.title_max_length:
            score += 20
    if description:
        score += 20
        if seo.description_optimal_min <= len(description) <= seo.description_optimal_max:
            score += 20
    return score


def alt_text_score(images: list[Image]) -> int:
    # No images to describe
    if not images:
        return 100
    with_alt = sum(1 for image in images if image.alt.strip())
    return clamp(with_alt / len(images) * 100)


def is_descriptive_anchor(text: str) -> bool:
    text = text.strip().lower()
    return bool(text) and text not in GENERIC_ANCHORS and len(text) > 3


def link_score(links: list[Link]) -> int:
    if not links:
        return 50
    score = 50
    if any(link.internal for link in links):
        score += 20
    if any(not link.internal for link in links):
        score += 10
    descriptive = sum(1 for link in links if is_descriptive_anchor(link.text))
    if descriptive / len(links) > settings.seo.descriptive_anchor_ratio:
        score += 20
    return clamp(score)


def schema_markup_score(content: ExtractedContent) -> int:
    structured = content.structured_data_signals
    if not (structured.json_ld_count or structured.microdata_count or structured.rdfa_count):
        return 0
    if not structured.schema_types:
        return clamp(30 - 20 * len(structured.validation_errors))
    score = 60 + 10 * min(4, len(structured.schema_types))
    score -= 20 * len(structured.validation_errors)
    return clamp(score)


class TechnicalSEOScorer(BaseScorer):
    """Headings, meta tags, alt text, links, schema markup and page speed."""

    advice = {
        "heading_structure": MetricAdvice(
            finding="Heading structure needs improvement",
            text="Use exactly one H1 and nest H2 and H3 sections without skipping levels.",
            implementation="Promote the page title to the only H1 and demote repeated H1s to H2.",
            expected_impact="Clearer outline for crawlers and AI summarizers",
            time_to_implement="1-2 hours",
        ),
        "meta_info": MetricAdvice(
            finding="Meta information is incomplete or unoptimized",
            text="Write a 30-60 character title and a 120-160 character meta description.",
            implementation="Edit the <title> and <meta name=\"description\"> tags for this page.",
            expected_impact="Better snippets and higher click-through rates",
            time_to_implement="30 minutes",
        ),
        "alt_text": MetricAdvice(
            finding="Images missing descriptive alt text",
            text="Add descriptive alt text to every meaningful image.",
            implementation="Describe what each image shows in its alt attribute; use alt=\"\" for decoration.",
            expected_impact="Images become readable to crawlers and screen readers",
            time_to_implement="1 hour",
        ),
        "links": MetricAdvice(
            finding="Link structure could be improved",
            text="Add internal links with descriptive anchor text and cite relevant external sources.",
            implementation="Replace 'click here' style anchors with text that names the destination.",
            expected_impact="Stronger topical context for crawlers",
            time_to_implement="1-2 hours",
        ),
        "schema_markup": MetricAdvice(
            finding="Structured data markup is missing or invalid",
            text="Add valid schema.org JSON-LD describing the page and the organization behind it.",
            implementation="Embed a <script type=\"application/ld+json\"> block and validate it.",
            expected_impact="Eligibility for rich results",
            time_to_implement="2-4 hours",
        ),
        "page_speed": MetricAdvice(
            finding="Page speed is below recommended levels",
            text="Reduce page weight and defer non-critical resources.",
            implementation="Compress images, lazy-load below-the-fold media and defer scripts.",
            expected_impact="Faster rendering for users and crawlers",
            time_to_implement="1-3 days",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "technical_seo"

    @property
    def name(self) -> str:
        return "Technical SEO"

    @property
    def description(self) -> str:
        return "On-page SEO fundamentals"

    def score(self, content: ExtractedContent) -> TechnicalSEO:
        metrics = {
            "heading_structure": heading_structure_score(content.headings),
            "meta_info": meta_info_score(content.title, content.meta_description),
            "alt_text": alt_text_score(content.images),
            "links": link_score(content.links),
            "schema_markup": schema_markup_score(content),
            "page_speed": page_speed_score(content),
        }
        score = mean(list(metrics.values()))
        findings, recommendations = self.advise(metrics)
        return TechnicalSEO(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            **metrics,
        )


# === Technical Crawlability ===


def _has_noindex(content: ExtractedContent) -> bool:
    meta = content.technical.robots_meta.lower()
    header = ""
    if isinstance(content.robots_policy, CrawledRobots):
        header = content.robots_policy.x_robots_tag.lower()
    return "noindex" in meta or "noindex" in header


def robots_access_score(content: ExtractedContent) -> int:
    """Manual input and missing robots.txt both start from the neutral value."""
    scoring = settings.scoring
    policy = content.robots_policy
    if isinstance(policy, CrawledRobots) and policy.has_robots_txt:
        blocked = sum(1 for value in policy.ai_bot_directives.values() if value == "disallowed")
        score = 100 - scoring.ai_bot_block_penalty * blocked
    else:
        score = scoring.no_robots_txt_score
    if _has_noindex(content):
        score -= scoring.noindex_penalty
    return clamp(score)


def content_delivery_score(content: ExtractedContent) -> int:
    if content.word_count == 0:
        return 0
    score = 40 + 60 * content.technical.content_ratio
    if content.technical.html_size > 500_000:
        score -= 10
    return clamp(score)


def javascript_dependency_score(content: ExtractedContent) -> int:
    if not content.technical.javascript_dependent:
        return 100
    if content.technical.has_noscript_content:
        return 70
    if content.ai_signals.bot_accessibility.content_availability == "partial":
        return 60
    return 30


def load_speed_score(content: ExtractedContent) -> int:
    performance = content.performance
    if isinstance(performance, MeasuredPerformance):
        if performance.lcp <= 2500:
            return 100
        if performance.lcp <= 4000:
            return 70
        return 40
    return load_time_band(content.technical.estimated_load_time)


class TechnicalCrawlabilityScorer(BaseScorer):
    """Whether AI crawlers may fetch the page and can read it without a browser."""

    advice = {
        "robots_access": MetricAdvice(
            finding="AI crawlers are restricted by robots.txt or robots directives",
            text="Allow AI crawlers such as GPTBot and PerplexityBot in robots.txt and drop noindex.",
            implementation="Add explicit 'User-agent' groups with 'Allow: /' for the AI crawlers you want.",
            expected_impact="Page becomes eligible for AI answers and citations",
            time_to_implement="30 minutes",
        ),
        "bot_accessibility": MetricAdvice(
            finding="Crawlers extract little content from the raw HTML",
            text="Serve the main heading, body text and structured data in the initial HTML.",
            implementation="Render primary content on the server instead of after page load.",
            expected_impact="More content indexed by non-rendering crawlers",
            time_to_implement="1-2 weeks",
        ),
        "content_delivery": MetricAdvice(
            finding="Main content is a small share of the page",
            text="Reduce boilerplate around the main content.",
            implementation="Trim repeated navigation, widgets and inline markup that crowd the article body.",
            expected_impact="Cleaner extraction of the primary content",
            time_to_implement="1-3 days",
        ),
        "javascript_dependency": MetricAdvice(
            finding="Content depends on JavaScript to render",
            text="Provide server-side rendering or a meaningful <noscript> fallback.",
            implementation="Enable SSR or static generation in your framework.",
            expected_impact="Content visible to crawlers that do not execute JavaScript",
            time_to_implement="1-2 weeks",
        ),
        "load_speed": MetricAdvice(
            finding="Largest content loads slowly",
            text="Improve Largest Contentful Paint to under 2.5 seconds.",
            implementation="Optimize the hero image, preload critical assets and cut render-blocking CSS.",
            expected_impact="Crawlers finish fetching before timeouts",
            time_to_implement="1-3 days",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "technical_crawlability"

    @property
    def name(self) -> str:
        return "Technical Crawlability"

    def score(self, content: ExtractedContent) -> TechnicalCrawlability:
        metrics = {
            "robots_access": robots_access_score(content),
            "bot_accessibility": clamp(content.ai_signals.bot_accessibility.bot_simulation.accessibility_score),
            "content_delivery": content_delivery_score(content),
            "javascript_dependency": javascript_dependency_score(content),
            "load_speed": load_speed_score(content),
        }
        score = mean(list(metrics.values()))
        findings, recommendations = self.advise(metrics)
        return TechnicalCrawlability(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            **metrics,
        )


# === Mobile Optimization ===


def _device_width(viewport: str) -> bool:
    return "width=device-width" in viewport.replace(" ", "").lower()


def touch_target_score(content: ExtractedContent) -> int:
    mobile = content.mobile_signals
    # Nothing to tap
    if not mobile.has_touchable_elements:
        return 50
    score = 70
    if mobile.has_touch_icon:
        score += 20
    if _device_width(mobile.viewport_content):
        score += 10
    return clamp(score)


def viewport_score(content: ExtractedContent) -> int:
    mobile = content.mobile_signals
    if not mobile.has_viewport_meta:
        return 0
    viewport = mobile.viewport_content.replace(" ", "").lower()
    score = 60
    if _device_width(viewport):
        score += 30
    if "initial-scale" in viewport:
        score += 10
    if "user-scalable=no" in viewport or "maximum-scale=1" in viewport:
        score -= 20
    if mobile.fixed_width_layout:
        score = min(score, 30)
    return clamp(score)


def mobile_usability_score(content: ExtractedContent) -> int:
    mobile = content.mobile_signals
    score = 100
    if mobile.uses_plugins:
        score -= 40
    if mobile.fixed_width_layout:
        score -= 30
    if not mobile.has_viewport_meta:
        score -= 30
    accessibility = content.performance.accessibility_score
    if accessibility is not None:
        score = (max(0, score) + accessibility) / 2
    return clamp(score)


def responsive_design_score(content: ExtractedContent) -> int:
    mobile = content.mobile_signals
    score = 0
    if mobile.mobile_optimized_css:
        score += 50
    if mobile.uses_responsive_images:
        score += 30
    if _device_width(mobile.viewport_content):
        score += 20
    return score


class MobileOptimizationScorer(BaseScorer):
    """Viewport, touch targets, responsive layout and mobile speed."""

    advice = {
        "mobile_page_speed": MetricAdvice(
            finding="Mobile page speed needs improvement",
            text="Optimize the page for slower mobile connections.",
            implementation="Serve smaller images to small screens and defer third-party scripts.",
            expected_impact="Faster mobile loads",
            time_to_implement="1-3 days",
        ),
        "touch_targets": MetricAdvice(
            finding="Touch interaction could be improved",
            text="Provide clearly tappable controls and a touch icon.",
            implementation="Keep tap targets at least 48px and add an apple-touch-icon link.",
            expected_impact="Easier navigation on phones",
            time_to_implement="2-4 hours",
        ),
        "viewport_configuration": MetricAdvice(
            finding="Viewport is missing or misconfigured",
            text="Add <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">.",
            implementation="Place the viewport meta tag in the document head and allow zooming.",
            expected_impact="Correct scaling on mobile devices",
            time_to_implement="15 minutes",
        ),
        "mobile_usability": MetricAdvice(
            finding="Page has mobile usability problems",
            text="Remove plugins and fixed-width layouts that break on small screens.",
            implementation="Replace <object>/<embed> content with HTML5 equivalents and use fluid widths.",
            expected_impact="Usable layout across screen sizes",
            time_to_implement="1-3 days",
        ),
        "responsive_design": MetricAdvice(
            finding="Layout is not responsive",
            text="Use CSS media queries and responsive images.",
            implementation="Add breakpoints and srcset/picture sources for large images.",
            expected_impact="Content adapts to every device",
            time_to_implement="2-5 days",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "mobile_optimization"

    @property
    def name(self) -> str:
        return "Mobile Optimization"

    def score(self, content: ExtractedContent) -> MobileOptimization:
        metrics = {
            "mobile_page_speed": page_speed_score(content),
            "touch_targets": touch_target_score(content),
            "viewport_configuration": viewport_score(content),
            "mobile_usability": mobile_usability_score(content),
            "responsive_design": responsive_design_score(content),
        }
        score = mean(list(metrics.values()))
        findings, recommendations = self.advise(metrics)
        return MobileOptimization(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            **metrics,
        )


# === Schema Analysis ===


def _has_schema(content: ExtractedContent) -> bool:
    structured = content.structured_data_signals
    return bool(structured.json_ld_count or structured.microdata_count or structured.rdfa_count)


def schema_presence_score(content: ExtractedContent) -> int:
    types = content.structured_data_signals.schema_types
    if not types:
        return 0
    return clamp(50 + 15 * len(types))


def schema_validation_score(content: ExtractedContent) -> int:
    if not _has_schema(content):
        return 0
    errors = content.structured_data_signals.validation_errors
    return clamp(100 - settings.scoring.schema_error_penalty * len(errors))


def rich_snippet_score(content: ExtractedContent) -> int:
    types = content.structured_data_signals.schema_types
    return clamp(RICH_RESULT_TYPES.score(" ".join(types)))


def completeness_score(content: ExtractedContent) -> int:
    """Average share of expected properties present on recognized entities."""
    entities = content.structured_data_signals.entities
    if not entities:
        return 0
    ratios = []
    for entity in entities:
        required = REQUIRED_PROPERTIES.get(entity.type)
        if not required:
            continue
        present = sum(1 for prop in required if prop in entity.properties)
        ratios.append(present / len(required))
    # Entities exist but none of a type we know the rules for
    if not ratios:
        return 50
    return clamp(sum(ratios) / len(ratios) * 100)


def json_ld_score(content: ExtractedContent) -> int:
    structured = content.structured_data_signals
    if structured.json_ld_count:
        score = 70
        if structured.has_schema_org_context:
            score += 15
        if structured.ai_friendly_schemas:
            score += 15
        if structured.validation_errors:
            score -= 20
        return clamp(score)
    if structured.microdata_count or structured.rdfa_count:
        return 40
    return 0


class SchemaAnalysisScorer(BaseScorer):
    """Presence, validity and rich-result potential of structured data."""

    advice = {
        "schema_presence": MetricAdvice(
            finding="No structured data found",
            text="Describe the page with schema.org types such as Organization, Article or FAQPage.",
            implementation="Add a JSON-LD block to the page template.",
            expected_impact="Machines understand what the page is about",
            time_to_implement="2-4 hours",
        ),
        "schema_validation": MetricAdvice(
            finding="Structured data has validation errors",
            text="Fix invalid JSON and add missing @context and @type properties.",
            implementation="Run the markup through a schema validator and correct each reported error.",
            expected_impact="Markup is actually used by search engines",
            time_to_implement="1-2 hours",
        ),
        "rich_snippet_potential": MetricAdvice(
            finding="Limited rich result potential",
            text="Use schema types that qualify for rich results, such as FAQPage, HowTo or Product.",
            implementation="Mark up existing FAQ, step-by-step or product content with matching types.",
            expected_impact="Enhanced listings in search and AI answers",
            time_to_implement="2-4 hours",
        ),
        "structured_data_completeness": MetricAdvice(
            finding="Structured data is missing recommended properties",
            text="Fill in the expected properties for each schema type.",
            implementation="Add name, url, logo, author and date properties where they apply.",
            expected_impact="Complete entities are eligible for more features",
            time_to_implement="1-2 hours",
        ),
        "json_ld_implementation": MetricAdvice(
            finding="JSON-LD implementation could be improved",
            text="Prefer JSON-LD with a schema.org @context over inline microdata.",
            implementation="Move structured data into a single JSON-LD script in the head.",
            expected_impact="Easier maintenance and parsing",
            time_to_implement="2-4 hours",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "schema_analysis"

    @property
    def name(self) -> str:
        return "Schema Analysis"

    def score(self, content: ExtractedContent) -> SchemaAnalysis:
        metrics = {
            "schema_presence": schema_presence_score(content),
            "schema_validation": schema_validation_score(content),
            "rich_snippet_potential": rich_snippet_score(content),
            "structured_data_completeness": completeness_score(content),
            "json_ld_implementation": json_ld_score(content),
        }
        score = mean(list(metrics.values()))
        findings, recommendations = self.advise(metrics)
        return SchemaAnalysis(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            **metrics,
        )


# Register all technical scorers
def register_technical_scorers(registry):
    """Register the technical category scorers with the given registry."""
    registry.register(TechnicalSEOScorer())
    registry.register(TechnicalCrawlabilityScorer())
    registry.register(MobileOptimizationScorer())
    registry.register(SchemaAnalysisScorer())

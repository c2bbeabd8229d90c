"""Analysis pipeline: fetch, extract, score, aggregate."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import structlog

from src.config.patterns import PATTERNS_VERSION
from src.fetcher.html_fetcher import fetch_page, fetch_robots, normalize_url
from src.fetcher.performance import estimate_accessibility, get_performance_metrics
from src.models.analysis import DebugInfo, WebsiteAnalysis
from src.models.content import EstimatedPerformance, ExtractedContent, ManualRobots
from src.parser.extractor import extract_content, text_to_html
from src.scoring import calculate_overall_score, generate_content_improvements, scorer_registry

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _with_accessibility(performance, html: str):
    """Fold the local accessibility estimate into metrics that lack one."""
    if performance.accessibility_score is not None:
        return performance
    return performance.model_copy(update={"accessibility_score": estimate_accessibility(html)})


def _debug_info(content: ExtractedContent) -> DebugInfo:
    return DebugInfo(
        source=content.source,
        html_size=content.technical.html_size,
        heading_count=len(content.headings),
        paragraph_count=len(content.paragraphs),
        image_count=len(content.images),
        link_count=len(content.links),
        schema_block_count=len(content.schema_blocks),
        robots_source=content.robots_policy.source,
        performance_source=content.performance.source,
        markdown_length=len(content.markdown_representation),
        entity_backend=content.ai_signals.entity_backend,
        patterns_version=PATTERNS_VERSION,
        scorers=scorer_registry.ids(),
    )


def score_content(content: ExtractedContent) -> WebsiteAnalysis:
    """Score an extracted page. Pure apart from the timestamp."""
    scores = scorer_registry.run_all(content)
    overall = calculate_overall_score(scores)
    improvements = generate_content_improvements(scores, overall)

    logger.info("Overall score %d for %s", overall, content.url or "manual input")
    return WebsiteAnalysis(
        url=content.url,
        title=content.title,
        overall_score=overall,
        timestamp=_timestamp(),
        technical_seo=scores["technical_seo"],
        content_quality=scores["content_quality"],
        ai_optimization=scores["ai_optimization"],
        eeat_signals=scores["eeat_signals"],
        technical_crawlability=scores["technical_crawlability"],
        mobile_optimization=scores["mobile_optimization"],
        schema_analysis=scores["schema_analysis"],
        content_improvements=improvements,
        extracted_content=content,
        debug_info=_debug_info(content),
    )


def analyze_html(html: str, url: str = "") -> WebsiteAnalysis:
    """Analyze supplied HTML with manual (non-HTTP) defaults."""
    with structlog.contextvars.bound_contextvars(url=url or "manual", source="manual"):
        performance = _with_accessibility(EstimatedPerformance(), html)
        content = extract_content(
            html,
            url,
            source="manual",
            robots_policy=ManualRobots(),
            performance=performance,
        )
        return score_content(content)


def analyze_text(text: str) -> WebsiteAnalysis:
    """Analyze pasted text or HTML. Plain text is wrapped one paragraph per line."""
    return analyze_html(text_to_html(text))


def analyze_url(url: str) -> WebsiteAnalysis:
    """Fetch and analyze a live page.

    The page fetch and the performance lookup run concurrently; robots.txt
    is fetched once the final URL after redirects is known.

    Raises:
        ValueError: If url is not an http(s) URL
        FetchError: If the page cannot be fetched
    """
    url = normalize_url(url)
    with structlog.contextvars.bound_contextvars(url=url, source="crawled"):
        with ThreadPoolExecutor(max_workers=2) as executor:
            page_future = executor.submit(fetch_page, url)
            performance_future = executor.submit(get_performance_metrics, url)
            page = page_future.result()
            performance = performance_future.result()

        x_robots_tag = next(
            (value for key, value in page.headers.items() if key.lower() == "x-robots-tag"),
            "",
        )
        robots_policy = fetch_robots(page.final_url, x_robots_tag=x_robots_tag)
        content = extract_content(
            page.html,
            page.final_url,
            source="crawled",
            robots_policy=robots_policy,
            performance=_with_accessibility(performance, page.html),
            headers=page.headers,
        )
        return score_content(content)

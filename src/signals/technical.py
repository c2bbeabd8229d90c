"""Technical page signals: head metadata, JavaScript reliance, load estimate, readability."""
from __future__ import annotations

import logging
import re

import textstat
from bs4 import BeautifulSoup
from readability import Document

from src.models.content import TechnicalSignals

logger = logging.getLogger(__name__)

SEMANTIC_ELEMENTS = ("main", "article", "section", "nav", "header", "footer", "aside", "figure", "time")

_FRAMEWORK_MARKERS = re.compile(
    r"data-reactroot|__NEXT_DATA__|ng-version=|data-v-[0-9a-f]{6,}|id=\"__nuxt\"|data-server-rendered",
    re.IGNORECASE,
)
_SPA_ROOT_IDS = ("root", "app", "__next", "__nuxt")


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def _calculate_content_ratio(html: str) -> float:
    """Ratio of readability's main-content text to all visible page text."""
    if not html or not html.strip():
        return 0.0
    try:
        soup = BeautifulSoup(html, "lxml")
        for tag in soup.find_all(["script", "style", "noscript", "template"]):
            tag.decompose()
        total_text = _clean_text(soup.get_text(" "))
        if not total_text:
            return 0.0
        main_html = Document(html).summary(html_partial=True)
        main_text = _clean_text(BeautifulSoup(main_html, "lxml").get_text(" "))
        return round(min(len(main_text) / len(total_text), 1.0), 2)
    except Exception as exc:
        # readability raises Unparseable on degenerate documents
        logger.debug("Content ratio unavailable: %s", exc)
        return 0.0


def _calculate_readability(text: str) -> tuple[float | None, float | None]:
    if not text or len(text) < 100:
        return None, None
    return (
        round(textstat.flesch_reading_ease(text), 1),
        round(textstat.flesch_kincaid_grade(text), 1),
    )


def estimate_load_time(html_size: int, image_count: int) -> float:
    """Rough load time in seconds from document weight and image count."""
    estimated = 0.5
    if html_size > 50_000:
        estimated += 0.5
    if html_size > 100_000:
        estimated += 1.0
    estimated += image_count * 0.1
    return round(estimated, 2)


def _is_javascript_dependent(soup: BeautifulSoup, html: str, script_count: int, text: str) -> bool:
    if _FRAMEWORK_MARKERS.search(html or ""):
        return True
    for root_id in _SPA_ROOT_IDS:
        root = soup.find(id=root_id)
        if root is not None and len(_clean_text(root.get_text(" "))) < 200:
            return True
    # script-heavy shell with almost no server-rendered text
    return script_count > 10 and len(text) < 500


def detect_technical_signals(
    soup: BeautifulSoup,
    html: str,
    text: str,
    *,
    image_count: int = 0,
) -> TechnicalSignals:
    """Collect head metadata and document-level technical signals."""
    canonical_tag = soup.find("link", attrs={"rel": lambda value: value and "canonical" in value})
    html_tag = soup.find("html")
    robots_tag = soup.find("meta", attrs={"name": lambda value: value and value.lower() == "robots"})
    sitemap_reference = (
        soup.find("link", attrs={"rel": lambda value: value and "sitemap" in value}) is not None
        or soup.find("a", href=lambda value: value and "sitemap" in value.lower()) is not None
    )
    scripts = soup.find_all("script")
    script_count = sum(
        1 for script in scripts
        if (script.get("type") or "").lower() not in {"application/ld+json", "application/json"}
    )
    noscript_text = any(
        _clean_text(tag.get_text(" ")) for tag in soup.find_all("noscript")
    )
    flesch, grade = _calculate_readability(text)
    html_size = len(html or "")

    return TechnicalSignals(
        canonical=canonical_tag.get("href", "") if canonical_tag else "",
        lang=(html_tag.get("lang") or "").strip() if html_tag else "",
        hreflang_count=len(soup.find_all("link", attrs={"hreflang": True})),
        has_open_graph=soup.find("meta", attrs={"property": lambda value: value and value.startswith("og:")}) is not None,
        has_twitter_card=soup.find("meta", attrs={"name": lambda value: value and value.lower().startswith("twitter:")}) is not None,
        robots_meta=(robots_tag.get("content") or "").strip() if robots_tag else "",
        has_sitemap_reference=sitemap_reference,
        html_size=html_size,
        script_count=script_count,
        javascript_dependent=_is_javascript_dependent(soup, html, script_count, text),
        has_noscript_content=noscript_text,
        estimated_load_time=estimate_load_time(html_size, image_count),
        content_ratio=_calculate_content_ratio(html),
        semantic_elements=[name for name in SEMANTIC_ELEMENTS if soup.find(name) is not None],
        flesch_reading_ease=flesch,
        flesch_kincaid_grade=grade,
    )

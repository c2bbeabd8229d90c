"""AI-oriented signals: entities, answer formats, authority, facts, bot access, voice search."""
from __future__ import annotations

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from src.config.patterns import (
    ACCURACY,
    AUTHORITY_DOMAINS,
    CREDENTIALS,
    FACTUAL,
    QUESTION_MARKERS,
    VOICE_SEARCH,
)
from src.models.content import (
    AISignals,
    AnswerFormats,
    AuthoritySignals,
    BotAccessibility,
    BotSimulation,
    CrawledRobots,
    FactualSignals,
    Heading,
    Link,
    StructuredDataSignals,
    TechnicalSignals,
    VoiceSearchSignals,
)
from src.signals.entities import detect_entities

MAX_SOURCES = 20

_STEP_PATTERN = re.compile(r"^(?:step\s*\d+|\d+\.\s)", re.IGNORECASE)
_CITATION_PATTERN = re.compile(r"\baccording to\b|\bcited in\b|\bsource:", re.IGNORECASE)
_AUTHOR_SELECTOR = '[rel="author"], .author, .byline, [itemprop="author"], .post-author'
_PUBLISHED_SELECTOR = (
    'meta[property="article:published_time"], [itemprop="datePublished"], time[datetime]'
)
_MODIFIED_SELECTOR = 'meta[property="article:modified_time"], [itemprop="dateModified"]'
_AI_META_NAMES = {"robots", "googlebot", "gptbot", "google-extended", "ccbot"}


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def is_question(text: str) -> bool:
    return bool(QUESTION_MARKERS.matches(text))


def is_definition_paragraph(text: str) -> bool:
    """
    Detect definition patterns in multiple languages.
    Returns True if the paragraph contains definition-like structures.
    """
    if not text:
        return False

    # Chinese patterns
    chinese_keywords = ("指的是", "可以理解為", "意指", "定義為", "係指")
    if any(keyword in text for keyword in chinese_keywords):
        return True
    if " 是 " in text or " 為 " in text:
        return True

    # English patterns
    english_patterns = [
        r"\bis\s+defined\s+as\b",
        r"\brefers\s+to\b",
        r"\bmeans\s+that\b",
        r"\bis\s+known\s+as\b",
        r"\bis\s+a\s+type\s+of\b",
        r"\bis\s+characterized\s+by\b",
        r"\bcan\s+be\s+described\s+as\b",
        r"\bis\s+the\s+process\s+of\b",
    ]
    for pattern in english_patterns:
        if re.search(pattern, text, re.IGNORECASE):
            return True

    # Japanese patterns
    japanese_patterns = ["とは", "を意味する", "と定義される", "のことを指す"]
    if any(pattern in text for pattern in japanese_patterns):
        return True

    # Korean patterns
    korean_patterns = ["이란", "를 의미", "을 뜻", "라고 정의"]
    return any(pattern in text for pattern in korean_patterns)


def _answer_formats(
    soup: BeautifulSoup,
    headings: list[Heading],
    paragraphs: list[str],
    lists: list[list[str]],
    table_count: int,
) -> AnswerFormats:
    question_headings = sum(1 for heading in headings if is_question(heading.text))
    question_paragraphs = sum(1 for paragraph in paragraphs[:20] if is_question(paragraph))
    step_blocks = sum(1 for heading in headings if _STEP_PATTERN.search(heading.text))
    step_blocks += sum(1 for paragraph in paragraphs if _STEP_PATTERN.search(paragraph))
    ordered_lists = len([ol for ol in soup.find_all("ol") if ol.find_parent(["ul", "ol"]) is None])
    return AnswerFormats(
        qa_count=question_headings + question_paragraphs,
        list_count=len(lists),
        step_by_step_count=step_blocks + ordered_lists,
        definition_count=sum(1 for paragraph in paragraphs if is_definition_paragraph(paragraph)),
        table_count=table_count,
    )


def _authority_signals(soup: BeautifulSoup, text: str, links: list[Link]) -> AuthoritySignals:
    bylines: list[str] = []
    author_meta = soup.find("meta", attrs={"name": lambda value: value and value.lower() == "author"})
    if author_meta and author_meta.get("content"):
        bylines.append(_clean_text(author_meta["content"]))
    for element in soup.select(_AUTHOR_SELECTOR):
        name = _clean_text(element.get("content") or element.get_text(" ", strip=True))
        if name and len(name) < 100 and name not in bylines:
            bylines.append(name)

    dates: list[str] = []
    for element in soup.select(_PUBLISHED_SELECTOR):
        value = _clean_text(element.get("content") or element.get("datetime") or element.get_text(" ", strip=True))
        if value and value not in dates:
            dates.append(value)

    modified = soup.select_one(_MODIFIED_SELECTOR)
    last_modified = None
    if modified is not None:
        last_modified = _clean_text(modified.get("content") or modified.get("datetime") or modified.get_text(" ", strip=True)) or None

    authority_links = [
        link.href for link in links
        if not link.internal and AUTHORITY_DOMAINS.matches(link.href)
    ]

    return AuthoritySignals(
        author_bylines=bylines[:10],
        publication_dates=dates[:10],
        last_modified=last_modified,
        credential_mentions=CREDENTIALS.matches(text),
        authority_links=list(dict.fromkeys(authority_links))[:MAX_SOURCES],
    )


def _factual_signals(soup: BeautifulSoup, text: str, links: list[Link]) -> FactualSignals:
    external = [link for link in links if not link.internal]
    sources: list[str] = []
    for link in external:
        host = urlparse(link.href).hostname
        if host and host not in sources:
            sources.append(host)
    citations = (
        len(soup.find_all("cite"))
        + len(soup.find_all("blockquote", attrs={"cite": True}))
        + len(_CITATION_PATTERN.findall(text))
    )
    return FactualSignals(
        citations=citations,
        statistics=FACTUAL.count(text, group="numbers"),
        dates=ACCURACY.count(text, group="dates"),
        sources=sources[:MAX_SOURCES],
        external_links=len(external),
    )


def _meta_robots_ai(soup: BeautifulSoup, headers: dict) -> str:
    parts = []
    for meta in soup.find_all("meta", attrs={"name": lambda value: value and value.lower() in _AI_META_NAMES}):
        content = _clean_text(meta.get("content") or "")
        if content:
            parts.append(f"{meta['name'].lower()}: {content}")
    header = next((value for key, value in headers.items() if key.lower() == "x-robots-tag"), "")
    if header:
        parts.append(f"x-robots-tag: {header}")
    return "; ".join(parts)


def simulate_bot_access(
    *,
    word_count: int,
    headings: list[Heading],
    paragraphs: list[str],
    structured: StructuredDataSignals,
    javascript_dependent: bool,
) -> tuple[str, BotSimulation]:
    """Estimate what a non-rendering crawler can read from the raw HTML."""
    if not javascript_dependent:
        availability = "full"
    elif word_count >= 100:
        availability = "partial"
    else:
        availability = "js-dependent"

    priority_content = any(heading.level == 1 for heading in headings) and bool(paragraphs)
    structured_present = (structured.json_ld_count + structured.microdata_count + structured.rdfa_count) > 0

    score = 0
    if word_count >= 300:
        score += 40
    elif word_count >= 100:
        score += 25
    elif word_count > 0:
        score += 10
    if priority_content:
        score += 25
    if structured_present:
        score += 15
    if availability == "full":
        score += 20
    elif availability == "partial":
        score += 10

    return availability, BotSimulation(
        content_extracted=word_count > 0,
        priority_content_found=priority_content,
        structured_data_present=structured_present,
        accessibility_score=max(0, min(100, score)),
    )


def detect_ai_signals(
    soup: BeautifulSoup,
    *,
    url: str,
    headings: list[Heading],
    paragraphs: list[str],
    links: list[Link],
    lists: list[list[str]],
    table_count: int,
    word_count: int,
    structured: StructuredDataSignals,
    technical: TechnicalSignals,
    robots_policy,
    headers: dict,
) -> AISignals:
    text = " ".join(paragraphs)
    entities, backend = detect_entities(paragraphs)

    if isinstance(robots_policy, CrawledRobots):
        directives = dict(robots_policy.ai_bot_directives)
    else:
        directives = BotAccessibility().ai_bot_directives
    availability, simulation = simulate_bot_access(
        word_count=word_count,
        headings=headings,
        paragraphs=paragraphs,
        structured=structured,
        javascript_dependent=technical.javascript_dependent,
    )
    meta_ai = _meta_robots_ai(soup, headers)

    question_formats = sum(1 for heading in headings if is_question(heading.text))
    question_formats += sum(1 for paragraph in paragraphs if is_question(paragraph))

    return AISignals(
        entities=entities,
        answer_formats=_answer_formats(soup, headings, paragraphs, lists, table_count),
        authority=_authority_signals(soup, text, links),
        factual=_factual_signals(soup, text, links),
        bot_accessibility=BotAccessibility(
            ai_bot_directives=directives,
            meta_robots_ai=meta_ai,
            content_availability=availability,
            bot_simulation=simulation,
        ),
        voice_search=VoiceSearchSignals(
            natural_language_patterns=VOICE_SEARCH.count(text, group="natural_language"),
            conversational_content=VOICE_SEARCH.count(text, group="conversational"),
            question_formats=question_formats,
            speakable_content="Speakable" in structured.ai_friendly_schemas
            or "SpeakableSpecification" in structured.ai_friendly_schemas,
        ),
        entity_backend=backend,
    )

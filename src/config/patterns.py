"""Versioned pattern tables used by signal detectors and category scorers.

Every heuristic keyword list lives here as a named ``PatternTable`` so the
tables can be tuned and tested without touching scorer logic. A table maps
group names to weighted patterns; plain phrases match case-insensitively on
word boundaries, ``regex=True`` patterns are used as-is.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

PATTERNS_VERSION = "2025.2"


@dataclass(frozen=True)
class WeightedPattern:
    """A single phrase or regular expression with its scoring weight."""
    pattern: str
    weight: float = 1.0
    regex: bool = False

    @cached_property
    def compiled(self) -> re.Pattern[str]:
        if self.regex:
            return re.compile(self.pattern, re.IGNORECASE | re.MULTILINE)
        escaped = re.escape(self.pattern)
        prefix = r"\b" if self.pattern[:1].isalnum() else ""
        suffix = r"\b" if self.pattern[-1:].isalnum() else ""
        return re.compile(f"{prefix}{escaped}{suffix}", re.IGNORECASE)

    def search(self, text: str) -> bool:
        return self.compiled.search(text) is not None

    def occurrences(self, text: str) -> int:
        return sum(1 for _ in self.compiled.finditer(text))


@dataclass(frozen=True, eq=False)
class PatternTable:
    """Named, versioned mapping of group -> weighted patterns.

    Attributes:
        name: Registry key of the table
        version: Version string, bumped whenever patterns or weights change
        groups: Ordered mapping of group name to patterns
    """
    name: str
    version: str
    groups: Mapping[str, tuple[WeightedPattern, ...]] = field(default_factory=dict)

    def _patterns(self, group: str | None = None) -> Iterable[WeightedPattern]:
        if group is not None:
            return self.groups.get(group, ())
        return (p for patterns in self.groups.values() for p in patterns)

    def matches(self, text: str, group: str | None = None) -> list[str]:
        """Return the patterns present in text (each listed once)."""
        if not text:
            return []
        return [p.pattern for p in self._patterns(group) if p.search(text)]

    def count(self, text: str, group: str | None = None) -> int:
        """Return the total number of occurrences of all patterns."""
        if not text:
            return 0
        return sum(p.occurrences(text) for p in self._patterns(group))

    def weighted_count(self, text: str, group: str | None = None) -> float:
        """Return occurrences multiplied by pattern weight."""
        if not text:
            return 0.0
        return sum(p.occurrences(text) * p.weight for p in self._patterns(group))

    def score(self, text: str, group: str | None = None, cap: float = 100.0) -> float:
        """Sum the weights of distinct patterns present in text, capped."""
        if not text:
            return 0.0
        total = sum(p.weight for p in self._patterns(group) if p.search(text))
        return min(cap, total)

    def groups_matched(self, text: str) -> list[str]:
        """Return group names with at least one matching pattern."""
        if not text:
            return []
        return [
            name for name, patterns in self.groups.items()
            if any(p.search(text) for p in patterns)
        ]


def _phrases(*phrases: str, weight: float = 1.0) -> tuple[WeightedPattern, ...]:
    return tuple(WeightedPattern(phrase, weight) for phrase in phrases)


def _regexes(*patterns: str, weight: float = 1.0) -> tuple[WeightedPattern, ...]:
    return tuple(WeightedPattern(pattern, weight, regex=True) for pattern in patterns)


INDUSTRY_EXPERTISE = PatternTable(
    name="industry_expertise",
    version=PATTERNS_VERSION,
    groups={
        "medical": _phrases(
            "diagnosis", "treatment", "clinical", "patient", "symptoms",
            "physician", "therapy", "medication", "peer-reviewed",
        ),
        "legal": _phrases(
            "attorney", "lawyer", "litigation", "statute", "jurisdiction",
            "compliance", "regulation", "court", "legal counsel",
        ),
        "financial": _phrases(
            "investment", "portfolio", "financial advisor", "tax", "accounting",
            "roi", "revenue", "fiduciary", "audit",
        ),
        "technology": _phrases(
            "software", "api", "algorithm", "machine learning", "cloud",
            "framework", "deployment", "architecture", "database",
        ),
        "engineering": _phrases(
            "specification", "tolerance", "prototype", "manufacturing",
            "load testing", "design review", "materials",
        ),
        "marketing": _phrases(
            "seo", "conversion rate", "campaign", "analytics", "brand strategy",
            "search engine", "content strategy",
        ),
    },
)

TOPIC_COVERAGE = PatternTable(
    name="topic_coverage",
    version=PATTERNS_VERSION,
    groups={
        "background": _phrases("background", "overview", "history", "introduction"),
        "how_to": _phrases("how to", "step-by-step", "step by step", "guide", "tutorial"),
        "examples": _phrases("for example", "for instance", "case study", "example"),
        "questions": _phrases("faq", "frequently asked", "common questions"),
        "takeaways": _phrases("key takeaways", "in summary", "conclusion", "summary"),
    },
)

CREDENTIALS = PatternTable(
    name="credentials",
    version=PATTERNS_VERSION,
    groups={
        "degrees": _phrases("phd", "ph.d", "m.d.", "mba", "msc", "doctorate", weight=15),
        "certifications": _phrases(
            "certified", "licensed", "accredited", "board-certified", "chartered",
            weight=12,
        ),
        "titles": _phrases("dr.", "professor", "senior engineer", "specialist", "expert in", weight=10),
        "tenure": _regexes(r"\b\d+\+?\s+years\s+of\s+(?:experience|practice)\b", weight=15),
    },
)

EXPERIENCE = PatternTable(
    name="experience",
    version=PATTERNS_VERSION,
    groups={
        "first_person": _phrases(
            "in my experience", "in our experience", "i have worked", "we have worked",
            "i tested", "we tested", "i found", "we found", "hands-on", "first-hand",
            "firsthand", "over the years", "when i", "our team has",
            weight=10,
        ),
    },
)

HEDGE_WORDS = PatternTable(
    name="hedge_words",
    version=PATTERNS_VERSION,
    groups={
        "strong": _phrases("maybe", "perhaps", "possibly", "probably", weight=1.0),
        "moderate": _phrases("might", "could be", "seems", "appears", "likely", weight=0.75),
        "quantifiers": _phrases("some", "many", "few", weight=0.25),
    },
)

CONVERSATIONAL = PatternTable(
    name="conversational",
    version=PATTERNS_VERSION,
    groups={
        "pronouns": _phrases("you", "your", "we", "our", weight=8),
        "modals": _phrases("can", "will", "should", "would", weight=8),
        "contractions": _phrases(
            "here's", "let's", "that's", "it's", "don't", "won't", "you'll", "we're",
            weight=8,
        ),
    },
)

FACTUAL = PatternTable(
    name="factual",
    version=PATTERNS_VERSION,
    groups={
        "evidence": _phrases(
            "percent", "%", "study", "research", "data", "statistics", "according to",
            "survey", "report", "analysis", "found", "shows", "indicates", "reveals",
            weight=15,
        ),
        "numbers": _regexes(
            r"\b\d+(?:\.\d+)?\s*%", r"\b\d{1,3}(?:,\d{3})+\b", r"\$\s?\d+",
            weight=5,
        ),
    },
)

ACCURACY = PatternTable(
    name="accuracy",
    version=PATTERNS_VERSION,
    groups={
        "indicators": _phrases(
            "published", "updated", "author", "source", "research", "study",
            "data", "statistics", "according to", "based on",
            weight=12,
        ),
        "dates": _regexes(
            r"\b(?:19|20)\d{2}\b",
            r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2},?\s+\d{4}\b",
            weight=10,
        ),
    },
)

LONG_TAIL = PatternTable(
    name="long_tail",
    version=PATTERNS_VERSION,
    groups={
        "question_words": _phrases("how", "what", "why", "when", "where", "which", "who", weight=10),
        "phrases": _phrases(
            "how to", "what is", "best way to", "step by step", "for beginners",
            "compared to", "vs", "tips for",
            weight=5,
        ),
    },
)

USER_INTENT = PatternTable(
    name="user_intent",
    version=PATTERNS_VERSION,
    groups={
        "informational": _phrases("how to", "what is", "why", "guide", "explained", weight=10),
        "commercial": _phrases("best", "review", "compare", "vs", "top", weight=10),
        "transactional": _phrases("price", "cost", "buy", "pricing", "free trial", weight=10),
        "practical": _phrases("example", "tips", "steps", "checklist", "template", weight=10),
    },
)

LEGAL_TRUST = PatternTable(
    name="legal_trust",
    version=PATTERNS_VERSION,
    groups={
        "policies": _phrases(
            "privacy policy", "terms of service", "terms of use", "cookie policy",
            "refund policy", "disclaimer", "gdpr",
            weight=25,
        ),
    },
)

COMPANY_INFO = PatternTable(
    name="company_info",
    version=PATTERNS_VERSION,
    groups={
        "about": _phrases(
            "about us", "our team", "company", "founded", "established",
            "mission", "vision", "values", "leadership",
            weight=15,
        ),
    },
)

CONTACT = PatternTable(
    name="contact",
    version=PATTERNS_VERSION,
    groups={
        "channels": _phrases("contact", "phone", "email", "address", "mailto:", "tel:", weight=20),
    },
)

CALL_TO_ACTION = PatternTable(
    name="call_to_action",
    version=PATTERNS_VERSION,
    groups={
        "actions": _phrases(
            "contact us", "get started", "learn more", "sign up", "subscribe",
            "download", "request a demo", "call now", "book", "schedule", "try it free",
            weight=20,
        ),
        "markup": _phrases("btn", "button", "cta", "call-to-action"),
    },
)

QUESTION_MARKERS = PatternTable(
    name="question_markers",
    version=PATTERNS_VERSION,
    groups={
        "question_mark": _regexes(r"^.+\?\s*$"),
        "interrogative": _regexes(
            r"^(?:what|how|why|when|where|who|which|can|does|is|are|do|will|should)\s+.+\?",
        ),
    },
)

VOICE_SEARCH = PatternTable(
    name="voice_search",
    version=PATTERNS_VERSION,
    groups={
        "natural_language": _phrases(
            "how do i", "how can i", "what is the best", "where can i", "can i",
            "near me", "is it possible", "what are the",
        ),
        "conversational": _phrases("you can", "you'll", "let's", "here's how", "you should"),
    },
)

AUTHORITY_DOMAINS = PatternTable(
    name="authority_domains",
    version=PATTERNS_VERSION,
    groups={
        "institutional": _regexes(r"\.gov(?:\.[a-z]{2})?(?:/|$)", r"\.edu(?:\.[a-z]{2})?(?:/|$)", r"\.int(?:/|$)"),
        "reference": _phrases(
            "wikipedia.org", "nih.gov", "who.int", "nature.com", "sciencedirect.com",
            "scholar.google", "pubmed", "reuters.com", "apnews.com", "doi.org",
        ),
    },
)

SOCIAL_PLATFORMS = PatternTable(
    name="social_platforms",
    version=PATTERNS_VERSION,
    groups={
        "platforms": _phrases(
            "facebook.com", "twitter.com", "x.com", "linkedin.com", "instagram.com",
            "youtube.com", "tiktok.com", "github.com",
        ),
        "social_proof": _phrases(
            "testimonial", "review", "rated", "customers", "clients", "trusted by",
            "case study", "award",
        ),
    },
)

RICH_RESULT_TYPES = PatternTable(
    name="rich_result_types",
    version=PATTERNS_VERSION,
    groups={
        "entity": _phrases("Organization", "LocalBusiness", weight=30) + _phrases("Person", weight=15),
        "answers": _phrases("FAQPage", "HowTo", "QAPage", weight=30),
        "commerce": _phrases("Product", "Recipe", "Event", weight=25)
        + _phrases("Review", "AggregateRating", weight=20),
        "content": _phrases("Article", "NewsArticle", "BlogPosting", "VideoObject", weight=20),
        "navigation": _phrases("BreadcrumbList", weight=15) + _phrases("WebSite", weight=10),
    },
)

PATTERN_TABLES: dict[str, PatternTable] = {
    table.name: table
    for table in (
        INDUSTRY_EXPERTISE,
        TOPIC_COVERAGE,
        CREDENTIALS,
        EXPERIENCE,
        HEDGE_WORDS,
        CONVERSATIONAL,
        FACTUAL,
        ACCURACY,
        LONG_TAIL,
        USER_INTENT,
        LEGAL_TRUST,
        COMPANY_INFO,
        CONTACT,
        CALL_TO_ACTION,
        QUESTION_MARKERS,
        VOICE_SEARCH,
        AUTHORITY_DOMAINS,
        SOCIAL_PLATFORMS,
        RICH_RESULT_TYPES,
    )
}


def get_table(name: str) -> PatternTable:
    """Look up a pattern table by name.

    Raises:
        KeyError: If no table is registered under that name
    """
    return PATTERN_TABLES[name]

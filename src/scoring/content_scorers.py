"""Content category scorers: Content Quality, AI Optimization, E-E-A-T."""
from __future__ import annotations

import re

from src.config.patterns import (
    ACCURACY,
    COMPANY_INFO,
    CONTACT,
    CONVERSATIONAL,
    CREDENTIALS,
    EXPERIENCE,
    FACTUAL,
    HEDGE_WORDS,
    INDUSTRY_EXPERTISE,
    LEGAL_TRUST,
    LONG_TAIL,
    SOCIAL_PLATFORMS,
    TOPIC_COVERAGE,
    USER_INTENT,
)
from src.models.analysis import AIOptimization, ContentQuality, EEATSignals
from src.models.content import ExtractedContent
from src.scoring.base import BaseScorer, MetricAdvice, clamp, status_for, weighted
from src.signals.ai import is_definition_paragraph, is_question

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_CAPITALIZED = re.compile(r"\b[A-Z][a-z]{2,}\b")
_WORD = re.compile(r"[a-z0-9']+")

MAX_CHUNK_LENGTH = 300
LOW_READABILITY = 30
HIGH_READABILITY = 60


def _sentences(paragraph: str) -> list[str]:
    return [sentence for sentence in _SENTENCE_SPLIT.split(paragraph) if sentence.strip()]


# === Content Quality ===


def coverage_score(content: ExtractedContent) -> int:
    words = content.word_count
    score = 0
    if words >= 300:
        score += 25
    if words >= 800:
        score += 20
    if words >= 1500:
        score += 15
    if len(content.headings) > 3:
        score += 20
    if len(content.paragraphs) > 5:
        score += 20
    return clamp(score)


def title_overlap(title: str, text: str) -> int:
    """Percentage of significant title words that appear in the body."""
    title_words = [word for word in _WORD.findall(title.lower()) if len(word) > 3]
    if not title_words:
        return 0
    body_words = set(_WORD.findall(text.lower()))
    found = sum(1 for word in title_words if word in body_words)
    return clamp(found / len(title_words) * 100)


def relevance_score(content: ExtractedContent) -> int:
    text = content.text
    if not text:
        return 0
    intent = clamp(len(USER_INTENT.groups_matched(f"{content.title} {text}")) * 25)
    return weighted([(70, title_overlap(content.title, text)), (30, intent)])


def accuracy_score(content: ExtractedContent) -> int:
    text = content.text
    score = ACCURACY.score(text, group="indicators")
    if ACCURACY.count(text, group="dates"):
        score += 10
    authority = content.ai_signals.authority
    if authority.publication_dates or authority.last_modified:
        score += 10
    return clamp(score)


class ContentQualityScorer(BaseScorer):
    """Depth, intent match and freshness of the page copy."""

    advice = {
        "comprehensive_coverage": MetricAdvice(
            finding="Content lacks comprehensive coverage of the topic",
            text="Expand the page to cover background, how-to steps, examples and common questions.",
            implementation="Outline the subtopics searchers expect and add a section for each.",
            expected_impact="More queries answered by one page",
            time_to_implement="1-2 days",
        ),
        "relevance_to_user_intent": MetricAdvice(
            finding="Content may not fully address user search intent",
            text="Align the body with the promise of the title and answer the reader's actual question.",
            implementation="Repeat the key terms of the title in the opening paragraphs and add practical advice.",
            expected_impact="Better match between queries and content",
            time_to_implement="2-4 hours",
        ),
        "accuracy_and_currency": MetricAdvice(
            finding="Content lacks indicators of accuracy and currency",
            text="Show publication and update dates and cite the sources behind your claims.",
            implementation="Add a visible 'last updated' date and link statistics to their origin.",
            expected_impact="Readers and AI systems can verify the information",
            time_to_implement="1-2 hours",
        ),
        "long_tail_keywords": MetricAdvice(
            finding="Limited use of long-tail keywords and conversational phrases",
            text="Work question-style and long-tail phrases into headings and copy.",
            implementation="Collect real user questions and use them as subheadings.",
            expected_impact="Visibility for specific and voice queries",
            time_to_implement="2-4 hours",
        ),
        "natural_language": MetricAdvice(
            finding="Language could be more natural and conversational",
            text="Write the way people speak: address the reader, use contractions and active voice.",
            implementation="Rewrite formal passages in second person.",
            expected_impact="Content fits conversational search",
            time_to_implement="2-4 hours",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "content_quality"

    @property
    def name(self) -> str:
        return "Content Quality"

    def score(self, content: ExtractedContent) -> ContentQuality:
        text = content.text
        metrics = {
            "comprehensive_coverage": coverage_score(content),
            "relevance_to_user_intent": relevance_score(content),
            "accuracy_and_currency": accuracy_score(content),
            "long_tail_keywords": clamp(LONG_TAIL.score(text)),
            "natural_language": clamp(CONVERSATIONAL.score(text)),
        }
        score = weighted([
            (40, metrics["comprehensive_coverage"]),
            (35, metrics["relevance_to_user_intent"]),
            (25, metrics["accuracy_and_currency"]),
        ])
        findings, recommendations = self.advise(metrics)
        return ContentQuality(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            **metrics,
        )


# === AI Optimization ===


def chunkability_score(paragraphs: list[str]) -> int:
    """Share of paragraphs that are 2-4 sentences and short enough to quote."""
    if not paragraphs:
        return 0
    ideal = sum(
        1 for paragraph in paragraphs
        if 2 <= len(_sentences(paragraph)) <= 4 and len(paragraph) <= MAX_CHUNK_LENGTH
    )
    return clamp(ideal / len(paragraphs) * 100)


def qa_format_score(content: ExtractedContent) -> int:
    text = content.text
    question_marks = text.count("?")
    score = 0
    if question_marks:
        score += 30
    if any(is_question(heading.text) for heading in content.headings):
        score += 30
    if question_marks > 3:
        score += 10
    schema_types = content.structured_data_signals.schema_types
    if "FAQPage" in schema_types or "QAPage" in schema_types:
        score += 20
    if any(is_definition_paragraph(paragraph) for paragraph in content.paragraphs):
        score += 10
    return clamp(score)


def entity_recognition_score(content: ExtractedContent) -> int:
    capitalized = set(_CAPITALIZED.findall(content.text))
    return clamp(10 * content.ai_signals.entities.total + 2 * len(capitalized))


def semantic_clarity_score(text: str) -> int:
    """100 minus 20 points per weighted hedge word per 100 words."""
    words = len(text.split())
    # Nothing to judge
    if words == 0:
        return 0
    density = HEDGE_WORDS.weighted_count(text) / words * 100
    return clamp(100 - density * 20)


def content_clarity_score(content: ExtractedContent, semantic_clarity: int) -> int:
    if semantic_clarity == 0:
        return 0
    flesch = content.technical.flesch_reading_ease
    score = semantic_clarity
    if flesch is not None:
        if flesch < LOW_READABILITY:
            score -= 15
        elif flesch >= HIGH_READABILITY:
            score += 5
    return clamp(score)


def structure_for_ai_score(content: ExtractedContent) -> int:
    headings = content.headings
    score = 0
    if any(heading.level == 1 for heading in headings):
        score += 25
    if sum(1 for heading in headings if heading.level == 2) >= 2:
        score += 25
    if content.lists:
        score += 20
    if content.table_count:
        score += 15
    if {"main", "article", "section"} & set(content.technical.semantic_elements):
        score += 15
    return clamp(score)


def contextual_relevance_score(content: ExtractedContent) -> int:
    text = " ".join([heading.text for heading in content.headings] + [content.text])
    return clamp(len(TOPIC_COVERAGE.groups_matched(text)) * 20)


class AIOptimizationScorer(BaseScorer):
    """How easily an AI system can chunk, quote and trust the page."""

    advice = {
        "chunkability": MetricAdvice(
            finding="Content paragraphs are too long for optimal AI processing",
            text="Break content into focused paragraphs of 2-4 sentences.",
            implementation="Split long paragraphs and move enumerations into lists.",
            expected_impact="Passages can be quoted as self-contained answers",
            time_to_implement="2-4 hours",
        ),
        "qa_format": MetricAdvice(
            finding="Content lacks clear question-answer formatting",
            text="Add questions as headings followed by direct answers, and mark them up as FAQPage.",
            implementation="Create an FAQ section and describe it with FAQPage JSON-LD.",
            expected_impact="Higher chance of being used as a direct answer",
            time_to_implement="2-4 hours",
        ),
        "entity_recognition": MetricAdvice(
            finding="Limited use of clearly defined entities (people, places, brands)",
            text="Name the people, organizations, products and places the content is about.",
            implementation="Replace vague references with proper names and link them to authoritative pages.",
            expected_impact="AI systems connect the page to known entities",
            time_to_implement="1-2 hours",
        ),
        "factual_density": MetricAdvice(
            finding="Content has low fact-to-fluff ratio",
            text="Add specific numbers, research findings and concrete details.",
            implementation="Back each key claim with a figure or a cited study.",
            expected_impact="Content is more likely to be cited",
            time_to_implement="2-4 hours",
        ),
        "semantic_clarity": MetricAdvice(
            finding="Content contains ambiguous language that may confuse AI systems",
            text="Replace hedging words with precise statements and define technical terms.",
            implementation="Edit out 'maybe', 'perhaps' and 'might' where the facts are known.",
            expected_impact="Statements can be extracted without ambiguity",
            time_to_implement="1-2 hours",
        ),
        "content_structure_for_ai": MetricAdvice(
            finding="Page structure gives AI systems few cues",
            text="Use one H1, several H2 sections, lists, tables and semantic HTML5 elements.",
            implementation="Wrap the body in <main>/<article> and break it into titled sections.",
            expected_impact="Clear boundaries between topics",
            time_to_implement="2-4 hours",
        ),
        "contextual_relevance": MetricAdvice(
            finding="Content misses supporting context",
            text="Add background, examples and a summary around the core answer.",
            implementation="Include an overview section, a worked example and key takeaways.",
            expected_impact="Answers come with the context AI systems look for",
            time_to_implement="2-4 hours",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "ai_optimization"

    @property
    def name(self) -> str:
        return "AI Optimization"

    def score(self, content: ExtractedContent) -> AIOptimization:
        text = content.text
        chunkability = chunkability_score(content.paragraphs)
        qa_format = qa_format_score(content)
        entity_recognition = entity_recognition_score(content)
        factual_density = clamp(FACTUAL.score(text))
        semantic_clarity = semantic_clarity_score(text)
        structure_for_ai = structure_for_ai_score(content)
        contextual_relevance = contextual_relevance_score(content)

        semantic_structure = weighted([
            (50, structure_for_ai),
            (25, chunkability),
            (25, entity_recognition),
        ])
        answer_potential = weighted([
            (50, qa_format),
            (30, factual_density),
            (20, contextual_relevance),
        ])
        content_clarity = content_clarity_score(content, semantic_clarity)
        score = weighted([
            (45, semantic_structure),
            (35, answer_potential),
            (20, content_clarity),
        ])

        findings, recommendations = self.advise({
            "content_structure_for_ai": structure_for_ai,
            "chunkability": chunkability,
            "qa_format": qa_format,
            "entity_recognition": entity_recognition,
            "factual_density": factual_density,
            "semantic_clarity": semantic_clarity,
            "contextual_relevance": contextual_relevance,
        })
        return AIOptimization(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            semantic_structure=semantic_structure,
            answer_potential=answer_potential,
            content_clarity=content_clarity,
            chunkability=chunkability,
            qa_format=qa_format,
            entity_recognition=entity_recognition,
            factual_density=factual_density,
            semantic_clarity=semantic_clarity,
            content_structure_for_ai=structure_for_ai,
            contextual_relevance=contextual_relevance,
        )


# === E-E-A-T ===


def expertise_score(content: ExtractedContent) -> int:
    text = content.text
    score = CREDENTIALS.score(text) + EXPERIENCE.score(text)
    score += 10 * len(INDUSTRY_EXPERTISE.groups_matched(text))
    if content.ai_signals.authority.author_bylines:
        score += 20
    return clamp(score)


def authoritativeness_score(content: ExtractedContent) -> int:
    authority = content.ai_signals.authority
    factual = content.ai_signals.factual
    score = min(30, 10 * len(authority.authority_links))
    if authority.author_bylines:
        score += 20
    score += min(20, 5 * factual.citations)
    score += min(30, SOCIAL_PLATFORMS.score(content.html.lower()) * 5)
    return clamp(score)


def trustworthiness_score(content: ExtractedContent) -> int:
    html = content.html.lower()
    legal = clamp(LEGAL_TRUST.score(html))
    contact = clamp(CONTACT.score(html))
    company = clamp(COMPANY_INFO.score(content.text))
    return weighted([(40, legal), (30, contact), (30, company)])


def factual_accuracy_score(content: ExtractedContent) -> int:
    factual = content.ai_signals.factual
    score = min(45, 15 * factual.citations)
    score += min(30, 10 * factual.statistics)
    score += min(25, 5 * len(factual.sources))
    return clamp(score)


class EEATScorer(BaseScorer):
    """Experience, expertise, authoritativeness and trust signals."""

    advice = {
        "expertise_experience": MetricAdvice(
            finding="Little evidence of first-hand experience or expertise",
            text="Show who wrote the content and why they are qualified.",
            implementation="Add an author byline with credentials and describe hands-on experience.",
            expected_impact="Content is weighed as expert material",
            time_to_implement="1-2 hours",
        ),
        "authoritativeness": MetricAdvice(
            finding="Few authority signals such as citations or reputable links",
            text="Cite recognized sources and link to your presence on established platforms.",
            implementation="Link claims to .gov, .edu or standards bodies and add social profile links.",
            expected_impact="Stronger association with trusted sources",
            time_to_implement="2-4 hours",
        ),
        "trustworthiness": MetricAdvice(
            finding="Missing company information and trust pages",
            text="Publish privacy, terms and contact information and describe the company.",
            implementation="Link privacy policy, terms and an About page from the footer.",
            expected_impact="Users and search engines can verify who runs the site",
            time_to_implement="1 day",
        ),
        "factual_accuracy": MetricAdvice(
            finding="Claims are rarely backed by citations or data",
            text="Attribute statistics and quotes to their sources.",
            implementation="Use <cite> or 'according to' with a link for each figure.",
            expected_impact="Verifiable content is cited more often",
            time_to_implement="2-4 hours",
        ),
    }

    @property
    def scorer_id(self) -> str:
        return "eeat_signals"

    @property
    def name(self) -> str:
        return "E-E-A-T Signals"

    def score(self, content: ExtractedContent) -> EEATSignals:
        metrics = {
            "expertise_experience": expertise_score(content),
            "authoritativeness": authoritativeness_score(content),
            "trustworthiness": trustworthiness_score(content),
            "factual_accuracy": factual_accuracy_score(content),
        }
        score = weighted([
            (40, metrics["expertise_experience"]),
            (35, metrics["authoritativeness"]),
            (25, metrics["trustworthiness"]),
        ])
        findings, recommendations = self.advise(metrics)
        return EEATSignals(
            score=score,
            status=status_for(score),
            findings=findings,
            recommendations=recommendations,
            **metrics,
        )


# Register all content scorers
def register_content_scorers(registry):
    """Register the content category scorers with the given registry."""
    registry.register(ContentQualityScorer())
    registry.register(AIOptimizationScorer())
    registry.register(EEATScorer())

"""Combine category scores into the overall score and content improvements."""
from __future__ import annotations

from collections.abc import Mapping

from src.config.settings import settings
from src.models.analysis import CategoryScore, ContentImprovement, Priority

CATEGORY_NAMES: dict[str, str] = {
    "ai_optimization": "AI Optimization",
    "content_quality": "Content Quality",
    "technical_crawlability": "Technical Crawlability",
    "eeat_signals": "E-E-A-T Signals",
    "mobile_optimization": "Mobile Optimization",
    "schema_analysis": "Schema Analysis",
    "technical_seo": "Technical SEO",
}

# Canned improvements per category: (current, improved, reasoning, implementation, impact)
IMPROVEMENT_STRATEGIES: dict[str, list[tuple[str, str, str, str, str]]] = {
    "ai_optimization": [
        (
            "Content lacks structured Q&A format",
            "Add FAQ sections with clear questions and direct answers, and describe them with FAQPage markup.",
            "AI search engines favour passages that answer a question on their own.",
            "Turn common customer questions into H2/H3 headings followed by 2-4 sentence answers.",
            "Higher chance of being quoted in AI answers",
        ),
        (
            "Limited entity recognition and factual density",
            "Include specific facts, statistics and named entities that AI systems can recognize.",
            "Dense, verifiable facts tie the page to specific queries and make it citable.",
            "Replace general statements with figures, names and dates.",
            "More precise matching to factual queries",
        ),
        (
            "Content lacks semantic clarity",
            "Use unambiguous language, define technical terms and keep terminology consistent.",
            "Clear statements let AI systems extract relationships between concepts.",
            "Remove hedging words and add a short definition for each key term.",
            "Cleaner extraction of statements",
        ),
    ],
    "content_quality": [
        (
            "Insufficient long-tail keyword coverage",
            "Work specific long-tail and question phrases naturally into headings and copy.",
            "Long-tail queries carry clear intent and face less competition.",
            "Collect real search questions and answer each one in its own section.",
            "Visibility for specific and conversational queries",
        ),
        (
            "Content lacks comprehensive coverage",
            "Cover the topic fully: background, step-by-step guidance, examples and common questions.",
            "Comprehensive pages satisfy intent and signal expertise.",
            "Outline the subtopics competitors cover and fill the gaps.",
            "Page ranks for a wider set of related queries",
        ),
        (
            "Limited relevance to user intent",
            "Align the content with what searchers actually want to know, with practical examples.",
            "Pages that match intent earn engagement and better rankings.",
            "Make the opening paragraph answer the question the title promises.",
            "Lower bounce rate and stronger relevance",
        ),
    ],
    "technical_seo": [
        (
            "Heading structure and meta information need work",
            "Use one H1, nest H2/H3 sections logically and write unique titles and descriptions.",
            "Headings and meta tags are the first structure crawlers read.",
            "Audit the heading outline and rewrite the title and meta description.",
            "Clearer page outline and better snippets",
        ),
        (
            "Images missing alt text",
            "Add descriptive alt text to all meaningful images.",
            "Alt text makes images understandable to crawlers and screen readers.",
            "Describe what each image shows in its alt attribute.",
            "Images contribute to relevance and accessibility",
        ),
    ],
    "eeat_signals": [
        (
            "Missing author credentials and experience",
            "Add author bylines, credentials and first-hand experience to the content.",
            "Demonstrated expertise is a core quality signal for search and AI systems.",
            "Create author bios and link them from each article.",
            "Content is weighed as expert material",
        ),
        (
            "Missing company information and trust pages",
            "Publish About, contact, privacy and terms pages and link them site-wide.",
            "Transparent ownership and policies build trust with users and search engines.",
            "Add the pages and link them from the footer.",
            "Higher trust scores",
        ),
    ],
    "technical_crawlability": [
        (
            "AI crawlers cannot fully access or read the page",
            "Allow AI crawlers in robots.txt and serve the main content in the initial HTML.",
            "Content that crawlers cannot fetch or render is never cited.",
            "Review robots.txt groups for AI user agents and enable server-side rendering.",
            "Page becomes available to AI search",
        ),
    ],
    "mobile_optimization": [
        (
            "Mobile experience needs improvement",
            "Configure the viewport, use responsive layouts and keep tap targets large.",
            "Most crawls and visits are mobile-first.",
            "Add a device-width viewport and CSS breakpoints.",
            "Usable pages on every device",
        ),
    ],
    "schema_analysis": [
        (
            "Structured data is missing or incomplete",
            "Add valid JSON-LD for Organization, Article, FAQPage or other relevant types.",
            "Structured data tells machines exactly what the page contains.",
            "Embed JSON-LD in the page template and validate it.",
            "Eligibility for rich results and clearer entity understanding",
        ),
    ],
}


def calculate_overall_score(scores: Mapping[str, CategoryScore]) -> int:
    """Round half-up of the weighted sum of category scores.

    Weights are integer percentages so the result is exact.
    """
    weights = settings.scoring.weights
    total = sum(weights[category] * scores[category].score for category in weights)
    return (total + 50) // 100


def improvement_priority(score: int) -> Priority:
    scoring = settings.scoring
    if score < scoring.high_priority_below:
        return "high"
    if score < scoring.medium_priority_below:
        return "medium"
    return "low"


def generate_content_improvements(
    scores: Mapping[str, CategoryScore],
    overall_score: int,
) -> list[ContentImprovement]:
    """Generate prioritized improvements for categories below their thresholds.

    Categories are visited in IMPROVEMENT_STRATEGIES order. A "Priority Action" entry leads
    when any category scores below the high-priority cut-off, and an
    "Overall Strategy" entry closes the list when the overall score is low.
    """
    scoring = settings.scoring
    improvements: list[ContentImprovement] = []

    for category, strategies in IMPROVEMENT_STRATEGIES.items():
        score = scores[category].score
        if score >= scoring.improvement_thresholds[category]:
            continue
        for current, improved, reasoning, implementation, impact in strategies:
            improvements.append(
                ContentImprovement(
                    section=CATEGORY_NAMES[category],
                    current=current,
                    improved=improved,
                    reasoning=reasoning,
                    priority=improvement_priority(score),
                    implementation=implementation,
                    estimated_impact=impact,
                )
            )

    critical = [
        CATEGORY_NAMES[category] for category in CATEGORY_NAMES
        if scores[category].score < scoring.high_priority_below
    ]
    if critical:
        improvements.insert(
            0,
            ContentImprovement(
                section="Priority Action",
                current=f"Multiple areas scoring below {scoring.high_priority_below}%: {', '.join(critical)}",
                improved="Fix these areas first; they hold back AI visibility the most.",
                reasoning=(
                    f"Areas below {scoring.high_priority_below}% offer the largest gains "
                    "and should come before polishing higher-scoring areas."
                ),
                priority="high",
            ),
        )

    if overall_score < scoring.overall_strategy_below:
        improvements.append(
            ContentImprovement(
                section="Overall Strategy",
                current=f"Overall score of {overall_score}% indicates room for improvement across multiple areas",
                improved="Improve content, technical accessibility and structured data together rather than one at a time.",
                reasoning="Gains in one category are capped while the others stay weak.",
                priority=improvement_priority(overall_score),
            ),
        )

    return improvements

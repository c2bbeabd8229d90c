"""Unit tests for the content category scorers."""
from __future__ import annotations

from src.models.content import (
    AISignals,
    AuthoritySignals,
    EntitySignals,
    ExtractedContent,
    FactualSignals,
    Heading,
    StructuredDataSignals,
    TechnicalSignals,
)
from src.scoring.content_scorers import (
    AIOptimizationScorer,
    ContentQualityScorer,
    EEATScorer,
    accuracy_score,
    authoritativeness_score,
    chunkability_score,
    content_clarity_score,
    contextual_relevance_score,
    coverage_score,
    entity_recognition_score,
    expertise_score,
    factual_accuracy_score,
    qa_format_score,
    relevance_score,
    semantic_clarity_score,
    structure_for_ai_score,
    title_overlap,
    trustworthiness_score,
)


class TestContentQuality:
    """Tests for coverage, relevance and accuracy."""

    def test_coverage(self):
        """Word count tiers, headings and paragraphs add up."""
        assert coverage_score(ExtractedContent()) == 0
        assert coverage_score(ExtractedContent(word_count=300)) == 25
        rich = ExtractedContent(
            word_count=1500,
            headings=[Heading(level=2, text=f"Section {i}") for i in range(4)],
            paragraphs=[f"Paragraph number {i} with enough text." for i in range(6)],
        )
        assert coverage_score(rich) == 100

    def test_title_overlap(self):
        """Only title words longer than three letters count."""
        assert title_overlap("", "anything") == 0
        assert title_overlap("A Guide to Tea", "this guide covers green tea") == 100
        assert title_overlap("Coffee Brewing", "coffee is great") == 50

    def test_relevance(self):
        """Title overlap and intent groups are blended 70/30."""
        content = ExtractedContent(
            title="Coffee Brewing Guide",
            paragraphs=["This guide explains coffee brewing with practical tips."],
        )
        assert relevance_score(content) == 85
        assert relevance_score(ExtractedContent(title="Coffee")) == 0

    def test_accuracy(self):
        """Indicators, dates and publication metadata add points."""
        content = ExtractedContent(paragraphs=["Published in 2024 according to research."])
        assert accuracy_score(content) == 46
        dated = content.model_copy(update={
            "ai_signals": AISignals(authority=AuthoritySignals(publication_dates=["2024-03-01"])),
        })
        assert accuracy_score(dated) == 56

    def test_empty_page(self):
        """An empty snapshot scores 0 with a finding per metric."""
        result = ContentQualityScorer().score(ExtractedContent())
        assert result.score == 0
        assert result.status == "critical"
        assert len(result.findings) == 5
        assert {r.priority for r in result.recommendations} == {"high"}


class TestAIOptimization:
    """Tests for AI readiness sub-metrics."""

    def test_chunkability(self):
        """Two to four sentence paragraphs under 300 characters are ideal."""
        assert chunkability_score([]) == 0
        paragraphs = ["One sentence. Two sentences.", "Single sentence only", "x" * 301 + ". y."]
        assert chunkability_score(paragraphs) == 33

    def test_qa_format(self):
        """Questions, FAQ markup and definitions add up."""
        content = ExtractedContent(
            headings=[Heading(level=2, text="What is espresso?")],
            paragraphs=["Espresso refers to coffee brewed under pressure. Why does it matter?"],
            structured_data_signals=StructuredDataSignals(schema_types=["FAQPage"]),
        )
        assert qa_format_score(content) == 90
        assert qa_format_score(ExtractedContent()) == 0

    def test_entity_recognition(self):
        """Entities count ten points, distinct capitalized words two."""
        content = ExtractedContent(
            paragraphs=["Alice met Bob in Paris"],
            ai_signals=AISignals(entities=EntitySignals(persons=["Alice", "Bob"])),
        )
        assert entity_recognition_score(content) == 26

    def test_semantic_clarity(self):
        """Hedge words per hundred words cost twenty points each."""
        assert semantic_clarity_score("") == 0
        assert semantic_clarity_score(" ".join(["maybe"] + ["word"] * 99)) == 80
        assert semantic_clarity_score("Water boils at one hundred degrees.") == 100

    def test_content_clarity(self):
        """Readability nudges clarity up or down."""
        def with_flesch(value):
            return ExtractedContent(technical=TechnicalSignals(flesch_reading_ease=value))
        assert content_clarity_score(with_flesch(20.0), 80) == 65
        assert content_clarity_score(with_flesch(70.0), 80) == 85
        assert content_clarity_score(with_flesch(None), 80) == 80
        assert content_clarity_score(with_flesch(70.0), 0) == 0

    def test_structure_for_ai(self):
        """H1, several H2s, lists, tables and semantic elements add up to 100."""
        content = ExtractedContent(
            headings=[Heading(level=1, text="T"), Heading(level=2, text="A"), Heading(level=2, text="B")],
            lists=[["one", "two"]],
            table_count=1,
            technical=TechnicalSignals(semantic_elements=["main"]),
        )
        assert structure_for_ai_score(content) == 100
        assert structure_for_ai_score(ExtractedContent()) == 0

    def test_contextual_relevance(self):
        """Each topic group present is worth twenty points."""
        content = ExtractedContent(
            headings=[Heading(level=2, text="Background")],
            paragraphs=["For example, you can steep tea for three minutes. In summary, use fresh water."],
        )
        assert contextual_relevance_score(content) == 60

    def test_serialized_alias(self):
        """The structure metric serializes under its camelCase alias."""
        result = AIOptimizationScorer().score(ExtractedContent())
        dumped = result.model_dump(by_alias=True)
        assert "contentStructureForAI" in dumped
        assert "semanticStructure" in dumped

    def test_empty_page(self):
        """An empty snapshot scores 0 with seven findings."""
        result = AIOptimizationScorer().score(ExtractedContent())
        assert result.score == 0
        assert len(result.findings) == 7
        assert result.findings[0] == "Page structure gives AI systems few cues"


class TestEEAT:
    """Tests for experience, expertise, authority and trust."""

    def test_expertise(self):
        """Credentials and tenure are weighted; bylines add twenty."""
        content = ExtractedContent(paragraphs=["Dr. Smith is a certified specialist with 10 years of experience."])
        assert expertise_score(content) == 47
        bylined = content.model_copy(update={
            "ai_signals": AISignals(authority=AuthoritySignals(author_bylines=["Dr. Smith"])),
        })
        assert expertise_score(bylined) == 67

    def test_authoritativeness(self):
        """Authority links, bylines, citations and social presence are capped separately."""
        content = ExtractedContent(
            html="<a href='https://linkedin.com/x'>in</a> <a href='https://github.com/x'>gh</a> testimonial",
            ai_signals=AISignals(
                authority=AuthoritySignals(
                    author_bylines=["Jane"],
                    authority_links=["https://nih.gov/a", "https://en.wikipedia.org/b"],
                ),
                factual=FactualSignals(citations=3),
            ),
        )
        assert authoritativeness_score(content) == 70

    def test_trustworthiness(self):
        """Legal pages and contact channels are read from the raw HTML."""
        html = (
            "<a href='/privacy'>Privacy Policy</a>"
            "<a href='/terms'>Terms of Service</a>"
            "<a href='mailto:hi@example.com'>Contact</a>"
        )
        assert trustworthiness_score(ExtractedContent(html=html)) == 32
        assert trustworthiness_score(ExtractedContent()) == 0

    def test_factual_accuracy(self):
        """Citations, statistics and sources are capped separately."""
        content = ExtractedContent(ai_signals=AISignals(factual=FactualSignals(
            citations=2, statistics=1, sources=["a.org", "b.org"],
        )))
        assert factual_accuracy_score(content) == 50
        maxed = ExtractedContent(ai_signals=AISignals(factual=FactualSignals(
            citations=10, statistics=10, sources=[f"s{i}.org" for i in range(10)],
        )))
        assert factual_accuracy_score(maxed) == 100

    def test_empty_page(self):
        """An empty snapshot scores 0 with four findings."""
        result = EEATScorer().score(ExtractedContent())
        assert result.score == 0
        assert len(result.findings) == 4
        assert {r.category for r in result.recommendations} == {"E-E-A-T Signals"}

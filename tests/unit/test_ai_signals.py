"""Unit tests for AI-oriented signals."""
from __future__ import annotations

import pytest

from src.models.content import CrawledRobots, Heading, ManualRobots, StructuredDataSignals
from src.parser.extractor import extract_content
from src.signals.ai import is_definition_paragraph, is_question, simulate_bot_access

PAGE_URL = "https://example.com/machine-learning-guide"


@pytest.fixture
def excellent(fixtures_dir):
    html = (fixtures_dir / "html" / "excellent.html").read_text(encoding="utf-8")
    return extract_content(html, PAGE_URL)


class TestTextPatterns:
    """Tests for question and definition detection."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("What is generative search?", True),
            ("Does this work offline?", True),
            ("Anything ending in a question mark?", True),
            ("A plain statement.", False),
            ("Is it worth it? Most teams say yes.", True),
            ("See example.com/search?q=crawl for the results.", False),
        ],
    )
    def test_is_question(self, text, expected):
        """Questions are detected by lead word or trailing question mark."""
        assert is_question(text) is expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Crawling is defined as fetching pages automatically.", True),
            ("Indexing refers to storing parsed pages.", True),
            ("機器學習指的是從資料中學習", True),
            ("機械学習とはデータから学ぶ技術です", True),
            ("The weather was nice today.", False),
            ("", False),
        ],
    )
    def test_is_definition_paragraph(self, text, expected):
        """Definition phrasing is recognized across languages."""
        assert is_definition_paragraph(text) is expected


class TestBotSimulation:
    """Tests for the non-rendering crawler estimate."""

    def test_full_access(self):
        """Server-rendered pages with content, an H1 and schema score 100."""
        availability, simulation = simulate_bot_access(
            word_count=300,
            headings=[Heading(level=1, text="Title")],
            paragraphs=["Some paragraph text that is long enough."],
            structured=StructuredDataSignals(json_ld_count=1),
            javascript_dependent=False,
        )
        assert availability == "full"
        assert simulation.accessibility_score == 100
        assert simulation.content_extracted is True
        assert simulation.priority_content_found is True
        assert simulation.structured_data_present is True

    def test_empty_js_shell(self):
        """An empty JavaScript shell scores 0."""
        availability, simulation = simulate_bot_access(
            word_count=0,
            headings=[],
            paragraphs=[],
            structured=StructuredDataSignals(),
            javascript_dependent=True,
        )
        assert availability == "js-dependent"
        assert simulation.accessibility_score == 0
        assert simulation.content_extracted is False

    def test_partial_access(self):
        """JavaScript pages with some server text are partially readable."""
        availability, simulation = simulate_bot_access(
            word_count=150,
            headings=[Heading(level=2, text="Section")],
            paragraphs=["Some paragraph text that is long enough."],
            structured=StructuredDataSignals(),
            javascript_dependent=True,
        )
        assert availability == "partial"
        assert simulation.accessibility_score == 35
        assert simulation.priority_content_found is False


class TestDetectAISignals:
    """Tests for the combined AI signal record on a well-built page."""

    def test_authority(self, excellent):
        """Bylines, dates and authority links are collected."""
        authority = excellent.ai_signals.authority
        assert authority.author_bylines[0] == "Dr. Jane Smith"
        assert authority.publication_dates == ["2024-03-01"]
        assert authority.last_modified == "2024-06-15"
        assert "https://www.nih.gov/research" in authority.authority_links
        assert "https://en.wikipedia.org/wiki/Machine_learning" in authority.authority_links
        assert authority.credential_mentions

    def test_factual(self, excellent):
        """Citations, statistics and external sources are counted."""
        factual = excellent.ai_signals.factual
        assert factual.citations == 2
        assert factual.statistics > 0
        assert factual.sources == ["www.nih.gov", "en.wikipedia.org", "www.linkedin.com"]
        assert factual.external_links == 3

    def test_answer_formats(self, excellent):
        """Question headings, definitions, lists, steps and tables are counted."""
        formats = excellent.ai_signals.answer_formats
        assert formats.qa_count == 4
        assert formats.definition_count == 2
        assert formats.list_count == 2
        assert formats.step_by_step_count >= 1
        assert formats.table_count == 1

    def test_bot_accessibility(self, excellent):
        """A server-rendered page is fully available to crawlers."""
        access = excellent.ai_signals.bot_accessibility
        assert access.content_availability == "full"
        assert access.bot_simulation.accessibility_score >= 85
        assert set(access.ai_bot_directives.values()) == {"unspecified"}

    def test_structured_and_voice(self, excellent):
        """Schema and question formats feed the voice search record."""
        assert excellent.structured_data_signals.json_ld_count == 3
        assert {"Article", "FAQPage"} <= set(excellent.structured_data_signals.ai_friendly_schemas)
        assert excellent.ai_signals.voice_search.question_formats == 4
        assert excellent.ai_signals.entity_backend == "patterns"

    def test_crawled_directives_copied(self, valid_html, mock_url):
        """Crawled robots directives are mirrored into the bot accessibility record."""
        policy = CrawledRobots(has_robots_txt=True, ai_bot_directives={"GPTBot": "disallowed"})
        content = extract_content(valid_html, mock_url, robots_policy=policy)
        assert content.ai_signals.bot_accessibility.ai_bot_directives == {"GPTBot": "disallowed"}

    def test_x_robots_tag_header(self, minimal_html):
        """The X-Robots-Tag header is reported with the AI meta directives."""
        content = extract_content(minimal_html, headers={"X-Robots-Tag": "noai"}, robots_policy=ManualRobots())
        assert content.ai_signals.bot_accessibility.meta_robots_ai == "x-robots-tag: noai"

    def test_meta_robots(self, html_noindex):
        """Robots meta tags are reported by name."""
        content = extract_content(html_noindex)
        assert content.ai_signals.bot_accessibility.meta_robots_ai == "robots: noindex, nofollow"

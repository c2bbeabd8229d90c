"""
Score Regression Tests.

These tests ensure that code changes don't unexpectedly alter scoring behavior.
If a test fails, it means the scoring algorithm has changed - this may be intentional
(in which case update the expected values) or a bug (fix the code).

Golden data approach:
- Each fixture has an expected score range
- Tests verify scores stay within that range and keep their relative order
"""
from __future__ import annotations

from pathlib import Path

import pytest

from src.pipeline import analyze_html


FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "html"


def _analyze(name: str):
    html_path = FIXTURES_DIR / name
    if not html_path.exists():
        pytest.skip("Fixture file not found")
    return analyze_html(html_path.read_text(encoding="utf-8"), "https://example.com/page")


class TestScoreRegressionWithFixtures:
    """Regression tests using HTML fixtures."""

    def test_excellent_fixture(self):
        """
        Excellent fixture should score 60+.

        This fixture has:
        - Article, FAQ and Organization JSON-LD
        - Multiple headings with good hierarchy
        - Lists, tables, definitions and statistics
        - Author byline, citations and dates
        """
        analysis = _analyze("excellent.html")
        assert analysis.overall_score >= 60, analysis.overall_score
        assert analysis.schema_analysis.score >= 70

    def test_poor_fixture(self):
        """Poor fixture (thin, unstructured page) should score 35 or less."""
        analysis = _analyze("poor.html")
        assert analysis.overall_score <= 35, analysis.overall_score
        assert analysis.schema_analysis.schema_presence == 0

    def test_relative_order(self):
        """Scores keep their ordering across quality levels."""
        poor = _analyze("poor.html").overall_score
        average = _analyze("average.html").overall_score
        excellent = _analyze("excellent.html").overall_score
        assert poor < average < excellent

    def test_improvement_counts_follow_quality(self):
        """Weaker pages get at least as many improvements."""
        poor = _analyze("poor.html").content_improvements
        excellent = _analyze("excellent.html").content_improvements
        assert len(poor) >= len(excellent)

"""
End-to-end tests for the full analysis pipeline.

Tests the complete flow: fetch → extract → score → aggregate → format
Uses a local HTTP server to avoid external network dependencies.
"""
from __future__ import annotations

import json
import socket
import threading
from http.server import HTTPServer, SimpleHTTPRequestHandler
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from src.fetcher.html_fetcher import FetchError, FetchResult
from src.models.content import CrawledRobots
from src.pipeline import analyze_html, analyze_text, analyze_url
from src.report.formatter import format_report
from src.scoring.base import status_for
from src.signals.robots import build_robots_policy


# Path to test fixtures
FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "html"

CATEGORIES = [
    "technical_seo",
    "content_quality",
    "ai_optimization",
    "eeat_signals",
    "technical_crawlability",
    "mobile_optimization",
    "schema_analysis",
]


class QuietHTTPHandler(SimpleHTTPRequestHandler):
    """HTTP handler that doesn't log to console."""

    def log_message(self, format, *args):
        """Suppress logging."""
        pass


def find_free_port():
    """Find a free port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        port = s.getsockname()[1]
    return port


class LocalHTTPServer:
    """Context manager for a local HTTP server serving test fixtures."""

    def __init__(self, directory: Path):
        self.directory = directory
        self.port = find_free_port()
        self.server = None
        self.thread = None

    def __enter__(self):
        handler = lambda *args, **kwargs: QuietHTTPHandler(
            *args, directory=str(self.directory), **kwargs
        )
        self.server = HTTPServer(("127.0.0.1", self.port), handler)
        self.thread = threading.Thread(target=self.server.serve_forever)
        self.thread.daemon = True
        self.thread.start()
        return self

    def __exit__(self, *args):
        if self.server:
            self.server.shutdown()
        if self.thread:
            self.thread.join(timeout=1)

    @property
    def base_url(self):
        return f"http://127.0.0.1:{self.port}"


@pytest.fixture
def local_server():
    """Fixture that provides a local HTTP server serving test HTML files."""
    with LocalHTTPServer(FIXTURES_DIR) as server:
        yield server


def _fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class TestManualPipeline:
    """Full pipeline on supplied HTML."""

    def test_deterministic(self):
        """The same input yields the same report apart from the timestamp."""
        html = _fixture("excellent.html")
        first = analyze_html(html, "https://example.com/machine-learning-guide")
        second = analyze_html(html, "https://example.com/machine-learning-guide")
        assert first.model_dump(exclude={"timestamp"}) == second.model_dump(exclude={"timestamp"})

    @pytest.mark.parametrize("name", ["excellent.html", "average.html", "poor.html"])
    def test_scores_bounded_with_matching_status(self, name):
        """Every category and the overall score stay within 0-100."""
        analysis = analyze_html(_fixture(name), "https://example.com/")
        assert 0 <= analysis.overall_score <= 100
        for category, result in analysis.category_scores().items():
            assert category in CATEGORIES
            assert 0 <= result.score <= 100
            assert result.status == status_for(result.score)

    def test_manual_defaults(self, valid_html, mock_url):
        """Manual input uses manual robots and estimated performance."""
        analysis = analyze_html(valid_html, mock_url)
        content = analysis.extracted_content
        assert content.source == "manual"
        assert content.robots_policy.source == "manual"
        assert content.performance.source == "estimated"
        assert content.performance.accessibility_score is not None
        assert analysis.debug_info.scorers == CATEGORIES
        assert analysis.technical_crawlability.robots_access == 80

    def test_example_page(self, valid_html, mock_url):
        """The example page extracts its structure and serializes cleanly."""
        analysis = analyze_html(valid_html, mock_url)
        content = analysis.extracted_content
        assert analysis.title == "Test Page - AI Readiness Example"
        assert [h.level for h in content.headings] == [1, 2, 2, 3]
        assert content.ai_signals.answer_formats.table_count == 1
        assert content.markdown_representation.startswith("# Test Page - AI Readiness Example")
        data = json.loads(format_report(analysis, "json"))
        assert data["url"] == mock_url
        assert len(data["contentImprovements"]) == len(analysis.content_improvements)

    def test_organization_article(self, organization_json_ld):
        """One h1, three h2, a long body, two FAQ tables and Organization JSON-LD."""
        sentence = "Our team reviews every cloud backup plan against the same checklist of features. "
        faq_table = (
            "<table><tr><th>Question</th><th>Answer</th></tr>"
            "<tr><td>How often are backups taken?</td><td>Every hour.</td></tr></table>"
        )
        body = "".join(
            f"<h2>Section {i}</h2><p>{sentence * 40}</p>{faq_table if i < 3 else ''}"
            for i in range(1, 4)
        )
        html = (
            "<html><head><title>Cloud Backup Plans Compared</title>"
            f'<script type="application/ld+json">{organization_json_ld}</script></head>'
            f"<body><h1>Cloud Backup Plans</h1>{body}</body></html>"
        )
        analysis = analyze_html(html, "https://example.com/backup")
        assert analysis.extracted_content.word_count >= 1500
        assert analysis.extracted_content.ai_signals.answer_formats.table_count == 2
        assert analysis.technical_seo.heading_structure >= 70
        assert analysis.schema_analysis.schema_presence > 0
        assert analysis.schema_analysis.status in ("excellent", "good", "needs-improvement")

    def test_deeply_nested_json_ld(self, organization_json_ld):
        """JSON-LD nested past the recursion limit is reported, not fatal."""
        deep = "[" * 100_000 + "]" * 100_000
        html = (
            "<html><head><title>Deep</title>"
            f'<script type="application/ld+json">{deep}</script>'
            f'<script type="application/ld+json">{organization_json_ld}</script></head>'
            "<body><h1>Deep</h1><p>Some text.</p></body></html>"
        )
        analysis = analyze_html(html, "https://example.com/deep")
        structured = analysis.extracted_content.structured_data_signals
        assert "Schema 1: Invalid JSON syntax" in structured.validation_errors
        assert structured.schema_types == ["Organization"]
        assert "- **Organization**: Example Corp" in analysis.extracted_content.markdown_representation

    def test_empty_page(self):
        """An empty document still produces a complete, low-scoring report."""
        analysis = analyze_html("<html><body></body></html>")
        assert analysis.url == ""
        assert analysis.overall_score < 50
        assert analysis.content_improvements[0].section == "Priority Action"
        assert analysis.content_improvements[-1].section == "Overall Strategy"

    def test_boilerplate_excluded(self, html_with_boilerplate):
        """Ads, banners and footers stay out of the crawler view but are still scored."""
        content = analyze_html(html_with_boilerplate).extracted_content
        markdown = content.markdown_representation
        main = markdown[markdown.index("\n## Main Content\n"):markdown.index("\n## Structured Data\n")]
        assert "real article content" in main
        assert "sponsored product" not in main
        assert "cookies" not in main
        assert "Copyright" not in main
        assert any("sponsored product" in paragraph for paragraph in content.paragraphs)

    def test_analyze_text(self):
        """Plain text is wrapped into paragraphs and scored."""
        analysis = analyze_text(
            "Photosynthesis is the process plants use to turn light into sugar.\n\n"
            "What is chlorophyll? It is the green pigment that absorbs light."
        )
        assert analysis.extracted_content.paragraphs == [
            "Photosynthesis is the process plants use to turn light into sugar.",
            "What is chlorophyll? It is the green pigment that absorbs light.",
        ]
        assert analysis.debug_info.source == "manual"


class TestCrawledPipeline:
    """Full pipeline on fetched pages, with the network mocked."""

    @pytest.fixture
    def fetched(self, monkeypatch):
        page = FetchResult(
            html=_fixture("excellent.html"),
            final_url="https://www.example.com/guide",
            headers={"Content-Type": "text/html", "X-Robots-Tag": "noai"},
        )
        fetch_page = MagicMock(return_value=page)
        fetch_robots = MagicMock(
            side_effect=lambda url, x_robots_tag="": build_robots_policy(
                "User-agent: GPTBot\nDisallow: /\n", url, x_robots_tag=x_robots_tag
            )
        )
        monkeypatch.setattr("src.pipeline.fetch_page", fetch_page)
        monkeypatch.setattr("src.pipeline.fetch_robots", fetch_robots)
        return fetch_page, fetch_robots

    def test_uses_final_url_and_header(self, fetched):
        """robots.txt is evaluated for the final URL with the X-Robots-Tag header."""
        fetch_page, fetch_robots = fetched
        analysis = analyze_url("example.com/guide")

        fetch_page.assert_called_once_with("https://example.com/guide")
        fetch_robots.assert_called_once_with("https://www.example.com/guide", x_robots_tag="noai")
        assert analysis.url == "https://www.example.com/guide"
        content = analysis.extracted_content
        assert content.source == "crawled"
        assert isinstance(content.robots_policy, CrawledRobots)
        assert content.robots_policy.ai_bot_directives["GPTBot"] == "disallowed"
        assert "x-robots-tag: noai" in content.ai_signals.bot_accessibility.meta_robots_ai

    def test_blocked_bot_lowers_crawlability(self, fetched):
        """A disallowed crawler costs robots access points."""
        analysis = analyze_url("https://example.com/guide")
        assert analysis.technical_crawlability.robots_access < 100

    def test_fetch_error_propagates(self, monkeypatch):
        """Fetch failures abort the analysis."""
        monkeypatch.setattr(
            "src.pipeline.fetch_page",
            MagicMock(side_effect=FetchError("https://example.com", "HTTP 500 while fetching")),
        )
        with pytest.raises(FetchError, match="HTTP 500"):
            analyze_url("https://example.com")

    def test_invalid_url(self):
        """Non-http input is rejected before any fetch."""
        with pytest.raises(ValueError):
            analyze_url("ftp://example.com/file")


class TestLocalServer:
    """Fetches against a real local HTTP server."""

    def test_local_server_blocked(self, local_server):
        """SSRF protection refuses loopback addresses."""
        with pytest.raises(FetchError, match="SSRF protection"):
            analyze_url(f"{local_server.base_url}/excellent.html")

    @patch("socket.gethostbyname", return_value="93.184.216.34")
    def test_local_server_fetch(self, mock_dns, local_server):
        """With address checks satisfied, the page is fetched and scored."""
        analysis = analyze_url(f"{local_server.base_url}/excellent.html")
        assert analysis.title == "Machine Learning Guide: How It Works in 2024"
        assert analysis.extracted_content.source == "crawled"
        assert analysis.extracted_content.robots_policy == CrawledRobots()
        assert 0 <= analysis.overall_score <= 100

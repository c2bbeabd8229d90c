"""Shared test fixtures and configuration."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def no_spacy_model(monkeypatch):
    """Use pattern entities everywhere so results do not depend on installed models."""
    monkeypatch.setattr("src.signals.entities._load_spacy_model", lambda: None)


@pytest.fixture(autouse=True)
def no_pagespeed_key(monkeypatch):
    """Never call PageSpeed Insights from tests unless a test opts in."""
    from src.config.settings import settings
    from src.fetcher.performance import performance_lookup

    monkeypatch.setattr(settings.performance, "api_key", "")
    performance_lookup.clear()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def valid_html() -> str:
    """Return a valid HTML page for testing."""
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Test Page - AI Readiness Example</title>
    <meta name="description" content="This is a test page for validating the AI readiness grader. It contains various content elements for comprehensive testing.">
    <link rel="canonical" href="https://example.com/test-page">
    <meta name="robots" content="index, follow">
</head>
<body>
    <h1>Main Heading for Test Page</h1>
    <p>This is the first paragraph with some introductory content about the test page.</p>

    <h2>Section One: Overview</h2>
    <p>Machine learning is defined as a subset of artificial intelligence that enables systems to learn from data.</p>
    <p>According to a 2024 study, 85% of enterprises now use some form of AI technology.</p>

    <h2>Section Two: Details</h2>
    <ul>
        <li>First item in the list</li>
        <li>Second item with more details</li>
        <li>Third item for completeness</li>
    </ul>

    <h3>Subsection: Technical Details</h3>
    <p>The implementation uses Python 3.11 with a small set of parsing libraries.</p>

    <table>
        <tr><th>Feature</th><th>Status</th></tr>
        <tr><td>HTML Parsing</td><td>Complete</td></tr>
        <tr><td>Scoring</td><td>Complete</td></tr>
    </table>

    <img src="/images/test.jpg" alt="Test image description">

    <a href="/internal-link">Internal Link</a>
    <a href="https://external.com">External Link</a>
</body>
</html>"""


@pytest.fixture
def minimal_html() -> str:
    """Return minimal HTML for edge case testing."""
    return """<!DOCTYPE html>
<html>
<head><title>Minimal</title></head>
<body><p>Content</p></body>
</html>"""


@pytest.fixture
def html_multiple_h1() -> str:
    """Return HTML with multiple H1 tags."""
    return """<!DOCTYPE html>
<html>
<head>
    <title>Multiple H1 Test</title>
    <meta name="description" content="Testing multiple H1 tags">
</head>
<body>
    <h1>First H1</h1>
    <p>Content that is long enough to count as a paragraph.</p>
    <h1>Second H1</h1>
    <p>More content that is long enough to count as well.</p>
</body>
</html>"""


@pytest.fixture
def html_noindex() -> str:
    """Return HTML with noindex directive."""
    return """<!DOCTYPE html>
<html>
<head>
    <title>Noindex Page</title>
    <meta name="robots" content="noindex, nofollow">
</head>
<body>
    <h1>Hidden Page</h1>
    <p>This page should not be indexed by anyone at all.</p>
</body>
</html>"""


@pytest.fixture
def html_with_boilerplate() -> str:
    """Return HTML whose main content is surrounded by navigation, ads and a footer."""
    return """<!DOCTYPE html>
<html>
<head><title>Boilerplate Test</title></head>
<body>
    <nav><a href="/">Home</a><a href="/blog">Blog</a><a href="/about">About</a></nav>
    <main>
        <h1>Article Heading</h1>
        <p>First paragraph of the real article content goes here.</p>
        <div class="advertisement"><p>Buy our sponsored product today, limited offer!</p></div>
        <h2>Second Section</h2>
        <p>Second paragraph of the real article content goes here.</p>
        <aside><p>Related posts you might want to read next week.</p></aside>
        <div class="cookie-banner"><p>We use cookies to improve your experience here.</p></div>
        <div class="social-share"><p>Share this article on every social network.</p></div>
        <ul>
            <li>List item one</li>
            <li>List item two</li>
        </ul>
        <footer><p>Copyright 2024 Example Company, all rights reserved.</p></footer>
    </main>
</body>
</html>"""


@pytest.fixture
def organization_json_ld() -> str:
    """Return a valid Organization JSON-LD block."""
    return """{
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": "Example Corp",
        "url": "https://example.com",
        "logo": "https://example.com/logo.png"
    }"""


@pytest.fixture
def mock_url() -> str:
    """Return a mock URL for testing."""
    return "https://example.com/test-page"


@pytest.fixture
def extracted(valid_html: str, mock_url: str):
    """Return ExtractedContent for valid HTML with manual defaults."""
    from src.parser.extractor import extract_content
    return extract_content(valid_html, mock_url, source="manual")


@pytest.fixture
def robots_txt_allow_all() -> str:
    """Return robots.txt that allows all crawlers."""
    return """User-agent: *
Allow: /

User-agent: GPTBot
Allow: /

Sitemap: https://example.com/sitemap.xml
"""


@pytest.fixture
def robots_txt_block_ai() -> str:
    """Return robots.txt that blocks AI crawlers."""
    return """User-agent: *
Allow: /

User-agent: GPTBot
Disallow: /

User-agent: CCBot
Disallow: /

User-agent: PerplexityBot
Disallow: /
"""

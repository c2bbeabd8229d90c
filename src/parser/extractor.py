"""Content extraction: raw HTML -> ExtractedContent."""
from __future__ import annotations

import html as html_lib
import logging
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment, Doctype, Tag

from src.models.content import (
    EstimatedPerformance,
    ExtractedContent,
    Heading,
    Image,
    Link,
    ManualRobots,
)
from src.parser.markdown_builder import build_markdown
from src.signals.ai import detect_ai_signals
from src.signals.mobile import detect_mobile_signals
from src.signals.structured_data import detect_structured_data
from src.signals.technical import detect_technical_signals
from src.signals.ux import detect_ux_signals

logger = logging.getLogger(__name__)

MIN_PARAGRAPH_LENGTH = 20

_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "details", "dl", "div", "fieldset",
    "figure", "footer", "form", "header", "h1", "h2", "h3", "h4", "h5", "h6",
    "main", "nav", "ol", "p", "pre", "section", "table", "ul",
})
_INVISIBLE_PARENTS = frozenset({"script", "style", "noscript", "template", "head", "title"})
_WALK_TAGS = (*_HEADING_TAGS, "p", "blockquote", "div", "img", "a", "ul", "ol", "table")


def parse_html(html: str) -> BeautifulSoup:
    """Parse HTML into the DOM the rest of the pipeline queries."""
    return BeautifulSoup(html or "", "lxml")


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def _word_count(text: str) -> int:
    if not text:
        return 0
    return len(text.split())


def _in_ancestor(tag: Tag, names: list[str]) -> bool:
    return tag.find_parent(names) is not None


def visible_text(root: Tag) -> str:
    """Text a reader would see: no script/style/template bodies, no comments."""
    parts = []
    for string in root.find_all(string=True):
        if isinstance(string, (Comment, Doctype)):
            continue
        if string.parent is not None and string.parent.name in _INVISIBLE_PARENTS:
            continue
        parts.append(str(string))
    return _clean_text(" ".join(parts))


def _is_leaf_block(tag: Tag) -> bool:
    """A container counts as a text block only when no block-level child would double count it."""
    return tag.find(lambda child: isinstance(child, Tag) and child.name in _BLOCK_TAGS) is None


def _is_internal(href: str, hostname: str) -> bool:
    return href.startswith("/") or (bool(hostname) and hostname in href)


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"name": lambda value: value and value.lower() == name})
    return _clean_text(tag.get("content", "")) if tag else ""


def _extract_elements(soup: BeautifulSoup, url: str) -> dict:
    """Single document-order pass over headings, paragraphs, images, links, lists and tables."""
    hostname = urlparse(url).hostname or ""
    headings: list[Heading] = []
    paragraphs: list[str] = []
    images: list[Image] = []
    links: list[Link] = []
    lists: list[list[str]] = []
    table_count = 0

    root = soup.body or soup
    for element in root.find_all(_WALK_TAGS):
        name = element.name

        if name in _HEADING_TAGS:
            text = _clean_text(element.get_text(" ", strip=True))
            if text:
                headings.append(Heading(level=int(name[1]), text=text))
            continue

        if name in {"p", "blockquote", "div"}:
            if _in_ancestor(element, ["ul", "ol", "table"]):
                continue
            if name != "p" and not _is_leaf_block(element):
                continue
            if name == "p" and _in_ancestor(element, ["p"]):
                continue
            text = _clean_text(element.get_text(" ", strip=True))
            if len(text) > MIN_PARAGRAPH_LENGTH:
                paragraphs.append(text)
            continue

        if name == "img":
            src = (element.get("src") or "").strip()
            if src:
                images.append(Image(src=src, alt=(element.get("alt") or "").strip()))
            continue

        if name == "a":
            href = (element.get("href") or "").strip()
            text = _clean_text(element.get_text(" ", strip=True))
            if href and text:
                links.append(Link(href=href, text=text, internal=_is_internal(href, hostname)))
            continue

        if name in {"ul", "ol"}:
            if _in_ancestor(element, ["ul", "ol", "table"]):
                continue
            items = []
            for li in element.find_all("li", recursive=False):
                item_text = _clean_text(li.get_text(" ", strip=True))
                if item_text:
                    items.append(item_text)
            if items:
                lists.append(items)
            continue

        if name == "table" and not _in_ancestor(element, ["table"]):
            table_count += 1

    return {
        "headings": headings,
        "paragraphs": paragraphs,
        "images": images,
        "links": links,
        "lists": lists,
        "table_count": table_count,
    }


def _extract_schema_blocks(soup: BeautifulSoup) -> list[str]:
    blocks = []
    for script in soup.find_all("script", attrs={"type": lambda value: value and value.lower().strip() == "application/ld+json"}):
        content = (script.string or script.get_text() or "").strip()
        if content:
            blocks.append(content)
    return blocks


def extract_content(
    html: str,
    url: str = "",
    *,
    source: str = "crawled",
    robots_policy=None,
    performance=None,
    headers: dict | None = None,
) -> ExtractedContent:
    """Extract a page into an immutable ExtractedContent.

    Args:
        html: Raw HTML of the page
        url: Final URL of the page (empty for manual input)
        source: "crawled" or "manual"
        robots_policy: CrawledRobots / ManualRobots supplied by the fetcher
        performance: MeasuredPerformance / EstimatedPerformance
        headers: Response headers, used for X-Robots-Tag

    Returns:
        ExtractedContent with every signal record populated
    """
    soup = parse_html(html)
    robots_policy = robots_policy if robots_policy is not None else ManualRobots()
    performance = performance if performance is not None else EstimatedPerformance()

    title = _clean_text(soup.title.get_text()) if soup.title else ""
    meta_description = _meta_content(soup, "description")

    elements = _extract_elements(soup, url)
    schema_blocks = _extract_schema_blocks(soup)
    body = soup.body or soup
    word_count = _word_count(visible_text(body))
    all_text = " ".join(elements["paragraphs"])

    technical = detect_technical_signals(soup, html, all_text, image_count=len(elements["images"]))
    mobile = detect_mobile_signals(soup, html)
    structured = detect_structured_data(html, url, schema_blocks)
    ux = detect_ux_signals(soup)
    ai = detect_ai_signals(
        soup,
        url=url,
        headings=elements["headings"],
        paragraphs=elements["paragraphs"],
        links=elements["links"],
        lists=elements["lists"],
        table_count=elements["table_count"],
        word_count=word_count,
        structured=structured,
        technical=technical,
        robots_policy=robots_policy,
        headers=headers or {},
    )

    markdown = build_markdown(html, url=url, title=title, schema_blocks=schema_blocks)

    logger.debug(
        "Extracted %d headings, %d paragraphs, %d links, %d schema blocks",
        len(elements["headings"]),
        len(elements["paragraphs"]),
        len(elements["links"]),
        len(schema_blocks),
    )

    return ExtractedContent(
        url=url,
        source=source,
        title=title,
        meta_description=meta_description,
        headings=elements["headings"],
        paragraphs=elements["paragraphs"],
        images=elements["images"],
        links=elements["links"],
        lists=elements["lists"],
        table_count=elements["table_count"],
        word_count=word_count,
        schema_blocks=schema_blocks,
        html=html,
        technical=technical,
        robots_policy=robots_policy,
        performance=performance,
        mobile_signals=mobile,
        structured_data_signals=structured,
        ux_signals=ux,
        ai_signals=ai,
        markdown_representation=markdown,
    )


_PARAGRAPH_BREAK = re.compile(r"\n\s*\n|\n")


def text_to_html(text: str) -> str:
    """Wrap pasted plain text into minimal HTML, one paragraph per line.

    Input that already looks like an HTML document is returned unchanged.
    """
    stripped = (text or "").strip()
    if re.match(r"(?is)^(<!doctype html|<html|<body|<head)", stripped):
        return stripped
    blocks = [block.strip() for block in _PARAGRAPH_BREAK.split(stripped) if block.strip()]
    body = "".join(f"<p>{html_lib.escape(block)}</p>" for block in blocks)
    return f"<html><body><div>{body}</div></body></html>"

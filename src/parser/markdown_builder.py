"""Bot-simulated markdown view: what a crawler would actually read.

The builder parses its own copy of the document so removing boilerplate
never changes what the extractor sees.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from src.config.patterns import CALL_TO_ACTION

logger = logging.getLogger(__name__)

CONTENT_SELECTORS: tuple[str, ...] = (
    "main",
    "article",
    ".main-content",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".content",
    "#content",
    "#main",
    '[role="main"]',
)

BOILERPLATE_SELECTORS: tuple[str, ...] = (
    "nav",
    "footer",
    "aside",
    '[role="navigation"]',
    '[role="contentinfo"]',
    '[role="complementary"]',
    ".sidebar",
    "#sidebar",
    ".ad",
    ".ads",
    ".advert",
    ".advertisement",
    ".ad-container",
    ".adsbygoogle",
    ".social-share",
    ".share-buttons",
    ".social",
    ".cookie",
    ".cookie-banner",
    "#cookie-consent",
    ".consent",
    ".comments",
    "#comments",
    ".comment-section",
    "[hidden]",
    '[aria-hidden="true"]',
    '[style*="display:none"]',
    '[style*="display: none"]',
    "script",
    "style",
    "noscript",
    "template",
)

MAX_STRUCTURED_DATA_ENTRIES = 10
MAX_KEY_LINKS = 15
MAX_NAVIGATION_LABELS = 10

_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_CONTENT_TAGS = (*_HEADING_TAGS, "p", "ul", "ol", "blockquote", "table", "img")
_CAPTURING_ANCESTORS = ["ul", "ol", "blockquote", "table"]
_GENERIC_ALT = {"image", "img", "photo", "picture", "logo", "icon", "banner", "spacer"}
_NAVIGATION_SELECTOR = 'nav, [role="navigation"]'
_BREADCRUMB_SELECTOR = (
    '.breadcrumb, .breadcrumbs, [aria-label*="breadcrumb" i], [itemtype*="BreadcrumbList"]'
)
_FOOTER_SELECTOR = 'footer, [role="contentinfo"]'
_META_SUMMARY_FIELDS = (
    ("Open Graph", "property", "og:", ("type", "title", "site_name")),
    ("Twitter Card", "name", "twitter:", ("card", "title")),
)


@dataclass
class _ContentNode:
    position: int
    priority: int
    markdown: str
    text: str


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def select_content_root(soup: BeautifulSoup) -> Tag:
    """Return the primary content container, falling back to body."""
    for selector in CONTENT_SELECTORS:
        found = soup.select_one(selector)
        if found is not None:
            return found
    return soup.body or soup


def _boilerplate_elements(root: Tag) -> list[Tag]:
    found: list[Tag] = []
    seen: set[int] = set()
    for selector in BOILERPLATE_SELECTORS:
        for element in root.select(selector):
            if id(element) not in seen:
                seen.add(id(element))
                found.append(element)
    return found


def _inside(tag: Tag, containers: set[int]) -> bool:
    if id(tag) in containers:
        return True
    return any(id(parent) in containers for parent in tag.parents)


def _descriptive_alt(img: Tag) -> str:
    for attr in ("alt", "title"):
        value = _clean_text(img.get(attr) or "")
        if len(value) > 3 and value.lower() not in _GENERIC_ALT:
            return value
    return ""


def _render_table(table: Tag) -> tuple[str, str]:
    rows = []
    for row in table.find_all("tr"):
        cells = [_clean_text(cell.get_text(" ", strip=True)) for cell in row.find_all(["th", "td"])]
        if any(cells):
            rows.append(cells)
    if not rows:
        return "", ""
    width = max(len(row) for row in rows)
    lines = []
    for index, row in enumerate(rows):
        padded = row + [""] * (width - len(row))
        lines.append("| " + " | ".join(padded) + " |")
        if index == 0:
            lines.append("|" + " --- |" * width)
    text = " ".join(" ".join(row) for row in rows)
    return "\n".join(lines), text


def _render_node(element: Tag, position: int) -> _ContentNode | None:
    name = element.name
    if name in _HEADING_TAGS:
        text = _clean_text(element.get_text(" ", strip=True))
        if not text:
            return None
        level = int(name[1])
        # Page headings sit below the "##" section headers.
        marker = "#" * min(6, level + 2)
        return _ContentNode(position, 100 - level * 10, f"{marker} {text}", text)

    if name == "p":
        text = _clean_text(element.get_text(" ", strip=True))
        if not text:
            return None
        return _ContentNode(position, 10 + min(10, len(text) // 100), text, text)

    if name in {"ul", "ol"}:
        items = [
            _clean_text(li.get_text(" ", strip=True))
            for li in element.find_all("li", recursive=False)
        ]
        items = [item for item in items if item]
        if not items:
            return None
        if name == "ol":
            lines = [f"{index}. {item}" for index, item in enumerate(items, start=1)]
        else:
            lines = [f"- {item}" for item in items]
        return _ContentNode(position, 20 + min(20, len(items) * 2), "\n".join(lines), " ".join(items))

    if name == "blockquote":
        text = _clean_text(element.get_text(" ", strip=True))
        if not text:
            return None
        return _ContentNode(position, 15, f"> {text}", text)

    if name == "table":
        markdown, text = _render_table(element)
        if not markdown:
            return None
        return _ContentNode(position, 25, markdown, text)

    if name == "img":
        alt = _descriptive_alt(element)
        src = (element.get("src") or "").strip()
        if not alt:
            return None
        return _ContentNode(position, 5, f"![{alt}]({src})", alt)

    return None


def _captured_by_parent(element: Tag, root: Tag) -> bool:
    """True when a list, quote or table between element and root already renders it."""
    for parent in element.parents:
        if parent is root:
            return False
        if parent.name in _CAPTURING_ANCESTORS:
            return True
    return False


def _main_content_nodes(root: Tag) -> list[_ContentNode]:
    nodes: list[_ContentNode] = []
    for position, element in enumerate(root.find_all(_CONTENT_TAGS)):
        if _captured_by_parent(element, root):
            continue
        node = _render_node(element, position)
        if node is not None:
            nodes.append(node)
    # Document position is the primary key; priority only breaks ties.
    return sorted(nodes, key=lambda node: (node.position, -node.priority))


@dataclass
class _NavigationContext:
    menu: list[str]
    breadcrumb: list[str]
    footer: list[str]
    internal_links: int
    external_links: int

    def lines(self) -> list[str]:
        lines = []
        if self.menu:
            lines.append(f"- Navigation: {', '.join(self.menu)}")
        if self.breadcrumb:
            lines.append(f"- Breadcrumb: {' > '.join(self.breadcrumb)}")
        if self.footer:
            lines.append(f"- Footer: {', '.join(self.footer)}")
        if self.internal_links or self.external_links:
            lines.append(f"- Internal links: {self.internal_links}")
            lines.append(f"- External links: {self.external_links}")
        return lines


def _labels(elements: list[Tag], skip: set[int] | None = None) -> list[str]:
    """Distinct short link labels under the given containers."""
    labels: list[str] = []
    for element in elements:
        for link in element.find_all("a"):
            if skip and _inside(link, skip):
                continue
            text = _clean_text(link.get_text(" ", strip=True))
            if text and len(text) < 50 and text not in labels:
                labels.append(text)
            if len(labels) >= MAX_NAVIGATION_LABELS:
                return labels
    return labels


def _breadcrumb_labels(containers: list[Tag]) -> list[str]:
    labels: list[str] = []
    for container in containers:
        for item in container.find_all("li") or container.find_all("a"):
            text = _clean_text(item.get_text(" ", strip=True))
            if text and text not in labels:
                labels.append(text)
    return labels[:MAX_NAVIGATION_LABELS]


def _navigation_context(soup: BeautifulSoup, hostname: str) -> _NavigationContext:
    """Menu, breadcrumb and footer labels plus page-wide link counts."""
    breadcrumbs = soup.select(_BREADCRUMB_SELECTOR)
    footers = soup.select(_FOOTER_SELECTOR)
    skip = {id(element) for element in (*breadcrumbs, *footers)}

    internal = external = 0
    for link in soup.find_all("a", href=True):
        href = link["href"].strip()
        if not href or urlparse(href).scheme.lower() not in ("", "http", "https"):
            continue
        if _is_internal_href(href, hostname):
            internal += 1
        else:
            external += 1

    return _NavigationContext(
        menu=_labels(soup.select(_NAVIGATION_SELECTOR), skip),
        breadcrumb=_breadcrumb_labels(breadcrumbs),
        footer=_labels(footers),
        internal_links=internal,
        external_links=external,
    )


def _technical_presence(soup: BeautifulSoup) -> list[tuple[str, bool]]:
    def has_meta(**attrs) -> bool:
        return soup.find("meta", attrs=attrs) is not None

    open_graph = soup.find("meta", attrs={"property": lambda value: value and value.startswith("og:")}) is not None
    json_ld = soup.find("script", attrs={"type": "application/ld+json"}) is not None
    microdata = soup.find(attrs={"itemscope": True}) is not None
    canonical = soup.find("link", attrs={"rel": lambda value: value and "canonical" in value}) is not None
    hreflang = soup.find("link", attrs={"hreflang": True}) is not None
    robots = has_meta(name=lambda value: value and value.lower() == "robots")
    sitemap = (
        soup.find("link", attrs={"rel": lambda value: value and "sitemap" in value}) is not None
        or soup.find("a", href=lambda value: value and "sitemap" in value.lower()) is not None
    )
    return [
        ("Title", soup.title is not None and bool(_clean_text(soup.title.get_text()))),
        ("Meta Description", has_meta(name=lambda value: value and value.lower() == "description")),
        ("Open Graph", open_graph),
        ("JSON-LD", json_ld),
        ("Microdata", microdata),
        ("Canonical URL", canonical),
        ("Hreflang", hreflang),
        ("Robots Meta", robots),
        ("Sitemap Reference", sitemap),
    ]


def _schema_summaries(schema_blocks: list[str]) -> list[str]:
    summaries: list[str] = []
    for index, block in enumerate(schema_blocks, start=1):
        try:
            data = json.loads(block)
        except (json.JSONDecodeError, RecursionError):
            logger.debug("Skipping malformed JSON-LD block %d in markdown view", index)
            continue
        items = data if isinstance(data, list) else [data]
        expanded = []
        for item in items:
            if isinstance(item, dict) and isinstance(item.get("@graph"), list):
                expanded.extend(item["@graph"])
            else:
                expanded.append(item)
        for item in expanded:
            if not isinstance(item, dict) or "@type" not in item:
                continue
            schema_type = item["@type"]
            if isinstance(schema_type, list):
                schema_type = ", ".join(str(t) for t in schema_type)
            label = item.get("name") or item.get("headline") or ""
            line = f"- **{schema_type}**"
            if isinstance(label, str) and label:
                line += f": {_clean_text(label)}"
            summaries.append(line)
            if len(summaries) >= MAX_STRUCTURED_DATA_ENTRIES:
                return summaries
    return summaries


def _microdata_name(scope: Tag) -> str:
    """First itemprop="name" owned by this item rather than a nested one."""
    for prop in scope.find_all(attrs={"itemprop": "name"}):
        if prop.find_parent(attrs={"itemscope": True}) is scope:
            return _clean_text(prop.get("content") or prop.get_text(" ", strip=True))
    return ""


def _microdata_summaries(soup: BeautifulSoup) -> list[str]:
    summaries: list[str] = []
    for scope in soup.select("[itemscope][itemtype]"):
        itemtype = (scope.get("itemtype") or "").split()
        schema_type = itemtype[0].rstrip("/").rsplit("/", 1)[-1] if itemtype else ""
        if not schema_type:
            continue
        line = f"- **{schema_type}** (microdata)"
        name = _microdata_name(scope)
        if name:
            line += f": {name}"
        summaries.append(line)
    return summaries


def _meta_summaries(soup: BeautifulSoup) -> list[str]:
    summaries: list[str] = []
    for label, attr, prefix, keys in _META_SUMMARY_FIELDS:
        values = []
        for key in keys:
            meta = soup.find("meta", attrs={attr: f"{prefix}{key}"})
            content = _clean_text(meta.get("content") or "") if meta else ""
            if content:
                values.append(f"{key}={content}")
        if values:
            summaries.append(f"- **{label}**: {', '.join(values)}")
    return summaries


def _is_internal_href(href: str, hostname: str) -> bool:
    parsed = urlparse(href)
    if not parsed.scheme and not parsed.netloc:
        return True
    return bool(hostname) and parsed.hostname == hostname


def _has_cta_markup(link: Tag, text: str) -> bool:
    if (link.get("role") or "").lower() == "button":
        return True
    classes = " ".join(link.get("class") or [])
    return bool(
        CALL_TO_ACTION.matches(classes, group="markup")
        or CALL_TO_ACTION.matches(text, group="actions")
    )


def _key_links(soup: BeautifulSoup, root: Tag, boilerplate: set[int], hostname: str) -> list[tuple[str, str]]:
    scored: list[tuple[int, str, str]] = []
    for link in soup.find_all("a", href=True):
        href = link["href"].strip()
        text = _clean_text(link.get_text(" ", strip=True))
        if not href or not text or href.lower().startswith("javascript:"):
            continue
        score = 0
        in_main = any(parent is root for parent in link.parents) and not _inside(link, boilerplate)
        if in_main:
            score += 3
        if len(text) > 10:
            score += 2
        if _is_internal_href(href, hostname):
            score += 2
        if _has_cta_markup(link, text):
            score += 2
        scored.append((score, text, href))

    # sorted() is stable, so equal scores keep document order
    ranked = sorted(scored, key=lambda entry: -entry[0])
    seen: set[str] = set()
    result: list[tuple[str, str]] = []
    for _, text, href in ranked:
        if href in seen:
            continue
        seen.add(href)
        result.append((text, href))
        if len(result) >= MAX_KEY_LINKS:
            break
    return result


def build_markdown(
    html: str,
    *,
    url: str = "",
    title: str = "",
    schema_blocks: list[str] | None = None,
) -> str:
    """Render the bot-simulated markdown view of a page.

    Sections, in order: Navigation Context, Technical SEO Signals,
    Main Content, Structured Data, Key Links.
    """
    soup = BeautifulSoup(html or "", "lxml")
    hostname = urlparse(url).hostname or ""

    if not title:
        h1 = soup.find("h1")
        title = _clean_text(h1.get_text(" ", strip=True)) if h1 else ""

    navigation = _navigation_context(soup, hostname)
    technical = _technical_presence(soup)
    if schema_blocks is None:
        schema_blocks = [
            (script.string or "").strip()
            for script in soup.find_all("script", attrs={"type": "application/ld+json"})
        ]
    summaries = (
        _schema_summaries([block for block in schema_blocks if block])
        + _microdata_summaries(soup)
        + _meta_summaries(soup)
    )[:MAX_STRUCTURED_DATA_ENTRIES]

    root = select_content_root(soup)
    boilerplate = _boilerplate_elements(root)
    boilerplate_ids = {id(element) for element in boilerplate}
    links = _key_links(soup, root, boilerplate_ids, hostname)
    for element in boilerplate:
        if not element.decomposed:
            element.decompose()
    nodes = _main_content_nodes(root)

    sections = [f"# {title or 'Untitled'}"]

    sections.append("## Navigation Context")
    navigation_lines = navigation.lines()
    if navigation_lines:
        sections.append("\n".join(navigation_lines))
    else:
        sections.append("_No navigation detected_")

    sections.append("## Technical SEO Signals")
    sections.append("\n".join(
        f"- {label}: {'Yes' if present else 'No'}" for label, present in technical
    ))

    sections.append("## Main Content")
    if nodes:
        sections.extend(node.markdown for node in nodes)
    else:
        sections.append("_No main content extracted_")

    sections.append("## Structured Data")
    sections.append("\n".join(summaries) if summaries else "_No structured data found_")

    sections.append("## Key Links")
    if links:
        sections.append("\n".join(f"- [{text}]({href})" for text, href in links))
    else:
        sections.append("_No links found_")

    return "\n\n".join(sections) + "\n"

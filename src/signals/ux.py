"""User-experience signals: navigation, forms, search, accessibility hooks, social proof."""
from __future__ import annotations

from bs4 import BeautifulSoup

from src.models.content import UXSignals

MAX_NAVIGATION_LABELS = 10
MAX_FORM_FIELDS = 20

_NAV_SELECTOR = 'nav, .nav, .navigation, .navbar, .menu, [role="navigation"]'
_SEARCH_SELECTOR = (
    'input[type="search"], input[name*="search"], input[id*="search"], '
    'input[placeholder*="search" i], [role="search"]'
)
_BREADCRUMB_SELECTOR = (
    '[aria-label*="breadcrumb" i], .breadcrumb, .breadcrumbs, '
    '[itemtype*="BreadcrumbList"]'
)
_SOCIAL_PROOF_SELECTORS = (
    (".testimonial, .review, .rating, [itemprop=\"review\"]", "testimonials/reviews"),
    ('.social, [class*="facebook"], [class*="twitter"], [class*="linkedin"]', "social media links"),
    (".badge, .certification, .award", "badges/certifications"),
    (".customer, .client, .partner, .logos", "customer logos"),
)


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def _navigation_labels(soup: BeautifulSoup) -> list[str]:
    labels: list[str] = []
    for nav in soup.select(_NAV_SELECTOR):
        for element in nav.find_all("a"):
            text = _clean_text(element.get_text(" ", strip=True))
            if text and len(text) < 50 and text not in labels:
                labels.append(text)
    return labels[:MAX_NAVIGATION_LABELS]


def _accessibility_features(soup: BeautifulSoup) -> list[str]:
    features = []
    if soup.find(attrs={"alt": True}) is not None:
        features.append("Image alt attributes")
    if soup.find(attrs={"aria-label": True}) is not None:
        features.append("ARIA labels")
    if soup.find(attrs={"role": True}) is not None:
        features.append("ARIA roles")
    if soup.select_one('button, input[type="button"], input[type="submit"]') is not None:
        features.append("Interactive buttons")
    if soup.find(attrs={"tabindex": True}) is not None:
        features.append("Tab navigation")
    if soup.find("label") is not None:
        features.append("Form labels")
    if soup.select_one('a[href="#main"], a[href="#content"], .skip-link') is not None:
        features.append("Skip links")
    return features


def detect_ux_signals(soup: BeautifulSoup) -> UXSignals:
    forms = soup.find_all("form")
    fields: list[str] = []
    for form in forms:
        for field in form.find_all(["input", "textarea", "select"]):
            field_type = field.get("type") or field.name
            fields.append(field.get("name") or field.get("id") or field_type)

    contact_form = False
    for form in forms:
        form_html = str(form).lower()
        if "contact" in form_html or "email" in form_html or "message" in form_html:
            contact_form = True
            break

    social_elements = [
        label for selector, label in _SOCIAL_PROOF_SELECTORS
        if soup.select_one(selector) is not None
    ]

    return UXSignals(
        has_navigation=soup.select_one(_NAV_SELECTOR) is not None,
        navigation_labels=_navigation_labels(soup),
        form_count=len(forms),
        form_fields=fields[:MAX_FORM_FIELDS],
        has_search_box=soup.select_one(_SEARCH_SELECTOR) is not None,
        has_contact_form=contact_form,
        accessibility_features=_accessibility_features(soup),
        interactive_elements_count=len(
            soup.select("button, input, select, textarea, a[href], [onclick], [onsubmit]")
        ),
        has_loading_indicators=soup.select_one('.loading, .spinner, .loader, [aria-busy="true"]') is not None,
        has_social_proof=bool(social_elements),
        social_elements=social_elements,
        has_breadcrumbs=soup.select_one(_BREADCRUMB_SELECTOR) is not None,
    )

"""Mobile friendliness signals."""
from __future__ import annotations

import re

from bs4 import BeautifulSoup

from src.models.content import MobileSignals

_FIXED_WIDTH = re.compile(r"width\s*=\s*\d+")


def detect_mobile_signals(soup: BeautifulSoup, html: str) -> MobileSignals:
    viewport = soup.find("meta", attrs={"name": lambda value: value and value.lower() == "viewport"})
    viewport_content = (viewport.get("content") or "").strip() if viewport else ""

    responsive_images = (
        soup.find("img", attrs={"srcset": True}) is not None
        or soup.find("picture") is not None
        or soup.find("source", attrs={"srcset": True}) is not None
    )
    mobile_css = (
        "@media" in (html or "")
        or soup.find("link", attrs={"media": True}) is not None
    )
    touchable = (
        soup.find("button") is not None
        or soup.find("a", href=True) is not None
        or soup.find("input", attrs={"type": lambda value: value and value.lower() in {"button", "submit"}}) is not None
    )
    touch_icon = soup.find(
        "link", attrs={"rel": lambda value: value and "apple-touch-icon" in value}
    ) is not None

    return MobileSignals(
        has_viewport_meta=viewport is not None,
        viewport_content=viewport_content,
        has_touchable_elements=touchable,
        uses_responsive_images=responsive_images,
        mobile_optimized_css=mobile_css,
        has_touch_icon=touch_icon,
        fixed_width_layout=bool(_FIXED_WIDTH.search(viewport_content)),
        uses_plugins=soup.find(["object", "embed", "applet"]) is not None,
    )

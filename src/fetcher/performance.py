"""Core Web Vitals lookup via PageSpeed Insights, with a short-lived cache."""
from __future__ import annotations

import logging
import threading
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from cachetools import TTLCache

from src.config.settings import settings
from src.models.content import EstimatedPerformance, MeasuredPerformance

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})
_SEMANTIC_TAGS = ("article", "section", "nav", "header", "footer", "main", "aside")


def _is_local(url: str) -> bool:
    return (urlparse(url).hostname or "").lower() in _LOCAL_HOSTS


def _parse_pagespeed(data: dict) -> MeasuredPerformance:
    """Pull LCP, max potential FID, CLS and the performance score from a v5 response."""
    lighthouse = data["lighthouseResult"]
    audits = lighthouse["audits"]
    score = lighthouse["categories"]["performance"]["score"] or 0
    return MeasuredPerformance(
        lcp=round(audits["largest-contentful-paint"]["numericValue"]),
        fid=round(audits["max-potential-fid"]["numericValue"]),
        cls=round(float(audits["cumulative-layout-shift"]["numericValue"]), 3),
        score=max(0, min(100, round(score * 100))),
    )


class PerformanceLookup:
    """PageSpeed Insights client memoized by (strategy, url).

    Local URLs are never cached. Failures are not cached either, so a
    transient API error is retried on the next analysis.
    """

    def __init__(self, maxsize: int | None = None, ttl: int | None = None):
        perf = settings.performance
        self._cache: TTLCache[tuple[str, str], MeasuredPerformance] = TTLCache(
            maxsize=maxsize or perf.cache_size,
            ttl=ttl if ttl is not None else perf.cache_ttl,
        )
        self._lock = threading.Lock()

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _request(self, url: str, strategy: str) -> MeasuredPerformance:
        perf = settings.performance
        response = requests.get(
            perf.api_url,
            params={
                "url": url,
                "key": perf.api_key,
                "category": "performance",
                "strategy": strategy,
            },
            timeout=perf.timeout,
        )
        response.raise_for_status()
        return _parse_pagespeed(response.json())

    def get(self, url: str, strategy: str | None = None) -> MeasuredPerformance | EstimatedPerformance:
        """Return measured metrics, or the estimated placeholder on any failure."""
        perf = settings.performance
        strategy = strategy or perf.strategy
        if not perf.api_key:
            logger.debug("No PageSpeed API key configured; using estimated performance")
            return EstimatedPerformance()

        key = (strategy, url)
        cacheable = not _is_local(url)
        if cacheable:
            with self._lock:
                cached = self._cache.get(key)
            if cached is not None:
                logger.debug("PageSpeed cache hit for %s", url)
                return cached

        try:
            metrics = self._request(url, strategy)
        except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
            logger.warning("PageSpeed lookup failed for %s, using estimates: %s", url, exc)
            return EstimatedPerformance()

        if cacheable:
            with self._lock:
                self._cache[key] = metrics
        return metrics


# Global lookup instance
performance_lookup = PerformanceLookup()


def get_performance_metrics(url: str, strategy: str | None = None) -> MeasuredPerformance | EstimatedPerformance:
    """Measured Core Web Vitals for url, or EstimatedPerformance. Never raises."""
    return performance_lookup.get(url, strategy)


def estimate_accessibility(html: str) -> int:
    """Local 0-100 accessibility estimate from alt text, ARIA, labels and landmarks."""
    soup = BeautifulSoup(html or "", "lxml")
    score = 40.0

    images = soup.find_all("img")
    if images:
        with_alt = sum(1 for image in images if (image.get("alt") or "").strip())
        score += with_alt / len(images) * 20
    else:
        score += 20

    if soup.find(["h1", "h2", "h3", "h4", "h5", "h6"]) is not None:
        score += 10

    aria_count = sum(
        1 for tag in soup.find_all(True)
        for attr in tag.attrs
        if attr.startswith("aria-") or attr == "role"
    )
    score += min(15, aria_count * 2)

    for form in soup.find_all("form"):
        inputs = form.find_all(["input", "select", "textarea"])
        if not inputs:
            continue
        labels = len(form.find_all("label"))
        score += min(10, labels / len(inputs) * 10)

    score += 2 * sum(1 for name in _SEMANTIC_TAGS if soup.find(name) is not None)
    return max(0, min(100, int(score + 0.5)))

"""HTML and robots.txt fetching with SSRF protection."""
from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from ipaddress import ip_address
from urllib.parse import urljoin, urlparse

import requests

from src.config.settings import settings
from src.models.content import CrawledRobots
from src.signals.robots import build_robots_policy

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """The page could not be retrieved; the analysis cannot run."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


@dataclass
class FetchResult:
    """Raw page returned by fetch_page."""
    html: str
    final_url: str
    headers: dict[str, str] = field(default_factory=dict)


def _is_url(source: str) -> bool:
    parsed = urlparse(source)
    return parsed.scheme in {"http", "https"}


def normalize_url(url: str) -> str:
    """Strip whitespace and prefix https:// when no scheme is given."""
    url = (url or "").strip()
    if not url:
        raise ValueError("URL is required")
    if "://" not in url:
        url = f"https://{url}"
    if not _is_url(url):
        raise ValueError("Only http and https URLs are allowed")
    return url


def _validate_ip(ip_str: str) -> tuple[bool, str]:
    """Check if an IP address is safe (not private/internal)."""
    try:
        ip = ip_address(ip_str)
        if ip.is_private or ip.is_loopback or ip.is_reserved or ip.is_link_local:
            return False, f"Access to private/internal IP addresses is forbidden: {ip_str}"
        return True, ""
    except ValueError:
        return False, f"Invalid IP address: {ip_str}"


def _resolve_and_validate_url(url: str) -> tuple[str, str, str]:
    """
    Resolve URL hostname to IP and validate it's safe.
    Returns (resolved_ip, hostname, error_message).

    There is a small TOCTOU window between validation and the request;
    exploiting it requires attacker-controlled DNS.
    """
    parsed = urlparse(url)

    # Only allow http and https
    if parsed.scheme not in {"http", "https"}:
        return "", "", "Only http and https schemes are allowed"

    hostname = parsed.hostname
    if not hostname:
        return "", "", "Invalid URL: hostname not found"

    # Resolve hostname to IP
    try:
        resolved_ip = socket.gethostbyname(hostname)
    except (socket.gaierror, UnicodeError):
        return "", "", f"Could not resolve hostname: {hostname}"

    # Validate IP is not private/internal
    is_safe, error_msg = _validate_ip(resolved_ip)
    if not is_safe:
        return "", "", error_msg

    return resolved_ip, hostname, ""


def _check_content_length(response: requests.Response, url: str) -> None:
    limit = settings.fetcher.max_response_size
    content_length = response.headers.get("Content-Length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        response.close()
        raise FetchError(url, f"Response too large: {int(content_length)} bytes (max {limit})")


def _get(url: str, timeout: int) -> requests.Response:
    return requests.get(
        url,
        timeout=timeout,
        allow_redirects=False,  # Disable automatic redirects for security
        stream=True,  # Enable streaming for size check
        headers={"User-Agent": settings.fetcher.user_agent},
    )


def _read_body(response: requests.Response, url: str) -> str:
    """Read the streamed body with a size limit and decode it."""
    limit = settings.fetcher.max_response_size
    chunks = []
    total_size = 0
    for chunk in response.iter_content(chunk_size=8192, decode_unicode=False):
        total_size += len(chunk)
        if total_size > limit:
            response.close()
            raise FetchError(url, f"Response too large: exceeded {limit} bytes")
        chunks.append(chunk)

    content_bytes = b"".join(chunks)
    encoding = response.encoding or "utf-8"
    try:
        return content_bytes.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return content_bytes.decode("utf-8", errors="replace")


def fetch_page(url: str) -> FetchResult:
    """
    Fetch raw HTML from a URL.

    Security measures:
    - Only accepts http/https URLs (no local file paths)
    - Validates resolved IP is not private/internal (SSRF protection)
    - Disables automatic redirects to validate each redirect target
    - Limits response size to prevent memory exhaustion

    Raises:
        ValueError: If the input is not an http(s) URL
        FetchError: On network errors, timeouts, non-2xx responses,
            oversize bodies, blocked addresses or too many redirects
    """
    source = normalize_url(url)
    fetcher = settings.fetcher

    # SSRF protection: resolve and validate URL before requesting
    _, _, error_msg = _resolve_and_validate_url(source)
    if error_msg:
        raise FetchError(source, f"SSRF protection: {error_msg}")

    logger.info("Fetching %s", source)
    try:
        response = _get(source, fetcher.request_timeout)
        _check_content_length(response, source)

        # Handle redirects manually with validation
        redirect_count = 0
        while response.is_redirect:
            if redirect_count >= fetcher.max_redirects:
                response.close()
                raise FetchError(source, f"Too many redirects (max {fetcher.max_redirects})")
            redirect_count += 1
            redirect_url = response.headers.get("Location", "")
            if not redirect_url:
                break

            # Handle relative redirects
            redirect_url = urljoin(source, redirect_url)

            # Validate redirect URL (prevents redirect to internal IPs)
            _, _, redirect_error = _resolve_and_validate_url(redirect_url)
            if redirect_error:
                response.close()
                raise FetchError(redirect_url, f"SSRF protection: Redirect blocked - {redirect_error}")

            logger.debug("Following redirect %s -> %s", source, redirect_url)
            response.close()
            response = _get(redirect_url, fetcher.request_timeout)
            source = redirect_url
            _check_content_length(response, source)

        response.raise_for_status()
        html = _read_body(response, source)
    except requests.Timeout as exc:
        raise FetchError(source, f"Timed out after {fetcher.request_timeout}s fetching {source}") from exc
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "unknown"
        raise FetchError(source, f"HTTP {status} while fetching {source}") from exc
    except requests.RequestException as exc:
        raise FetchError(source, f"Could not fetch {source}: {exc}") from exc

    logger.info("Fetched %s (%d bytes)", source, len(html))
    return FetchResult(html=html, final_url=source, headers=dict(response.headers))


def fetch_robots(url: str, x_robots_tag: str = "") -> CrawledRobots:
    """Fetch /robots.txt for the URL's host and evaluate it for AI crawlers.

    Never raises: any failure yields the "no robots.txt" policy.
    """
    parsed = urlparse(url)
    robots_url = f"{parsed.scheme}://{parsed.netloc}/robots.txt"
    robots_txt = None
    try:
        _, _, error_msg = _resolve_and_validate_url(robots_url)
        if error_msg:
            logger.info("robots.txt skipped for %s: %s", robots_url, error_msg)
        else:
            response = requests.get(
                robots_url,
                timeout=settings.fetcher.robots_timeout,
                headers={"User-Agent": settings.fetcher.user_agent},
            )
            if response.status_code < 400:
                robots_txt = response.text
            else:
                logger.info("No robots.txt at %s (HTTP %d)", robots_url, response.status_code)
    except requests.RequestException as exc:
        logger.info("robots.txt unavailable at %s: %s", robots_url, exc)

    return build_robots_policy(robots_txt, url, x_robots_tag=x_robots_tag)

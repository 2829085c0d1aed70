import logging
import re
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup
from django.conf import settings

from core.common.errors import UpstreamFetchError

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"
NO_DESCRIPTION = "No description available"

# navigation noise, dropped before any text is read
NOISE_SELECTOR = "script, style, nav, footer, header, .nav, .footer, .header"

# first match wins
CONTENT_SELECTORS = ("main", ".main", ".content", ".container", "body")


class FetchError(UpstreamFetchError):
    """Website could not be fetched. The public message stays generic; url/reason are for logs."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(details={})

    def __str__(self):
        return f"Failed to fetch website {self.url}: {self.reason}"


@dataclass(frozen=True)
class ExtractedPage:
    title: str
    description: str
    content: str


def normalize_text(text: str) -> str:
    text = text or ""
    text = text.replace("\x00", " ")
    text = re.sub(r"\s+", " ", text).strip()
    return text


def fetch_html(url: str, timeout_s=None) -> str:
    """Single GET, no retries. Timeout, DNS, non-2xx and transport errors all become FetchError."""
    timeout_s = timeout_s or getattr(settings, "FETCH_TIMEOUT_SECONDS", 10)
    try:
        resp = requests.get(url, timeout=timeout_s, headers={"User-Agent": settings.FETCH_USER_AGENT})
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Failed to fetch website %s: %s", url, e)
        raise FetchError(url, str(e) or e.__class__.__name__) from e
    return resp.text


def _meta_content(soup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    if not tag:
        return ""
    return (tag.get("content") or "").strip()


def _first_text(soup, name: str) -> str:
    tag = soup.find(name)
    return tag.get_text().strip() if tag else ""


def extract_page(html: str, max_chars=None) -> ExtractedPage:
    max_chars = max_chars or getattr(settings, "CONTENT_MAX_CHARS", 10000)
    soup = BeautifulSoup(html or "", "html.parser")

    for tag in soup.select(NOISE_SELECTOR):
        # matches may be nested
        tag.extract()

    title = _first_text(soup, "title") or _first_text(soup, "h1") or UNTITLED

    description = (
        _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or _first_text(soup, "p")[:160]
        or NO_DESCRIPTION
    )

    root = None
    for selector in CONTENT_SELECTORS:
        root = soup.select_one(selector)
        if root is not None:
            break
    text = (root or soup).get_text(separator=" ")
    content = normalize_text(text)[:max_chars]

    return ExtractedPage(title=title, description=description, content=content)

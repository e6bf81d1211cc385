"""Turning an extraction into a :class:`ScrapedPage`.

Identifiers must be stable across re-scrapes of the same logical page so
that repeated runs update rather than duplicate a record.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from policy_qa.scraper.extractor import extract_policy_text
from policy_qa.scraper.models import ExtractionRules, ScrapedPage

_NON_SLUG_RE = re.compile(r"[^a-z0-9]")

# Checked in order; first substring match wins.
_CATEGORY_RULES: list[tuple[str, str]] = [
    ("student-life", "student-services"),
    ("course", "curriculum"),
    ("clinic", "clinics"),
]
DEFAULT_CATEGORY = "academic"


def _path_segments(url: str) -> list[str]:
    return [s for s in urlparse(url).path.split("/") if s]


def identifier_from_title(prefix: str, title: str, limit: int = 50) -> str:
    """``prefix`` + title lower-cased with non-alphanumerics as ``-``, cut to *limit*."""
    return prefix + _NON_SLUG_RE.sub("-", title.lower())[:limit]


def identifier_from_url(prefix: str, url: str, limit: int = 80) -> str:
    """``prefix`` + the last two path segments joined by ``-``, cut to *limit*."""
    return prefix + "-".join(_path_segments(url)[-2:])[:limit]


def title_from_url(url: str) -> str:
    """Title-case the last path segment: ``exam-rules`` becomes ``Exam Rules``."""
    segments = _path_segments(url)
    slug = segments[-1] if segments else urlparse(url).netloc
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), slug.replace("-", " "))


def categorize_url(url: str) -> str:
    """Assign a category from URL substrings."""
    for needle, category in _CATEGORY_RULES:
        if needle in url:
            return category
    return DEFAULT_CATEGORY


def build_scraped_page(
    html: str,
    url: str,
    *,
    identifier: str,
    title: str,
    category: str,
    rules: ExtractionRules | None = None,
    source_name: str | None = None,
) -> Optional[ScrapedPage]:
    """Extract *html* and wrap the result, or return ``None`` on a thin page."""
    extraction = extract_policy_text(html, rules)
    if extraction is None:
        return None
    return ScrapedPage(
        identifier=identifier,
        title=title,
        category=category,
        content=extraction.content,
        summary=extraction.summary,
        source_url=url,
        source_name=source_name or title,
    )

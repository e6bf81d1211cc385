"""Content extraction.

Two extractors live here:

``extract_policy_text``
    The layered selector heuristic used for pages of the policy site.  The
    document is stripped of boilerplate, then an ordered list of strategies
    is tried left to right; the first one whose text clears the minimum
    length wins.  Returns ``None`` when nothing usable is found, which is a
    normal outcome for navigation-only pages.

``extract_content``
    Readability extraction for arbitrary pages (web-search fallback), using
    ``trafilatura`` first and a BeautifulSoup heuristic second.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional
from urllib.parse import urljoin

import trafilatura
from bs4 import BeautifulSoup, NavigableString, Tag

from policy_qa.scraper.models import (
    NOISE_SELECTORS,
    CleanPage,
    Extraction,
    ExtractionRules,
    RawPage,
    TextMode,
)

Strategy = Callable[[BeautifulSoup], Optional[str]]

_WS_RE = re.compile(r"\s+")
_HSPACE_RE = re.compile(r"[^\S\n]+")
_NEWLINES_RE = re.compile(r"\s*\n\s*")

# Elements that start a new line in "paragraphs" mode.
_BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "li", "main", "ol", "p", "pre",
    "section", "table", "td", "th", "tr", "ul",
})


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def clean_text(text: str, mode: TextMode = "collapse") -> str:
    """Normalise whitespace in *text*.

    ``collapse`` turns every whitespace run into one space.  ``paragraphs``
    does the same for horizontal whitespace but keeps a single newline
    wherever the run contained a line break.
    """
    if mode == "paragraphs":
        text = _NEWLINES_RE.sub("\n", text)
        return _HSPACE_RE.sub(" ", text).strip()
    return _WS_RE.sub(" ", text).strip()


def generate_summary(content: str, max_length: int = 200) -> str:
    """Return a preview of *content* no longer than *max_length*.

    Cuts at the last period when it falls beyond 70% of the limit, otherwise
    hard-truncates and appends ``"..."``.
    """
    cleaned = content.strip()
    if len(cleaned) <= max_length:
        return cleaned
    truncated = cleaned[:max_length]
    last_period = truncated.rfind(".")
    if last_period > max_length * 0.7:
        return truncated[: last_period + 1]
    return truncated[: max_length - 3] + "..."


# ---------------------------------------------------------------------------
# Layered policy extractor
# ---------------------------------------------------------------------------

def strip_noise(soup: BeautifulSoup, selectors: Iterable[str] = NOISE_SELECTORS) -> BeautifulSoup:
    """Remove boilerplate elements from *soup* in place and return it."""
    for selector in selectors:
        for tag in soup.select(selector):
            tag.decompose()
    return soup


def _block_text(node: Tag) -> str:
    """Text of *node* with a line break before every block element.

    Inline markup (links, emphasis) stays on its line, so minified HTML such
    as ``<p>a.</p><p>b</p>`` still yields two lines.
    """
    parts: List[str] = []
    for el in node.descendants:
        if isinstance(el, Tag):
            if el.name in _BLOCK_TAGS:
                parts.append("\n")
        elif type(el) is NavigableString:
            parts.append(str(el))
    return "".join(parts)


def _node_text(node, mode: TextMode) -> str:
    if mode == "paragraphs":
        return clean_text(_block_text(node), mode)
    return clean_text(node.get_text(separator=" "), mode)


def selector_strategy(selector: str, min_length: int, mode: TextMode) -> Strategy:
    """Return a strategy that reads every node matching *selector*."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        nodes = soup.select(selector)
        if not nodes:
            return None
        separator = "\n" if mode == "paragraphs" else " "
        text = clean_text(separator.join(_node_text(n, mode) for n in nodes), mode)
        return text if len(text) > min_length else None

    return strategy


def paragraph_strategy(min_length: int, floor: int, mode: TextMode) -> Strategy:
    """Return a strategy that joins qualifying ``p``/``li`` nodes of the body."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        root = soup.body or soup
        parts: List[str] = []
        for node in root.find_all(["p", "li"]):
            text = _node_text(node, mode)
            if len(text) > floor:
                parts.append(text)
        text = "\n\n".join(parts).strip()
        return text if len(text) >= min_length else None

    return strategy


def build_strategies(rules: ExtractionRules) -> List[Strategy]:
    """Primary selectors in priority order, then the paragraph fallback."""
    strategies = [
        selector_strategy(sel, rules.min_length, rules.mode) for sel in rules.selectors
    ]
    strategies.append(
        paragraph_strategy(rules.min_length, rules.paragraph_floor, rules.mode)
    )
    return strategies


def extract_policy_text(html: str, rules: ExtractionRules | None = None) -> Optional[Extraction]:
    """Run the layered extractor over *html*.

    Args:
        html: Raw HTML document.
        rules: Selectors and thresholds.  Defaults to ``ExtractionRules()``.

    Returns:
        An :class:`Extraction` with content cut to ``rules.max_length`` and
        its summary, or ``None`` when no tier produced enough text.
    """
    rules = rules or ExtractionRules()
    soup = strip_noise(BeautifulSoup(html, "html.parser"))

    for strategy in build_strategies(rules):
        text = strategy(soup)
        if text:
            content = text[: rules.max_length]
            return Extraction(
                content=content,
                summary=generate_summary(content, rules.max_summary_length),
            )
    return None


# ---------------------------------------------------------------------------
# Link discovery
# ---------------------------------------------------------------------------

def discover_links(
    html: str,
    base_url: str,
    predicate: Callable[[str], bool] | None = None,
) -> List[str]:
    """Return absolute, de-duplicated hrefs from ``<a>`` tags in document order."""
    return [url for url, _ in discover_link_texts(html, base_url, predicate, min_text=0)]


def discover_link_texts(
    html: str,
    base_url: str,
    predicate: Callable[[str], bool] | None = None,
    min_text: int = 3,
) -> List[tuple[str, str]]:
    """Return ``(url, link text)`` pairs whose text is longer than *min_text*.

    Relative hrefs are resolved against *base_url*.  The first occurrence of
    each URL wins.
    """
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    links: List[tuple[str, str]] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href:
            continue
        url = urljoin(base_url, href)
        text = clean_text(anchor.get_text())
        if min_text and len(text) <= min_text:
            continue
        if predicate is not None and not predicate(url):
            continue
        if url not in seen:
            seen.add(url)
            links.append((url, text))
    return links


# ---------------------------------------------------------------------------
# Readability extraction (search-result pages)
# ---------------------------------------------------------------------------

def _extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = re.search(r"<title[^>]*>([^<]+)</title>", html, re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return ""


def _bs4_fallback(html: str) -> str:
    """Extract readable text using ``<main>``/``<article>`` heuristics."""
    soup = strip_noise(BeautifulSoup(html, "html.parser"))
    container = soup.find("main") or soup.find("article") or soup.body
    if container is None:
        return soup.get_text(separator=" ", strip=True)
    return container.get_text(separator=" ", strip=True)


def extract_content(raw: RawPage) -> CleanPage:
    """Extract clean, readable text from *raw*.

    Tries ``trafilatura`` first.  Falls back to a BeautifulSoup heuristic when
    trafilatura returns ``None`` or an empty string.
    """
    text: str | None = trafilatura.extract(
        raw.html,
        include_links=False,
        include_images=False,
        include_tables=True,
        no_fallback=False,
        url=raw.url,
    )

    if not text:
        text = _bs4_fallback(raw.html)

    return CleanPage(
        url=raw.url,
        title=_extract_title(raw.html),
        text=text or "",
        links=discover_links(raw.html, raw.url),
    )

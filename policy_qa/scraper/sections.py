"""Split a long rules page into one record per ``h2``/``h3`` section."""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from policy_qa.scraper.extractor import clean_text, generate_summary
from policy_qa.scraper.models import ScrapedPage, TextMode

_CONTAINER_SELECTOR = "main, .main-content, article, .content"
_HEADINGS = ("h2", "h3")
_BODY_TAGS = ("p", "ul", "ol", "div")


def split_sections(
    html: str,
    url: str,
    *,
    category: str,
    source_name: str,
    min_title: int = 5,
    min_length: int = 100,
    max_summary_length: int = 200,
    mode: TextMode = "collapse",
) -> List[ScrapedPage]:
    """Return a :class:`ScrapedPage` for each sufficiently long section.

    Section text is gathered from the heading's following siblings until the
    next heading.  Identifiers are ``f"{category}-{index}-v2"`` where *index*
    counts headings in document order, so they stay stable while the page
    layout does.
    """
    soup = BeautifulSoup(html, "html.parser")
    container = soup.select_one(_CONTAINER_SELECTOR)
    if container is None:
        return []

    pages: List[ScrapedPage] = []
    for index, heading in enumerate(container.find_all(_HEADINGS)):
        title = clean_text(heading.get_text())
        if len(title) < min_title:
            continue

        parts: List[str] = []
        for sibling in heading.find_next_siblings():
            if sibling.name in _HEADINGS:
                break
            if sibling.name in _BODY_TAGS:
                text = clean_text(sibling.get_text(separator=" "), mode)
                if text:
                    parts.append(text)

        content = "\n\n".join(parts).strip()
        if len(content) > min_length:
            pages.append(
                ScrapedPage(
                    identifier=f"{category}-{index}-v2",
                    title=title,
                    category=category,
                    content=content,
                    summary=generate_summary(content, max_summary_length),
                    source_url=url,
                    source_name=source_name,
                )
            )
    return pages

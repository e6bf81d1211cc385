"""Web-search fallback: find on-site pages, fetch them, extract readable text.

Used only when the policy store is empty.  Every step tolerates failure;
the worst case is an empty excerpt list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from policy_qa.config import settings
from policy_qa.qa.search_providers import SearchProviderChain, build_default_chain, scoped_query
from policy_qa.scraper.extractor import extract_content
from policy_qa.scraper.fetcher import fetch_url
from policy_qa.scraper.models import RawPage

EXCERPT_CHARS = 3000


@dataclass
class SearchExcerpt:
    url: str
    title: str
    text: str

    def citation(self) -> dict[str, str]:
        return {"title": self.title, "category": "web", "url": self.url}


def gather_excerpts(
    question: str,
    chain: Optional[SearchProviderChain] = None,
    fetch: Callable[[str], RawPage] = fetch_url,
    max_pages: Optional[int] = None,
) -> list[SearchExcerpt]:
    """Search for *question* and return readable excerpts of the top results."""
    chain = chain or build_default_chain()
    limit = max_pages if max_pages is not None else settings.search_fallback_pages
    query = scoped_query(question)
    print(f"[ASK] searching the web: {query!r}")

    excerpts: list[SearchExcerpt] = []
    for url in chain.search(query, max_results=limit):
        try:
            raw = fetch(url)
        except httpx.HTTPError as exc:
            print(f"[ASK] ✗ {url}: {exc}")
            continue
        page = extract_content(raw)
        if not page.text.strip():
            continue
        excerpts.append(
            SearchExcerpt(url=url, title=page.title or url, text=page.text[:EXCERPT_CHARS])
        )
    return excerpts


def format_search_context(excerpts: list[SearchExcerpt]) -> str:
    return "\n\n".join(
        f"[Result {i}]\nTitle: {e.title}\nContent: {e.text}\nURL: {e.url}\n---"
        for i, e in enumerate(excerpts, start=1)
    )

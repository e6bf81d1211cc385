"""Breadth-first crawl over an explicit frontier.

The :class:`Frontier` (pending queue plus visited set) is owned by the batch
driver and threaded through :func:`crawl_step`, which returns the updated
frontier alongside what it found.  Nothing here keeps module-level state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Optional

import httpx

from policy_qa.scraper.extractor import discover_links
from policy_qa.scraper.models import ExtractionRules, RawPage, ScrapedPage
from policy_qa.scraper.pages import (
    build_scraped_page,
    categorize_url,
    identifier_from_url,
    title_from_url,
)

Fetch = Callable[[str], RawPage]


@dataclass
class Frontier:
    """Pending URLs in FIFO order and every URL already taken from the queue."""

    queue: Deque[str] = field(default_factory=deque)
    visited: set[str] = field(default_factory=set)

    @classmethod
    def seed(cls, *urls: str) -> "Frontier":
        return cls(queue=deque(urls))

    def copy(self) -> "Frontier":
        return Frontier(queue=deque(self.queue), visited=set(self.visited))

    def is_done(self, max_pages: int) -> bool:
        return not self.queue or len(self.visited) >= max_pages


@dataclass
class CrawlStep:
    """Outcome of visiting one URL."""

    url: str
    page: Optional[ScrapedPage] = None
    error: Optional[str] = None
    links_added: int = 0


def crawl_step(
    frontier: Frontier,
    fetch: Fetch,
    *,
    predicate: Callable[[str], bool],
    rules: ExtractionRules | None = None,
    max_pages: int = 200,
    link_window: int = 10,
    id_prefix: str = "crawl-",
) -> tuple[Frontier, Optional[CrawlStep]]:
    """Visit the next unvisited URL of *frontier*.

    Links are only harvested while the number of visited pages is within
    *link_window*; beyond that the crawl drains what it has queued.

    Returns:
        The updated frontier and the step outcome, or ``None`` as outcome
        when the frontier is exhausted or *max_pages* has been reached.
        Fetch errors are reported on the outcome, never raised.
    """
    nxt = frontier.copy()

    while not nxt.is_done(max_pages):
        url = nxt.queue.popleft()
        if url in nxt.visited:
            continue
        nxt.visited.add(url)
        step = CrawlStep(url=url)

        try:
            raw = fetch(url)
        except httpx.HTTPError as exc:
            step.error = str(exc) or exc.__class__.__name__
            return nxt, step

        step.page = build_scraped_page(
            raw.html,
            url,
            identifier=identifier_from_url(id_prefix, url),
            title=title_from_url(url),
            category=categorize_url(url),
            rules=rules,
        )

        if len(nxt.visited) <= link_window:
            for link in discover_links(raw.html, url, predicate):
                if link not in nxt.visited and link not in nxt.queue:
                    nxt.queue.append(link)
                    step.links_added += 1

        return nxt, step

    return nxt, None

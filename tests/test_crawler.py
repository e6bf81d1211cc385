"""Tests for the explicit crawl frontier.

``fetch`` is injected, so every test runs against an in-memory site map.
"""

from __future__ import annotations

import httpx

from policy_qa.scraper.crawler import CrawlStep, Frontier, crawl_step
from policy_qa.scraper.models import RawPage
from policy_qa.scraper.sources import is_crawlable

START = "https://www.suffolk.edu/law/academics-clinics"
PAGE_A = "https://www.suffolk.edu/law/academics-clinics/clinics"
PAGE_B = "https://www.suffolk.edu/law/academics-clinics/course-catalog"

_BODY = "Suffolk Law offers a wide range of academic programs and clinics. " * 3


def _html(*links: str) -> str:
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return f"<html><body><main><p>{_BODY}</p>{anchors}</main></body></html>"


_SITE = {
    START: _html(PAGE_A, "/law/academics-clinics/course-catalog", "https://www.suffolk.edu/news"),
    PAGE_A: _html(PAGE_B, START),
}


def _fetch(url: str) -> RawPage:
    if url not in _SITE:
        raise httpx.ConnectError(f"cannot reach {url}")
    return RawPage(url=url, html=_SITE[url], status_code=200)


def _step(frontier: Frontier, **kwargs) -> tuple[Frontier, CrawlStep | None]:
    return crawl_step(frontier, _fetch, predicate=is_crawlable, **kwargs)


class TestFrontier:
    def test_seed(self) -> None:
        frontier = Frontier.seed(START)
        assert list(frontier.queue) == [START]
        assert frontier.visited == set()

    def test_copy_is_independent(self) -> None:
        frontier = Frontier.seed(START)
        clone = frontier.copy()
        clone.queue.append(PAGE_A)
        clone.visited.add(START)
        assert list(frontier.queue) == [START]
        assert frontier.visited == set()

    def test_is_done(self) -> None:
        assert Frontier().is_done(10)
        assert Frontier.seed(START).is_done(0)
        assert not Frontier.seed(START).is_done(1)


class TestCrawlStep:
    def test_first_step_queues_relevant_links(self) -> None:
        frontier, step = _step(Frontier.seed(START))
        assert step is not None
        assert step.url == START
        assert step.error is None
        assert step.links_added == 2
        assert list(frontier.queue) == [PAGE_A, PAGE_B]
        assert frontier.visited == {START}

    def test_does_not_mutate_input(self) -> None:
        original = Frontier.seed(START)
        _step(original)
        assert list(original.queue) == [START]
        assert original.visited == set()

    def test_builds_page_from_url(self) -> None:
        _, step = _step(Frontier.seed(PAGE_A))
        assert step is not None and step.page is not None
        assert step.page.identifier == "crawl-academics-clinics-clinics"
        assert step.page.title == "Clinics"
        assert step.page.category == "clinics"

    def test_visited_and_queued_links_are_not_requeued(self) -> None:
        frontier, _ = _step(Frontier.seed(START))
        frontier, step = _step(frontier)
        assert step is not None
        assert step.url == PAGE_A
        assert step.links_added == 0
        assert list(frontier.queue) == [PAGE_B]

    def test_fetch_error_is_reported_not_raised(self) -> None:
        frontier, step = _step(Frontier.seed(PAGE_B))
        assert step is not None
        assert step.page is None
        assert "cannot reach" in (step.error or "")
        assert PAGE_B in frontier.visited

    def test_skips_already_visited_urls(self) -> None:
        frontier = Frontier.seed(START, PAGE_A)
        frontier.visited.add(START)
        _, step = _step(frontier)
        assert step is not None
        assert step.url == PAGE_A

    def test_link_window_stops_harvesting(self) -> None:
        frontier, step = _step(Frontier.seed(START), link_window=0)
        assert step is not None
        assert step.links_added == 0
        assert not frontier.queue

    def test_max_pages_ends_crawl(self) -> None:
        frontier, _ = _step(Frontier.seed(START), max_pages=1)
        frontier, step = _step(frontier, max_pages=1)
        assert step is None

    def test_full_crawl_visits_each_page_once(self) -> None:
        frontier = Frontier.seed(START)
        seen: list[str] = []
        while True:
            frontier, step = _step(frontier)
            if step is None:
                break
            seen.append(step.url)
        assert seen == [START, PAGE_A, PAGE_B]
        assert not frontier.queue

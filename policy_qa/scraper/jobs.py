"""Batch scrape jobs.

Every job is strictly sequential: fetch, extract, persist, then sleep
``settings.scrape_delay`` seconds before the next fetch.  A failing URL is
printed and counted but never aborts the batch; re-running the job later is
the retry mechanism.

Jobs
----
``scrape_policy_list``:  the fixed list of student policy pages.
``scrape_policy_index``: policy index page, then each linked policy.
``scrape_sections``:     long rules pages, one record per heading.
``scrape_library``:      library landing page plus its linked pages.
``crawl_academics``:     breadth-first crawl of the academics section.
"""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Optional

import httpx

from policy_qa.config import settings
from policy_qa.db.policies import upsert_policy
from policy_qa.scraper.crawler import Fetch, Frontier, crawl_step
from policy_qa.scraper.extractor import discover_link_texts
from policy_qa.scraper.fetcher import fetch_url
from policy_qa.scraper.models import ExtractionRules, RawPage, ScrapedPage
from policy_qa.scraper.pages import (
    build_scraped_page,
    identifier_from_title,
    identifier_from_url,
)
from policy_qa.scraper.sections import split_sections
from policy_qa.scraper.sources import (
    ACADEMICS_START_URL,
    LIBRARY_PATH,
    LIBRARY_URL,
    POLICY_INDEX_PATH,
    POLICY_INDEX_URL,
    POLICY_PAGES,
    SECTION_SOURCES,
    PageTarget,
    SectionSource,
    is_crawlable,
)


@dataclass
class JobReport:
    """Counters for one batch run."""

    name: str
    visited: int = 0
    saved: int = 0
    skipped: int = 0
    failed: int = 0
    duration: float = 0.0

    def summary_line(self) -> str:
        return (
            f"[{self.name}] visited={self.visited} saved={self.saved} "
            f"skipped={self.skipped} failed={self.failed} "
            f"in {self.duration:.1f}s"
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _delay(delay: Optional[float]) -> float:
    return settings.scrape_delay if delay is None else delay


def _fetch(fetch: Fetch, url: str, report: JobReport) -> Optional[RawPage]:
    report.visited += 1
    try:
        return fetch(url)
    except httpx.HTTPError as exc:
        print(f"[SCRAPE] ✗ {url}: {str(exc) or exc.__class__.__name__}")
        report.failed += 1
        return None


def _save(conn: sqlite3.Connection, page: Optional[ScrapedPage], report: JobReport) -> None:
    if page is None:
        report.skipped += 1
        print("[SCRAPE]   too little content, skipped")
        return
    try:
        upsert_policy(conn, page)
    except sqlite3.Error as exc:
        print(f"[SCRAPE] ✗ could not save {page.identifier!r}: {exc}")
        report.failed += 1
        return
    report.saved += 1
    print(f"[SCRAPE]   ✓ {len(page.content)} characters → {page.identifier}")


def scrape_targets(
    conn: sqlite3.Connection,
    targets: Iterable[PageTarget],
    *,
    report: JobReport,
    category: str,
    id_prefix: str,
    identify: Literal["title", "url"] = "title",
    rules: ExtractionRules | None = None,
    fetch: Fetch = fetch_url,
    delay: Optional[float] = None,
    pause_first: bool = False,
) -> JobReport:
    """Fetch, extract and upsert each target in order."""
    rules = rules or ExtractionRules.from_settings()
    pause = _delay(delay)

    for i, target in enumerate(targets):
        if i > 0 or pause_first:
            time.sleep(pause)
        print(f"[SCRAPE] {target.title}")
        raw = _fetch(fetch, target.url, report)
        if raw is None:
            continue
        if identify == "url":
            identifier = identifier_from_url(id_prefix, target.url)
        else:
            identifier = identifier_from_title(id_prefix, target.title)
        page = build_scraped_page(
            raw.html,
            target.url,
            identifier=identifier,
            title=target.title,
            category=category,
            rules=rules,
        )
        _save(conn, page, report)
    return report


def _finish(report: JobReport, started: float) -> JobReport:
    report.duration = time.monotonic() - started
    print(report.summary_line())
    return report


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

def scrape_policy_list(
    conn: sqlite3.Connection,
    targets: Iterable[PageTarget] = POLICY_PAGES,
    *,
    rules: ExtractionRules | None = None,
    fetch: Fetch = fetch_url,
    delay: Optional[float] = None,
) -> JobReport:
    """Scrape the fixed list of student policy pages."""
    started = time.monotonic()
    report = JobReport(name="policies")
    scrape_targets(
        conn,
        targets,
        report=report,
        category="student-services",
        id_prefix="policy-v2-",
        rules=rules,
        fetch=fetch,
        delay=delay,
    )
    return _finish(report, started)


def scrape_policy_index(
    conn: sqlite3.Connection,
    index_url: str = POLICY_INDEX_URL,
    *,
    limit: Optional[int] = None,
    rules: ExtractionRules | None = None,
    fetch: Fetch = fetch_url,
    delay: Optional[float] = None,
) -> JobReport:
    """Discover policy links on the index page, then scrape each of them."""
    started = time.monotonic()
    report = JobReport(name="index")

    print(f"[SCRAPE] Reading policy index {index_url}")
    raw = _fetch(fetch, index_url, report)
    if raw is None:
        return _finish(report, started)

    links = discover_link_texts(
        raw.html, index_url, lambda url: POLICY_INDEX_PATH in url, min_text=5
    )
    links = links[: limit if limit is not None else settings.job_page_limit]
    print(f"[SCRAPE] Found {len(links)} policy link(s)")

    scrape_targets(
        conn,
        [PageTarget(url, title) for url, title in links],
        report=report,
        category="student-services",
        id_prefix="policy-",
        rules=rules,
        fetch=fetch,
        delay=delay,
        pause_first=True,
    )
    return _finish(report, started)


def scrape_sections(
    conn: sqlite3.Connection,
    sources: Iterable[SectionSource] = SECTION_SOURCES,
    *,
    fetch: Fetch = fetch_url,
    delay: Optional[float] = None,
) -> JobReport:
    """Split each rules page into per-heading records and upsert them."""
    started = time.monotonic()
    report = JobReport(name="sections")
    pause = _delay(delay)

    for i, source in enumerate(sources):
        if i > 0:
            time.sleep(pause)
        print(f"[SCRAPE] {source.name}")
        raw = _fetch(fetch, source.url, report)
        if raw is None:
            continue
        pages = split_sections(
            raw.html,
            source.url,
            category=source.category,
            source_name=source.name,
            max_summary_length=settings.max_summary_length,
        )
        if not pages:
            report.skipped += 1
            print("[SCRAPE]   no sections found")
        for page in pages:
            _save(conn, page, report)
    return _finish(report, started)


def _is_library_link(url: str) -> bool:
    lowered = url.lower()
    return LIBRARY_PATH in url and "#" not in url and ".pdf" not in lowered


def scrape_library(
    conn: sqlite3.Connection,
    main_url: str = LIBRARY_URL,
    *,
    limit: Optional[int] = None,
    rules: ExtractionRules | None = None,
    fetch: Fetch = fetch_url,
    delay: Optional[float] = None,
) -> JobReport:
    """Scrape the library landing page and up to *limit* pages it links to."""
    started = time.monotonic()
    report = JobReport(name="library")
    rules = rules or ExtractionRules.from_settings()

    print("[SCRAPE] About the Law Library")
    raw = _fetch(fetch, main_url, report)
    if raw is None:
        return _finish(report, started)

    page = build_scraped_page(
        raw.html,
        main_url,
        identifier=identifier_from_url("library-", main_url),
        title="About the Law Library",
        category="library",
        rules=rules,
    )
    _save(conn, page, report)

    links = [
        PageTarget(url, title)
        for url, title in discover_link_texts(raw.html, main_url, _is_library_link)
        if url != main_url
    ]
    links = links[: limit if limit is not None else settings.job_page_limit]
    print(f"[SCRAPE] Found {len(links)} library page(s)")

    scrape_targets(
        conn,
        links,
        report=report,
        category="library",
        id_prefix="library-",
        identify="url",
        rules=rules,
        fetch=fetch,
        delay=delay,
        pause_first=True,
    )
    return _finish(report, started)


def crawl_academics(
    conn: sqlite3.Connection,
    frontier: Frontier | None = None,
    *,
    start_url: str = ACADEMICS_START_URL,
    max_pages: Optional[int] = None,
    link_window: Optional[int] = None,
    predicate: Callable[[str], bool] = is_crawlable,
    rules: ExtractionRules | None = None,
    fetch: Fetch = fetch_url,
    delay: Optional[float] = None,
) -> tuple[JobReport, Frontier]:
    """Breadth-first crawl from *start_url*, saving every page with enough text.

    Pass the returned frontier back in to continue an interrupted crawl.
    """
    started = time.monotonic()
    report = JobReport(name="crawl")
    frontier = frontier if frontier is not None else Frontier.seed(start_url)
    limit = max_pages if max_pages is not None else settings.crawl_max_pages
    window = link_window if link_window is not None else settings.crawl_link_window
    rules = rules or ExtractionRules.from_settings()
    pause = _delay(delay)

    while True:
        frontier, step = crawl_step(
            frontier,
            fetch,
            predicate=predicate,
            rules=rules,
            max_pages=limit,
            link_window=window,
        )
        if step is None:
            break

        report.visited += 1
        print(f"[CRAWL] [{len(frontier.visited)}/{limit}] {step.url}")
        if step.error is not None:
            print(f"[CRAWL] ✗ {step.error}")
            report.failed += 1
        else:
            _save(conn, step.page, report)
            if step.links_added:
                print(f"[CRAWL]   queued {step.links_added} new link(s)")

        if frontier.is_done(limit):
            break
        time.sleep(pause)

    return _finish(report, started), frontier

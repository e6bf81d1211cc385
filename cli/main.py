"""Policy Q&A CLI: entry-point for scraping, storage and answering.

Usage:
    python cli/main.py --help

Command groups:
    db      → schema, seed data, listing and keyword search
    scrape  → one-off page scrape and the batch scrape jobs
    crawl   → breadth-first crawl of the academics section
    ask     → answer a question from the stored policies
    serve   → run the HTTP API

Scheduled runs (daily policy scrape, weekly crawl) are plain cron entries
calling these commands, e.g.::

    0 2 * * *  policy-qa scrape policies
    0 3 * * 0  policy-qa crawl
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so `from policy_qa.xxx import ...`
# works when the CLI is invoked as `python cli/main.py`.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from policy_qa.config import settings
from policy_qa.db import get_connection, init_db
from policy_qa.db.policies import (
    category_counts,
    count_policies,
    list_policies,
    search_policies,
    upsert_policy,
)
from policy_qa.db.seeds import seed_policies

app = typer.Typer(
    name="policy-qa",
    help="Suffolk Law policy scraper and Q&A backend.",
    no_args_is_help=True,
)


def _open_db():
    conn = get_connection()
    init_db(conn)
    return conn


# ---------------------------------------------------------------------------
# db
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = _open_db()
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


@db_app.command("seed")
def db_seed(
    samples: bool = typer.Option(True, "--samples/--no-samples", help="Also insert sample policies."),
) -> None:
    """Load the hand-written common-question records."""
    conn = _open_db()
    written = seed_policies(conn, include_samples=samples)
    conn.close()
    typer.echo(f"[db seed] Wrote {written} record(s).")


@db_app.command("list")
def db_list(
    category: Optional[str] = typer.Option(None, help="Filter by category ('all' for every one)."),
) -> None:
    """List active policies, newest first."""
    conn = _open_db()
    policies = list_policies(conn, category=category)
    conn.close()
    if not policies:
        typer.echo("[db list] No policies found.")
        return
    for p in policies:
        typer.echo(f"  {p.id:>4}  [{p.category}]  {p.title!r}  ({p.external_id})")


@db_app.command("search")
def db_search(
    query: str = typer.Argument(..., help="Keywords to search for."),
    top_k: int = typer.Option(10, help="Maximum number of results."),
) -> None:
    """Keyword search over policy titles and content."""
    conn = _open_db()
    results = search_policies(conn, query, top_k=top_k)
    conn.close()
    if not results:
        typer.echo(f"[db search] No results for {query!r}.")
        return
    for p in results:
        typer.echo(f"  {p.id:>4}  [{p.category}]  {p.title!r}")
        typer.echo(f"        {p.source_url}")


@db_app.command("stats")
def db_stats() -> None:
    """Show policy counts per category."""
    conn = _open_db()
    total = count_policies(conn)
    active = count_policies(conn, active_only=True)
    counts = category_counts(conn)
    conn.close()
    typer.echo(f"[db stats] {total} policies ({active} active)")
    for category, n in counts.items():
        typer.echo(f"  {category:<20} {n}")


# ---------------------------------------------------------------------------
# scrape
# ---------------------------------------------------------------------------
scrape_app = typer.Typer(help="Scrape policy pages.", no_args_is_help=True)
app.add_typer(scrape_app, name="scrape")


@scrape_app.command("page")
def scrape_page(
    url: str = typer.Argument(..., help="URL to scrape."),
    save: bool = typer.Option(False, "--save", help="Upsert the result into the database."),
    category: Optional[str] = typer.Option(None, help="Category to store under (default: from URL)."),
) -> None:
    """Scrape one URL and print the extracted policy text."""
    from policy_qa.scraper.fetcher import fetch_url
    from policy_qa.scraper.pages import (
        build_scraped_page,
        categorize_url,
        identifier_from_url,
        title_from_url,
    )

    typer.echo(f"[scrape] Fetching {url!r} …")
    raw = fetch_url(url)
    typer.echo(f"[scrape] HTTP {raw.status_code}, extracting content …")

    page = build_scraped_page(
        raw.html,
        url,
        identifier=identifier_from_url("page-", url),
        title=title_from_url(url),
        category=category or categorize_url(url),
    )
    if page is None:
        typer.echo("[scrape] Not enough content on this page.")
        raise typer.Exit(1)

    typer.echo(f"[scrape] Title   : {page.title}")
    typer.echo(f"[scrape] Length  : {len(page.content)}")
    typer.echo(f"[scrape] Summary : {page.summary}")
    typer.echo("")
    typer.echo(page.content)

    if save:
        conn = _open_db()
        policy = upsert_policy(conn, page)
        conn.close()
        typer.echo(f"\n[scrape] Saved as policy {policy.id} ({policy.external_id})")


@scrape_app.command("policies")
def scrape_policies_cmd(
    delay: Optional[float] = typer.Option(None, help="Seconds between requests."),
) -> None:
    """Scrape the fixed list of student policy pages."""
    from policy_qa.scraper.jobs import scrape_policy_list

    conn = _open_db()
    try:
        report = scrape_policy_list(conn, delay=delay)
    finally:
        conn.close()
    if report.saved == 0 and report.failed:
        raise typer.Exit(1)


@scrape_app.command("index")
def scrape_index_cmd(
    limit: Optional[int] = typer.Option(None, help="Maximum linked pages to scrape."),
    delay: Optional[float] = typer.Option(None, help="Seconds between requests."),
) -> None:
    """Scrape the policy index page and every policy it links to."""
    from policy_qa.scraper.jobs import scrape_policy_index

    conn = _open_db()
    try:
        scrape_policy_index(conn, limit=limit, delay=delay)
    finally:
        conn.close()


@scrape_app.command("sections")
def scrape_sections_cmd(
    delay: Optional[float] = typer.Option(None, help="Seconds between requests."),
) -> None:
    """Split the long rules pages into one record per heading."""
    from policy_qa.scraper.jobs import scrape_sections

    conn = _open_db()
    try:
        scrape_sections(conn, delay=delay)
    finally:
        conn.close()


@scrape_app.command("library")
def scrape_library_cmd(
    limit: Optional[int] = typer.Option(None, help="Maximum linked pages to scrape."),
    delay: Optional[float] = typer.Option(None, help="Seconds between requests."),
) -> None:
    """Scrape the law library landing page and the pages it links to."""
    from policy_qa.scraper.jobs import scrape_library

    conn = _open_db()
    try:
        scrape_library(conn, limit=limit, delay=delay)
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# crawl / ask / serve
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl(
    max_pages: Optional[int] = typer.Option(None, help="Stop after this many pages."),
    delay: Optional[float] = typer.Option(None, help="Seconds between requests."),
) -> None:
    """Breadth-first crawl of the academics section."""
    from policy_qa.scraper.jobs import crawl_academics

    conn = _open_db()
    try:
        _, frontier = crawl_academics(conn, max_pages=max_pages, delay=delay)
    finally:
        conn.close()
    if frontier.queue:
        typer.echo(f"[crawl] Stopped with {len(frontier.queue)} URL(s) still queued.")


@app.command("ask")
def ask(
    question: str = typer.Argument(..., help="Question about Suffolk Law policies."),
) -> None:
    """Answer a question from the stored policies."""
    from policy_qa.qa import LLMError, answer_question

    conn = _open_db()
    try:
        result = answer_question(conn, question)
    except (ValueError, LLMError) as exc:
        typer.echo(f"[ask] Error: {exc}")
        raise typer.Exit(1)
    finally:
        conn.close()

    typer.echo(result.answer)
    if result.sources:
        typer.echo("\nSources:")
        for source in result.sources:
            typer.echo(f"  - {source['title']}: {source['url']}")
    typer.echo(f"\n[ask] confidence={result.confidence}")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address."),
    port: Optional[int] = typer.Option(None, help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "policy_qa.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    app()

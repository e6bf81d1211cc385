"""Site-scoped web search used when the policy store cannot answer.

Providers are tried in order and the first non-empty URL list wins:

  1. Brave Search: REST API, only when ``BRAVE_API_KEY`` is set.
  2. SearXNG: configured instance, then a few public ones.
  3. DuckDuckGo: ``duckduckgo_search`` with backoff on rate limits.

Each provider returns ``[]`` on any failure.  Queries carry a ``site:``
operator, and results outside the site are dropped because not every engine
honours it.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from urllib.parse import urlparse

import httpx
from duckduckgo_search import DDGS
from duckduckgo_search.exceptions import DuckDuckGoSearchException, RatelimitException

from policy_qa.config import settings

_PUBLIC_SEARXNG = [
    "https://searx.be",
    "https://paulgo.io",
    "https://searx.tiekoetter.com",
]

_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


def scoped_query(question: str, site: str | None = None) -> str:
    """Turn a free-text question into a ``site:``-restricted query."""
    q = question.strip().strip('"').rstrip("?").strip()
    site = settings.search_site if site is None else site
    return f"site:{site} {q}" if site else q


def on_site(url: str, site: str | None = None) -> bool:
    """True when *url* lives under *site* (``host/path-prefix``)."""
    site = settings.search_site if site is None else site
    if not site:
        return True
    host, _, prefix = site.partition("/")
    parsed = urlparse(url)
    netloc = parsed.netloc.lower()
    if netloc != host and not netloc.endswith("." + host):
        return False
    prefix = prefix.strip("/")
    path = parsed.path.strip("/")
    # Whole path segments only: "law" must not match "lawyers-weekly".
    return not prefix or path == prefix or path.startswith(prefix + "/")


def _keep(urls: list[str], max_results: int) -> list[str]:
    kept: list[str] = []
    for url in urls:
        if url and url not in kept and on_site(url):
            kept.append(url)
        if len(kept) >= max_results:
            break
    return kept


class SearchProvider(ABC):
    """One search backend."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Label used in log lines."""

    @abstractmethod
    def search(self, query: str, max_results: int = 5) -> list[str]:
        """Return result URLs, or ``[]`` on failure."""


class BraveSearchProvider(SearchProvider):
    @property
    def name(self) -> str:
        return "Brave"

    def search(self, query: str, max_results: int = 5) -> list[str]:
        api_key = settings.brave_api_key
        if not api_key:
            return []
        try:
            with httpx.Client(timeout=settings.search_provider_timeout) as client:
                resp = client.get(
                    "https://api.search.brave.com/res/v1/web/search",
                    params={"q": query, "count": max_results},
                    headers={
                        "Accept": "application/json",
                        "X-Subscription-Token": api_key,
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            print(f"[Brave] request failed: {exc}")
            return []

        urls = _keep(
            [item.get("url", "") for item in data.get("web", {}).get("results", [])],
            max_results,
        )
        if urls:
            print(f"[Brave] ✓ {len(urls)} result(s).")
        return urls


class SearXNGProvider(SearchProvider):
    """Query SearXNG instances, configured one first, with a short timeout each."""

    @property
    def name(self) -> str:
        return "SearXNG"

    def _instances(self) -> list[str]:
        primary = (settings.searxng_base_url or "").rstrip("/")
        rest = [u for u in _PUBLIC_SEARXNG if u != primary]
        return [primary] + rest if primary else rest

    def search(self, query: str, max_results: int = 5) -> list[str]:
        with httpx.Client(
            timeout=settings.searxng_instance_timeout,
            follow_redirects=True,
        ) as client:
            for base in self._instances():
                try:
                    resp = client.get(
                        f"{base}/search",
                        params={"q": query, "format": "json"},
                        headers={"Accept": "application/json", "User-Agent": _BROWSER_UA},
                    )
                    resp.raise_for_status()
                    items = resp.json().get("results", [])
                except (httpx.HTTPError, ValueError) as exc:
                    print(f"[SearXNG] {base} failed: {exc!r:.120}")
                    continue
                urls = _keep([i.get("url") or i.get("href") or "" for i in items], max_results)
                if urls:
                    print(f"[SearXNG] ✓ {base} → {len(urls)} result(s).")
                    return urls
                print(f"[SearXNG] {base} had no on-site results.")

        return []


class DuckDuckGoProvider(SearchProvider):
    """``DDGS().text`` retried with exponential backoff when rate-limited."""

    @property
    def name(self) -> str:
        return "DuckDuckGo"

    def search(self, query: str, max_results: int = 5) -> list[str]:
        retries = settings.search_retry_max
        for attempt in range(retries + 1):
            try:
                with DDGS() as ddgs:
                    results = ddgs.text(query, max_results=max_results) or []
            except RatelimitException:
                if attempt >= retries:
                    print(f"[DuckDuckGo] still rate-limited after {retries} retries.")
                    return []
                wait = settings.search_retry_base_delay * (2 ** attempt)
                print(f"[DuckDuckGo] rate-limited; retrying in {wait:.0f}s")
                time.sleep(wait)
                continue
            except DuckDuckGoSearchException as exc:
                print(f"[DuckDuckGo] search error: {exc}")
                return []

            urls = _keep([r.get("href", "") for r in results], max_results)
            if urls:
                print(f"[DuckDuckGo] ✓ {len(urls)} result(s).")
            return urls
        return []


class SearchProviderChain:
    """Try providers in order; return the first non-empty result list."""

    def __init__(self, providers: list[SearchProvider]) -> None:
        self._providers = providers

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._providers]

    def search(self, query: str, max_results: int = 5) -> list[str]:
        for provider in self._providers:
            urls = provider.search(query, max_results=max_results)
            if urls:
                return urls
        print("[search] no provider returned results.")
        return []


def build_default_chain() -> SearchProviderChain:
    """Brave (if keyed) → SearXNG → DuckDuckGo."""
    providers: list[SearchProvider] = []
    if settings.brave_api_key:
        providers.append(BraveSearchProvider())
    providers.append(SearXNGProvider())
    providers.append(DuckDuckGoProvider())
    return SearchProviderChain(providers)

"""HTTP fetcher for policy pages.

Fetching is deliberately free of rate limiting: the batch drivers in
:mod:`policy_qa.scraper.jobs` sleep between successive calls.
"""

from __future__ import annotations

import httpx

from policy_qa.config import settings
from policy_qa.scraper.models import RawPage


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def fetch_url(url: str, timeout: float | None = None) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Args:
        url: Absolute URL to GET.  Redirects are followed.
        timeout: Per-request timeout in seconds.  Defaults to
            ``settings.request_timeout``.

    Raises:
        httpx.HTTPStatusError: If the server returns a 4xx/5xx status code.
        httpx.TransportError: On connection failures and timeouts.
    """
    with httpx.Client(
        headers=_default_headers(),
        timeout=timeout if timeout is not None else settings.request_timeout,
        follow_redirects=True,
    ) as client:
        response = client.get(url)
        response.raise_for_status()
        return RawPage(url=url, html=response.text, status_code=response.status_code)

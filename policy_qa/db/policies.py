"""CRUD and search for the ``policies`` table."""

from __future__ import annotations

import re
import sqlite3
from time import time
from typing import Optional

from policy_qa.db.models import Policy
from policy_qa.scraper.models import ScrapedPage


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_policy(row: sqlite3.Row) -> Policy:
    return Policy(
        id=row["id"],
        external_id=row["external_id"],
        title=row["title"],
        category=row["category"],
        content=row["content"],
        summary=row["summary"],
        source_url=row["source_url"],
        source_name=row["source_name"],
        is_active=bool(row["is_active"]),
        created_at=row["created_at"],
        last_updated=row["last_updated"],
    )


def _sanitize_fts_query(text: str) -> str:
    """Convert a natural-language question into a safe FTS5 query.

    Word tokens of 3+ chars are quoted (FTS5 treats quoted strings as
    literals) and OR-ed together so bm25 ranks partial matches too.  Returns
    an empty string when no token survives.
    """
    tokens = re.findall(r"[A-Za-z0-9]{3,}", text)
    seen: set[str] = set()
    unique: list[str] = []
    for token in tokens:
        if token.lower() not in seen:
            seen.add(token.lower())
            unique.append(token)
    return " OR ".join(f'"{t}"' for t in unique)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def upsert_policy(
    conn: sqlite3.Connection,
    page: ScrapedPage,
    now: Optional[int] = None,
) -> Policy:
    """Insert *page*, or refresh the existing row with the same identifier.

    On conflict only ``title``, ``content``, ``summary`` and ``last_updated``
    are overwritten; category and source fields keep their first values.
    """
    ts = now if now is not None else int(time())
    with conn:
        conn.execute(
            """
            INSERT INTO policies (external_id, title, category, content, summary,
                                  source_url, source_name, created_at, last_updated)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(external_id) DO UPDATE SET
                title        = excluded.title,
                content      = excluded.content,
                summary      = excluded.summary,
                last_updated = excluded.last_updated
            """,
            (
                page.identifier,
                page.title,
                page.category,
                page.content,
                page.summary,
                page.source_url,
                page.source_name,
                ts,
                ts,
            ),
        )
    return get_policy_by_external_id(conn, page.identifier)  # type: ignore[return-value]


def insert_policy_if_missing(conn: sqlite3.Connection, page: ScrapedPage) -> bool:
    """Insert *page* unless its identifier exists.  Returns ``True`` if inserted."""
    with conn:
        cursor = conn.execute(
            """
            INSERT OR IGNORE INTO policies (external_id, title, category, content,
                                            summary, source_url, source_name)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                page.identifier,
                page.title,
                page.category,
                page.content,
                page.summary,
                page.source_url,
                page.source_name,
            ),
        )
    return cursor.rowcount == 1


def get_policy(conn: sqlite3.Connection, policy_id: int) -> Optional[Policy]:
    """Fetch a single policy by primary key.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM policies WHERE id = ?", (policy_id,)).fetchone()
    return _row_to_policy(row) if row else None


def get_policy_by_external_id(conn: sqlite3.Connection, external_id: str) -> Optional[Policy]:
    """Fetch a single policy by its natural key."""
    row = conn.execute(
        "SELECT * FROM policies WHERE external_id = ?", (external_id,)
    ).fetchone()
    return _row_to_policy(row) if row else None


def list_policies(
    conn: sqlite3.Connection,
    category: Optional[str] = None,
) -> list[Policy]:
    """Return active policies, newest first.

    ``category`` of ``None`` or ``"all"`` disables the filter.
    """
    sql = "SELECT * FROM policies WHERE is_active = 1"
    params: list = []
    if category and category != "all":
        sql += " AND category = ?"
        params.append(category)
    sql += " ORDER BY last_updated DESC, id DESC"
    return [_row_to_policy(r) for r in conn.execute(sql, params).fetchall()]


def recent_policies(conn: sqlite3.Connection, limit: int) -> list[Policy]:
    """Return up to *limit* active policies, most recently updated first."""
    rows = conn.execute(
        """
        SELECT * FROM policies
        WHERE  is_active = 1
        ORDER  BY last_updated DESC, id DESC
        LIMIT  ?
        """,
        (limit,),
    ).fetchall()
    return [_row_to_policy(r) for r in rows]


def search_policies(
    conn: sqlite3.Connection,
    query: str,
    top_k: int = 10,
    category: Optional[str] = None,
) -> list[Policy]:
    """Return up to *top_k* active policies matching *query*, best first.

    ``category`` narrows the match before *top_k* is applied; ``None`` or
    ``"all"`` disables it.
    """
    fts_query = _sanitize_fts_query(query)
    if not fts_query:
        return []
    sql = """
        SELECT p.*
        FROM   policies p
        JOIN   policies_fts f ON p.id = f.rowid
        WHERE  policies_fts MATCH ?
          AND  p.is_active = 1
    """
    params: list = [fts_query]
    if category and category != "all":
        sql += "  AND  p.category = ?\n"
        params.append(category)
    sql += "ORDER  BY bm25(policies_fts)\nLIMIT  ?"
    params.append(top_k)
    return [_row_to_policy(r) for r in conn.execute(sql, params).fetchall()]


def set_policy_active(conn: sqlite3.Connection, policy_id: int, active: bool) -> Policy:
    """Show or hide a policy from listings and answers.

    Raises:
        ValueError: If ``policy_id`` does not exist.
    """
    if get_policy(conn, policy_id) is None:
        raise ValueError(f"Policy not found: {policy_id!r}")
    with conn:
        conn.execute(
            "UPDATE policies SET is_active = ? WHERE id = ?",
            (1 if active else 0, policy_id),
        )
    return get_policy(conn, policy_id)  # type: ignore[return-value]


def count_policies(conn: sqlite3.Connection, active_only: bool = False) -> int:
    """Return the number of stored policies."""
    sql = "SELECT COUNT(*) FROM policies"
    if active_only:
        sql += " WHERE is_active = 1"
    return conn.execute(sql).fetchone()[0]


def category_counts(conn: sqlite3.Connection) -> dict[str, int]:
    """Return ``{category: active policy count}``."""
    rows = conn.execute(
        """
        SELECT category, COUNT(*) AS n FROM policies
        WHERE  is_active = 1
        GROUP  BY category
        ORDER  BY category
        """
    ).fetchall()
    return {r["category"]: r["n"] for r in rows}

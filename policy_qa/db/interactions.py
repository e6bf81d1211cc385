"""Log of answered questions (``qa_interactions`` table).

Sources are stored as a JSON array of citation dicts::

    [{"id": 1, "title": "...", "category": "...", "url": "..."}]
"""

from __future__ import annotations

import json
import sqlite3
from time import time
from typing import Any

from policy_qa.db.models import QAInteraction


def _row_to_interaction(row: sqlite3.Row) -> QAInteraction:
    return QAInteraction(
        id=row["id"],
        question=row["question"],
        answer=row["answer"],
        sources=json.loads(row["sources"] or "[]"),
        confidence=row["confidence"],
        created_at=row["created_at"],
    )


def log_interaction(
    conn: sqlite3.Connection,
    question: str,
    answer: str,
    sources: list[dict[str, Any]],
    confidence: str,
) -> QAInteraction:
    """Persist one question/answer pair and return it."""
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO qa_interactions (question, answer, sources, confidence, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (question, answer, json.dumps(sources), confidence, int(time())),
        )
    row = conn.execute(
        "SELECT * FROM qa_interactions WHERE id = ?", (cursor.lastrowid,)
    ).fetchone()
    return _row_to_interaction(row)


def list_interactions(conn: sqlite3.Connection, limit: int = 50) -> list[QAInteraction]:
    """Return the most recent interactions first."""
    rows = conn.execute(
        "SELECT * FROM qa_interactions ORDER BY created_at DESC, id DESC LIMIT ?",
        (limit,),
    ).fetchall()
    return [_row_to_interaction(r) for r in rows]

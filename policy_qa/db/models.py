"""Dataclass models representing DB rows.

These are plain Python objects, not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Policy:
    id: int
    external_id: str
    title: str
    category: str
    content: str
    summary: str | None
    source_url: str
    source_name: str | None
    is_active: bool
    created_at: int
    last_updated: int

    def citation(self) -> dict[str, Any]:
        """The metadata returned alongside an answer."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "url": self.source_url,
        }


@dataclass
class QAInteraction:
    id: int
    question: str
    answer: str
    sources: list[dict[str, Any]] = field(default_factory=list)
    confidence: str | None = None
    created_at: int = 0

    def sources_json(self) -> str:
        """Serialise sources to a JSON string for storage."""
        return json.dumps(self.sources)

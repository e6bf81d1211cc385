"""Policy listing endpoint.

Routes
------
GET /api/policies?category=<name|all>&q=<keywords>&limit=<n>

Without ``q`` every active policy in the category is returned, newest first.
With ``q`` the result is an FTS5 keyword search ranked by bm25; the category
filter still applies.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query, Request

from policy_qa.db.models import Policy
from policy_qa.db.policies import list_policies, search_policies

router = APIRouter()


def _policy_dict(policy: Policy) -> dict[str, Any]:
    return {
        "id": policy.id,
        "external_id": policy.external_id,
        "title": policy.title,
        "category": policy.category,
        "content": policy.content,
        "summary": policy.summary,
        "source_url": policy.source_url,
        "source_name": policy.source_name,
        "last_updated": policy.last_updated,
    }


@router.get("")
def get_policies(
    request: Request,
    category: Optional[str] = None,
    q: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
) -> dict[str, Any]:
    conn = request.app.state.db

    if q and q.strip():
        found = search_policies(conn, q, top_k=limit, category=category)
    else:
        found = list_policies(conn, category=category)[:limit]

    return {
        "success": True,
        "policies": [_policy_dict(p) for p in found],
        "count": len(found),
    }

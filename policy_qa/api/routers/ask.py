"""Question answering endpoint.

Routes
------
POST /api/ask   body ``{"question": "..."}``

Errors map to HTTP status codes: a too-short question is 400 and a failed
chat model call is 502.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from policy_qa.qa import LLMError, answer_question

router = APIRouter()


class AskRequest(BaseModel):
    question: str = ""


@router.post("")
def ask(body: AskRequest, request: Request) -> dict[str, Any]:
    conn = request.app.state.db
    try:
        result = answer_question(conn, body.question)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except LLMError as exc:
        print(f"[ASK] ✗ {exc}")
        raise HTTPException(
            status_code=502, detail="Failed to process question"
        ) from exc

    return {"success": True, **result.to_dict()}

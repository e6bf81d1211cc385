"""Answer a student question from stored policy text.

Flow
----
1. Reject questions shorter than ``settings.min_question_length``.
2. Coursework questions get a fixed "ask your professor" reply, no model call.
3. The most recently updated active policies become the prompt context.
4. With an empty store, the web-search fallback supplies the context instead.
5. The reply gets the disclaimer if missing and is logged to
   ``qa_interactions``.
"""

from __future__ import annotations

import sqlite3
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from policy_qa.config import settings
from policy_qa.db.interactions import log_interaction
from policy_qa.db.policies import recent_policies
from policy_qa.qa import prompts
from policy_qa.qa.fallback import SearchExcerpt, format_search_context, gather_excerpts
from policy_qa.qa.llm import get_llm, invoke_text

NO_POLICIES_ANSWER = (
    "I could not find any Suffolk Law policy information to answer this question. "
    "Please contact AcadServLaw@suffolk.edu or LawDeanofStudents@suffolk.edu.\n\n"
    + prompts.DISCLAIMER
)


class LLMError(RuntimeError):
    """The chat model call failed."""


@dataclass
class Answer:
    question: str
    answer: str
    sources: list[dict[str, Any]] = field(default_factory=list)
    confidence: str = "high"
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _ask_model(llm: Any, messages: list[Any]) -> str:
    try:
        return invoke_text(llm, messages)
    except Exception as exc:
        raise LLMError(f"chat model call failed: {exc}") from exc


def answer_question(
    conn: sqlite3.Connection,
    question: str,
    llm: Any = None,
    *,
    search: Optional[Callable[[str], list[SearchExcerpt]]] = None,
) -> Answer:
    """Answer *question* and record the interaction.

    Raises ``ValueError`` for a too-short question and ``LLMError`` when the
    chat model fails.  *search* replaces the web-search fallback in tests.
    """
    question = (question or "").strip()
    if len(question) < settings.min_question_length:
        raise ValueError("Please provide a valid question")

    print(f"[ASK] {question}")

    if prompts.is_coursework(question):
        result = Answer(question=question, answer=prompts.COURSEWORK_ANSWER, sources=[])
    else:
        policies = recent_policies(conn, settings.answer_context_limit)
        if policies:
            messages = prompts.build_answer_messages(
                question, prompts.format_policy_context(policies)
            )
            reply = _ask_model(llm or get_llm(), messages)
            result = Answer(
                question=question,
                answer=prompts.ensure_disclaimer(reply),
                sources=[p.citation() for p in policies[: settings.answer_source_limit]],
                confidence="high",
            )
        else:
            result = _answer_from_web(question, llm, search)

    log_interaction(conn, result.question, result.answer, result.sources, result.confidence)
    return result


def _answer_from_web(
    question: str,
    llm: Any,
    search: Optional[Callable[[str], list[SearchExcerpt]]],
) -> Answer:
    excerpts: list[SearchExcerpt] = []
    if settings.search_fallback_enabled:
        excerpts = (search or gather_excerpts)(question)

    if not excerpts:
        print("[ASK] no stored policies and no web results")
        return Answer(
            question=question, answer=NO_POLICIES_ANSWER, sources=[], confidence="low"
        )

    messages = prompts.build_answer_messages(
        question, format_search_context(excerpts), guidance=prompts.SEARCH_GUIDANCE
    )
    reply = _ask_model(llm or get_llm(), messages)
    return Answer(
        question=question,
        answer=prompts.ensure_disclaimer(reply),
        sources=[e.citation() for e in excerpts],
        confidence="low",
    )

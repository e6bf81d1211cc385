"""Fixed prompt text for the answer endpoint."""

from __future__ import annotations

from typing import Any, Iterable

from langchain_core.messages import HumanMessage, SystemMessage

from policy_qa.db.models import Policy

DISCLAIMER_MARKER = "⚠️"

DISCLAIMER = (
    "⚠️ Please note: This tool can make mistakes. Verify with actual Suffolk Law "
    "policies or contact AcadServLaw@suffolk.edu or LawDeanofStudents@suffolk.edu."
)

INSTRUCTIONS = f"""You are a helpful guide to Suffolk Law School. Provide brief, neutral answers.

TONE: Neutral and informative. Use "According to..." and "The policy states..." Avoid "You must" unless quoting.

CONTACTS: Academic (AcadServLaw@suffolk.edu), Dean (LawDeanofStudents@suffolk.edu), Emergency (617-573-8111 for emergencies only)

OUT OF SCOPE: Coursework → "Direct to professor." Unrelated → "Outside my scope."

ALWAYS END WITH: "{DISCLAIMER}\""""

ANSWER_GUIDANCE = (
    "Answer briefly using ONLY these policies. Cite by name. Include URLs as "
    "clickable links. If unclear, say so and recommend contacts. Keep concise. "
    "End with disclaimer."
)

SEARCH_GUIDANCE = (
    "No stored policy covers this question, so the excerpts below come from a "
    "live web search. Summarize what they say about the question, cite each "
    "URL you rely on, and say clearly when the excerpts do not answer it. "
    "Keep concise. End with disclaimer."
)

COURSEWORK_ANSWER = (
    "This is the kind of question that is best directed to your professor.\n\n"
    + DISCLAIMER
)

# Any of these in a question routes it to the professor instead of the model.
COURSEWORK_KEYWORDS: tuple[str, ...] = ("solve", "homework", "assignment")


def is_coursework(question: str) -> bool:
    lowered = question.lower()
    return any(word in lowered for word in COURSEWORK_KEYWORDS)


def format_policy_context(policies: Iterable[Policy]) -> str:
    """Render policies as numbered ``[Policy i]`` blocks."""
    return "\n\n".join(
        f"[Policy {i}]\nTitle: {p.title}\nContent: {p.content}\nURL: {p.source_url}\n---"
        for i, p in enumerate(policies, start=1)
    )


def build_answer_prompt(question: str, context: str, guidance: str = ANSWER_GUIDANCE) -> str:
    """The user turn: context, question and answer guidance."""
    return (
        f"POLICIES:\n{context}\n\n"
        f"QUESTION: {question}\n\n"
        f"{guidance}"
    )


def ensure_disclaimer(answer: str) -> str:
    """Append the disclaimer unless the model already included it."""
    answer = answer.strip()
    if DISCLAIMER_MARKER in answer:
        return answer
    return f"{answer}\n\n{DISCLAIMER}"


def build_answer_messages(
    question: str, context: str, guidance: str = ANSWER_GUIDANCE
) -> list[Any]:
    """System instructions plus one user turn, ready for ``llm.invoke``."""
    return [
        SystemMessage(content=INSTRUCTIONS),
        HumanMessage(content=build_answer_prompt(question, context, guidance)),
    ]

"""Question answering over stored policies, with a web-search fallback."""

from policy_qa.qa.answer import Answer, LLMError, answer_question

__all__ = ["Answer", "LLMError", "answer_question"]

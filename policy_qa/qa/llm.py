"""Chat model factory.

The provider is chosen by ``settings.llm_provider``: ``anthropic`` (default),
``openai`` or ``ollama``.  Provider packages are imported lazily so only the
one in use needs its API key configured.
"""

from __future__ import annotations

from typing import Any

from langchain_core.language_models import BaseChatModel

from policy_qa.config import settings


def get_llm() -> BaseChatModel:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )

    if settings.llm_provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=settings.ollama_chat_model,
            temperature=settings.llm_temperature,
            num_predict=settings.llm_max_tokens,
        )

    from langchain_anthropic import ChatAnthropic

    return ChatAnthropic(
        model=settings.anthropic_chat_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )


def invoke_text(llm: Any, messages: Any) -> str:
    """Call *llm* with *messages* (or a bare prompt) and return the reply text."""
    response = llm.invoke(messages)
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        # Anthropic replies may arrive as a list of content blocks.
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return str(content)

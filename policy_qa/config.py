"""Centralised settings for the policy Q&A backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("POLICY_QA_WORKSPACE", Path.home() / ".policy_qa")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "suffolk_law.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Chat model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "anthropic")
    )
    anthropic_chat_model: str = field(
        default_factory=lambda: os.environ.get(
            "ANTHROPIC_CHAT_MODEL", "claude-sonnet-4-20250514"
        )
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TEMPERATURE", "0.2"))
    )
    llm_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("LLM_MAX_TOKENS", "1500"))
    )

    # ------------------------------------------------------------------
    # Answer endpoint
    # ------------------------------------------------------------------
    answer_context_limit: int = field(
        default_factory=lambda: int(os.environ.get("ANSWER_CONTEXT_LIMIT", "15"))
    )
    answer_source_limit: int = field(
        default_factory=lambda: int(os.environ.get("ANSWER_SOURCE_LIMIT", "5"))
    )
    min_question_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_QUESTION_LENGTH", "5"))
    )

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get("BASE_URL", "https://www.suffolk.edu")
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SCRAPER_USER_AGENT", "Mozilla/5.0")
    )
    scrape_delay: float = field(
        default_factory=lambda: float(os.environ.get("SCRAPE_DELAY", "2.0"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    min_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTENT_LENGTH", "100"))
    )
    max_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_LENGTH", "10000"))
    )
    max_summary_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SUMMARY_LENGTH", "200"))
    )
    paragraph_floor: int = field(
        default_factory=lambda: int(os.environ.get("PARAGRAPH_FLOOR", "30"))
    )
    # "collapse" or "paragraphs"; anything else is rejected by ExtractionRules.
    text_mode: str = field(
        default_factory=lambda: os.environ.get("TEXT_MODE", "collapse").strip().lower()
    )

    # ------------------------------------------------------------------
    # Crawler
    # ------------------------------------------------------------------
    crawl_max_pages: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_MAX_PAGES", "200"))
    )
    crawl_link_window: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_LINK_WINDOW", "10"))
    )
    job_page_limit: int = field(
        default_factory=lambda: int(os.environ.get("JOB_PAGE_LIMIT", "20"))
    )

    # ------------------------------------------------------------------
    # Web search fallback
    # ------------------------------------------------------------------
    search_fallback_enabled: bool = field(
        default_factory=lambda: _env_bool("SEARCH_FALLBACK_ENABLED", "true")
    )
    search_fallback_pages: int = field(
        default_factory=lambda: int(os.environ.get("SEARCH_FALLBACK_PAGES", "3"))
    )
    search_site: str = field(
        default_factory=lambda: os.environ.get("SEARCH_SITE", "suffolk.edu/law")
    )
    brave_api_key: str = field(
        default_factory=lambda: os.environ.get("BRAVE_API_KEY", "")
    )
    searxng_base_url: str = field(
        default_factory=lambda: os.environ.get("SEARXNG_BASE_URL", "https://searx.be")
    )
    search_provider_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SEARCH_PROVIDER_TIMEOUT", "15.0"))
    )
    searxng_instance_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SEARXNG_INSTANCE_TIMEOUT", "5.0"))
    )
    search_retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("SEARCH_RETRY_BASE_DELAY", "2.0"))
    )
    search_retry_max: int = field(
        default_factory=lambda: int(os.environ.get("SEARCH_RETRY_MAX", "2"))
    )

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3001")))


# Module-level singleton: import this everywhere:
#   from policy_qa.config import settings
settings = Settings()

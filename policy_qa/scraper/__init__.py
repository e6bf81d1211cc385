"""Scraper package: fetching, layered content extraction, batch jobs."""

from policy_qa.scraper.extractor import (
    clean_text,
    extract_content,
    extract_policy_text,
    generate_summary,
)
from policy_qa.scraper.fetcher import fetch_url
from policy_qa.scraper.models import CleanPage, ExtractionRules, RawPage, ScrapedPage

__all__ = [
    "fetch_url",
    "clean_text",
    "generate_summary",
    "extract_policy_text",
    "extract_content",
    "RawPage",
    "CleanPage",
    "ScrapedPage",
    "ExtractionRules",
]

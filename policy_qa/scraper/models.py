"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, get_args

TextMode = Literal["collapse", "paragraphs"]

# Ordered most-likely to least-likely main content container.
DEFAULT_SELECTORS: tuple[str, ...] = (
    "main",
    "article",
    ".content",
    ".main-content",
    ".page-content",
    ".policy-content",
    "#content",
)

# Removed from the document before any text is read.
NOISE_SELECTORS: tuple[str, ...] = (
    "script",
    "style",
    "nav",
    "header",
    "footer",
    ".nav",
    ".menu",
    ".breadcrumb",
)


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class CleanPage:
    """Readable content extracted from an arbitrary :class:`RawPage`."""

    url: str
    title: str
    text: str
    links: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractionRules:
    """Parameters for one call of the layered content extractor."""

    selectors: tuple[str, ...] = DEFAULT_SELECTORS
    min_length: int = 100
    max_length: int = 10000
    max_summary_length: int = 200
    paragraph_floor: int = 30
    mode: TextMode = "collapse"

    def __post_init__(self) -> None:
        if self.mode not in get_args(TextMode):
            raise ValueError(
                f"Unknown text mode {self.mode!r}; expected one of {get_args(TextMode)}"
            )

    @classmethod
    def from_settings(cls, **overrides) -> "ExtractionRules":
        """Build rules from ``settings``, with keyword overrides."""
        from policy_qa.config import settings  # noqa: PLC0415

        values = {
            "min_length": settings.min_content_length,
            "max_length": settings.max_content_length,
            "max_summary_length": settings.max_summary_length,
            "paragraph_floor": settings.paragraph_floor,
            "mode": settings.text_mode,
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class Extraction:
    """Accepted text from the extractor, already truncated, with its summary."""

    content: str
    summary: str


@dataclass
class ScrapedPage:
    """A single scraped record, ready to be upserted by ``identifier``."""

    identifier: str
    title: str
    category: str
    content: str
    summary: str
    source_url: str
    source_name: str

"""Tests for the layered policy extractor and the summary generator.

Everything here is pure: HTML strings in, text out.  No network, no DB.
"""

from __future__ import annotations

import pytest

from policy_qa.scraper.extractor import (
    build_strategies,
    clean_text,
    extract_policy_text,
    generate_summary,
    paragraph_strategy,
    selector_strategy,
    strip_noise,
)
from policy_qa.scraper.models import ExtractionRules

from bs4 import BeautifulSoup


_LONG_SENTENCE = (
    "Students must attend at least eighty percent of scheduled class sessions "
    "to remain enrolled in good standing for the semester."
)


def _page(body: str) -> str:
    return f"<html><head><title>Policy</title></head><body>{body}</body></html>"


# ---------------------------------------------------------------------------
# clean_text
# ---------------------------------------------------------------------------

class TestCleanText:
    def test_collapse_mode(self) -> None:
        assert clean_text("Hello\n\n\tworld   !", "collapse") == "Hello world !"

    def test_paragraphs_mode(self) -> None:
        assert clean_text("Hello\n\n\tworld   !", "paragraphs") == "Hello\nworld !"

    def test_default_mode_is_collapse(self) -> None:
        assert clean_text("  a\n b  ") == "a b"

    def test_paragraphs_mode_strips_ends(self) -> None:
        assert clean_text("\n  first line \n\n second line \n", "paragraphs") == (
            "first line\nsecond line"
        )


# ---------------------------------------------------------------------------
# generate_summary
# ---------------------------------------------------------------------------

class TestGenerateSummary:
    def test_short_content_returned_unchanged(self) -> None:
        text = "A short policy."
        assert generate_summary(text) == text

    def test_exactly_max_length_unchanged(self) -> None:
        text = "y" * 200
        assert generate_summary(text) == text

    def test_cuts_at_late_period(self) -> None:
        summary = generate_summary("A. " * 100)
        assert summary.endswith(".")
        assert not summary.endswith("...")
        assert len(summary) == 200
        assert summary == ("A. " * 67)[:200]

    def test_hard_cut_without_periods(self) -> None:
        summary = generate_summary("x" * 500)
        assert summary == "x" * 197 + "..."
        assert len(summary) == 200

    def test_early_period_is_ignored(self) -> None:
        text = "Intro. " + "z" * 400
        summary = generate_summary(text)
        assert summary.endswith("...")
        assert len(summary) == 200

    def test_period_between_140_and_200_is_used(self) -> None:
        text = "w" * 150 + ". " + "v" * 300
        assert generate_summary(text) == "w" * 150 + "."

    def test_custom_max_length(self) -> None:
        assert generate_summary("x" * 50, max_length=20) == "x" * 17 + "..."


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class TestStrategies:
    def test_strip_noise_removes_boilerplate(self) -> None:
        soup = BeautifulSoup(
            _page("<nav>Menu</nav><script>var x;</script><main>Body</main>"
                  "<div class='breadcrumb'>Home</div>"),
            "html.parser",
        )
        text = strip_noise(soup).get_text()
        assert "Menu" not in text
        assert "var x" not in text
        assert "Home" not in text
        assert "Body" in text

    def test_selector_strategy_missing_node(self) -> None:
        soup = BeautifulSoup(_page("<div>nothing</div>"), "html.parser")
        assert selector_strategy("main", 10, "collapse")(soup) is None

    def test_paragraph_strategy_applies_floor(self) -> None:
        soup = BeautifulSoup(
            _page(f"<ul><li>Home</li><li>{_LONG_SENTENCE}</li></ul>"), "html.parser"
        )
        assert paragraph_strategy(10, 30, "collapse")(soup) == _LONG_SENTENCE

    def test_build_strategies_order(self) -> None:
        rules = ExtractionRules(selectors=("main", "article"))
        assert len(build_strategies(rules)) == 3


# ---------------------------------------------------------------------------
# extract_policy_text
# ---------------------------------------------------------------------------

class TestExtractPolicyText:
    def test_selector_tier_wins(self) -> None:
        html = _page(
            f"<header>Suffolk University</header>"
            f"<main><h1>Attendance</h1><p>{_LONG_SENTENCE}</p></main>"
            f"<p>Unrelated footer-ish paragraph that is long enough to count.</p>"
        )
        result = extract_policy_text(html)
        assert result is not None
        assert result.content == f"Attendance {_LONG_SENTENCE}"
        assert "Unrelated" not in result.content
        assert "\n\n" not in result.content

    def test_earlier_selector_has_priority(self) -> None:
        html = _page(
            f"<article>{_LONG_SENTENCE} (article)</article>"
            f"<main>{_LONG_SENTENCE} (main)</main>"
        )
        result = extract_policy_text(html)
        assert result is not None
        assert result.content.endswith("(main)")

    def test_short_selector_falls_through_to_paragraphs(self) -> None:
        html = _page(
            "<main><p>Too short.</p></main>"
            f"<div class='wrapper'><p>{_LONG_SENTENCE}</p>"
            f"<p>{_LONG_SENTENCE}</p><li>Nav</li></div>"
        )
        result = extract_policy_text(html)
        assert result is not None
        assert result.content == f"{_LONG_SENTENCE}\n\n{_LONG_SENTENCE}"

    def test_no_tier_returns_none(self) -> None:
        html = _page("<main><p>Short.</p></main><p>Also short.</p>")
        assert extract_policy_text(html) is None

    def test_selector_threshold_is_strict(self) -> None:
        at_min = _page(f"<main><div>{'y' * 100}</div></main>")
        above = _page(f"<main><div>{'y' * 101}</div></main>")
        assert extract_policy_text(at_min) is None
        result = extract_policy_text(above)
        assert result is not None
        assert result.content == "y" * 101

    def test_paragraph_threshold_is_inclusive(self) -> None:
        html = _page(f"<div><p>{'q' * 100}</p></div>")
        result = extract_policy_text(html)
        assert result is not None
        assert result.content == "q" * 100

    def test_noise_inside_container_is_removed(self) -> None:
        html = _page(f"<main><nav>Skip to content</nav><p>{_LONG_SENTENCE}</p></main>")
        result = extract_policy_text(html)
        assert result is not None
        assert "Skip to content" not in result.content

    def test_truncates_to_max_length(self) -> None:
        html = _page(f"<main><p>{'word ' * 3000}</p></main>")
        result = extract_policy_text(html)
        assert result is not None
        assert len(result.content) == 10000

    def test_custom_max_length(self) -> None:
        html = _page(f"<main><p>{'word ' * 300}</p></main>")
        result = extract_policy_text(html, ExtractionRules(max_length=500))
        assert result is not None
        assert len(result.content) == 500

    def test_summary_is_generated_from_content(self) -> None:
        html = _page(f"<main><p>{'x' * 500}</p></main>")
        result = extract_policy_text(html)
        assert result is not None
        assert result.summary == "x" * 197 + "..."

    def test_custom_selectors(self) -> None:
        html = _page(f"<div class='policy-body'>{_LONG_SENTENCE}</div>")
        rules = ExtractionRules(selectors=(".policy-body",), min_length=50)
        result = extract_policy_text(html, rules)
        assert result is not None
        assert result.content == _LONG_SENTENCE

    def test_paragraphs_mode_keeps_line_breaks(self) -> None:
        html = _page(
            f"<main>\n<p>{_LONG_SENTENCE}</p>\n<p>Second   paragraph of the policy.</p>\n</main>"
        )
        collapsed = extract_policy_text(html, ExtractionRules(mode="collapse"))
        kept = extract_policy_text(html, ExtractionRules(mode="paragraphs"))
        assert collapsed is not None and kept is not None
        assert "\n" not in collapsed.content
        assert kept.content == f"{_LONG_SENTENCE}\nSecond paragraph of the policy."

    def test_paragraphs_mode_splits_adjacent_blocks(self) -> None:
        html = _page(
            "<main><p>Grades are posted each term.</p>"
            f"<p>{_LONG_SENTENCE}</p><p>See <a href='/law/rules'>the rules</a> page.</p></main>"
        )
        result = extract_policy_text(html, ExtractionRules(mode="paragraphs"))
        assert result is not None
        assert "term.Students" not in result.content
        assert result.content == (
            f"Grades are posted each term.\n{_LONG_SENTENCE}\nSee the rules page."
        )

    def test_is_idempotent(self) -> None:
        html = _page(
            f"<main><h2>Rule</h2><p>{_LONG_SENTENCE}</p><p>{_LONG_SENTENCE}</p></main>"
        )
        first = extract_policy_text(html)
        second = extract_policy_text(html)
        assert first == second

    @pytest.mark.parametrize("html", ["", "<html></html>", "not html at all"])
    def test_degenerate_input(self, html: str) -> None:
        assert extract_policy_text(html) is None


# ---------------------------------------------------------------------------
# ExtractionRules
# ---------------------------------------------------------------------------

class TestExtractionRules:
    def test_unknown_mode_rejected(self) -> None:
        with pytest.raises(ValueError, match="paragraph"):
            ExtractionRules(mode="paragraph")  # type: ignore[arg-type]

    def test_from_settings_rejects_misspelled_mode(self, monkeypatch) -> None:
        monkeypatch.setattr("policy_qa.config.settings.text_mode", "paragraph")
        with pytest.raises(ValueError):
            ExtractionRules.from_settings()

    def test_from_settings_reads_mode(self, monkeypatch) -> None:
        monkeypatch.setattr("policy_qa.config.settings.text_mode", "paragraphs")
        assert ExtractionRules.from_settings().mode == "paragraphs"
        assert ExtractionRules.from_settings(mode="collapse").mode == "collapse"

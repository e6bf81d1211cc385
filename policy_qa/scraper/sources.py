"""Start pages and fixed URL lists scraped by the batch jobs."""

from __future__ import annotations

from dataclasses import dataclass

_POLICY_ROOT = (
    "https://www.suffolk.edu/law/academics-clinics/student-life/"
    "policies-rules/student-policies-procedures"
)

POLICY_INDEX_URL = _POLICY_ROOT
ACADEMICS_START_URL = "https://www.suffolk.edu/law/academics-clinics"
LIBRARY_URL = "https://www.suffolk.edu/law/faculty-research/about-the-library"

# Path fragments that scope link discovery per job.
POLICY_INDEX_PATH = "/student-policies-procedures/"
ACADEMICS_PATH = "/law/academics-clinics"
LIBRARY_PATH = "/law/faculty-research/"


@dataclass(frozen=True)
class PageTarget:
    """A URL to scrape together with its display title."""

    url: str
    title: str


@dataclass(frozen=True)
class SectionSource:
    """A long rules page that is split into one record per heading."""

    url: str
    category: str
    name: str


POLICY_PAGES: tuple[PageTarget, ...] = tuple(
    PageTarget(f"{_POLICY_ROOT}/{slug}", title)
    for slug, title in (
        ("exam-regulations-policy", "Exam Regulations Policy"),
        ("exam-postponement-and-rescheduling-requests-policy", "Exam Postponement Policy"),
        ("academic-accommodations", "Academic Accommodations"),
        ("leaves-of-absence-voluntary", "Voluntary Leave of Absence"),
        ("recording-classes-policy", "Recording Classes Policy"),
        ("accommodations-for-exams-policy", "Accommodations for Exams"),
        ("exam-interruption-policy", "Exam Interruption Policy"),
        ("examsoft-missing-text-policy", "ExamSoft Missing Text Policy"),
        ("requesting-exam-accommodations-policy", "Requesting Exam Accommodations"),
        ("class-make-up-policy", "Class Make-up Policy"),
        ("cancellation-and-delay-policy", "Cancellation and Delay Policy"),
        ("disciplinary-procedure-policy", "Disciplinary Procedure"),
        ("leaves-of-absence-involuntary", "Involuntary Leave of Absence"),
        ("satisfactory-academic-progress-policy", "Satisfactory Academic Progress"),
        ("visiting-out-study-abroad-policy", "Visiting Out/Study Abroad"),
        ("military-service-policy", "Military Service Policy"),
        (
            "withdrawal-due-to-failure-to-file-previous-educational-transcripts",
            "Withdrawal for Missing Transcripts",
        ),
        ("family-rights-and-privacy-act-policy", "FERPA Policy"),
        ("computer-use-policy", "Computer Use Policy"),
        ("electronic-mail-policy", "Electronic Mail Policy"),
    )
)

SECTION_SOURCES: tuple[SectionSource, ...] = (
    SectionSource(
        url=(
            "https://www.suffolk.edu/law/academics-clinics/student-life/"
            "policies-rules/academic-rules-regulations"
        ),
        category="academic",
        name="Academic Rules & Regulations",
    ),
    SectionSource(
        url=_POLICY_ROOT,
        category="student-services",
        name="Student Policies & Procedures",
    ),
    SectionSource(
        url=(
            "https://www.suffolk.edu/law/academics-clinics/academic-resources/"
            "course-registration"
        ),
        category="registration",
        name="Course Registration",
    ),
)


def is_crawlable(url: str) -> bool:
    """Relevance filter for the academics crawler."""
    lowered = url.lower()
    return (
        ACADEMICS_PATH in url
        and "#" not in url
        and "mailto:" not in lowered
        and not lowered.endswith((".pdf", ".jpg", ".png"))
    )

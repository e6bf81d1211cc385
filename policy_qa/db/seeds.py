"""Hand-written policy records.

``SAMPLE_POLICIES`` give a fresh database something to answer from before the
first scrape.  ``COMMON_QUESTIONS`` cover attendance and exam questions whose
answers are scattered across pages the scrapers do not capture cleanly.
"""

from __future__ import annotations

import sqlite3

from policy_qa.db.policies import insert_policy_if_missing, upsert_policy
from policy_qa.scraper.models import ScrapedPage

_RULES_URL = (
    "https://www.suffolk.edu/law/academics-clinics/student-life/"
    "policies-rules/academic-rules-regulations"
)
_ATTENDANCE_URL = f"{_RULES_URL}#rule2B"


SAMPLE_POLICIES: tuple[ScrapedPage, ...] = (
    ScrapedPage(
        identifier="graduation-req-1",
        title="JD Degree Requirements",
        category="curriculum",
        content=(
            "Students must complete at least 84 semester hours to earn the JD degree. "
            "This includes 6 semesters of full-time study or 8 semesters of part-time "
            "study. All students must be in good academic standing and complete required "
            "courses including Civil Procedure, Constitutional Law, Contracts, Criminal "
            "Law, Property, and Torts."
        ),
        summary="Requirements to graduate with a JD degree from Suffolk Law",
        source_url=(
            "https://www.suffolk.edu/law/academics-clinics/juris-doctor/"
            "curriculum-requirements"
        ),
        source_name="Curriculum & Requirements",
    ),
    ScrapedPage(
        identifier="grading-policy-1",
        title="Grading Standards",
        category="academic",
        content=(
            "For courses with 25 or more students, the required median final course "
            "grade is B+. Required courses in Civil Procedure, Constitutional Law, "
            "Contracts, Criminal Law, Property, and Torts have specific grade "
            "distribution requirements. Faculty members must conform to these "
            "distribution limits."
        ),
        summary="Grade distribution requirements for courses",
        source_url=_RULES_URL,
        source_name="Academic Rules & Regulations",
    ),
    ScrapedPage(
        identifier="registration-1",
        title="Course Registration",
        category="registration",
        content=(
            "Fall course registration takes place in early April. Spring term "
            "registration takes place in November. JD students have priority "
            "enrollment in courses required for the JD degree. Students register "
            "through MySuffolk portal."
        ),
        summary="How and when to register for courses",
        source_url=(
            "https://www.suffolk.edu/law/academics-clinics/academic-resources/"
            "course-registration"
        ),
        source_name="Course Registration",
    ),
)


COMMON_QUESTIONS: tuple[ScrapedPage, ...] = (
    ScrapedPage(
        identifier="absence-short-term",
        title="Short-Term Absences (1-2 Days)",
        category="attendance",
        content=(
            "For absences of one or two days due to illness, family issues, or "
            "short-term conflicts, email your professors directly. The Dean of Students "
            'Office does not need to be contacted for these short absences and will not '
            '"excuse" them. The Attendance Policy provides an Applicable Absence '
            "Limitation to cover these situations. As a professional courtesy, always "
            "notify your professors of absences."
        ),
        summary="Email professors for 1-2 day absences; Dean of Students not needed",
        source_url=_ATTENDANCE_URL,
        source_name="Attendance Policy",
    ),
    ScrapedPage(
        identifier="absence-extended",
        title="Extended Absences (3+ Days)",
        category="attendance",
        content=(
            "If you will be absent for more than three consecutive days or will exceed "
            "the Applicable Absence Limitation for any class, you must contact the Dean "
            "of Students Office at lawdeanofstudents@suffolk.edu or 617-573-8157."
        ),
        summary="Contact Dean of Students for absences over 3 days",
        source_url=_ATTENDANCE_URL,
        source_name="Attendance Policy",
    ),
    ScrapedPage(
        identifier="excused-absences",
        title="Excused Absences",
        category="attendance",
        content=(
            'Routine absences cannot be excused. An absence may only be "excused" in '
            "rare circumstances when a student has a serious situation causing them to "
            "exceed the Applicable Absence Limitation. There are significant "
            "restrictions on excused absences, and exceeding the Applicable Absence "
            "Limitation will likely result in exclusion from affected classes."
        ),
        summary="Excused absences only for rare serious situations exceeding absence limits",
        source_url=_ATTENDANCE_URL,
        source_name="Attendance Policy",
    ),
    ScrapedPage(
        identifier="absence-limitation-exceeded",
        title="Exceeding Applicable Absence Limitation",
        category="attendance",
        content=(
            "Unless you have a rare situation allowing limited excused absences beyond "
            "the Applicable Absence Limitation, exceeding the limit can result in "
            "exclusion from the class. Exclusion means you will either be allowed to "
            "withdraw (if you have an extraordinary circumstance like medical issue, "
            "work commitment, or family issue) or you will be assigned an F in the course."
        ),
        summary="Exceeding absence limit can result in exclusion or F grade",
        source_url=_ATTENDANCE_URL,
        source_name="Attendance Policy",
    ),
    ScrapedPage(
        identifier="attendance-tracking",
        title="How Attendance is Tracked",
        category="attendance",
        content=(
            "All students should scan the QR code located in each classroom. If you "
            "cannot scan the code but are present, communicate that in the follow-up "
            "email sent the next day. Physical presence is what matters for attendance; "
            "keeping up with work outside class does not avoid the attendance policy."
        ),
        summary="Scan QR code in classroom; physical presence required",
        source_url=_ATTENDANCE_URL,
        source_name="Attendance Policy",
    ),
    ScrapedPage(
        identifier="exam-emergency",
        title="Emergency During Exam Period",
        category="exams",
        content=(
            "If you are ill or have a significant personal emergency causing a conflict "
            "with an exam, contact the Dean of Students Office by emailing "
            "lawdeanofstudents@suffolk.edu (preferred) or calling 617-573-8157. Because "
            "of exam anonymity, you MUST NOT alert your professor(s). The Dean of "
            "Students Office will assist you."
        ),
        summary="Contact Dean of Students (not professor) for exam emergencies",
        source_url="http://www.suffolk.edu/law/student-life/19216.php#examPostpone",
        source_name="Exam Postponement Policy",
    ),
    ScrapedPage(
        identifier="library-hours",
        title="Law Library Hours",
        category="library",
        content=(
            "The Suffolk Law Library offers extended hours during the academic year. "
            "Students can access study rooms, research materials, and librarian "
            "assistance. For current hours and to book study rooms, visit the library "
            "website or contact the library directly."
        ),
        summary="Library offers study spaces and research assistance",
        source_url="https://www.suffolk.edu/law/faculty-research/about-the-library",
        source_name="Law Library",
    ),
)


def seed_policies(conn: sqlite3.Connection, include_samples: bool = True) -> int:
    """Load the hand-written records and return how many rows were written.

    Common questions are upserted so edits here reach existing databases;
    samples are only inserted when missing.
    """
    written = 0
    for page in COMMON_QUESTIONS:
        upsert_policy(conn, page)
        written += 1
    if include_samples:
        for page in SAMPLE_POLICIES:
            if insert_policy_if_missing(conn, page):
                written += 1
    return written

"""
Pytest configuration and shared fixtures for testing.
"""
import sys
from pathlib import Path

# Add project root to path so libs/ is importable (matches CI PYTHONPATH config)
# This must happen before importing from tutor_analytics/ which imports from libs/
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

backend_root = Path(__file__).parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Callable, Optional  # noqa: E402

import pytest  # noqa: E402

from libs.domain_types import TestFamily  # noqa: E402

from tutor_analytics.models import (  # noqa: E402
    Assignment,
    Attempt,
    SchoolClass,
    SpellingAnswer,
    SpellingQuestion,
    Student,
    Subject,
    Test,
)
from tutor_analytics.repositories import (  # noqa: E402
    InMemoryFamilyRepository,
    InMemorySchoolRepository,
)
from tutor_analytics.services import ReportService  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
TEACHER_ID = "teacher-1"


@pytest.fixture
def base_time() -> datetime:
    """Fixed reference time; attempts are expressed as offsets from it."""
    return BASE_TIME


@pytest.fixture
def make_attempt() -> Callable[..., Attempt]:
    """
    Factory for attempts.

    ``completed_after`` is the duration in minutes; passing it marks the
    attempt completed. ``percentage`` defaults to score / max_score.
    """

    def _make(
        attempt_id: int,
        student_id: int,
        *,
        test_id: int = 1,
        score: int = 0,
        max_score: int = 10,
        percentage: Optional[float] = None,
        grade: Optional[int] = None,
        started_offset: int = 0,
        completed_after: Optional[int] = None,
        completed: Optional[bool] = None,
        attempt_number: int = 1,
    ) -> Attempt:
        started_at = BASE_TIME + timedelta(minutes=started_offset)
        completed_at = (
            started_at + timedelta(minutes=completed_after)
            if completed_after is not None
            else None
        )
        if percentage is None:
            percentage = round(score / max_score * 100, 2) if max_score else 0.0
        return Attempt(
            id=attempt_id,
            test_id=test_id,
            student_id=student_id,
            started_at=started_at,
            attempt_number=attempt_number,
            completed_at=completed_at,
            score=score,
            max_score=max_score,
            percentage=percentage,
            grade=grade,
            completed=completed if completed is not None else completed_at is not None,
        )

    return _make


@pytest.fixture
def school() -> InMemorySchoolRepository:
    """
    Two classes mapped to the spelling assignment.

    Students 1 and 2 are in 7A, student 3 in 7B; student 4 has no class and
    is therefore not on any roster.
    """
    return InMemorySchoolRepository(
        subjects=[Subject(1, "Russian language"), Subject(2, "Literature")],
        assignments=[
            Assignment(10, "Spelling week", subject_id=1),
            Assignment(20, "Poetry", subject_id=2),
            Assignment(30, "Unmapped homework", subject_id=1),
        ],
        classes=[
            SchoolClass(100, "7A", TEACHER_ID),
            SchoolClass(101, "7B", TEACHER_ID),
        ],
        assignment_classes=[(10, 100), (10, 101), (20, 101)],
        students=[
            Student(1, "u1", class_id=100),
            Student(2, "u2", class_id=100),
            Student(3, "u3", class_id=101),
            Student(4, "u4", class_id=None),
        ],
        display_names={
            "u1": "Anna Ivanova",
            "u2": "Boris Petrov",
            "u3": "Clara Smirnova",
            "u4": "Dmitry Orlov",
        },
    )


@pytest.fixture
def spelling_test() -> Test:
    return Test(
        id=1,
        family=TestFamily.SPELLING,
        title="Vowels after sibilants",
        assignment_id=10,
        teacher_id=TEACHER_ID,
        max_attempts=3,
    )


@pytest.fixture
def spelling_questions() -> list:
    return [
        SpellingQuestion(11, 1, 1, "ж_знь", "и", "жизнь"),
        SpellingQuestion(12, 1, 2, "ш_пот", "ё", "шёпот", points=2),
        SpellingQuestion(13, 1, 3, "ц_рк", "и", "цирк"),
    ]


@pytest.fixture
def spelling_attempts(make_attempt) -> list:
    """
    Attempts at the spelling test.

    - student 1: two completed attempts (60% then 90%)
    - student 2: one in-progress attempt
    - student 3: no attempt
    - student 4: one completed attempt while off the roster
    """
    return [
        make_attempt(101, 1, score=6, grade=3, started_offset=0, completed_after=10),
        make_attempt(102, 1, score=9, grade=5, started_offset=60, completed_after=15, attempt_number=2),
        make_attempt(103, 2, started_offset=30),
        make_attempt(104, 4, score=3, grade=2, started_offset=45, completed_after=5),
    ]


@pytest.fixture
def spelling_answers() -> list:
    """
    Answers to the spelling test.

    Question 11: "ы" twice from student 1 (attempts 101, 102), "е" from student 4
    Question 12: all correct
    Question 13: unanswered
    """
    return [
        SpellingAnswer(1001, 101, 11, "ы"),
        SpellingAnswer(1002, 101, 12, "ё", is_correct=True),
        SpellingAnswer(1003, 102, 11, "ы"),
        SpellingAnswer(1004, 102, 12, "ё", is_correct=True),
        SpellingAnswer(1005, 104, 11, "е"),
        SpellingAnswer(1006, 104, 12, "ё", is_correct=True),
    ]


@pytest.fixture
def spelling_repository(
    spelling_test, spelling_questions, spelling_attempts, spelling_answers
) -> InMemoryFamilyRepository:
    return InMemoryFamilyRepository(
        TestFamily.SPELLING,
        tests=[spelling_test],
        attempts=spelling_attempts,
        questions=spelling_questions,
        answers=spelling_answers,
    )


@pytest.fixture
def report_service(school, spelling_repository) -> ReportService:
    """Service wired to the spelling repository and an empty repository per other family."""
    return ReportService(
        school,
        {
            TestFamily.SPELLING: spelling_repository,
            TestFamily.PUNCTUATION: InMemoryFamilyRepository(TestFamily.PUNCTUATION),
            TestFamily.STRESS: InMemoryFamilyRepository(TestFamily.STRESS),
            TestFamily.GENERIC: InMemoryFamilyRepository(TestFamily.GENERIC),
        },
    )

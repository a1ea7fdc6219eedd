"""
Common read-only records consumed by the analytics core.

Tests and attempts have the same shape in every test family, so a single
record type carries a ``family`` tag. Questions and answers differ per family;
the analytics core only sees the normalized ``Question`` and ``Answer`` below,
produced by the adapters in ``tutor_analytics.families``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from libs.domain_types import TestFamily


@dataclass(frozen=True)
class Subject:
    """School subject an assignment belongs to."""

    id: int
    name: str


@dataclass(frozen=True)
class Assignment:
    """Teacher assignment grouping one or more tests."""

    id: int
    title: str
    subject_id: int


@dataclass(frozen=True)
class SchoolClass:
    """A class of students."""

    id: int
    name: str
    teacher_id: Optional[str] = None


@dataclass(frozen=True)
class Student:
    """A student. ``user_id`` links to the account used for the display name."""

    id: int
    user_id: str
    class_id: Optional[int] = None


@dataclass(frozen=True)
class Test:
    """A test of any family."""

    __test__ = False

    id: int
    family: TestFamily
    title: str
    assignment_id: int
    teacher_id: str
    max_attempts: int = 1
    is_active: bool = True
    show_hints: bool = True
    show_correct_answers: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class Attempt:
    """
    One student's pass at a test (a "test result").

    ``completed`` with no ``completed_at`` is treated as not completed by the
    attempt classifier; it is never counted as finished work.
    """

    id: int
    test_id: int
    student_id: int
    started_at: datetime
    attempt_number: int = 1
    completed_at: Optional[datetime] = None
    score: int = 0
    max_score: int = 0
    percentage: float = 0.0
    grade: Optional[int] = None
    completed: bool = False

    @property
    def is_finished(self) -> bool:
        """True when the attempt is completed and carries a completion time."""
        return self.completed and self.completed_at is not None


@dataclass(frozen=True)
class Question:
    """Family-independent view of a question."""

    id: int
    test_id: int
    order_index: int
    points: int = 1


@dataclass(frozen=True)
class Answer:
    """
    Family-independent view of a submitted answer.

    ``submitted_value`` is the literal value the student submitted, rendered
    as a string by the family adapter. It is never normalized further.
    """

    id: int
    attempt_id: int
    question_id: int
    is_correct: bool
    submitted_value: str

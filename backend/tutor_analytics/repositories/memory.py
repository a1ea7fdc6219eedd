"""
In-memory repositories.

This module provides in-memory implementations of the collaborator protocols
for development, testing, and for embedders that already hold the rows in
memory (for example after a bulk export from their own database).
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from libs.domain_types import TestFamily

from tutor_analytics.models import (
    Assignment,
    Attempt,
    FamilyAnswer,
    FamilyQuestion,
    SchoolClass,
    Student,
    Subject,
    Test,
)

logger = logging.getLogger(__name__)


class InMemoryFamilyRepository:
    """
    In-memory implementation of ``FamilyRepository`` for a single family.

    Rows are indexed once at construction; every read returns a fresh list
    so callers cannot mutate the stored state.
    """

    def __init__(
        self,
        family: TestFamily,
        tests: Iterable[Test] = (),
        attempts: Iterable[Attempt] = (),
        questions: Iterable[FamilyQuestion] = (),
        answers: Iterable[FamilyAnswer] = (),
    ):
        """
        Initialize the repository with the family's rows.

        Args:
            family: Family every stored test must belong to
            tests: Test rows
            attempts: Attempt rows for those tests
            questions: Family-specific question rows
            answers: Family-specific answer rows

        Raises:
            ValueError: If a test of another family is supplied
        """
        self.family = family
        self._tests: Dict[int, Test] = {}
        self._attempts: Dict[int, Attempt] = {}
        self._questions: Dict[int, FamilyQuestion] = {}
        self._answers: Dict[int, FamilyAnswer] = {}

        for test in tests:
            if test.family != family:
                raise ValueError(
                    f"Test {test.id} belongs to family {test.family.value}, "
                    f"not {family.value}"
                )
            self._tests[test.id] = test
        for attempt in attempts:
            self._attempts[attempt.id] = attempt
        for question in questions:
            self._questions[question.id] = question
        for answer in answers:
            self._answers[answer.id] = answer

        self._answers_by_question: Dict[int, List[FamilyAnswer]] = defaultdict(list)
        self._answers_by_attempt: Dict[int, List[FamilyAnswer]] = defaultdict(list)
        for answer in sorted(self._answers.values(), key=lambda a: a.id):
            self._answers_by_question[answer.question_id].append(answer)
            self._answers_by_attempt[answer.attempt_id].append(answer)

        logger.debug(
            f"InMemoryFamilyRepository[{family.value}]: loaded {len(self._tests)} tests, "
            f"{len(self._attempts)} attempts, {len(self._questions)} questions, "
            f"{len(self._answers)} answers"
        )

    async def get_test(self, test_id: int) -> Optional[Test]:
        return self._tests.get(test_id)

    async def get_tests_for_teacher(self, teacher_id: str) -> List[Test]:
        return sorted(
            (t for t in self._tests.values() if t.teacher_id == teacher_id),
            key=lambda t: t.id,
        )

    async def get_attempts_for_test(self, test_id: int) -> List[Attempt]:
        return sorted(
            (a for a in self._attempts.values() if a.test_id == test_id),
            key=lambda a: a.id,
        )

    async def get_attempts_for_student_and_test(
        self, student_id: int, test_id: int
    ) -> List[Attempt]:
        return [
            a
            for a in await self.get_attempts_for_test(test_id)
            if a.student_id == student_id
        ]

    async def get_questions_for_test(self, test_id: int) -> Sequence[FamilyQuestion]:
        return sorted(
            (q for q in self._questions.values() if q.test_id == test_id),
            key=lambda q: (q.order_index, q.id),
        )

    async def get_answers_for_question(self, question_id: int) -> Sequence[FamilyAnswer]:
        return list(self._answers_by_question.get(question_id, []))

    async def get_answers_for_attempt(self, attempt_id: int) -> Sequence[FamilyAnswer]:
        return list(self._answers_by_attempt.get(attempt_id, []))


class InMemorySchoolRepository:
    """In-memory implementation of ``SchoolRepository``."""

    def __init__(
        self,
        subjects: Iterable[Subject] = (),
        assignments: Iterable[Assignment] = (),
        classes: Iterable[SchoolClass] = (),
        assignment_classes: Iterable[Tuple[int, int]] = (),
        students: Iterable[Student] = (),
        display_names: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the repository.

        Args:
            subjects: Subject rows
            assignments: Assignment rows
            classes: Class rows
            assignment_classes: (assignment_id, class_id) mapping rows
            students: Student rows
            display_names: user_id -> full display name
        """
        self._subjects = {s.id: s for s in subjects}
        self._assignments = {a.id: a for a in assignments}
        self._classes = {c.id: c for c in classes}
        self._students = {s.id: s for s in students}
        self._display_names = dict(display_names or {})

        self._class_ids_by_assignment: Dict[int, List[int]] = defaultdict(list)
        for assignment_id, class_id in assignment_classes:
            if class_id not in self._class_ids_by_assignment[assignment_id]:
                self._class_ids_by_assignment[assignment_id].append(class_id)

    async def get_assignment(self, assignment_id: int) -> Optional[Assignment]:
        return self._assignments.get(assignment_id)

    async def get_subject(self, subject_id: int) -> Optional[Subject]:
        return self._subjects.get(subject_id)

    async def get_class(self, class_id: int) -> Optional[SchoolClass]:
        return self._classes.get(class_id)

    async def get_class_ids_for_assignment(self, assignment_id: int) -> List[int]:
        return list(self._class_ids_by_assignment.get(assignment_id, []))

    async def get_students_for_class(self, class_id: int) -> List[Student]:
        return sorted(
            (s for s in self._students.values() if s.class_id == class_id),
            key=lambda s: s.id,
        )

    async def get_student(self, student_id: int) -> Optional[Student]:
        return self._students.get(student_id)

    async def get_display_name(self, user_id: str) -> Optional[str]:
        return self._display_names.get(user_id)

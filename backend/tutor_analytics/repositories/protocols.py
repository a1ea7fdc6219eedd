"""
Collaborator interfaces consumed by the analytics engine.

The engine never owns storage. The surrounding application supplies objects
satisfying these protocols; any object with matching async methods works, no
inheritance required. Every method is a read: the engine never creates,
mutates or deletes rows.
"""

from typing import List, Optional, Protocol, Sequence

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


class FamilyRepository(Protocol):
    """
    Reads for one test family.

    Question and answer rows come back in the family's own shape; the family
    adapter turns them into the common ``Question`` / ``Answer`` records.
    """

    async def get_test(self, test_id: int) -> Optional[Test]:
        ...

    async def get_tests_for_teacher(self, teacher_id: str) -> List[Test]:
        ...

    async def get_attempts_for_test(self, test_id: int) -> List[Attempt]:
        ...

    async def get_attempts_for_student_and_test(
        self, student_id: int, test_id: int
    ) -> List[Attempt]:
        ...

    async def get_questions_for_test(self, test_id: int) -> Sequence[FamilyQuestion]:
        """Questions of the test sorted by order index."""
        ...

    async def get_answers_for_question(self, question_id: int) -> Sequence[FamilyAnswer]:
        ...

    async def get_answers_for_attempt(self, attempt_id: int) -> Sequence[FamilyAnswer]:
        ...


class SchoolRepository(Protocol):
    """Reads for the family-independent school structure and user names."""

    async def get_assignment(self, assignment_id: int) -> Optional[Assignment]:
        ...

    async def get_subject(self, subject_id: int) -> Optional[Subject]:
        ...

    async def get_class(self, class_id: int) -> Optional[SchoolClass]:
        ...

    async def get_class_ids_for_assignment(self, assignment_id: int) -> List[int]:
        """Ids of the classes the assignment is mapped to."""
        ...

    async def get_students_for_class(self, class_id: int) -> List[Student]:
        ...

    async def get_student(self, student_id: int) -> Optional[Student]:
        ...

    async def get_display_name(self, user_id: str) -> Optional[str]:
        ...

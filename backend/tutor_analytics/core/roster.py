"""
Roster resolution.

The roster of a test is the set of students expected to take it: every
student of every class the test's assignment is mapped to. It is recomputed
on each read and never stored.

Attempt existence never implies roster membership. A student who has an
attempt on file but is not reachable through assignment -> class -> student
is left out of the roster (and therefore out of every roster-based
denominator).
"""

import logging
from typing import Iterable, List, Optional

from tutor_analytics.core.concurrency import gather_bounded
from tutor_analytics.models import Student
from tutor_analytics.repositories import SchoolRepository

logger = logging.getLogger(__name__)


def dedupe_students(students: Iterable[Student]) -> List[Student]:
    """
    Drop repeated students, keeping the first occurrence of each id.

    Args:
        students: Students in lookup order (class order, then class listing order)

    Returns:
        Students with unique ids, in first-seen order
    """
    seen: set[int] = set()
    unique: List[Student] = []
    for student in students:
        if student.id in seen:
            continue
        seen.add(student.id)
        unique.append(student)
    return unique


async def resolve_roster(school: SchoolRepository, assignment_id: int) -> List[Student]:
    """
    Resolve the students expected to take a test of the given assignment.

    An assignment with no mapped classes yields an empty roster. There is no
    fallback to "all students of the teacher": that would inflate the
    not-started count for assignments nobody was asked to do.

    Args:
        school: School-wide repository
        assignment_id: Assignment the test belongs to

    Returns:
        Unique students ordered by mapped class, then by the class listing order
    """
    class_ids = await school.get_class_ids_for_assignment(assignment_id)
    if not class_ids:
        logger.info(f"Assignment {assignment_id} is not mapped to any class; roster is empty")
        return []

    # A class id mapped twice would only produce duplicates
    class_ids = list(dict.fromkeys(class_ids))
    students_per_class = await gather_bounded(school.get_students_for_class, class_ids)

    roster = dedupe_students(
        student for students in students_per_class for student in students
    )

    logger.debug(
        f"Resolved roster for assignment {assignment_id}: "
        f"{len(roster)} students from {len(class_ids)} classes"
    )
    return roster


def filter_roster_by_class(roster: List[Student], class_id: Optional[int]) -> List[Student]:
    """Restrict a roster to one class; ``None`` keeps everyone."""
    if class_id is None:
        return list(roster)
    return [s for s in roster if s.class_id == class_id]

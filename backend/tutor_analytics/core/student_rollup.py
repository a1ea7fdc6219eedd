"""
Per-student rollups.

Produces one summary row per roster student, whether or not the student has
attempted the test, plus the list of roster students without any attempt and
the attempts left over from students who are not on the roster.

Rows are ordered by class name (students without a class first) and then by
display name, both compared ordinally; student id breaks the remaining ties.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from libs.domain_types import AttemptStatus, InconsistencyReason

from tutor_analytics.core.aggregation import positive_durations
from tutor_analytics.core.attempts import (
    group_attempts_by_student,
    select_best_attempt,
    select_latest_attempt,
)
from tutor_analytics.core.config import settings
from tutor_analytics.core.datetime_utils import ensure_timezone_aware
from tutor_analytics.models import Attempt, Student
from tutor_analytics.schemas import (
    AttemptSummary,
    DataInconsistency,
    StudentRef,
    StudentRollup,
)

logger = logging.getLogger(__name__)


def summarize_attempt(attempt: Optional[Attempt]) -> Optional[AttemptSummary]:
    """Convert an attempt into its report summary (None passes through)."""
    if attempt is None:
        return None
    return AttemptSummary(
        attempt_id=attempt.id,
        attempt_number=attempt.attempt_number,
        score=attempt.score,
        max_score=attempt.max_score,
        percentage=attempt.percentage,
        grade=attempt.grade,
        started_at=attempt.started_at,
        completed_at=attempt.completed_at,
    )


def attempt_status(attempts: Sequence[Attempt]) -> AttemptStatus:
    """
    Overall status of a student from their attempts.

    A finished attempt makes the student completed even when a later attempt
    is still open.
    """
    if any(a.is_finished for a in attempts):
        return AttemptStatus.COMPLETED
    if any(not a.completed for a in attempts):
        return AttemptStatus.IN_PROGRESS
    return AttemptStatus.NOT_STARTED


def _sort_key(class_name: Optional[str], display_name: str, student_id: int):
    return (class_name or "", display_name, student_id)


def build_student_rollup(
    student: Student,
    attempts: Sequence[Attempt],
    display_name: str,
    class_name: Optional[str],
) -> StudentRollup:
    """
    Build the summary row of one student.

    Args:
        student: Roster student
        attempts: The student's attempts at the test (any state)
        display_name: Resolved display name
        class_name: Name of the student's class, if any

    Returns:
        StudentRollup for the student
    """
    starts = [ensure_timezone_aware(a.started_at) for a in attempts]
    completions = [
        ensure_timezone_aware(a.completed_at) for a in attempts if a.is_finished
    ]
    durations = positive_durations(attempts)

    return StudentRollup(
        student_id=student.id,
        display_name=display_name,
        class_name=class_name,
        status=attempt_status(attempts),
        attempts_used=len(attempts),
        has_completed=bool(completions),
        is_in_progress=any(not a.completed for a in attempts),
        best_result=summarize_attempt(select_best_attempt(attempts)),
        latest_result=summarize_attempt(select_latest_attempt(attempts)),
        first_attempt_at=min(starts) if starts else None,
        last_attempt_at=max(starts) if starts else None,
        last_completed_at=max(completions) if completions else None,
        total_time_spent_seconds=sum(durations) if durations else None,
    )


def build_student_rollups(
    roster: Sequence[Student],
    attempts: Iterable[Attempt],
    name_by_student: Mapping[int, str],
    class_name_by_id: Mapping[int, str],
) -> List[StudentRollup]:
    """
    Build the summary rows of every roster student.

    Args:
        roster: Students expected to take the test
        attempts: Every attempt recorded for the test; attempts of students
                  outside the roster are ignored here
        name_by_student: student_id -> display name; missing entries fall
                         back to UNKNOWN_STUDENT_NAME
        class_name_by_id: class_id -> class name

    Returns:
        One StudentRollup per roster student, sorted by class then name
    """
    attempts_by_student = group_attempts_by_student(attempts)
    rollups = [
        build_student_rollup(
            student,
            attempts_by_student.get(student.id, []),
            name_by_student.get(student.id, settings.UNKNOWN_STUDENT_NAME),
            class_name_by_id.get(student.class_id) if student.class_id is not None else None,
        )
        for student in roster
    ]
    rollups.sort(key=lambda r: _sort_key(r.class_name, r.display_name, r.student_id))
    return rollups


def students_not_taken(rollups: Iterable[StudentRollup]) -> List[StudentRef]:
    """Roster students without any attempt, in rollup order."""
    return [
        StudentRef(
            student_id=r.student_id,
            display_name=r.display_name,
            class_name=r.class_name,
        )
        for r in rollups
        if r.attempts_used == 0
    ]


def find_off_roster_attempts(
    roster: Sequence[Student], attempts: Iterable[Attempt]
) -> List[DataInconsistency]:
    """
    Report students who have attempts but are not on the roster.

    Their attempts still count in the attempt-based statistics; they only
    stay out of the roster-based denominators and the rollups.

    Returns:
        One DataInconsistency per off-roster student, ordered by student id
    """
    roster_ids = {s.id for s in roster}
    orphaned: Dict[int, List[int]] = {}
    for attempt in attempts:
        if attempt.student_id not in roster_ids:
            orphaned.setdefault(attempt.student_id, []).append(attempt.id)

    inconsistencies = [
        DataInconsistency(
            student_id=student_id,
            attempt_ids=sorted(attempt_ids),
            reason=InconsistencyReason.STUDENT_NOT_ON_ROSTER,
        )
        for student_id, attempt_ids in sorted(orphaned.items())
    ]

    for item in inconsistencies:
        logger.warning(
            f"Student {item.student_id} has {len(item.attempt_ids)} attempts "
            f"but is not on the roster",
            extra={"student_id": item.student_id},
        )
    return inconsistencies

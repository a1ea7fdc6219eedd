"""
Attempt classification.

Partitions the attempts of one test into completed and in-progress sets,
derives the distinct students behind each set, and picks the best and the
latest completed attempt of a student.

Classification rules:
- completed: ``completed`` flag set AND a completion time present
- in progress: ``completed`` flag not set
- an attempt flagged completed without a completion time belongs to neither
  set; it is not counted as finished work and not counted as open work

A student with both a completed and an in-progress attempt (a re-attempt
after a reset) appears in both distinct-student lists. The completion funnel
counts such a student twice (completed + in progress may exceed the roster by
the overlap) and the not-started count is clamped at zero so it never goes
negative. Per-student status resolves the overlap to "completed".
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tutor_analytics.core.datetime_utils import ensure_timezone_aware
from tutor_analytics.models import Attempt

logger = logging.getLogger(__name__)


@dataclass
class AttemptClassification:
    """Completed / in-progress split of the attempts of one test."""

    completed_attempts: List[Attempt] = field(default_factory=list)
    in_progress_attempts: List[Attempt] = field(default_factory=list)
    # Distinct student ids in first-seen order
    completed_student_ids: List[int] = field(default_factory=list)
    in_progress_student_ids: List[int] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return len(self.completed_student_ids)

    @property
    def in_progress_count(self) -> int:
        return len(self.in_progress_student_ids)

    def not_started_count(self, roster_size: int) -> int:
        """Roster students with no attempt in either set, never below zero."""
        return max(0, roster_size - self.completed_count - self.in_progress_count)


def _distinct_student_ids(attempts: Iterable[Attempt]) -> List[int]:
    return list(dict.fromkeys(a.student_id for a in attempts))


def classify_attempts(attempts: Iterable[Attempt]) -> AttemptClassification:
    """
    Split all attempts of a test into completed and in-progress sets.

    Args:
        attempts: Every attempt recorded for the test, any student

    Returns:
        AttemptClassification with both attempt lists and the distinct
        students behind them
    """
    attempts = list(attempts)
    completed = [a for a in attempts if a.is_finished]
    in_progress = [a for a in attempts if not a.completed]

    orphaned = len(attempts) - len(completed) - len(in_progress)
    if orphaned:
        logger.warning(
            f"{orphaned} attempts are flagged completed without a completion time; "
            "excluded from completion statistics"
        )

    return AttemptClassification(
        completed_attempts=completed,
        in_progress_attempts=in_progress,
        completed_student_ids=_distinct_student_ids(completed),
        in_progress_student_ids=_distinct_student_ids(in_progress),
    )


def group_attempts_by_student(attempts: Iterable[Attempt]) -> Dict[int, List[Attempt]]:
    """Group attempts by student id, keeping the input order within each group."""
    grouped: Dict[int, List[Attempt]] = defaultdict(list)
    for attempt in attempts:
        grouped[attempt.student_id].append(attempt)
    return dict(grouped)


def select_best_attempt(attempts: Iterable[Attempt]) -> Optional[Attempt]:
    """
    Pick a student's best completed attempt.

    Highest percentage wins; ties go to the highest raw score; a remaining
    tie goes to the lowest attempt id so the choice does not depend on the
    order the repository returned the rows in.

    Args:
        attempts: Attempts of one student (any state; unfinished ones are ignored)

    Returns:
        The best completed attempt, or None if the student has none
    """
    completed = [a for a in attempts if a.is_finished]
    if not completed:
        return None
    return max(completed, key=lambda a: (a.percentage, a.score, -a.id))


def select_latest_attempt(attempts: Iterable[Attempt]) -> Optional[Attempt]:
    """
    Pick a student's most recently completed attempt.

    Ties on completion time go to the highest attempt id.

    Args:
        attempts: Attempts of one student (any state; unfinished ones are ignored)

    Returns:
        The completed attempt with the latest completion time, or None
    """
    completed = [a for a in attempts if a.is_finished]
    if not completed:
        return None
    return max(
        completed,
        key=lambda a: (ensure_timezone_aware(a.completed_at), a.id),
    )

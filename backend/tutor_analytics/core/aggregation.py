"""
Test-level statistics.

Computes the completion funnel, the score and grade summary, the completion
time summary and the grade histogram of one test from its roster and all of
its attempts.

Denominators:
- total_students and not_started_count are roster-based
- every other value is attempt-based and counts all attempts on file, including
  attempts of students who are not on the roster

Every mean over an empty set has a defined value: 0.0 for score and
percentage averages, None for the grade average and the completion time.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from tutor_analytics.core.attempts import AttemptClassification, classify_attempts
from tutor_analytics.core.datetime_utils import elapsed_seconds, ensure_timezone_aware
from tutor_analytics.models import Attempt, Student
from tutor_analytics.schemas import TestStatistics

logger = logging.getLogger(__name__)

# =============================================================================
# Grade labels
# =============================================================================

# Histogram buckets, highest first. Anything below 3 (or outside the scale)
# lands in the failing bucket.
GRADE_LABELS = ("5", "4", "3", "2")
FAILING_GRADE_LABEL = "2"


def grade_label(grade: int) -> str:
    """
    Map a grade to its histogram label.

    Args:
        grade: Grade on the 1-5 scale

    Returns:
        "5", "4" or "3" for those grades, "2" for everything else
    """
    label = str(grade)
    if label in GRADE_LABELS:
        return label
    return FAILING_GRADE_LABEL


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def positive_durations(attempts: Iterable[Attempt]) -> List[float]:
    """
    Durations in seconds of finished attempts that took a positive amount of time.

    Zero and negative durations (clock anomalies) are excluded, not clamped.
    """
    durations: List[float] = []
    for attempt in attempts:
        if not attempt.is_finished:
            continue
        seconds = elapsed_seconds(attempt.started_at, attempt.completed_at)
        if seconds is not None and seconds > 0:
            durations.append(seconds)
    return durations


def compute_grade_distribution(completed_attempts: Iterable[Attempt]) -> Dict[str, int]:
    """
    Count completed, graded attempts per grade label.

    Every label is present in the result, even with a zero count, in the
    order "5", "4", "3", "2".
    """
    distribution = {label: 0 for label in GRADE_LABELS}
    for attempt in completed_attempts:
        if attempt.grade is None:
            continue
        distribution[grade_label(attempt.grade)] += 1
    return distribution


def compute_average_grade(completed_attempts: Iterable[Attempt]) -> Optional[int]:
    """Mean grade of the graded attempts rounded half up, or None if none are graded."""
    grades = [a.grade for a in completed_attempts if a.grade is not None]
    if not grades:
        return None
    return round_half_up(sum(grades) / len(grades))


def compute_test_statistics(
    roster: Sequence[Student],
    attempts: Iterable[Attempt],
    classification: Optional[AttemptClassification] = None,
) -> TestStatistics:
    """
    Compute the statistics of one test.

    Args:
        roster: Students expected to take the test
        attempts: Every attempt recorded for the test
        classification: Pre-computed classification of ``attempts``; computed
                        here when omitted

    Returns:
        TestStatistics for the test
    """
    attempts = list(attempts)
    if classification is None:
        classification = classify_attempts(attempts)

    completed = classification.completed_attempts
    total_students = len(roster)

    scores = [a.score for a in completed]
    completion_times = [ensure_timezone_aware(a.completed_at) for a in completed]
    durations = positive_durations(completed)

    statistics = TestStatistics(
        total_students=total_students,
        completed_count=classification.completed_count,
        in_progress_count=classification.in_progress_count,
        not_started_count=classification.not_started_count(total_students),
        average_score=_mean(scores),
        average_percentage=_mean([a.percentage for a in completed]),
        highest_score=max(scores) if scores else 0,
        lowest_score=min(scores) if scores else 0,
        max_score=max((a.max_score for a in completed), default=0),
        average_grade=compute_average_grade(completed),
        first_completion_at=min(completion_times) if completion_times else None,
        last_completion_at=max(completion_times) if completion_times else None,
        average_completion_seconds=_mean(durations) if durations else None,
        grade_distribution=compute_grade_distribution(completed),
    )

    logger.debug(
        f"Computed statistics: {statistics.completed_count}/{total_students} completed, "
        f"{statistics.in_progress_count} in progress, "
        f"{statistics.not_started_count} not started"
    )
    return statistics

"""
Common mistake detection.

Clusters the wrong answers to one question by their literal submitted value
and attributes every cluster to the students who produced it.

Values are compared exactly as submitted: "A", "a" and "a " are three
different clusters. Normalizing is the family adapter's job, and the
adapters deliberately do not normalize.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from tutor_analytics.core.config import settings
from tutor_analytics.models import Answer
from tutor_analytics.schemas import CommonMistake

logger = logging.getLogger(__name__)


def _share_of(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, settings.RATE_PRECISION)


def detect_mistake_patterns(
    answers: Sequence[Answer],
    student_by_attempt: Mapping[int, int],
    name_by_student: Mapping[int, str],
    top_n: Optional[int] = None,
) -> List[CommonMistake]:
    """
    Rank the most frequent wrong answers to a question.

    Answers are read in ascending answer id order. Clusters are ranked by
    size, largest first; clusters of equal size keep the order in which their
    value first appeared.

    A student is named once per cluster however many of their attempts gave
    that value. A student whose attempt or name cannot be resolved still
    counts towards the cluster size but is not named.

    Args:
        answers: Answers to one question
        student_by_attempt: attempt_id -> student_id
        name_by_student: student_id -> display name
        top_n: Clusters to keep (defaults to MISTAKE_TOP_N)

    Returns:
        Up to ``top_n`` CommonMistake entries, most frequent first
    """
    if top_n is None:
        top_n = settings.MISTAKE_TOP_N

    incorrect = [a for a in sorted(answers, key=lambda a: a.id) if not a.is_correct]
    if not incorrect:
        return []

    clusters: Dict[str, List[Answer]] = {}
    for answer in incorrect:
        clusters.setdefault(answer.submitted_value, []).append(answer)

    ranked = sorted(clusters.items(), key=lambda item: len(item[1]), reverse=True)

    mistakes: List[CommonMistake] = []
    for value, members in ranked[:top_n]:
        student_ids = dict.fromkeys(
            student_by_attempt[a.attempt_id]
            for a in members
            if a.attempt_id in student_by_attempt
        )
        names = sorted(
            name_by_student[student_id]
            for student_id in student_ids
            if student_id in name_by_student
        )
        mistakes.append(
            CommonMistake(
                submitted_value=value,
                count=len(members),
                percentage=_share_of(len(members), len(incorrect)),
                student_names=names,
            )
        )

    if len(ranked) > top_n:
        logger.debug(
            f"Kept {top_n} of {len(ranked)} distinct wrong values for question "
            f"{incorrect[0].question_id}"
        )
    return mistakes

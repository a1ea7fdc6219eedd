"""
Question difficulty analysis.

Counts the answers of every question of a test, derives the success rate and
flags the hardest and the easiest questions.

Flags are computed over answered questions only (total > 0). Every question
whose success rate equals the minimum is flagged most difficult and every
question equal to the maximum is flagged easiest, so several questions can
share a flag, and with a single answered question (or all rates equal) the
same question carries both flags.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from tutor_analytics.core.config import settings
from tutor_analytics.models import Answer, Question
from tutor_analytics.schemas import CommonMistake, QuestionAnalytics

logger = logging.getLogger(__name__)


def success_rate(correct: int, total: int) -> float:
    """Correct answers as a percentage of all answers, 0.0 when there are none."""
    if total == 0:
        return 0.0
    return round(correct / total * 100, settings.RATE_PRECISION)


def analyze_questions(
    questions: Sequence[Question],
    answers_by_question: Mapping[int, Sequence[Answer]],
    mistakes_by_question: Optional[Mapping[int, List[CommonMistake]]] = None,
) -> List[QuestionAnalytics]:
    """
    Build the analytics row of every question.

    Args:
        questions: Questions of the test in test order
        answers_by_question: question_id -> answers to that question; missing
                             keys mean no answers
        mistakes_by_question: Optional question_id -> common mistakes to attach

    Returns:
        One QuestionAnalytics per question, in the order of ``questions``
    """
    mistakes_by_question = mistakes_by_question or {}
    rows: List[QuestionAnalytics] = []

    for question in questions:
        answers = answers_by_question.get(question.id, ())
        total = len(answers)
        correct = sum(1 for a in answers if a.is_correct)
        rows.append(
            QuestionAnalytics(
                question_id=question.id,
                order_index=question.order_index,
                points=question.points,
                total_answers=total,
                correct_answers=correct,
                incorrect_answers=total - correct,
                success_rate=success_rate(correct, total),
                common_mistakes=list(mistakes_by_question.get(question.id, [])),
            )
        )

    return flag_difficulty(rows)


def flag_difficulty(rows: List[QuestionAnalytics]) -> List[QuestionAnalytics]:
    """
    Set the most-difficult and easiest flags on answered questions.

    Unanswered questions never carry a flag; if no question was answered,
    nothing is flagged.
    """
    answered = [row for row in rows if row.total_answers > 0]
    if not answered:
        logger.debug("No answered questions; skipping difficulty flags")
        return rows

    lowest = min(row.success_rate for row in answered)
    highest = max(row.success_rate for row in answered)

    flags: Dict[int, Dict[str, bool]] = {}
    for row in answered:
        flags[row.question_id] = {
            "is_most_difficult": row.success_rate == lowest,
            "is_easiest": row.success_rate == highest,
        }

    return [
        row.model_copy(update=flags[row.question_id]) if row.question_id in flags else row
        for row in rows
    ]

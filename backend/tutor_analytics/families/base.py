"""
Family adapter interface.

Each test family stores its questions and answers in its own shape. An
adapter converts those rows into the family-independent ``Question`` and
``Answer`` records, so a single pipeline serves every family.

Adapters never decide correctness: ``is_correct`` is copied from the row the
grading collaborator produced.
"""

from typing import Any, Optional

from libs.domain_types import TestFamily

from tutor_analytics.models import Answer, Question


class FamilyAdapter:
    """Base adapter; subclasses render the submitted value."""

    family: TestFamily

    def to_question(self, raw: Any) -> Question:
        """Project a family question row onto the common question fields."""
        return Question(
            id=raw.id,
            test_id=raw.test_id,
            order_index=raw.order_index,
            points=raw.points,
        )

    def to_answer(self, raw: Any, raw_question: Optional[Any] = None) -> Answer:
        """
        Project a family answer row onto the common answer fields.

        Args:
            raw: Family answer row
            raw_question: Family question row the answer belongs to, when the
                          submitted value can only be rendered with it

        Returns:
            Answer with the submitted value rendered as a string
        """
        return Answer(
            id=raw.id,
            attempt_id=raw.attempt_id,
            question_id=raw.question_id,
            is_correct=raw.is_correct,
            submitted_value=self.submitted_value(raw, raw_question),
        )

    def submitted_value(self, raw: Any, raw_question: Optional[Any]) -> str:
        raise NotImplementedError

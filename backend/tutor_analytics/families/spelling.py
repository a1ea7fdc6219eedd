"""Spelling tests: the student fills a letter gap in a word."""

from typing import Optional

from libs.domain_types import TestFamily

from tutor_analytics.families.base import FamilyAdapter
from tutor_analytics.models import SpellingAnswer, SpellingQuestion


class SpellingAdapter(FamilyAdapter):
    family = TestFamily.SPELLING

    def submitted_value(
        self, raw: SpellingAnswer, raw_question: Optional[SpellingQuestion]
    ) -> str:
        # Kept as typed: "A" and "a" are different mistakes
        return raw.student_answer

"""Punctuation tests: the student lists the numbered positions that need a comma."""

from typing import Optional

from libs.domain_types import TestFamily

from tutor_analytics.families.base import FamilyAdapter
from tutor_analytics.models import PunctuationAnswer, PunctuationQuestion


class PunctuationAdapter(FamilyAdapter):
    family = TestFamily.PUNCTUATION

    def submitted_value(
        self, raw: PunctuationAnswer, raw_question: Optional[PunctuationQuestion]
    ) -> str:
        return raw.student_answer

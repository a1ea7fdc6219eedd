"""Stress tests: the student picks the stressed vowel position of a word."""

from typing import Optional

from libs.domain_types import TestFamily

from tutor_analytics.families.base import FamilyAdapter
from tutor_analytics.models import StressAnswer, StressQuestion


class StressAdapter(FamilyAdapter):
    family = TestFamily.STRESS

    def submitted_value(
        self, raw: StressAnswer, raw_question: Optional[StressQuestion]
    ) -> str:
        return str(raw.student_answer)

"""
Generic tests: single choice, multiple choice and true/false questions.

A generic answer carries either free text or a selected option id. The
submitted value is the free text when present, otherwise the text of the
selected option, so clusters of wrong answers read as option texts rather
than database ids.
"""

import logging
from typing import Optional

from libs.domain_types import TestFamily

from tutor_analytics.families.base import FamilyAdapter
from tutor_analytics.models import GenericAnswer, GenericQuestion

logger = logging.getLogger(__name__)


class GenericAdapter(FamilyAdapter):
    family = TestFamily.GENERIC

    def submitted_value(
        self, raw: GenericAnswer, raw_question: Optional[GenericQuestion]
    ) -> str:
        if raw.student_answer:
            return raw.student_answer
        if raw.selected_option_id is None:
            return ""

        options = raw_question.options if raw_question is not None else []
        for option in options:
            if option.id == raw.selected_option_id:
                return option.text

        logger.debug(
            f"Answer {raw.id} selects option {raw.selected_option_id} "
            f"which is not on question {raw.question_id}"
        )
        return f"option #{raw.selected_option_id}"

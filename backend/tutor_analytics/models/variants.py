"""
Family-specific question and answer rows.

These are the shapes the surrounding application stores for each test family.
Only the family adapters read the family-specific fields; everything past the
adapter works with ``Question`` and ``Answer`` from ``entities``.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from libs.domain_types import GenericQuestionKind


# =============================================================================
# Spelling
# =============================================================================


@dataclass(frozen=True)
class SpellingQuestion:
    id: int
    test_id: int
    order_index: int
    word_with_gap: str
    correct_letter: str
    full_word: str
    points: int = 1
    hint: Optional[str] = None


@dataclass(frozen=True)
class SpellingAnswer:
    id: int
    attempt_id: int
    question_id: int
    student_answer: str
    is_correct: bool = False
    no_letter_needed: bool = False
    points: int = 0


# =============================================================================
# Punctuation
# =============================================================================


@dataclass(frozen=True)
class PunctuationQuestion:
    id: int
    test_id: int
    order_index: int
    sentence_with_numbers: str
    correct_positions: str
    points: int = 1
    explanation: Optional[str] = None


@dataclass(frozen=True)
class PunctuationAnswer:
    id: int
    attempt_id: int
    question_id: int
    student_answer: str
    is_correct: bool = False
    points: int = 0


# =============================================================================
# Stress placement
# =============================================================================


@dataclass(frozen=True)
class StressQuestion:
    id: int
    test_id: int
    order_index: int
    word: str
    stress_position: int
    points: int = 1
    word_with_stress: Optional[str] = None


@dataclass(frozen=True)
class StressAnswer:
    id: int
    attempt_id: int
    question_id: int
    student_answer: int
    is_correct: bool = False
    points: int = 0


# =============================================================================
# Generic multiple choice
# =============================================================================


@dataclass(frozen=True)
class QuestionOption:
    id: int
    text: str
    is_correct: bool = False
    order_index: int = 0


@dataclass(frozen=True)
class GenericQuestion:
    id: int
    test_id: int
    order_index: int
    text: str
    kind: GenericQuestionKind = GenericQuestionKind.SINGLE_CHOICE
    points: int = 1
    options: List[QuestionOption] = field(default_factory=list)


@dataclass(frozen=True)
class GenericAnswer:
    id: int
    attempt_id: int
    question_id: int
    is_correct: bool = False
    student_answer: Optional[str] = None  # free text (true/false questions)
    selected_option_id: Optional[int] = None
    points: int = 0


FamilyQuestion = Union[SpellingQuestion, PunctuationQuestion, StressQuestion, GenericQuestion]
FamilyAnswer = Union[SpellingAnswer, PunctuationAnswer, StressAnswer, GenericAnswer]

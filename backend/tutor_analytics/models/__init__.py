"""
Models package for the analytics engine.
"""
from .entities import (
    Answer,
    Assignment,
    Attempt,
    Question,
    SchoolClass,
    Student,
    Subject,
    Test,
)
from .variants import (
    FamilyAnswer,
    FamilyQuestion,
    GenericAnswer,
    GenericQuestion,
    PunctuationAnswer,
    PunctuationQuestion,
    QuestionOption,
    SpellingAnswer,
    SpellingQuestion,
    StressAnswer,
    StressQuestion,
)

__all__ = [
    "Answer",
    "Assignment",
    "Attempt",
    "Question",
    "SchoolClass",
    "Student",
    "Subject",
    "Test",
    "FamilyAnswer",
    "FamilyQuestion",
    "GenericAnswer",
    "GenericQuestion",
    "PunctuationAnswer",
    "PunctuationQuestion",
    "QuestionOption",
    "SpellingAnswer",
    "SpellingQuestion",
    "StressAnswer",
    "StressQuestion",
]

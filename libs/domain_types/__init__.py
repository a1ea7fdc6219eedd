"""Shared domain types for the tutoring analytics services.

This package is the single source of truth for domain enums used across
the analytics engine and the applications that embed it.

Usage:
    from libs.domain_types import TestFamily, AttemptStatus
"""

import enum


class TestFamily(str, enum.Enum):
    """Families of knowledge tests. Each family has its own question/answer shape."""

    __test__ = False

    SPELLING = "spelling"
    PUNCTUATION = "punctuation"
    STRESS = "stress"
    GENERIC = "generic"


class AttemptStatus(str, enum.Enum):
    """Where a roster student stands on a test."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    NOT_STARTED = "not_started"


class GenericQuestionKind(str, enum.Enum):
    """Question kinds of the generic multiple-choice family."""

    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"


class InconsistencyReason(str, enum.Enum):
    """Reasons an attempt is excluded from roster-based figures."""

    STUDENT_NOT_ON_ROSTER = "student_not_on_roster"

"""
Exceptions raised by the analytics engine.

Only lookup and authorization failures are raised. Collaborator errors are
never wrapped: they propagate unchanged so the repository layer that owns
retries can see them. Recoverable data inconsistencies are reported inside
the report body instead of being raised.
"""

from typing import Any, Dict, Optional


class AnalyticsError(Exception):
    """Base exception for analytics engine errors.

    Attributes:
        message: Human-readable error description
        original_error: The underlying exception that caused this error, if any
        context: Additional context about where the error occurred
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the analytics error.

        Args:
            message: Human-readable description of what went wrong
            original_error: The underlying exception that caused this error
            context: Additional context about where the error occurred
        """
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return a detailed string representation of the error."""
        parts = [self.message]
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in sorted(self.context.items()))
            parts.append(f"({details})")
        if self.original_error:
            parts.append(f"caused by {type(self.original_error).__name__}")
        return " ".join(parts)


class NotFoundError(AnalyticsError):
    """A requested entity does not resolve."""


class TestNotFoundError(NotFoundError):
    """The test id does not resolve within its family."""

    __test__ = False

    def __init__(self, family: str, test_id: int):
        super().__init__(
            f"Test {test_id} not found",
            context={"family": family, "test_id": test_id},
        )
        self.family = family
        self.test_id = test_id


class StudentNotFoundError(NotFoundError):
    """The student id does not resolve."""

    def __init__(self, student_id: int):
        super().__init__(
            f"Student {student_id} not found", context={"student_id": student_id}
        )
        self.student_id = student_id


class AccessDeniedError(AnalyticsError):
    """The test does not belong to the requesting teacher."""

    def __init__(self, family: str, test_id: int, teacher_id: str):
        super().__init__(
            f"Teacher {teacher_id} has no access to test {test_id}",
            context={"family": family, "test_id": test_id, "teacher_id": teacher_id},
        )
        self.family = family
        self.test_id = test_id
        self.teacher_id = teacher_id


class UnknownTestFamilyError(AnalyticsError, ValueError):
    """No adapter or repository is registered for the requested family."""

    def __init__(self, family: Any):
        super().__init__(f"Unknown test family: {family!r}", context={"family": family})
        self.family = family

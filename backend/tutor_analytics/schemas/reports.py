"""
Pydantic schemas for the analytics reports.

These schemas describe everything the engine hands back to the surrounding
application: the per-test report, the cross-test index row and the
per-student drill-down. They carry no behavior; every value is computed by
the modules in ``tutor_analytics.core``.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from libs.domain_types import AttemptStatus, InconsistencyReason, TestFamily


# =============================================================================
# Shared building blocks
# =============================================================================


class TestSummary(BaseModel):
    """Identifying fields and flags of the test a report is about."""

    __test__ = False

    id: int = Field(..., description="Test ID within its family")
    family: TestFamily = Field(..., description="Test family")
    title: str = Field(..., description="Test title")
    assignment_id: int = Field(..., description="Assignment the test belongs to")
    teacher_id: str = Field(..., description="Owning teacher")
    max_attempts: int = Field(..., ge=0, description="Attempts allowed per student")
    is_active: bool = Field(..., description="Whether students can currently take the test")
    show_hints: bool = Field(..., description="Whether hints are shown to students")
    show_correct_answers: bool = Field(
        ..., description="Whether correct answers are revealed after completion"
    )


class AttemptSummary(BaseModel):
    """Result of a single attempt."""

    attempt_id: int = Field(..., description="Attempt ID")
    attempt_number: int = Field(..., ge=0, description="1-based attempt number of the student")
    score: int = Field(..., description="Raw score")
    max_score: int = Field(..., description="Maximum reachable score")
    percentage: float = Field(..., description="Score as a percentage of max_score")
    grade: Optional[int] = Field(None, description="Grade on the 1-5 scale, if assigned")
    started_at: datetime = Field(..., description="When the attempt was started")
    completed_at: Optional[datetime] = Field(
        None, description="When the attempt was completed (None while in progress)"
    )


# =============================================================================
# Test statistics
# =============================================================================


class TestStatistics(BaseModel):
    """
    Completion funnel and score summary of one test.

    Roster-based fields (total_students, not_started_count) only count
    students reachable through the assignment's classes; attempt-based fields
    count every attempt on file.
    """

    __test__ = False

    total_students: int = Field(..., ge=0, description="Roster size")
    completed_count: int = Field(
        ..., ge=0, description="Distinct students with at least one completed attempt"
    )
    in_progress_count: int = Field(
        ..., ge=0, description="Distinct students with at least one in-progress attempt"
    )
    not_started_count: int = Field(
        ..., ge=0, description="Roster students with no attempt, clamped at zero"
    )
    average_score: float = Field(
        ..., description="Mean raw score over completed attempts (0.0 if none)"
    )
    average_percentage: float = Field(
        ..., description="Mean percentage over completed attempts (0.0 if none)"
    )
    highest_score: int = Field(..., description="Highest raw score (0 if none)")
    lowest_score: int = Field(..., description="Lowest raw score (0 if none)")
    max_score: int = Field(..., description="Highest max_score seen (0 if none)")
    average_grade: Optional[int] = Field(
        None,
        description="Mean grade of graded completed attempts, rounded half up (None if none)",
    )
    first_completion_at: Optional[datetime] = Field(
        None, description="Earliest completion time"
    )
    last_completion_at: Optional[datetime] = Field(
        None, description="Latest completion time"
    )
    average_completion_seconds: Optional[float] = Field(
        None,
        description="Mean duration of completed attempts with a positive duration",
    )
    grade_distribution: Dict[str, int] = Field(
        default_factory=dict,
        description="Completed graded attempts per grade label ('5', '4', '3', '2')",
    )


# =============================================================================
# Question analytics
# =============================================================================


class CommonMistake(BaseModel):
    """A cluster of identical wrong answers to one question."""

    submitted_value: str = Field(..., description="Literal submitted value")
    count: int = Field(..., ge=1, description="Wrong answers with this value")
    percentage: float = Field(
        ..., ge=0.0, le=100.0, description="Share of all wrong answers to the question"
    )
    student_names: List[str] = Field(
        default_factory=list,
        description="Distinct students who gave this answer, sorted by name",
    )


class QuestionAnalytics(BaseModel):
    """Answer counts, difficulty flags and common mistakes of one question."""

    question_id: int = Field(..., description="Question ID")
    order_index: int = Field(..., description="Position of the question in the test")
    points: int = Field(..., description="Point value")
    total_answers: int = Field(..., ge=0, description="Answers recorded")
    correct_answers: int = Field(..., ge=0, description="Correct answers recorded")
    incorrect_answers: int = Field(..., ge=0, description="Incorrect answers recorded")
    success_rate: float = Field(
        ..., ge=0.0, le=100.0, description="Correct answers as a percentage (0 if unanswered)"
    )
    is_most_difficult: bool = Field(
        False, description="Success rate equals the lowest among answered questions"
    )
    is_easiest: bool = Field(
        False, description="Success rate equals the highest among answered questions"
    )
    common_mistakes: List[CommonMistake] = Field(
        default_factory=list, description="Most frequent wrong answers, most frequent first"
    )


# =============================================================================
# Students
# =============================================================================


class StudentRollup(BaseModel):
    """Per-student summary row of a test report."""

    student_id: int = Field(..., description="Student ID")
    display_name: str = Field(..., description="Student display name")
    class_name: Optional[str] = Field(None, description="Name of the student's class")
    status: AttemptStatus = Field(..., description="Completed wins over in progress")
    attempts_used: int = Field(..., ge=0, description="Attempts of any state")
    has_completed: bool = Field(..., description="At least one completed attempt")
    is_in_progress: bool = Field(..., description="At least one in-progress attempt")
    best_result: Optional[AttemptSummary] = Field(
        None, description="Completed attempt with the highest percentage"
    )
    latest_result: Optional[AttemptSummary] = Field(
        None, description="Most recently completed attempt"
    )
    first_attempt_at: Optional[datetime] = Field(None, description="Earliest attempt start")
    last_attempt_at: Optional[datetime] = Field(None, description="Latest attempt start")
    last_completed_at: Optional[datetime] = Field(None, description="Latest completion time")
    total_time_spent_seconds: Optional[float] = Field(
        None,
        description="Sum of positive completed durations (None if there are none)",
    )


class StudentRef(BaseModel):
    """A roster student referenced by id and name."""

    student_id: int = Field(..., description="Student ID")
    display_name: str = Field(..., description="Student display name")
    class_name: Optional[str] = Field(None, description="Name of the student's class")


class DataInconsistency(BaseModel):
    """Attempts on file from a student who is not on the test's roster."""

    student_id: int = Field(..., description="Student ID found on the attempts")
    attempt_ids: List[int] = Field(..., description="Affected attempt IDs, ascending")
    reason: InconsistencyReason = Field(..., description="Why the attempts are inconsistent")


# =============================================================================
# Report
# =============================================================================


class TestReport(BaseModel):
    """
    Full analytics report of one test.

    Deterministic: building the report twice over unchanged data yields an
    identical object, list ordering included.
    """

    __test__ = False

    test: TestSummary
    statistics: TestStatistics
    questions: List[QuestionAnalytics] = Field(
        default_factory=list, description="Question analytics in test order"
    )
    students: List[StudentRollup] = Field(
        default_factory=list, description="One row per roster student"
    )
    students_not_taken: List[StudentRef] = Field(
        default_factory=list, description="Roster students without any attempt"
    )
    inconsistencies: List[DataInconsistency] = Field(
        default_factory=list, description="Off-roster students with attempts"
    )


class ReportSummaryRow(BaseModel):
    """One row of the teacher's cross-test report index."""

    test_id: int = Field(..., description="Test ID within its family")
    title: str = Field(..., description="Test title")
    family: TestFamily = Field(..., description="Test family")
    assignment_id: int = Field(..., description="Assignment ID")
    assignment_title: str = Field(..., description="Assignment title")
    subject_id: Optional[int] = Field(None, description="Subject ID")
    subject_name: str = Field(..., description="Subject name")
    total_students: int = Field(..., ge=0)
    completed_count: int = Field(..., ge=0)
    in_progress_count: int = Field(..., ge=0)
    not_started_count: int = Field(..., ge=0)
    average_percentage: float = Field(..., description="0.0 if no completed attempts")
    average_grade: Optional[int] = Field(None, description="None if no graded attempts")
    last_completion_at: Optional[datetime] = Field(None)


# =============================================================================
# Student drill-down
# =============================================================================


class AnswerDetail(BaseModel):
    """A single answer of an attempt, joined to its question."""

    answer_id: int
    question_id: int
    order_index: int
    points: int
    submitted_value: str
    is_correct: bool


class AttemptDetail(AttemptSummary):
    """An attempt of the drill-down view with its answers."""

    status: AttemptStatus = Field(..., description="State of this attempt")
    duration_seconds: Optional[float] = Field(
        None, description="Completion time minus start time (None while in progress)"
    )
    answers: List[AnswerDetail] = Field(
        default_factory=list, description="Answers ordered by question position"
    )


class StudentDetail(BaseModel):
    """Every attempt of one student at one test."""

    test: TestSummary
    student_id: int
    display_name: str
    class_name: Optional[str] = None
    attempts_used: int = Field(..., ge=0)
    attempts: List[AttemptDetail] = Field(
        default_factory=list, description="Attempts, most recently started first"
    )

"""
Pydantic schemas for the analytics output.
"""
from .reports import (
    AnswerDetail,
    AttemptDetail,
    AttemptSummary,
    CommonMistake,
    DataInconsistency,
    QuestionAnalytics,
    ReportSummaryRow,
    StudentDetail,
    StudentRef,
    StudentRollup,
    TestReport,
    TestStatistics,
    TestSummary,
)

__all__ = [
    "AnswerDetail",
    "AttemptDetail",
    "AttemptSummary",
    "CommonMistake",
    "DataInconsistency",
    "QuestionAnalytics",
    "ReportSummaryRow",
    "StudentDetail",
    "StudentRef",
    "StudentRollup",
    "TestReport",
    "TestStatistics",
    "TestSummary",
]

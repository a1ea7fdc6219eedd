"""
Cross-test report index.

Helpers for the teacher's index of all tests across families: the subject
filter, the row builder and the final ordering. Fetching happens in
``ReportService.build_index``; the subject filter is applied there before any
attempt is read.
"""

from typing import Iterable, List, Optional

from tutor_analytics.core.config import settings
from tutor_analytics.models import Assignment, Subject, Test
from tutor_analytics.schemas import ReportSummaryRow, TestStatistics


def matches_subject(assignment: Assignment, subject_filter: Optional[int]) -> bool:
    """True if the assignment passes the subject filter (``None`` passes everything)."""
    return subject_filter is None or assignment.subject_id == subject_filter


def build_summary_row(
    test: Test,
    assignment: Assignment,
    subject: Optional[Subject],
    statistics: TestStatistics,
) -> ReportSummaryRow:
    """
    Build the index row of one test.

    Args:
        test: The test
        assignment: The test's assignment
        subject: The assignment's subject; None if it does not resolve
        statistics: Statistics of the test

    Returns:
        ReportSummaryRow for the test
    """
    return ReportSummaryRow(
        test_id=test.id,
        title=test.title,
        family=test.family,
        assignment_id=assignment.id,
        assignment_title=assignment.title,
        subject_id=subject.id if subject else assignment.subject_id,
        subject_name=subject.name if subject else settings.UNKNOWN_SUBJECT_NAME,
        total_students=statistics.total_students,
        completed_count=statistics.completed_count,
        in_progress_count=statistics.in_progress_count,
        not_started_count=statistics.not_started_count,
        average_percentage=statistics.average_percentage,
        average_grade=statistics.average_grade,
        last_completion_at=statistics.last_completion_at,
    )


def sort_index_rows(rows: Iterable[ReportSummaryRow]) -> List[ReportSummaryRow]:
    """Order rows by subject name, assignment title and test title, then family and id."""
    return sorted(
        rows,
        key=lambda r: (
            r.subject_name,
            r.assignment_title,
            r.title,
            r.family.value,
            r.test_id,
        ),
    )

"""
Report service.

Entry points of the analytics engine. The service fetches everything a report
needs through the collaborator protocols, fans out independent lookups
concurrently, and hands the fetched rows to the pure computation functions in
``tutor_analytics.core``.

Guarantees:
- NotFound and AccessDenied are raised before any attempt, question or answer
  is read
- collaborator exceptions propagate unchanged (no retries here)
- output is deterministic: every list is sorted explicitly after the
  concurrent fetches, so completion order never leaks into the result
"""

import logging
import time
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from libs.domain_types import TestFamily

from tutor_analytics.core.aggregation import compute_test_statistics
from tutor_analytics.core.attempts import classify_attempts
from tutor_analytics.core.concurrency import gather_bounded
from tutor_analytics.core.config import settings
from tutor_analytics.core.datetime_utils import elapsed_seconds, ensure_timezone_aware
from tutor_analytics.core.exceptions import (
    AccessDeniedError,
    StudentNotFoundError,
    TestNotFoundError,
    UnknownTestFamilyError,
)
from tutor_analytics.core.logging_config import report_job
from tutor_analytics.core.mistake_patterns import detect_mistake_patterns
from tutor_analytics.core.question_difficulty import analyze_questions
from tutor_analytics.core.report_index import (
    build_summary_row,
    matches_subject,
    sort_index_rows,
)
from tutor_analytics.core.roster import filter_roster_by_class, resolve_roster
from tutor_analytics.core.student_rollup import (
    attempt_status,
    build_student_rollups,
    find_off_roster_attempts,
    students_not_taken,
    summarize_attempt,
)
from tutor_analytics.families import get_adapter
from tutor_analytics.models import (
    Answer,
    Assignment,
    Attempt,
    FamilyQuestion,
    Student,
    Subject,
    Test,
)
from tutor_analytics.repositories import FamilyRepository, SchoolRepository
from tutor_analytics.schemas import (
    AnswerDetail,
    AttemptDetail,
    ReportSummaryRow,
    StudentDetail,
    TestReport,
    TestSummary,
)

logger = logging.getLogger(__name__)


def summarize_test(test: Test) -> TestSummary:
    """Copy the reportable fields of a test."""
    return TestSummary(
        id=test.id,
        family=test.family,
        title=test.title,
        assignment_id=test.assignment_id,
        teacher_id=test.teacher_id,
        max_attempts=test.max_attempts,
        is_active=test.is_active,
        show_hints=test.show_hints,
        show_correct_answers=test.show_correct_answers,
    )


def _elapsed_ms(started: float) -> float:
    return round((time.time() - started) * 1000, 2)


class ReportService:
    """
    Builds test reports, the teacher's report index and student drill-downs.

    Args:
        school: School-wide repository (assignments, classes, students, names)
        family_repositories: One repository per supported test family
    """

    def __init__(
        self,
        school: SchoolRepository,
        family_repositories: Mapping[TestFamily, FamilyRepository],
    ):
        self.school = school
        self.family_repositories = dict(family_repositories)

    def _repository(self, family: TestFamily) -> FamilyRepository:
        try:
            return self.family_repositories[family]
        except KeyError as e:
            raise UnknownTestFamilyError(family) from e

    async def _get_owned_test(
        self, family: TestFamily, test_id: int, teacher_id: str
    ) -> Test:
        """
        Load a test and check it belongs to the teacher.

        Raises:
            UnknownTestFamilyError: If the family has no repository
            TestNotFoundError: If the test does not exist
            AccessDeniedError: If another teacher owns the test
        """
        repository = self._repository(family)
        test = await repository.get_test(test_id)
        if test is None:
            raise TestNotFoundError(family.value, test_id)
        if test.teacher_id != teacher_id:
            logger.warning(
                f"Teacher {teacher_id} requested {family.value} test {test_id} "
                f"owned by another teacher",
                extra={"test_id": test_id, "test_family": family.value, "teacher_id": teacher_id},
            )
            raise AccessDeniedError(family.value, test_id, teacher_id)
        return test

    # =========================================================================
    # Lookups shared by the entry points
    # =========================================================================

    async def _resolve_names(self, students: Iterable[Student]) -> Dict[int, str]:
        """student_id -> display name, for the students whose name resolves."""
        students = list(students)
        names = await gather_bounded(
            lambda s: self.school.get_display_name(s.user_id), students
        )
        return {
            student.id: name for student, name in zip(students, names) if name
        }

    async def _resolve_class_names(self, students: Iterable[Student]) -> Dict[int, str]:
        """class_id -> class name, for the classes of the given students."""
        class_ids = sorted({s.class_id for s in students if s.class_id is not None})
        classes = await gather_bounded(self.school.get_class, class_ids)
        return {c.id: c.name for c in classes if c is not None}

    async def _resolve_off_roster_students(
        self, roster: Sequence[Student], attempts: Iterable[Attempt]
    ) -> List[Student]:
        """Students with attempts who are not on the roster, as far as they resolve."""
        roster_ids = {s.id for s in roster}
        student_ids = sorted({a.student_id for a in attempts} - roster_ids)
        students = await gather_bounded(self.school.get_student, student_ids)
        return [s for s in students if s is not None]

    async def _load_answers(
        self,
        repository: FamilyRepository,
        test: Test,
        raw_questions: Sequence[FamilyQuestion],
    ) -> Dict[int, List[Answer]]:
        """question_id -> normalized answers, one concurrent lookup per question."""
        adapter = get_adapter(test.family)
        raw_answers = await gather_bounded(
            lambda q: repository.get_answers_for_question(q.id), raw_questions
        )
        return {
            question.id: [adapter.to_answer(raw, question) for raw in answers]
            for question, answers in zip(raw_questions, raw_answers)
        }

    # =========================================================================
    # Test report
    # =========================================================================

    async def get_test_report(
        self,
        family: TestFamily,
        test_id: int,
        teacher_id: str,
        job_id: Optional[str] = None,
    ) -> TestReport:
        """
        Build the report of a test after checking the teacher owns it.

        Args:
            family: Test family
            test_id: Test ID within the family
            teacher_id: Requesting teacher
            job_id: Optional caller-supplied id attached to every log line

        Returns:
            TestReport of the test

        Raises:
            TestNotFoundError: If the test does not exist
            AccessDeniedError: If another teacher owns the test
        """
        with report_job(job_id):
            test = await self._get_owned_test(family, test_id, teacher_id)
            return await self.build_report(test)

    async def build_report(self, test: Test, job_id: Optional[str] = None) -> TestReport:
        """
        Build the full analytics report of a test.

        The caller is responsible for authorization; use ``get_test_report``
        to load the test by id with the ownership check.

        Args:
            test: Test to report on
            job_id: Optional caller-supplied id attached to every log line

        Returns:
            TestReport with statistics, question analytics and student rollups
        """
        with report_job(job_id):
            started = time.time()
            repository = self._repository(test.family)
            adapter = get_adapter(test.family)

            roster = await resolve_roster(self.school, test.assignment_id)
            attempts = await repository.get_attempts_for_test(test.id)
            raw_questions = await repository.get_questions_for_test(test.id)

            questions = [adapter.to_question(q) for q in raw_questions]
            questions.sort(key=lambda q: (q.order_index, q.id))
            answers_by_question = await self._load_answers(repository, test, raw_questions)

            classification = classify_attempts(attempts)
            statistics = compute_test_statistics(roster, attempts, classification)

            off_roster = await self._resolve_off_roster_students(roster, attempts)
            name_by_student = await self._resolve_names([*roster, *off_roster])
            class_name_by_id = await self._resolve_class_names(roster)

            student_by_attempt = {a.id: a.student_id for a in attempts}
            mistakes_by_question = {
                question.id: detect_mistake_patterns(
                    answers_by_question.get(question.id, []),
                    student_by_attempt,
                    name_by_student,
                )
                for question in questions
            }
            question_rows = analyze_questions(
                questions, answers_by_question, mistakes_by_question
            )

            rollups = build_student_rollups(
                roster, attempts, name_by_student, class_name_by_id
            )

            report = TestReport(
                test=summarize_test(test),
                statistics=statistics,
                questions=question_rows,
                students=rollups,
                students_not_taken=students_not_taken(rollups),
                inconsistencies=find_off_roster_attempts(roster, attempts),
            )

            logger.info(
                f"Built report for {test.family.value} test {test.id}: "
                f"{len(roster)} students, {len(attempts)} attempts, "
                f"{len(questions)} questions",
                extra={
                    "test_id": test.id,
                    "test_family": test.family.value,
                    "duration_ms": _elapsed_ms(started),
                },
            )
            return report

    # =========================================================================
    # Report index
    # =========================================================================

    async def build_index(
        self,
        teacher_id: str,
        subject_filter: Optional[int] = None,
        class_filter: Optional[int] = None,
        job_id: Optional[str] = None,
    ) -> List[ReportSummaryRow]:
        """
        Build one summary row per test of the teacher, across all families.

        The subject filter is applied from the assignment before any attempt
        is read. The class filter narrows the roster only, so attempt-based
        counts still include every attempt on file.

        Args:
            teacher_id: Teacher whose tests are listed
            subject_filter: Optional subject ID
            class_filter: Optional class ID
            job_id: Optional caller-supplied id attached to every log line

        Returns:
            Rows sorted by subject name, assignment title and test title
        """
        with report_job(job_id):
            started = time.time()

            families = sorted(self.family_repositories, key=lambda f: f.value)
            tests_per_family = await gather_bounded(
                lambda f: self.family_repositories[f].get_tests_for_teacher(teacher_id),
                families,
            )
            tests = [test for tests in tests_per_family for test in tests]

            assignment_ids = sorted({t.assignment_id for t in tests})
            assignments = await gather_bounded(self.school.get_assignment, assignment_ids)
            assignment_by_id: Dict[int, Assignment] = {
                a.id: a for a in assignments if a is not None
            }

            selected: List[Tuple[Test, Assignment]] = []
            for test in tests:
                assignment = assignment_by_id.get(test.assignment_id)
                if assignment is None:
                    logger.warning(
                        f"Skipping {test.family.value} test {test.id}: "
                        f"assignment {test.assignment_id} not found",
                        extra={"test_id": test.id, "test_family": test.family.value},
                    )
                    continue
                if matches_subject(assignment, subject_filter):
                    selected.append((test, assignment))

            subject_ids = sorted({a.subject_id for _, a in selected})
            subjects = await gather_bounded(self.school.get_subject, subject_ids)
            subject_by_id: Dict[int, Subject] = {
                s.id: s for s in subjects if s is not None
            }

            roster_assignment_ids = sorted({a.id for _, a in selected})
            rosters = await gather_bounded(
                lambda assignment_id: resolve_roster(self.school, assignment_id),
                roster_assignment_ids,
            )
            roster_by_assignment = {
                assignment_id: filter_roster_by_class(roster, class_filter)
                for assignment_id, roster in zip(roster_assignment_ids, rosters)
            }

            attempts_per_test = await gather_bounded(
                lambda pair: self._repository(pair[0].family).get_attempts_for_test(pair[0].id),
                selected,
            )

            rows = [
                build_summary_row(
                    test,
                    assignment,
                    subject_by_id.get(assignment.subject_id),
                    compute_test_statistics(roster_by_assignment[assignment.id], attempts),
                )
                for (test, assignment), attempts in zip(selected, attempts_per_test)
            ]
            rows = sort_index_rows(rows)

            logger.info(
                f"Built report index for teacher {teacher_id}: "
                f"{len(rows)} of {len(tests)} tests",
                extra={
                    "teacher_id": teacher_id,
                    "row_count": len(rows),
                    "duration_ms": _elapsed_ms(started),
                },
            )
            return rows

    # =========================================================================
    # Student drill-down
    # =========================================================================

    async def build_student_detail(
        self,
        family: TestFamily,
        test_id: int,
        student_id: int,
        teacher_id: str,
        job_id: Optional[str] = None,
    ) -> StudentDetail:
        """
        List every attempt of one student at one test with its answers.

        Args:
            family: Test family
            test_id: Test ID within the family
            student_id: Student to inspect
            teacher_id: Requesting teacher
            job_id: Optional caller-supplied id attached to every log line

        Returns:
            StudentDetail with attempts newest first

        Raises:
            TestNotFoundError: If the test does not exist
            AccessDeniedError: If another teacher owns the test
            StudentNotFoundError: If the student does not exist
        """
        with report_job(job_id):
            test = await self._get_owned_test(family, test_id, teacher_id)
            student = await self.school.get_student(student_id)
            if student is None:
                raise StudentNotFoundError(student_id)

            repository = self._repository(family)
            adapter = get_adapter(family)

            attempts = await repository.get_attempts_for_student_and_test(student_id, test_id)
            attempts = sorted(
                attempts,
                key=lambda a: (ensure_timezone_aware(a.started_at), a.id),
                reverse=True,
            )

            raw_questions = await repository.get_questions_for_test(test_id)
            question_by_id = {q.id: q for q in raw_questions}
            raw_answers = await gather_bounded(
                lambda a: repository.get_answers_for_attempt(a.id), attempts
            )

            details: List[AttemptDetail] = []
            for attempt, answers in zip(attempts, raw_answers):
                answer_rows: List[AnswerDetail] = []
                for raw in answers:
                    raw_question = question_by_id.get(raw.question_id)
                    if raw_question is None:
                        logger.warning(
                            f"Answer {raw.id} of attempt {attempt.id} references "
                            f"question {raw.question_id} outside test {test_id}; dropped",
                            extra={"test_id": test_id, "student_id": student_id},
                        )
                        continue
                    answer = adapter.to_answer(raw, raw_question)
                    answer_rows.append(
                        AnswerDetail(
                            answer_id=answer.id,
                            question_id=answer.question_id,
                            order_index=raw_question.order_index,
                            points=raw_question.points,
                            submitted_value=answer.submitted_value,
                            is_correct=answer.is_correct,
                        )
                    )
                answer_rows.sort(key=lambda r: (r.order_index, r.question_id, r.answer_id))
                details.append(self._attempt_detail(attempt, answer_rows))

            names = await self._resolve_names([student])
            class_names = await self._resolve_class_names([student])

            return StudentDetail(
                test=summarize_test(test),
                student_id=student.id,
                display_name=names.get(student.id, settings.UNKNOWN_STUDENT_NAME),
                class_name=(
                    class_names.get(student.class_id)
                    if student.class_id is not None
                    else None
                ),
                attempts_used=len(attempts),
                attempts=details,
            )

    @staticmethod
    def _attempt_detail(attempt: Attempt, answers: List[AnswerDetail]) -> AttemptDetail:
        summary = summarize_attempt(attempt)
        return AttemptDetail(
            **summary.model_dump(),
            status=attempt_status([attempt]),
            duration_seconds=(
                elapsed_seconds(attempt.started_at, attempt.completed_at)
                if attempt.is_finished
                else None
            ),
            answers=answers,
        )

"""
Tests for attempt classification and best/latest attempt selection.
"""

from datetime import datetime, timedelta

from tutor_analytics.core.attempts import (
    classify_attempts,
    group_attempts_by_student,
    select_best_attempt,
    select_latest_attempt,
)
from tutor_analytics.models import Attempt


class TestClassifyAttempts:
    """Tests for the completed / in-progress split."""

    def test_empty_attempts(self):
        """No attempts yields empty sets and a not-started count equal to the roster."""
        classification = classify_attempts([])

        assert classification.completed_attempts == []
        assert classification.in_progress_attempts == []
        assert classification.completed_count == 0
        assert classification.in_progress_count == 0
        assert classification.not_started_count(3) == 3

    def test_splits_completed_and_in_progress(self, make_attempt):
        attempts = [
            make_attempt(1, 10, score=8, completed_after=5),
            make_attempt(2, 11),
        ]

        classification = classify_attempts(attempts)

        assert [a.id for a in classification.completed_attempts] == [1]
        assert [a.id for a in classification.in_progress_attempts] == [2]
        assert classification.completed_student_ids == [10]
        assert classification.in_progress_student_ids == [11]

    def test_student_ids_are_distinct(self, make_attempt):
        """Two completed attempts of one student count the student once."""
        attempts = [
            make_attempt(1, 10, completed_after=5),
            make_attempt(2, 10, started_offset=20, completed_after=5),
        ]

        classification = classify_attempts(attempts)

        assert classification.completed_student_ids == [10]
        assert classification.completed_count == 1

    def test_completed_flag_without_time_is_in_neither_set(self, make_attempt):
        attempt = make_attempt(1, 10, completed=True)

        classification = classify_attempts([attempt])

        assert classification.completed_attempts == []
        assert classification.in_progress_attempts == []

    def test_student_with_both_states_counts_in_both_sets(self, make_attempt):
        """A re-attempt after completion keeps the student in both lists."""
        attempts = [
            make_attempt(1, 10, completed_after=5),
            make_attempt(2, 10, started_offset=30),
        ]

        classification = classify_attempts(attempts)

        assert classification.completed_student_ids == [10]
        assert classification.in_progress_student_ids == [10]

    def test_not_started_is_clamped_at_zero(self, make_attempt):
        """Overlap and off-roster attempts never push not-started below zero."""
        attempts = [
            make_attempt(1, 10, completed_after=5),
            make_attempt(2, 10, started_offset=30),
            make_attempt(3, 99, completed_after=5),
        ]

        classification = classify_attempts(attempts)

        assert classification.completed_count + classification.in_progress_count == 3
        assert classification.not_started_count(1) == 0

    def test_funnel_sums_to_roster_without_overlap(self, make_attempt):
        attempts = [
            make_attempt(1, 1, completed_after=5),
            make_attempt(2, 2),
        ]

        classification = classify_attempts(attempts)

        total = (
            classification.completed_count
            + classification.in_progress_count
            + classification.not_started_count(3)
        )
        assert total == 3


class TestGroupAttemptsByStudent:
    """Tests for grouping attempts per student."""

    def test_groups_preserve_input_order(self, make_attempt):
        attempts = [
            make_attempt(3, 2),
            make_attempt(1, 1),
            make_attempt(2, 2),
        ]

        grouped = group_attempts_by_student(attempts)

        assert [a.id for a in grouped[2]] == [3, 2]
        assert [a.id for a in grouped[1]] == [1]


class TestSelectBestAttempt:
    """Tests for the best completed attempt."""

    def test_highest_percentage_wins_regardless_of_order(self, make_attempt):
        """A 90% attempt beats a 60% attempt whichever finished first."""
        first = make_attempt(1, 10, score=9, completed_after=5)
        second = make_attempt(2, 10, score=6, started_offset=60, completed_after=5)

        assert select_best_attempt([first, second]).id == 1
        assert select_best_attempt([second, first]).id == 1

    def test_percentage_tie_broken_by_score(self, make_attempt):
        small = make_attempt(1, 10, score=5, max_score=10, completed_after=5)
        large = make_attempt(2, 10, score=10, max_score=20, completed_after=5)

        assert select_best_attempt([small, large]).id == 2

    def test_full_tie_broken_by_lowest_id(self, make_attempt):
        a = make_attempt(7, 10, score=5, completed_after=5)
        b = make_attempt(3, 10, score=5, started_offset=30, completed_after=5)

        assert select_best_attempt([a, b]).id == 3
        assert select_best_attempt([b, a]).id == 3

    def test_ignores_unfinished_attempts(self, make_attempt):
        in_progress = make_attempt(1, 10, score=10, percentage=100.0)
        finished = make_attempt(2, 10, score=2, completed_after=5)

        assert select_best_attempt([in_progress, finished]).id == 2

    def test_none_without_completed_attempts(self, make_attempt):
        assert select_best_attempt([]) is None
        assert select_best_attempt([make_attempt(1, 10)]) is None


class TestSelectLatestAttempt:
    """Tests for the most recently completed attempt."""

    def test_latest_completion_wins(self, make_attempt):
        early = make_attempt(1, 10, score=9, completed_after=5)
        late = make_attempt(2, 10, score=3, started_offset=60, completed_after=5)

        assert select_latest_attempt([late, early]).id == 2

    def test_equal_completion_time_broken_by_highest_id(self, make_attempt):
        a = make_attempt(4, 10, completed_after=10)
        b = make_attempt(9, 10, started_offset=5, completed_after=5)

        assert select_latest_attempt([a, b]).id == 9

    def test_mixes_naive_and_aware_timestamps(self, make_attempt, base_time):
        """Naive timestamps are read as UTC instead of failing the comparison."""
        aware = make_attempt(1, 10, completed_after=5)
        naive_time = (base_time + timedelta(hours=1)).replace(tzinfo=None)
        naive = Attempt(
            id=2,
            test_id=1,
            student_id=10,
            started_at=datetime(2024, 5, 1, 9, 30),
            completed_at=naive_time,
            completed=True,
        )

        assert select_latest_attempt([aware, naive]).id == 2

    def test_none_without_completed_attempts(self, make_attempt):
        assert select_latest_attempt([make_attempt(1, 10)]) is None

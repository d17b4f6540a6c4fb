import pytest
from datetime import datetime, timedelta, timezone

from quiz_portal.models.quiz import Question
from quiz_portal.services.scoring import (
    calculate_score,
    summarize_scores,
    time_remaining_seconds,
    total_marks
)


@pytest.fixture
def questions():
    return [
        Question(id="q1", text="Q1", options=["a", "b", "c", "d"], correctAnswer=1, marks=5),
        Question(id="q2", text="Q2", options=["a", "b", "c", "d"], correctAnswer=0, marks=3),
    ]


class TestCalculateScore:
    """Score is the sum of marks for correctly answered questions"""

    def test_one_correct_one_incorrect(self, questions):
        assert calculate_score(questions, {"q1": 1, "q2": 2}) == 5

    def test_no_responses_scores_zero(self, questions):
        assert calculate_score(questions, {}) == 0

    def test_all_correct_scores_total_marks(self, questions):
        assert calculate_score(questions, {"q1": 1, "q2": 0}) == total_marks(questions) == 8

    def test_unanswered_question_contributes_nothing(self, questions):
        assert calculate_score(questions, {"q2": 0}) == 3

    def test_answers_to_unknown_questions_are_ignored(self, questions):
        assert calculate_score(questions, {"other": 1, "q1": 1}) == 5

    def test_out_of_range_option_is_just_incorrect(self, questions):
        assert calculate_score(questions, {"q1": 7, "q2": -1}) == 0

    def test_empty_quiz_scores_zero(self):
        assert calculate_score([], {"q1": 1}) == 0


class TestSummarizeScores:

    def test_average_of_two_attempts(self):
        assert summarize_scores([4, 6]) == (2, 5.0)

    def test_no_attempts(self):
        attempts, average = summarize_scores([])
        assert attempts == 0
        assert average == 0

    def test_average_rounded_to_two_decimals(self):
        assert summarize_scores([1, 1, 2]) == (3, 1.33)

    def test_missing_score_counts_as_zero(self):
        assert summarize_scores([None, 4]) == (2, 2.0)


class TestTimeRemaining:

    def test_untimed_quiz_has_no_remaining_time(self):
        assert time_remaining_seconds(datetime.now(timezone.utc), None) is None

    def test_remaining_time_counts_down(self):
        start = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
        now = start + timedelta(minutes=4)
        assert time_remaining_seconds(start, 10, now=now) == 6 * 60

    def test_expired_time_is_clamped_to_zero(self):
        start = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
        now = start + timedelta(minutes=45)
        assert time_remaining_seconds(start, 30, now=now) == 0

    def test_naive_start_time_is_treated_as_utc(self):
        start = datetime(2025, 1, 1, 10, 0)
        now = datetime(2025, 1, 1, 10, 1, 30, tzinfo=timezone.utc)
        assert time_remaining_seconds(start, 2, now=now) == 30

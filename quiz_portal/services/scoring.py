"""
Scoring
Pure functions for grading a session and aggregating quiz statistics
FILE: quiz_portal/services/scoring.py
"""
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from quiz_portal.models.quiz import Question


def calculate_score(
    questions: Sequence[Question],
    responses: Mapping[str, int]
) -> int:
    """
    Replay stored answers against the quiz definition

    Args:
        questions: Quiz questions in their defined order
        responses: Mapping of questionId -> selectedOption

    Returns:
        Sum of marks for questions whose selected option equals the
        correct answer. Unanswered and incorrect questions contribute 0.
    """
    score = 0
    for question in questions:
        selected = responses.get(question.id)
        if selected is not None and selected == question.correctAnswer:
            score += question.marks
    return score


def total_marks(questions: Iterable[Question]) -> int:
    """Highest achievable score for the given questions"""
    return sum(q.marks for q in questions)


def summarize_scores(scores: Iterable[Optional[int]]) -> Tuple[int, float]:
    """
    Fold completed-session scores into (attempts, averageScore)

    averageScore is rounded to 2 decimal places and is 0 with no attempts.
    """
    attempts = 0
    total = 0
    for score in scores:
        attempts += 1
        total += score or 0

    if attempts == 0:
        return 0, 0
    return attempts, round(total / attempts, 2)


def time_remaining_seconds(
    start_time: datetime,
    time_limit: Optional[int],
    now: Optional[datetime] = None
) -> Optional[int]:
    """Seconds left before the time limit elapses (None when the quiz is untimed)"""
    if not time_limit:
        return None

    now = now or datetime.now(timezone.utc)
    # MongoDB hands back naive datetimes that are in UTC
    if start_time.tzinfo is None:
        start_time = start_time.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    elapsed = int((now - start_time).total_seconds())
    return max(0, time_limit * 60 - elapsed)

"""Ordering of quiz results.

Higher score wins; among equal scores the earlier completion wins; results
completed within the same timestamp tick are ordered by insertion (id).
Everything that reports a rank or a leaderboard position goes through the
helpers below so the two can never disagree.
"""

from sqlalchemy import and_, or_

from quizboard.models import QuizResult


def beats(score: int, completion_time, result_id: int):
    """SQL clause matching every stored result ranked ahead of the given one."""
    return or_(
        QuizResult.score > score,
        and_(QuizResult.score == score, QuizResult.completion_time < completion_time),
        and_(
            QuizResult.score == score,
            QuizResult.completion_time == completion_time,
            QuizResult.id < result_id,
        ),
    )


def leaderboard_order():
    return (
        QuizResult.score.desc(),
        QuizResult.completion_time.asc(),
        QuizResult.id.asc(),
    )


def sort_key(result: QuizResult):
    return (-result.score, result.completion_time, result.id)

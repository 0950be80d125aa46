import json
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from quizboard import db
from quizboard.errors import RankComputationError, StorageError
from quizboard.models import QuizResult
from .ranking import beats, leaderboard_order


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ResultStore:
    """Append-only table of quiz results plus the rank and stats queries.

    Every read and write runs under one re-entrant lock; callers that need an
    insert and the rank read after it to see no other write in between hold
    ``serialized()`` around both.
    """

    def __init__(self, clock=_utcnow):
        self._clock = clock
        self._lock = threading.RLock()
        self._last_completion_time: Optional[datetime] = None
        self.closed = False

    @contextmanager
    def serialized(self):
        with self._lock:
            yield self

    @contextmanager
    def _locked(self):
        """Hold the store lock for one unit of work.

        The session's transaction always ends before the lock is released,
        so the connection is back in the pool before another caller uses it.
        """
        with self._lock:
            try:
                yield db.session
            finally:
                db.session.rollback()

    def _next_completion_time(self) -> datetime:
        if self._last_completion_time is None:
            self._last_completion_time = db.session.query(func.max(QuizResult.completion_time)).scalar()
        now = self._clock()
        # Never hand out a timestamp earlier than one already stored
        if self._last_completion_time is not None and now < self._last_completion_time:
            now = self._last_completion_time
        self._last_completion_time = now
        return now

    def insert(self, fields: Dict[str, Any]) -> int:
        with self._locked() as session:
            try:
                result = QuizResult(
                    player_name=fields['player_name'],
                    score=fields['score'],
                    correct_answers=fields['correct_answers'],
                    total_questions=fields['total_questions'],
                    time_taken=fields['time_taken'],
                    answers=json.dumps(fields.get('answers')),
                    source_address=fields.get('source_address'),
                    completion_time=self._next_completion_time(),
                )
                session.add(result)
                session.commit()
                result_id = result.id
            except SQLAlchemyError as exc:
                session.rollback()
                raise StorageError() from exc
        current_app.logger.info(
            f"[store-insert] id={result_id} player={fields['player_name']!r} score={fields['score']}"
        )
        return result_id

    def rank_of(self, score: int, result_id: int) -> int:
        with self._locked() as session:
            try:
                completion_time = (
                    session.query(QuizResult.completion_time)
                    .filter(QuizResult.id == result_id)
                    .scalar()
                )
                if completion_time is None:
                    raise RankComputationError()
                ahead = (
                    session.query(func.count(QuizResult.id))
                    .filter(beats(score, completion_time, result_id))
                    .scalar()
                )
            except SQLAlchemyError as exc:
                raise RankComputationError() from exc
        return int(ahead or 0) + 1

    def top_n(self, n: int) -> List[Tuple[int, QuizResult]]:
        if n is None or n <= 0:
            return []
        with self._locked() as session:
            try:
                rows = session.query(QuizResult).order_by(*leaderboard_order()).limit(n).all()
            except SQLAlchemyError as exc:
                raise StorageError('Failed to load leaderboard') from exc
            # Detached rows keep their loaded values after the transaction ends
            for row in rows:
                session.expunge(row)
        return [(position, row) for position, row in enumerate(rows, start=1)]

    def aggregate_stats(self) -> Dict[str, Any]:
        with self._locked() as session:
            try:
                count, average, highest, lowest = session.query(
                    func.count(QuizResult.id),
                    func.avg(QuizResult.score),
                    func.max(QuizResult.score),
                    func.min(QuizResult.score),
                ).one()
            except SQLAlchemyError as exc:
                raise StorageError('Failed to load statistics') from exc
        return {
            'count': int(count or 0),
            'averageScore': float(average) if average is not None else 0,
            'maxScore': highest if highest is not None else 0,
            'minScore': lowest if lowest is not None else 0,
        }

    def count(self) -> int:
        with self._locked() as session:
            try:
                return int(session.query(func.count(QuizResult.id)).scalar() or 0)
            except SQLAlchemyError as exc:
                raise StorageError('Failed to count results') from exc

    def close(self) -> None:
        with self._lock:
            db.session.remove()
            db.engine.dispose()
            self._last_completion_time = None
            self.closed = True

from quizboard import db
import json


def _isoformat(value):
    if value is None:
        return None
    return value.isoformat(timespec='microseconds') + 'Z'


class QuizResult(db.Model):
    __tablename__ = 'quiz_result'
    __table_args__ = (
        db.Index('ix_quiz_result_score_completion', 'score', 'completion_time'),
    )
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    player_name = db.Column(db.String(20), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    correct_answers = db.Column(db.Integer, nullable=False)
    total_questions = db.Column(db.Integer, nullable=False)
    time_taken = db.Column(db.Integer, nullable=False)  # seconds
    answers = db.Column(db.Text, nullable=False)  # JSON-encoded, stored verbatim
    # Naive UTC, assigned by the store at insert
    completion_time = db.Column(db.DateTime, nullable=False, index=True)
    source_address = db.Column(db.String(64), nullable=True)

    @property
    def answers_payload(self):
        try:
            return json.loads(self.answers) if self.answers else None
        except ValueError:
            return self.answers

    def to_dict(self):
        return {
            'id': self.id,
            'playerName': self.player_name,
            'score': self.score,
            'correctAnswers': self.correct_answers,
            'totalQuestions': self.total_questions,
            'timeTaken': self.time_taken,
            'answers': self.answers_payload,
            'completionTime': _isoformat(self.completion_time),
            'sourceAddress': self.source_address,
        }

    def to_leaderboard_dict(self, rank):
        return {
            'playerName': self.player_name,
            'score': self.score,
            'correctAnswers': self.correct_answers,
            'totalQuestions': self.total_questions,
            'timeTaken': self.time_taken,
            'completionTime': _isoformat(self.completion_time),
            'rank': rank,
        }

    def __repr__(self):
        return f"<QuizResult id={self.id} player={self.player_name!r} score={self.score}>"

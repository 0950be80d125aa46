"""Error taxonomy for the quiz backend and the JSON handlers that render it.

Every client-facing failure is a ``{"error": message}`` body; internal
details are logged, never returned.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException


class QuizboardError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(QuizboardError):
    """Malformed or oversized submission; never reaches the store."""
    status_code = 400
    message = 'Invalid data format'


class StorageError(QuizboardError):
    """Insert or query against the result store failed."""
    status_code = 500
    message = 'Failed to save result'


class RankComputationError(StorageError):
    message = 'Rank computation failed'


class BroadcastError(QuizboardError):
    """Fan-out failure. Logged only; the submission already succeeded."""
    message = 'Broadcast failed'


class RateLimitExceeded(QuizboardError):
    status_code = 429
    message = 'Too many requests, please try again later'


def register_error_handlers(flask_app) -> None:
    @flask_app.errorhandler(QuizboardError)
    def handle_quizboard_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc.__cause__ or exc}")
        return jsonify({'error': exc.message}), exc.status_code

    @flask_app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({'error': 'Resource not found'}), 404

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({'error': exc.description or exc.name}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"[error] unhandled {type(exc).__name__}")
        return jsonify({'error': 'Internal server error'}), 500

from typing import Any, Dict, Optional

from flask import current_app

from quizboard.errors import ValidationError

INTEGER_FIELDS = (
    ('score', 'score'),
    ('correctAnswers', 'correct_answers'),
    ('totalQuestions', 'total_questions'),
    ('timeTaken', 'time_taken'),
)


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid score
    return isinstance(value, int) and not isinstance(value, bool)


def validate_submission(payload, max_name_length: int = 20) -> Dict[str, Any]:
    """Check a submit-quiz body and map it onto store fields.

    Raises ValidationError before anything touches the store.
    """
    if not isinstance(payload, dict):
        raise ValidationError()

    player_name = payload.get('playerName')
    if not isinstance(player_name, str) or not player_name:
        raise ValidationError()
    if len(player_name) > max_name_length:
        raise ValidationError(f'Player name cannot exceed {max_name_length} characters')

    fields = {'player_name': player_name, 'answers': payload.get('answers')}
    for key, column in INTEGER_FIELDS:
        value = payload.get(key)
        if not _is_int(value):
            raise ValidationError()
        fields[column] = value
    return fields


class SubmissionPipeline:
    """validate -> persist -> rank -> broadcast -> respond.

    A result that committed before its rank read failed stays stored; there
    is no compensating delete.
    """

    def __init__(self, store, channel, broadcaster, max_name_length: int = 20):
        self.store = store
        self.channel = channel
        self.broadcaster = broadcaster
        self.max_name_length = max_name_length

    def submit(self, payload, source_address: Optional[str] = None) -> Dict[str, Any]:
        fields = validate_submission(payload, self.max_name_length)
        fields['source_address'] = source_address

        with self.store.serialized():
            result_id = self.store.insert(fields)
            rank = self.store.rank_of(fields['score'], result_id)

        current_app.logger.info(
            f"[submit] id={result_id} player={fields['player_name']!r} score={fields['score']} rank={rank}"
        )
        self.channel.dispatch(self._announce, fields['player_name'], fields['score'], rank)
        return {
            'success': True,
            'rank': rank,
            'message': 'Quiz result submitted successfully',
        }

    def _announce(self, player_name: str, score: int, rank: int) -> None:
        self.channel.publish_score_update(player_name, score, rank)
        self.broadcaster.broadcast()

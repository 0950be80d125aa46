from flask import Blueprint, jsonify, request, current_app
from quizboard.services import get_services


results = Blueprint('results', __name__)


def _leaderboard_limit() -> int:
    cfg = current_app.config
    default = int(cfg.get('LEADERBOARD_DEFAULT_LIMIT', 50))
    try:
        limit = int(request.args.get('limit', default))
    except (TypeError, ValueError):
        limit = default
    if limit <= 0:
        limit = default
    return limit


@results.route('/submit-quiz', methods=['POST'])
def submit_quiz():
    data = request.get_json(silent=True)
    response = get_services().pipeline.submit(data, source_address=request.remote_addr)
    return jsonify(response)


@results.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    rows = get_services().store.top_n(_leaderboard_limit())
    return jsonify([row.to_leaderboard_dict(rank) for rank, row in rows])


@results.route('/stats', methods=['GET'])
def get_stats():
    stats = get_services().store.aggregate_stats()
    return jsonify({
        'totalParticipants': stats['count'],
        'averageScore': stats['averageScore'],
        'highestScore': stats['maxScore'],
        'lowestScore': stats['minScore'],
    })

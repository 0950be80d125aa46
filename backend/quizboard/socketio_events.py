from flask import current_app, request
from quizboard import socketio
from quizboard.errors import BroadcastError
from quizboard.services import get_services
from flask_socketio import emit


def handle_connect():
    current_app.logger.info(f"[sio-connect] sid={request.sid}")
    services = get_services()
    # Newcomers see the current leaderboard without waiting for a submission
    services.channel.dispatch(services.broadcaster.broadcast)


def handle_disconnect(*args):
    current_app.logger.info(f"[sio-disconnect] sid={request.sid}")


def handle_join_quiz(data):
    player_name = data.get('playerName') if isinstance(data, dict) else None
    if not player_name:
        emit('error', {'message': 'playerName is required'})
        return
    current_app.logger.info(f"[join-quiz] player={player_name!r} sid={request.sid}")
    try:
        get_services().channel.publish_player_joined(player_name, skip_sid=request.sid)
    except BroadcastError as exc:
        current_app.logger.warning(f"[broadcast-failed] {exc}: {exc.__cause__ or ''}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the configured namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join-quiz', handle_join_quiz, namespace=namespace)

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from flask import current_app

from quizboard.errors import BroadcastError, StorageError

LIVE_SCORE_UPDATE = 'live-score-update'
LEADERBOARD_UPDATE = 'leaderboard-update'
PLAYER_JOINED = 'player-joined'


class LiveUpdateChannel:
    """Fan-out of quiz events to every Socket.IO subscriber on one namespace.

    Delivery is best-effort and at-most-once. Work handed to ``dispatch``
    never propagates errors back to the caller.
    """

    def __init__(self, socketio, namespace: str = '/', background: bool = True):
        self.socketio = socketio
        self.namespace = namespace
        self.background = background

    def _emit(self, event: str, payload: Any, skip_sid: Optional[str] = None) -> None:
        try:
            self.socketio.emit(event, payload, namespace=self.namespace, skip_sid=skip_sid)
        except Exception as exc:
            raise BroadcastError(f'Failed to emit {event}') from exc

    def publish_score_update(self, player_name: str, score: int, rank: int) -> None:
        self._emit(LIVE_SCORE_UPDATE, {
            'playerName': player_name,
            'currentScore': score,
            'rank': rank,
        })

    def publish_leaderboard(self, rows: List[Dict[str, Any]]) -> None:
        self._emit(LEADERBOARD_UPDATE, rows)

    def publish_player_joined(self, player_name: str, skip_sid: Optional[str] = None) -> None:
        self._emit(PLAYER_JOINED, {
            'playerName': player_name,
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }, skip_sid=skip_sid)

    def dispatch(self, fn: Callable[..., None], *args) -> None:
        """Run ``fn`` detached from the current request (fire-and-forget)."""
        app = current_app._get_current_object()

        def _runner():
            with app.app_context():
                try:
                    fn(*args)
                except (BroadcastError, StorageError) as exc:
                    app.logger.warning(f"[broadcast-failed] {exc}: {exc.__cause__ or ''}")

        if self.background:
            self.socketio.start_background_task(_runner)
        else:
            _runner()

    def close(self) -> int:
        """Disconnect every subscriber on the namespace. Returns how many."""
        server = self.socketio.server
        if server is None:
            return 0
        sids = [sid for sid, _ in server.manager.get_participants(self.namespace, None)]
        for sid in sids:
            try:
                server.disconnect(sid, namespace=self.namespace)
            except Exception as exc:
                current_app.logger.warning(f"[channel-close] sid={sid} failed: {exc}")
        return len(sids)

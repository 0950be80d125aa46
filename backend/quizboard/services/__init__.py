"""Quiz result services: storage, ranking, live fan-out and submission.

The store, channel and broadcaster are built once per application in
``init_services`` and looked up through ``get_services``; HTTP routes and
socket handlers never touch module-level state.
"""

import time

from flask import current_app


class Services:
    def __init__(self, store, channel, broadcaster, pipeline, started_at):
        self.store = store
        self.channel = channel
        self.broadcaster = broadcaster
        self.pipeline = pipeline
        self.started_at = started_at


def init_services(flask_app, socketio) -> Services:
    from .results.store import ResultStore
    from .live.channel import LiveUpdateChannel
    from .live.broadcaster import LeaderboardBroadcaster
    from .submission import SubmissionPipeline

    cfg = flask_app.config
    store = ResultStore()
    channel = LiveUpdateChannel(
        socketio,
        namespace=cfg.get('SOCKETIO_NAMESPACE', '/'),
        background=bool(cfg.get('BROADCAST_IN_BACKGROUND', True)),
    )
    broadcaster = LeaderboardBroadcaster(store, channel, size=int(cfg.get('LEADERBOARD_BROADCAST_SIZE', 20)))
    pipeline = SubmissionPipeline(
        store,
        channel,
        broadcaster,
        max_name_length=int(cfg.get('PLAYER_NAME_MAX_LENGTH', 20)),
    )
    services = Services(store, channel, broadcaster, pipeline, started_at=time.monotonic())
    flask_app.extensions['quizboard'] = services
    return services


def get_services(app=None) -> Services:
    app = app or current_app
    return app.extensions['quizboard']

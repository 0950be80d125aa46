import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # In-memory by default; results live for the process lifetime only
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Request bodies (answers payloads can be large)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(10 * 1024 * 1024)))
    PLAYER_NAME_MAX_LENGTH = int(os.environ.get('PLAYER_NAME_MAX_LENGTH', '20'))
    # Size of the snapshot pushed on every leaderboard-update
    LEADERBOARD_BROADCAST_SIZE = int(os.environ.get('LEADERBOARD_BROADCAST_SIZE', '20'))
    LEADERBOARD_DEFAULT_LIMIT = int(os.environ.get('LEADERBOARD_DEFAULT_LIMIT', '50'))
    # Per source address on /api/*. 0 disables.
    RATE_LIMIT_MAX_REQUESTS = int(os.environ.get('RATE_LIMIT_MAX_REQUESTS', '100'))
    RATE_LIMIT_WINDOW_SEC = int(os.environ.get('RATE_LIMIT_WINDOW_SEC', str(15 * 60)))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Fan-out runs as a Socket.IO background task unless disabled (tests)
    BROADCAST_IN_BACKGROUND = os.environ.get('BROADCAST_IN_BACKGROUND', '1') != '0'

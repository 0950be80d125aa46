from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'no-referrer',
    'Content-Security-Policy': (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "font-src 'self' https://fonts.gstatic.com; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "img-src 'self' data: https:; "
        "connect-src 'self' ws: wss:"
    ),
}


def _parse_origins(raw):
    if not raw or raw == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS', '*'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from quizboard.errors import register_error_handlers
    register_error_handlers(flask_app)

    from quizboard.ratelimit import init_rate_limit
    init_rate_limit(flask_app)

    from quizboard.services import init_services
    init_services(flask_app, socketio)

    # Import and register blueprints here
    from quizboard.routes import main
    flask_app.register_blueprint(main)

    from quizboard.api.results import results
    from quizboard.api.system import system
    flask_app.register_blueprint(results, url_prefix='/api')
    flask_app.register_blueprint(system, url_prefix='/api')

    from quizboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @flask_app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    # The default store is in-memory, so the schema is created at startup
    with flask_app.app_context():
        from quizboard import models  # noqa: F401
        db.create_all()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the quiz result table."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    flask_app.logger.info(f"[startup] quizboard ready db={flask_app.config['SQLALCHEMY_DATABASE_URI']}")
    return flask_app


def shutdown(flask_app) -> None:
    """Disconnect subscribers and drain the store before the process exits."""
    from quizboard.services import get_services
    services = get_services(flask_app)
    with flask_app.app_context():
        closed = services.channel.close()
        flask_app.logger.info(f"[shutdown] disconnected {closed} subscriber(s), closing result store")
        services.store.close()

import os
import signal
import sys

from quizboard import create_app, socketio, shutdown

app = create_app()


def _handle_signal(signum, frame):
    app.logger.info(f"[signal] received {signal.Signals(signum).name}, shutting down")
    shutdown(app)
    sys.exit(0)


if __name__ == '__main__':
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)
    port = int(os.environ.get('PORT', '3000'))
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG') == '1',
                 allow_unsafe_werkzeug=True)

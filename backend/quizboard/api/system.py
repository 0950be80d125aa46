"""Liveness endpoint."""

import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify

from quizboard.services import get_services

system = Blueprint('system', __name__)


@system.route('/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        'uptime': round(time.monotonic() - get_services().started_at, 3),
    })

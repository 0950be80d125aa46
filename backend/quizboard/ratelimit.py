import threading
import time
from typing import Dict, Tuple

from flask import request

from quizboard.errors import RateLimitExceeded


class TokenBucketLimiter:
    """Per-key token buckets: ``max_tokens`` requests, refilled evenly over ``window_sec``."""

    def __init__(self, max_tokens: int, window_sec: float, clock=time.monotonic):
        self.max_tokens = max_tokens
        self.refill_per_second = (max_tokens / window_sec) if window_sec > 0 else float(max_tokens)
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: Dict[str, Tuple[float, float]] = {}

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            tokens, last_seen = self._buckets.get(key, (float(self.max_tokens), now))
            tokens = min(float(self.max_tokens), tokens + (now - last_seen) * self.refill_per_second)
            if tokens < 1:
                self._buckets[key] = (tokens, now)
                return False
            self._buckets[key] = (tokens - 1, now)

            # Keep memory bounded for long-running processes
            if len(self._buckets) > 50000:
                stale_before = now - 60
                stale = [k for k, (_, seen) in self._buckets.items() if seen < stale_before]
                for k in stale[:5000]:
                    self._buckets.pop(k, None)
        return True


def init_rate_limit(flask_app, prefix: str = '/api/') -> None:
    max_requests = int(flask_app.config.get('RATE_LIMIT_MAX_REQUESTS', 0))
    if max_requests <= 0:
        return
    limiter = TokenBucketLimiter(max_requests, float(flask_app.config.get('RATE_LIMIT_WINDOW_SEC', 900)))
    flask_app.extensions['quizboard_rate_limiter'] = limiter

    @flask_app.before_request
    def enforce_rate_limit():
        if not request.path.startswith(prefix):
            return None
        client = request.remote_addr or 'unknown'
        if not limiter.allow(client):
            flask_app.logger.info(f"[rate-limit] client={client} path={request.path}")
            raise RateLimitExceeded()
        return None

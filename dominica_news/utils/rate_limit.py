"""
Rate limiting helpers
Sliding-window counters kept in process memory (one set per server process)
"""
import time
from collections import deque
from functools import wraps
from threading import Lock

from flask import current_app, request, abort

from dominica_news.exceptions import NewsException


class InMemoryRateLimiter:
    """Sliding-window limiter; ``clock`` is injectable for tests"""

    def __init__(self, clock=time.monotonic):
        self._events = {}
        self._lock = Lock()
        self._clock = clock

    def _current(self, key, window_seconds, now):
        """Events still inside the window; keys with none left are dropped"""
        events = self._events.get(key)
        if events is None:
            return None
        cutoff = now - window_seconds
        while events and events[0] <= cutoff:
            events.popleft()
        if not events:
            del self._events[key]
            return None
        return events

    def is_allowed(self, key, limit, window_seconds):
        """Record one event for ``key`` if it fits in the window"""
        if limit <= 0 or window_seconds <= 0:
            return False

        now = self._clock()
        with self._lock:
            events = self._current(key, window_seconds, now)
            if events is None:
                events = self._events[key] = deque()
            if len(events) >= limit:
                return False
            events.append(now)
            return True

    def is_exhausted(self, key, limit, window_seconds):
        """Check without recording"""
        now = self._clock()
        with self._lock:
            events = self._current(key, window_seconds, now)
            return events is not None and len(events) >= limit

    def hit(self, key):
        with self._lock:
            self._events.setdefault(key, deque()).append(self._clock())

    def tracked_keys(self):
        with self._lock:
            return len(self._events)

    def reset(self):
        with self._lock:
            self._events.clear()


def get_client_identifier():
    """Client IP, honouring X-Forwarded-For"""
    forwarded_for = request.headers.get('X-Forwarded-For', '')
    if forwarded_for:
        first_ip = forwarded_for.split(',', 1)[0].strip()
        if first_ip:
            return first_ip
    return request.remote_addr or 'unknown'


def _limiter():
    from dominica_news.extensions import rate_limiter
    return rate_limiter


def rate_limit(bucket, config_key=None, max_requests=60, window=60, failures_only=False):
    """
    Rate limit decorator

    Args:
        bucket: counter namespace, combined with the client IP
        config_key: config entry holding a (max_requests, window) pair,
            read at request time; overrides the two arguments below
        max_requests: events allowed per window
        window: window length in seconds
        failures_only: count only responses with status >= 400
            (used for login/register so legitimate users are not locked out)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_app.config.get('RATE_LIMIT_ENABLED', True):
                return func(*args, **kwargs)

            limit, period = max_requests, window
            if config_key:
                limit, period = current_app.config[config_key]

            limiter = _limiter()
            key = f'{bucket}:{get_client_identifier()}'

            if not failures_only:
                if not limiter.is_allowed(key, limit, period):
                    abort(429, description='Too many requests, please try again later')
                return func(*args, **kwargs)

            if limiter.is_exhausted(key, limit, period):
                abort(429, description='Too many authentication attempts, please try again later')
            try:
                rv = func(*args, **kwargs)
            except NewsException as exc:
                if exc.code >= 400:
                    limiter.hit(key)
                raise
            status = rv[1] if isinstance(rv, tuple) and len(rv) > 1 else getattr(rv, 'status_code', 200)
            if status >= 400:
                limiter.hit(key)
            return rv
        return wrapper
    return decorator

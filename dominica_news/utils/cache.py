"""
Process-local TTL response cache

Plugged into Flask-Caching as its backend (``CACHE_TYPE`` points here), so
views keep using ``@cache.cached(...)`` while this class owns the entry
lifecycle:

    fresh (age < ttl) -> stale (age >= ttl, still stored) -> removed

``get`` treats stale entries as a miss but leaves them in place; they go
away only through ``sweep()`` (run by a background timer) or a matching
``invalidate()``. Each server process has its own independent copy.
"""
import logging
import re
import threading
import time

from flask import request
from flask_caching.backends.base import BaseCache

logger = logging.getLogger(__name__)


class TTLResponseCache(BaseCache):
    """key -> (payload, expires_at) map guarded by a lock"""

    def __init__(self, default_timeout=300, clock=time.monotonic, **kwargs):
        super().__init__(default_timeout=default_timeout)
        self._entries = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._stop_event = None
        self._sweeper = None

    @classmethod
    def factory(cls, app, config, args, kwargs):
        return cls(*args, **kwargs)

    # -- entry access -------------------------------------------------

    def _expires_at(self, timeout):
        timeout = self._normalize_timeout(timeout)
        # Flask-Caching convention: 0 means "never expires"
        if not timeout:
            return None
        return self._clock() + timeout

    def _is_fresh(self, expires_at, now):
        return expires_at is None or now < expires_at

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if not self._is_fresh(expires_at, self._clock()):
                return None
        logger.debug('Cache HIT: %s', key)
        return value

    def set(self, key, value, timeout=None):
        with self._lock:
            self._entries[key] = (value, self._expires_at(timeout))
        logger.debug('Cache SET: %s', key)
        return True

    def add(self, key, value, timeout=None):
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry[1], self._clock()):
                return False
            self._entries[key] = (value, self._expires_at(timeout))
        return True

    def has(self, key):
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._is_fresh(entry[1], self._clock())

    def delete(self, key):
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self):
        self.invalidate()
        return True

    # -- invalidation and sweeping -------------------------------------

    def invalidate(self, pattern=None):
        """
        Drop entries regardless of freshness.

        With no pattern every entry goes; otherwise every key in which the
        regular expression ``pattern`` matches anywhere (so a plain prefix
        such as ``"article:"`` behaves as a substring test).
        Returns the number of removed entries.
        """
        with self._lock:
            if pattern is None:
                removed = len(self._entries)
                self._entries.clear()
                logger.info('Cache cleared: ALL (%d entries)', removed)
                return removed

            regex = re.compile(pattern)
            doomed = [key for key in self._entries if regex.search(key)]
            for key in doomed:
                del self._entries[key]
        logger.info('Cache cleared: %d entries matching "%s"', len(doomed), pattern)
        return len(doomed)

    def sweep(self):
        """Remove entries that are stale right now; returns how many"""
        with self._lock:
            now = self._clock()
            doomed = [
                key for key, (_, expires_at) in self._entries.items()
                if not self._is_fresh(expires_at, now)
            ]
            for key in doomed:
                del self._entries[key]
        logger.debug('Cache sweep: removed %d expired entries', len(doomed))
        return len(doomed)

    def stats(self):
        with self._lock:
            now = self._clock()
            valid = sum(1 for _, expires_at in self._entries.values()
                        if self._is_fresh(expires_at, now))
            total = len(self._entries)
        return {
            'totalEntries': total,
            'validEntries': valid,
            'expiredEntries': total - valid,
        }

    # -- lifecycle ------------------------------------------------------

    @property
    def running(self):
        return self._sweeper is not None and self._sweeper.is_alive()

    def start(self, interval):
        """Start the periodic sweeper thread (no-op when already running)"""
        if self.running:
            return
        stop_event = threading.Event()

        def _loop():
            while not stop_event.wait(interval):
                try:
                    self.sweep()
                except Exception:
                    logger.exception('Cache sweep failed')

        self._stop_event = stop_event
        self._sweeper = threading.Thread(target=_loop, name='cache-sweeper', daemon=True)
        self._sweeper.start()
        logger.info('Cache sweeper started (every %ss)', interval)

    def stop(self):
        if self._stop_event is not None:
            self._stop_event.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=5)
        self._sweeper = None
        self._stop_event = None


def _backend():
    from dominica_news.extensions import cache
    return cache.cache


def invalidate_cache(pattern=None):
    """Invalidate entries in the current app's response cache"""
    return _backend().invalidate(pattern)


def cache_key(prefix, part=None):
    """Key builder for ``@cache.cached(key_prefix=...)``"""
    def _make_key():
        suffix = part() if callable(part) else (part or request.full_path)
        return f'{prefix}:{suffix}'
    return _make_key


def is_successful_payload(rv):
    """Only successful JSON payloads are stored"""
    return isinstance(rv, dict) and rv.get('success') is True


def has_authorization():
    """Authenticated requests bypass the public cache"""
    return 'Authorization' in request.headers

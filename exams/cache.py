# exams/cache.py
"""
Read-through cache for question pools, keyed on (type, topic, language).

Entries live in a Django cache alias (`exam_pools` by default), so every
worker sees the same pools and a clear() made by one worker reaches all of
them. Each entry is stored as (stored_at, data) and expires after
`ttl_seconds` by the injectable clock; the backend timeout is set to the same
TTL. Keys are tracked in a registry entry so stats and sweeps can walk them.
The exams app owns one instance and clears it whenever the question bank
changes (see exams/signals.py).
"""
import threading
import time
from typing import Any, Dict, Optional

from django.core.cache import caches

REGISTRY_KEY = 'pool:registry'


class PoolCache:
    """TTL cache for pool query results."""

    def __init__(self, ttl_seconds=300, clock=time.time, backend=None, alias='exam_pools'):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.backend = backend if backend is not None else caches[alias]
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _generate_key(self, pool_type, topic, language):
        return f"pool:{pool_type}:{topic}:{language}"

    def _is_expired(self, stored_at, now):
        return now - stored_at > self.ttl_seconds

    def _keys(self):
        return set(self.backend.get(REGISTRY_KEY) or ())

    def _forget(self, keys):
        with self._lock:
            remaining = self._keys() - set(keys)
            self.backend.set(REGISTRY_KEY, remaining, timeout=None)
        self.backend.delete_many(list(keys))

    def get(self, pool_type, topic, language) -> Optional[Any]:
        """Cached pool, or None if missing or expired."""
        key = self._generate_key(pool_type, topic, language)
        entry = self.backend.get(key)
        if entry is None:
            return None
        stored_at, data = entry
        if self._is_expired(stored_at, self.clock()):
            self._forget([key])
            return None
        return data

    def set(self, pool_type, topic, language, data):
        key = self._generate_key(pool_type, topic, language)
        now = self.clock()
        self.backend.set(key, (now, data), timeout=self.ttl_seconds)
        with self._lock:
            keys = self._keys()
            keys.add(key)
            self.backend.set(REGISTRY_KEY, keys, timeout=None)
        # sweep at most once per TTL
        if now - self._last_sweep > self.ttl_seconds:
            self.cleanup()

    def clear(self):
        with self._lock:
            keys = self._keys()
            self.backend.delete_many(list(keys) + [REGISTRY_KEY])

    def cleanup(self) -> int:
        """Drop expired entries, and registry keys the backend already evicted.

        Returns:
            int: number of entries removed
        """
        now = self.clock()
        self._last_sweep = now
        keys = self._keys()
        entries = self.backend.get_many(list(keys))
        stale = [key for key in keys
                 if key not in entries or self._is_expired(entries[key][0], now)]
        if stale:
            self._forget(stale)
        return len(stale)

    def get_stats(self) -> Dict[str, Any]:
        now = self.clock()
        entries = self.backend.get_many(list(self._keys()))
        expired = sum(1 for stored_at, _ in entries.values()
                      if self._is_expired(stored_at, now))
        total = len(entries)
        return {
            'total': total,
            'valid': total - expired,
            'expired': expired,
            'ttl_seconds': self.ttl_seconds,
        }

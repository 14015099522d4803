"""Compute-once cache for parsed filters and resolved sort specs.

Galleries in a large site often share filter strings, and a single build
renders galleries concurrently. Each key is computed at most once; callers
racing on the same key wait for the first computation and receive the same
published object. Failed computations are not cached so that every caller
sees the error.
"""

import logging
import threading
from collections.abc import Callable, Hashable
from typing import Any, TypeVar

from photofolio.query.parser import FilterQuery, parse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryCache:
    """Thread-safe memo of parsed queries and other derived values.

    Usage:
        cache = QueryCache()
        query = cache.query("exif.iso >= 800 | limit 5")
    """

    def __init__(self):
        self._entries: dict[Hashable, Any] = {}
        self._key_locks: dict[Hashable, threading.Lock] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, key: Hashable, factory: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing it on first use."""
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                if key in self._entries:
                    return self._entries[key]

            logger.debug("Cache miss for %r", key)
            try:
                value = factory()
                with self._lock:
                    return self._entries.setdefault(key, value)
            finally:
                with self._lock:
                    if self._key_locks.get(key) is key_lock:
                        del self._key_locks[key]

    def query(self, source: str) -> FilterQuery:
        """Parse ``source`` once and return the shared FilterQuery.

        Raises:
            LexError: For malformed tokens
            ParseError: For grammar violations
        """
        return self.get_or_compute(("filter", source), lambda: parse(source))

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

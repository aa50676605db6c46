"""In-memory cache of analysis results keyed by file content.

Storage is a :class:`cachetools.TTLCache`: the least recently used
entry is evicted once ``max_size`` is reached, and entries older than
``ttl`` seconds are treated as absent.  On top of that every entry
carries an MD5 fingerprint of the file it was computed from, so
editing a file silently invalidates its entry.

The cache is shared by the worker threads of a parallel directory
analysis; all access to the storage goes through one lock.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from cachetools import LRUCache, TTLCache

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    fingerprint: Optional[str] = None


def file_fingerprint(path: str) -> str:
    """Return the MD5 hex digest of ``path``, or ``""`` if unreadable."""
    digest = hashlib.md5()
    try:
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(65536), b""):
                digest.update(chunk)
    except OSError as exc:
        logger.warning("Failed to hash file %s: %s", path, exc)
        return ""
    return digest.hexdigest()


class ResultCache:
    """LRU cache with expiry and file-content invalidation.

    A ``ttl`` of 0 keeps entries until they are evicted or invalidated.
    ``timer`` is the clock used for expiry.
    """

    def __init__(
        self,
        max_size: int = 500,
        ttl: float = 3600.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = max_size
        self.ttl = ttl
        if ttl:
            self._entries = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)
        else:
            self._entries = LRUCache(maxsize=max_size)
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def generate_key(tool: str, params: Dict[str, Any]) -> str:
        """Build a key from a tool name and its (JSON-serialisable) params."""
        normalized = json.dumps(params, sort_keys=True, default=str)
        return f"{tool}:{hashlib.md5(normalized.encode('utf-8')).hexdigest()}"

    def get(self, key: str, file_path: Optional[str] = None) -> Optional[Any]:
        """Return the cached value for ``key`` or ``None``.

        When ``file_path`` is given and the entry was stored with a
        fingerprint, the entry is dropped if the file has changed.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

        if file_path and entry.fingerprint is not None:
            if file_fingerprint(file_path) != entry.fingerprint:
                logger.debug("Cache invalidated for %s: file modified", key)
                with self._lock:
                    if self._entries.get(key) is entry:
                        del self._entries[key]
                    self.misses += 1
                return None

        with self._lock:
            self.hits += 1
        logger.debug("Cache hit for %s", key)
        return entry.value

    def set(self, key: str, value: Any, file_path: Optional[str] = None) -> None:
        fingerprint = file_fingerprint(file_path) if file_path else None
        with self._lock:
            self._entries[key] = CacheEntry(value=value, fingerprint=fingerprint)

    def clear(self, pattern: Optional[str] = None) -> int:
        """Drop every entry, or only those whose key contains ``pattern``.

        Returns:
            The number of entries removed.
        """
        with self._lock:
            if pattern is None:
                count = len(self._entries)
                self._entries.clear()
                logger.info("Cache cleared")
                return count
            doomed = [key for key in list(self._entries) if pattern in key]
            for key in doomed:
                self._entries.pop(key, None)
        logger.info("Cleared %d cache entries matching pattern: %s", len(doomed), pattern)
        return len(doomed)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "size": len(self._entries),
                "maxSize": self.max_size,
                "hits": self.hits,
                "misses": self.misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

"""Process-local result cache for catalog reads.

Entries live for ``ttl`` seconds (60 by default) and the cache is bounded to
``maxsize`` entries, evicting the least recently used one when full. Expired
entries are dropped lazily on the next read; there is no background sweep.

Each ``WebsiteService`` owns its own instance, so tests get a fresh cache per
service and can drive expiry through an injected ``timer``.
"""

import hashlib
import json
import logging
import time
from collections.abc import Callable
from typing import Any, NamedTuple

from cachetools import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60
DEFAULT_MAXSIZE = 512


class CacheKey(NamedTuple):
    """Structured cache key; serialized canonically by ``ResultCache.make_key``."""

    operation: str
    sort: str | None = None
    category: str | None = None
    framework: str | None = None
    cursor: str | None = None
    page_size: int | None = None


class ResultCache:
    """TTL + LRU memo keyed by ``CacheKey``."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        maxsize: int = DEFAULT_MAXSIZE,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    @staticmethod
    def make_key(key: CacheKey) -> str:
        """Generate a deterministic, delimiter-free key string."""
        normalized = json.dumps(key._asdict(), sort_keys=True, ensure_ascii=False, separators=(",", ":"))
        return f"gr:{hashlib.sha256(normalized.encode()).hexdigest()[:32]}"

    def get(self, key: CacheKey) -> Any | None:
        """Read from cache. Returns None on miss or expiry."""
        cache_key = self.make_key(key)
        value = self._entries.get(cache_key)
        if value is None:
            # TTLCache hides expired items but only drops them on mutation
            self._entries.expire()
            return None
        logger.debug("Cache HIT | op=%s | key=%s", key.operation, cache_key[:20])
        return value

    def set(self, key: CacheKey, value: Any) -> None:
        """Store ``value``, overwriting any previous entry for ``key``."""
        cache_key = self.make_key(key)
        self._entries[cache_key] = value
        logger.debug("Cache SET | op=%s | key=%s | ttl=%ss", key.operation, cache_key[:20], self.ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

"""Thread-safe LRU cache for compiled messages.

Architecture:
    - Thread-safe using threading.RLock (reentrant lock)
    - LRU eviction via OrderedDict
    - Key: (language, message) - the pattern text itself, so reloading
      catalogs never serves a stale compilation for changed text

Shared between an I18n instance and the views created by I18n.use().

Python 3.12+.
"""

from collections import OrderedDict
from threading import RLock

from icuflow.constants import DEFAULT_COMPILE_CACHE_SIZE
from icuflow.icu.compiler import CompiledMessage

__all__ = ["CompileCache"]

type _CacheKey = tuple[str, str]


class CompileCache:
    """Thread-safe LRU cache of CompiledMessage instances.

    Attributes:
        maxsize: Maximum number of cache entries
        hits: Number of cache hits
        misses: Number of cache misses
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses")

    def __init__(self, maxsize: int = DEFAULT_COMPILE_CACHE_SIZE) -> None:
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._cache: OrderedDict[_CacheKey, CompiledMessage] = OrderedDict()
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get(self, language: str, message: str) -> CompiledMessage | None:
        """Cached compilation, or None on miss."""
        key = (language, message)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self._hits += 1
                return self._cache[key]
            self._misses += 1
            return None

    def put(self, language: str, message: str, compiled: CompiledMessage) -> None:
        """Store a compilation, evicting the least recently used entry if full."""
        key = (language, message)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self._maxsize:
                self._cache.popitem(last=False)
            self._cache[key] = compiled

    def clear(self) -> None:
        """Clear all cached entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int | float]:
        """Cache statistics: size, maxsize, hits, misses, hit_rate (percent)."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        with self._lock:
            return self._misses

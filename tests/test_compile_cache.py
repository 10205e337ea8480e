"""Tests for runtime/cache.py - LRU cache of compiled messages."""

import pytest

from icuflow.icu.compiler import CompiledMessage
from icuflow.icu.tokens import Text
from icuflow.runtime.cache import CompileCache


def _compiled(text: str) -> CompiledMessage:
    return CompiledMessage((Text(text),), "en", None)


class TestCompileCacheBasic:
    def test_miss_then_hit(self) -> None:
        cache = CompileCache(maxsize=4)

        assert cache.get("en", "Hi") is None
        compiled = _compiled("Hi")
        cache.put("en", "Hi", compiled)

        assert cache.get("en", "Hi") is compiled
        assert cache.hits == 1
        assert cache.misses == 1

    def test_keyed_by_language(self) -> None:
        cache = CompileCache(maxsize=4)
        cache.put("en", "Hi", _compiled("Hi"))

        assert cache.get("cs", "Hi") is None

    @pytest.mark.parametrize("maxsize", [0, -1])
    def test_invalid_maxsize(self, maxsize: int) -> None:
        with pytest.raises(ValueError, match="maxsize"):
            CompileCache(maxsize=maxsize)


class TestCompileCacheEviction:
    def test_least_recently_used_evicted(self) -> None:
        cache = CompileCache(maxsize=2)
        cache.put("en", "a", _compiled("a"))
        cache.put("en", "b", _compiled("b"))

        cache.get("en", "a")
        cache.put("en", "c", _compiled("c"))

        assert len(cache) == 2
        assert cache.get("en", "b") is None
        assert cache.get("en", "a") is not None

    def test_put_existing_key_does_not_evict(self) -> None:
        cache = CompileCache(maxsize=2)
        cache.put("en", "a", _compiled("a"))
        cache.put("en", "b", _compiled("b"))

        cache.put("en", "a", _compiled("a2"))

        assert len(cache) == 2
        assert cache.get("en", "b") is not None


class TestCompileCacheStats:
    def test_stats(self) -> None:
        cache = CompileCache(maxsize=10)
        cache.put("en", "a", _compiled("a"))
        cache.get("en", "a")
        cache.get("en", "a")
        cache.get("en", "b")

        assert cache.get_stats() == {
            "size": 1,
            "maxsize": 10,
            "hits": 2,
            "misses": 1,
            "hit_rate": 66.67,
        }

    def test_clear_resets_metrics(self) -> None:
        cache = CompileCache(maxsize=10)
        cache.put("en", "a", _compiled("a"))
        cache.get("en", "a")

        cache.clear()

        assert cache.get_stats()["size"] == 0
        assert cache.hits == 0
        assert cache.get_stats()["hit_rate"] == 0.0

"""In-process TTL cache with tag-based invalidation.

Public read models (bet lists, leaderboards) are cached under one or more
tags; evaluation invalidates by tag rather than by key.
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, Generic, Iterable, Optional, TypeVar

from betleague.shared.enums import BetCategory

T = TypeVar("T")

CATEGORY_TAGS = {
    BetCategory.MATCH: "matches",
    BetCategory.SERIES: "series",
    BetCategory.SINGLE_BET: "single-bets",
    BetCategory.QUESTION: "questions",
}


def leaderboard_tag(league_id: int) -> str:
    return f"leaderboard:{league_id}"


@dataclass
class CacheEntry(Generic[T]):
    """A cached value with expiration time and tags."""

    value: T
    expires_at: float
    tags: FrozenSet[str] = field(default_factory=frozenset)

    def is_expired(self) -> bool:
        return time.time() > self.expires_at


class TagCache(Generic[T]):
    """TTL cache whose entries can be dropped by tag.

    Example:
        cache = TagCache[list](ttl_seconds=900)
        cache.set("leaderboard:1", rows, tags=["leaderboard:1"])
        cache.invalidate_tags("leaderboard:1")
    """

    def __init__(self, ttl_seconds: float = 900, maxsize: int = 1024) -> None:
        self.ttl_seconds = ttl_seconds
        self.maxsize = max(1, int(maxsize))
        self._cache: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = asyncio.Lock()

    def get(self, key: str) -> Optional[T]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._cache[key]
            return None
        # LRU touch
        self._cache.move_to_end(key)
        return entry.value

    def set(
        self,
        key: str,
        value: T,
        tags: Iterable[str] = (),
        ttl: Optional[float] = None,
    ) -> None:
        ttl_seconds = ttl if ttl is not None else self.ttl_seconds
        self._cache[key] = CacheEntry(
            value=value,
            expires_at=time.time() + ttl_seconds,
            tags=frozenset(tags),
        )
        self._cache.move_to_end(key)
        while len(self._cache) > self.maxsize:
            self._cache.popitem(last=False)

    async def get_or_set(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[T]],
        tags: Iterable[str] = (),
        ttl: Optional[float] = None,
    ) -> T:
        """Return the cached value or fetch, store and return it.

        Only one fetch runs at a time; fetch errors propagate and nothing is cached.
        """
        value = self.get(key)
        if value is not None:
            return value

        async with self._lock:
            value = self.get(key)
            if value is not None:
                return value
            value = await fetch_fn()
            if value is not None:
                self.set(key, value, tags=tags, ttl=ttl)
            return value

    def invalidate(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    def invalidate_tags(self, *tags: str) -> int:
        """Drop every entry carrying any of ``tags``. Returns the number dropped."""
        wanted = set(tags)
        doomed = [key for key, entry in self._cache.items() if entry.tags & wanted]
        for key in doomed:
            del self._cache[key]
        return len(doomed)

    def clear(self) -> int:
        count = len(self._cache)
        self._cache.clear()
        return count

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


_cache: Optional[TagCache] = None


def get_cache(ttl_seconds: float = 900) -> TagCache:
    """Get the process-wide cache instance."""
    global _cache
    if _cache is None:
        _cache = TagCache(ttl_seconds=ttl_seconds)
    return _cache


__all__ = [
    "CATEGORY_TAGS",
    "CacheEntry",
    "TagCache",
    "get_cache",
    "leaderboard_tag",
]

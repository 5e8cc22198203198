"""Two-tier result cache: in-process LRU in front of Redis.

Redis is best-effort. Any error on the persistent tier is logged and the cache
keeps working from memory.
"""

import logging
import time
from collections import OrderedDict

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from pricefinder.config import settings
from pricefinder.errors import CacheStoreUnavailable
from pricefinder.schemas.price_result import CacheEntry
from pricefinder.services.query_analyzer import canonical_query

logger = logging.getLogger(__name__)

KEY_PREFIX = "pricefinder:price:"


class PriceCache:
    def __init__(
        self,
        redis_client=None,
        max_entries: int | None = None,
        ttl_seconds: int | None = None,
        key_max_length: int | None = None,
    ):
        self._memory: OrderedDict[str, tuple[CacheEntry, float]] = OrderedDict()
        self._redis = redis_client
        self._max_entries = max_entries or settings.memory_cache_size
        self._ttl = ttl_seconds or settings.cache_ttl_seconds
        self._key_max_length = key_max_length or settings.cache_key_max_length
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_settings(cls) -> "PriceCache":
        client = None
        if settings.redis_url:
            client = aioredis.from_url(settings.redis_url, decode_responses=True)
        return cls(redis_client=client)

    def key_for(self, text: str) -> str:
        return canonical_query(text, self._key_max_length)

    async def get(self, text: str) -> tuple[CacheEntry, str] | None:
        """Return (entry, tier) where tier is "memory" or "persistent"."""
        key = self.key_for(text)
        if not key:
            return None

        hit = self._memory.get(key)
        if hit is not None:
            entry, stored_at = hit
            if time.monotonic() - stored_at <= self._ttl:
                self._memory.move_to_end(key)
                self._hits += 1
                logger.debug("Cache HIT (memory): %s", key)
                return entry, "memory"
            del self._memory[key]

        entry = await self._persistent_get(key)
        if entry is not None:
            self._remember(key, entry)
            self._hits += 1
            logger.debug("Cache HIT (persistent): %s", key)
            return entry, "persistent"

        self._misses += 1
        return None

    async def set(self, text: str, entry: CacheEntry) -> None:
        key = self.key_for(text)
        if not key:
            return
        self._remember(key, entry)
        if self._redis is None:
            return
        try:
            await self._redis.set(KEY_PREFIX + key, entry.model_dump_json(), ex=self._ttl)
        except (RedisError, OSError) as exc:
            logger.warning("Persistent cache write failed for %s: %s", key, exc)

    async def clear(self) -> int:
        """Drop every entry from both tiers; returns how many were removed."""
        cleared = len(self._memory)
        self._memory.clear()
        if self._redis is not None:
            try:
                keys = [k async for k in self._redis.scan_iter(match=KEY_PREFIX + "*")]
                if keys:
                    cleared = max(cleared, await self._redis.delete(*keys))
            except (RedisError, OSError) as exc:
                logger.warning("Persistent cache clear failed: %s", exc)
        logger.info("Cleared %d cache entries", cleared)
        return cleared

    async def stats(self) -> dict:
        persistent = "disabled"
        if self._redis is not None:
            try:
                await self.ping()
                persistent = "ok"
            except CacheStoreUnavailable:
                persistent = "unavailable"
        total = self._hits + self._misses
        return {
            "entries": len(self._memory),
            "max_entries": self._max_entries,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total else 0.0,
            "ttl_seconds": self._ttl,
            "persistent": persistent,
        }

    async def ping(self) -> None:
        try:
            await self._redis.ping()
        except (RedisError, OSError) as exc:
            raise CacheStoreUnavailable(str(exc)) from exc

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()

    def _remember(self, key: str, entry: CacheEntry) -> None:
        self._memory[key] = (entry, time.monotonic())
        self._memory.move_to_end(key)
        while len(self._memory) > self._max_entries:
            evicted, _ = self._memory.popitem(last=False)
            logger.debug("Cache evicted %s", evicted)

    async def _persistent_get(self, key: str) -> CacheEntry | None:
        if self._redis is None:
            return None
        try:
            raw = await self._redis.get(KEY_PREFIX + key)
        except (RedisError, OSError) as exc:
            logger.warning("Persistent cache read failed for %s: %s", key, exc)
            return None
        if not raw:
            return None
        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

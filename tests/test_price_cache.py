import pytest

from pricefinder.schemas.price_result import CacheEntry
from pricefinder.services.price_cache import KEY_PREFIX, PriceCache

from conftest import FakeRedis


def _entry(price=279.99):
    return CacheEntry(
        found=True,
        price=price,
        source="Best Buy",
        url="https://www.bestbuy.com/site/mixer/6543210.p",
        title="KitchenAid Stand Mixer",
        confidence=0.9,
    )


@pytest.mark.asyncio
async def test_memory_hit_uses_canonical_key():
    cache = PriceCache(max_entries=10)
    await cache.set("KitchenAid Stand Mixer!", _entry())

    hit = await cache.get("  kitchenaid   stand mixer ")

    assert hit is not None
    entry, tier = hit
    assert tier == "memory"
    assert entry.source == "Best Buy"


@pytest.mark.asyncio
async def test_persistent_hit_backfills_memory(fake_redis):
    await PriceCache(redis_client=fake_redis).set("stand mixer", _entry())
    assert fake_redis.expiry[KEY_PREFIX + "stand mixer"] == 43200

    cache = PriceCache(redis_client=fake_redis)
    first = await cache.get("stand mixer")
    second = await cache.get("stand mixer")

    assert first[1] == "persistent"
    assert second[1] == "memory"


@pytest.mark.asyncio
async def test_lru_eviction():
    cache = PriceCache(max_entries=2)
    await cache.set("a", _entry(1))
    await cache.set("b", _entry(2))
    await cache.get("a")
    await cache.set("c", _entry(3))

    assert await cache.get("b") is None
    assert (await cache.get("a"))[0].price == 1
    assert (await cache.get("c"))[0].price == 3


@pytest.mark.asyncio
async def test_redis_outage_degrades_to_memory():
    cache = PriceCache(redis_client=FakeRedis(fail=True))

    await cache.set("stand mixer", _entry())
    hit = await cache.get("stand mixer")
    stats = await cache.stats()

    assert hit[1] == "memory"
    assert stats["persistent"] == "unavailable"
    assert await cache.get("unknown item") is None


@pytest.mark.asyncio
async def test_clear_and_stats(fake_redis):
    cache = PriceCache(redis_client=fake_redis)
    await cache.set("one", _entry())
    await cache.set("two", _entry())
    await cache.get("one")
    await cache.get("three")

    stats = await cache.stats()
    assert stats["entries"] == 2
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["persistent"] == "ok"

    assert await cache.clear() == 2
    assert fake_redis.store == {}
    assert await cache.get("one") is None


@pytest.mark.asyncio
async def test_unreadable_persistent_entry_is_ignored(fake_redis):
    fake_redis.store[KEY_PREFIX + "stand mixer"] = "{broken"

    assert await PriceCache(redis_client=fake_redis).get("stand mixer") is None

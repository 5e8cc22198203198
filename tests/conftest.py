import fnmatch
import json

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from pricefinder.services.price_cache import PriceCache
from pricefinder.services.price_engine import PriceEngine
from pricefinder.services.retry_policy import RetryPolicy


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis with the calls the cache makes."""

    def __init__(self, fail: bool = False):
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("redis is down")

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        self._check()
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match="*"):
        self._check()
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True


class SerpStub:
    """Routes SerpAPI requests by engine and serves retailer pages by URL."""

    def __init__(self, shopping=None, offers=None, organic=None, pages=None):
        self.shopping = shopping or []
        self.offers = offers or []
        self.organic = organic or []
        self.pages = pages or {}
        self.requests: list[httpx.Request] = []

    @property
    def serp_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "serpapi.com"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "serpapi.com":
            engine = request.url.params.get("engine")
            if engine == "google_shopping":
                return httpx.Response(200, json={"shopping_results": self.shopping})
            if engine == "google_product":
                return httpx.Response(200, json={"sellers_results": {"online_sellers": self.offers}})
            return httpx.Response(200, json={"organic_results": self.organic})
        page = self.pages.get(str(request.url))
        if page is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, html=page)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


KITCHENAID_RESULTS = [
    {
        "title": "KitchenAid Classic Series 4.5 Quart Tilt-Head Stand Mixer KSM150PS",
        "extracted_price": 279.99,
        "source": "Best Buy",
        "link": "https://www.bestbuy.com/site/kitchenaid-classic-stand-mixer/6543210.p?skuId=6543210",
        "product_id": "11111",
    },
    {
        "title": "KitchenAid Stand Mixer KSM150PS",
        "extracted_price": 189.0,
        "source": "eBay - bargainhunter",
        "link": "https://www.ebay.com/itm/123456",
    },
    {
        "title": "KitchenAid Artisan Stand Mixer KSM150PS",
        "extracted_price": 329.0,
        "source": "Target",
        "link": "https://www.target.com/p/kitchenaid-artisan-stand-mixer/-/A-12345678",
    },
    {
        "title": "Cuisinart 5.5 Quart Stand Mixer",
        "extracted_price": 199.0,
        "source": "Walmart",
        "link": "https://www.walmart.com/ip/Cuisinart-Stand-Mixer/55555555",
    },
]


@pytest.fixture
def no_wait_retry():
    return RetryPolicy(max_attempts=3, base_delay=0, max_delay=0)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def kitchenaid_stub():
    return SerpStub(shopping=json.loads(json.dumps(KITCHENAID_RESULTS)))


@pytest.fixture
def make_engine(no_wait_retry):
    def build(stub: SerpStub | None = None, api_key: str = "test-key", cache: PriceCache | None = None):
        stub = stub or SerpStub()
        return PriceEngine(
            http_client=stub.client(),
            cache=cache or PriceCache(max_entries=100),
            api_key=api_key,
            retry_policy=no_wait_retry,
        )

    return build

import asyncio
import warnings

import httpx
import pytest
from tenacity import RetryCallState

from pricefinder.errors import ConfigurationUnavailable, NetworkTimeout, ParseFailure
from pricefinder.schemas.query import ItemQuery
from pricefinder.services.query_analyzer import analyze_query
from pricefinder.services.retry_policy import RetryPolicy
from pricefinder.services.search_orchestrator import SearchOrchestrator
from pricefinder.services.search_strategies import SearchStrategy
from pricefinder.services.shopping_search import ShoppingSearchClient, parse_price

from conftest import KITCHENAID_RESULTS, SerpStub


def _client(handler, retry):
    return ShoppingSearchClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)), api_key="k", retry_policy=retry
    )


@pytest.mark.parametrize(
    "value,expected",
    [(279.99, 279.99), ("$1,299.00", 1299.0), ("USD 45", 45.0), ("free", None), (0, None), (None, None)],
)
def test_parse_price(value, expected):
    assert parse_price(value) == expected


@pytest.mark.asyncio
async def test_search_sends_window_locale_and_negative_sites(no_wait_retry):
    stub = SerpStub(shopping=KITCHENAID_RESULTS)
    client = ShoppingSearchClient(stub.client(), api_key="k", retry_policy=no_wait_retry)

    results = await client.search(
        "KitchenAid stand mixer", price_window=(255.0, 345.0), excluded_sites=("ebay.com", "etsy.com")
    )

    params = stub.serp_calls[0].url.params
    assert params["engine"] == "google_shopping"
    assert params["q"] == "KitchenAid stand mixer -site:ebay.com -site:etsy.com"
    assert params["tbs"] == "mr:1,price:1,ppr_min:255,ppr_max:345"
    assert params["gl"] == "us"
    assert params["hl"] == "en"
    assert len(results) == 4
    assert results[0].source == "Best Buy"
    assert results[0].product_id == "11111"


@pytest.mark.asyncio
async def test_listings_without_price_are_skipped(no_wait_retry):
    stub = SerpStub(shopping=[{"title": "No price"}, {"title": "Priced", "price": "$12.50", "source": "Target"}])
    client = ShoppingSearchClient(stub.client(), api_key="k", retry_policy=no_wait_retry)

    results = await client.search("anything")

    assert [r.title for r in results] == ["Priced"]
    assert results[0].price == 12.5


@pytest.mark.asyncio
async def test_rate_limit_is_retried(no_wait_retry):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(429, json={"error": "rate limited"})
        return httpx.Response(200, json={"shopping_results": KITCHENAID_RESULTS[:1]})

    results = await _client(handler, no_wait_retry).search("mixer")

    assert len(calls) == 2
    assert len(results) == 1


@pytest.mark.asyncio
async def test_server_errors_give_up_after_three_attempts(no_wait_retry):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(NetworkTimeout):
        await _client(handler, no_wait_retry).search("mixer")
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_bad_key_is_not_retried(no_wait_retry):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401, json={"error": "Invalid API key"})

    with pytest.raises(ConfigurationUnavailable):
        await _client(handler, no_wait_retry).search("mixer")
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_malformed_payload(no_wait_retry):
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"), no_wait_retry)

    with pytest.raises(ParseFailure):
        await client.search("mixer")


@pytest.mark.asyncio
async def test_no_results_error_is_an_empty_list(no_wait_retry):
    client = _client(
        lambda request: httpx.Response(200, json={"error": "Google hasn't returned any results for this query."}),
        no_wait_retry,
    )

    assert await client.search("zzzz") == []


@pytest.mark.asyncio
async def test_missing_key_raises_without_network():
    stub = SerpStub()
    client = ShoppingSearchClient(stub.client(), api_key="")

    with pytest.raises(ConfigurationUnavailable):
        await client.search("mixer")
    assert stub.requests == []


def _strategy(name, query, priority):
    return SearchStrategy(name=name, query=query, priority=priority)


@pytest.mark.asyncio
async def test_orchestrator_merges_dedupes_and_drops_failures(no_wait_retry):
    def handler(request):
        q = request.url.params["q"]
        if q.startswith("broken"):
            return httpx.Response(503)
        return httpx.Response(200, json={"shopping_results": KITCHENAID_RESULTS})

    orchestrator = SearchOrchestrator(_client(handler, no_wait_retry), excluded_sites=("ebay.com",))
    text = "KitchenAid Stand Mixer KSM150PS"
    query = ItemQuery(text=text, target_price=300, tolerance_pct=15, attributes=analyze_query(text))
    strategies = [_strategy("first", "mixer one", 1), _strategy("second", "mixer two", 2), _strategy("bad", "broken", 3)]

    outcome = await orchestrator.search(query, strategies)

    assert len(outcome.candidates) == len(KITCHENAID_RESULTS)
    assert {c.strategy for c in outcome.candidates} == {"first"}
    assert "bad" in outcome.failures
    assert outcome.search_terms == ["mixer one", "mixer two", "broken"]


@pytest.mark.asyncio
async def test_orchestrator_deadline_cancels_stragglers(no_wait_retry):
    class SlowClient(ShoppingSearchClient):
        async def search(self, query, **kwargs):
            if query == "slow":
                await asyncio.sleep(5)
            return await super().search(query, **kwargs)

    stub = SerpStub(shopping=KITCHENAID_RESULTS[:1])
    orchestrator = SearchOrchestrator(SlowClient(stub.client(), api_key="k", retry_policy=no_wait_retry), deadline=0.2)
    query = ItemQuery(text="mixer", attributes=analyze_query("mixer"))

    outcome = await orchestrator.search(query, [_strategy("fast", "quick", 1), _strategy("slow", "slow", 2)])

    assert len(outcome.candidates) == 1
    assert outcome.failures == {"slow": "deadline exceeded"}


def test_backoff_is_bounded_and_uses_current_tenacity_api():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        retrying = RetryPolicy(max_attempts=5, base_delay=1.0, max_delay=4.0)._retrying()

    state = RetryCallState(retry_object=retrying, fn=None, args=(), kwargs={})
    delays = []
    for attempt in (1, 2, 3, 4):
        state.attempt_number = attempt
        delays.append(retrying.wait(state))

    assert 1.0 <= delays[0] <= 2.0
    assert 2.0 <= delays[1] <= 3.0
    assert all(4.0 <= delay <= 5.0 for delay in delays[2:])

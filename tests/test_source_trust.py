import pytest

from pricefinder.schemas.product_search import TrustLevel
from pricefinder.services.source_trust import (
    classify_source,
    is_marketplace_adjacent,
    retailer_display_name,
)


@pytest.mark.parametrize(
    "source",
    ["eBay - bargainhunter", "Etsy", "Shenzhen Trading Co", "Alibaba.com", "Temu", "ACME Wholesale", "xkcdqz"],
)
def test_blocked_sources(source):
    assert classify_source(source) is TrustLevel.BLOCKED


@pytest.mark.parametrize("source", ["Best Buy", "Target", "Costco Wholesale", "Williams Sonoma", "Bob's Hardware"])
def test_everything_else_is_trusted(source):
    assert classify_source(source) is TrustLevel.TRUSTED


def test_custom_pattern_set():
    assert classify_source("Bob's Hardware", (r"\bbob's\b",)) is TrustLevel.BLOCKED


def test_marketplace_adjacent_sellers():
    assert is_marketplace_adjacent("Walmart - ShopName")
    assert is_marketplace_adjacent("Amazon.com - Seller")
    assert not is_marketplace_adjacent("Walmart")


def test_retailer_display_names():
    assert retailer_display_name("Walmart - ShopName") == "Walmart"
    assert retailer_display_name("bestbuy.com") == "Best Buy"
    assert retailer_display_name("https://www.homedepot.com/p/123456789") == "Home Depot"
    assert retailer_display_name("https://shop.somestore.com/item/1") == "Somestore"
    assert retailer_display_name("Bob's Hardware.com") == "Bob's Hardware"

import json

import pytest

from pricefinder.errors import ResolutionFailure
from pricefinder.registries import default_registries
from pricefinder.registries.retailers import unwrap_redirect
from pricefinder.schemas.product_search import Candidate, MerchantOffer, ScoredCandidate
from pricefinder.services.page_fetcher import PageFetcher, parse_page
from pricefinder.services.shopping_search import ShoppingSearchClient
from pricefinder.services.url_resolver import DirectUrlResolver

from conftest import SerpStub


def _scored(candidate: Candidate) -> ScoredCandidate:
    return ScoredCandidate(
        candidate=candidate,
        unit_price=candidate.price,
        effective_price=candidate.price,
        score=0.9,
    )


@pytest.fixture
def retailers():
    return default_registries().retailers


@pytest.mark.parametrize(
    "url",
    [
        "https://www.walmart.com/ip/Mainstays-Storage-Bin/123456789",
        "https://www.amazon.com/KitchenAid-Mixer/dp/B00005UP2P",
        "https://www.target.com/p/kitchenaid-mixer/-/A-12345678",
        "https://www.homedepot.com/p/Husky-Tool-Box/315555555",
        "https://www.lowes.com/pd/Whirlpool-Refrigerator/1000123456",
        "https://www.bestbuy.com/site/samsung-55-tv/6543210.p?skuId=6543210",
    ],
)
def test_direct_product_urls(retailers, url):
    assert retailers.is_direct(url)


@pytest.mark.parametrize(
    "url",
    [
        "https://www.walmart.com/search?q=storage+bin",
        "https://www.amazon.com/s?k=kitchenaid+mixer",
        "https://www.target.com/s?searchTerm=mixer",
        "https://www.homedepot.com/s/tool%20box",
        "https://www.bestbuy.com/site/searchpage.jsp?st=tv",
        "https://www.google.com/search?tbm=shop&q=mixer",
        "https://www.somestore.com/p/123456",
    ],
)
def test_listing_and_unknown_urls_are_not_direct(retailers, url):
    assert not retailers.is_direct(url)


def test_unwrap_click_tracking():
    wrapped = "https://www.google.com/url?url=https%3A%2F%2Fwww.walmart.com%2Fip%2FWidget%2F123456789&sa=U"

    assert unwrap_redirect(wrapped) == "https://www.walmart.com/ip/Widget/123456789"


@pytest.mark.asyncio
async def test_own_link_after_unwrapping():
    resolver = DirectUrlResolver(None, None)
    candidate = Candidate(
        title="Widget",
        price=10.0,
        source="Walmart",
        link="https://www.google.com/url?url=https%3A%2F%2Fwww.walmart.com%2Fip%2FWidget%2F123456789",
    )

    resolution = await resolver.resolve(_scored(candidate))

    assert resolution.step == "own_link"
    assert resolution.url == "https://www.walmart.com/ip/Widget/123456789"
    assert resolution.retailer == "Walmart"


@pytest.mark.asyncio
async def test_merchant_link_closest_to_target():
    resolver = DirectUrlResolver(None, None)
    candidate = Candidate(
        title="Stand Mixer",
        price=300.0,
        source="Google Shopping",
        link="https://www.google.com/shopping/product/1",
        merchants=[
            MerchantOffer(name="Target", link="https://www.target.com/p/mixer/-/A-11111111", price=250.0),
            MerchantOffer(name="Best Buy", link="https://www.bestbuy.com/site/mixer/6543210.p", price=299.0),
            MerchantOffer(name="Someone", link="https://www.example.com/mixer", price=300.0),
        ],
    )

    resolution = await resolver.resolve(_scored(candidate), target_price=300)

    assert resolution.step == "merchant_link"
    assert resolution.url == "https://www.bestbuy.com/site/mixer/6543210.p"
    assert resolution.price == 299.0


@pytest.mark.asyncio
async def test_product_detail_lookup(no_wait_retry):
    stub = SerpStub(offers=[
        {"name": "Walmart", "link": "https://www.walmart.com/ip/Mixer/22222222", "base_price": "$289.00"},
    ])
    client = ShoppingSearchClient(stub.client(), api_key="k", retry_policy=no_wait_retry)
    resolver = DirectUrlResolver(client, None)
    candidate = Candidate(title="Mixer", price=289.0, source="Walmart", product_id="999")

    resolution = await resolver.resolve(_scored(candidate))

    assert resolution.step == "product_detail"
    assert resolution.url == "https://www.walmart.com/ip/Mixer/22222222"
    assert resolution.price == 289.0
    assert stub.serp_calls[0].url.params["engine"] == "google_product"


@pytest.mark.asyncio
async def test_site_search_on_retailer_domain(no_wait_retry):
    stub = SerpStub(organic=[
        {"link": "https://www.target.com/s?searchTerm=mixer"},
        {"link": "https://www.target.com/p/kitchenaid-mixer/-/A-87654321"},
    ])
    client = ShoppingSearchClient(stub.client(), api_key="k", retry_policy=no_wait_retry)
    resolver = DirectUrlResolver(client, None)
    candidate = Candidate(title="KitchenAid Mixer", price=300.0, source="Target")

    resolution = await resolver.resolve(_scored(candidate))

    assert resolution.step == "site_search"
    assert resolution.url == "https://www.target.com/p/kitchenaid-mixer/-/A-87654321"
    assert stub.serp_calls[0].url.params["q"] == 'site:target.com "KitchenAid Mixer"'


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "link,expected",
    [
        ("https://www.target.com/s/kitchenaid-mixer/-/A-12345678", "https://www.target.com/p/-/A-12345678"),
        ("https://www.amazon.com/gp/search?asin=B00005UP2P", "https://www.amazon.com/dp/B00005UP2P"),
        ("https://www.walmart.com/browse?itemId=123456789", "https://www.walmart.com/ip/123456789"),
    ],
)
async def test_rewrite_when_id_is_present(link, expected):
    resolver = DirectUrlResolver(None, None)

    resolution = await resolver.resolve(_scored(Candidate(title="x", price=10.0, link=link)))

    assert resolution.step == "rewrite"
    assert resolution.url == expected


CATALOG_HTML = """
<html><body>
  <div class="tile"><a href="/ip/Widget-Small/111111">Widget Small</a><span>$12.99</span></div>
  <div class="tile"><a href="/ip/Widget-Large/222222">Widget Large</a><span>$24.99</span></div>
  <div class="tile"><a href="/help">Help</a></div>
</body></html>
"""


@pytest.mark.asyncio
async def test_catalog_page_scan_picks_price_closest_to_target():
    url = "https://www.walmart.com/search?q=widget"
    stub = SerpStub(pages={url: CATALOG_HTML})
    resolver = DirectUrlResolver(None, PageFetcher(stub.client()))
    candidate = Candidate(title="Widget", price=25.0, source="Walmart", link=url)

    resolution = await resolver.resolve(_scored(candidate), target_price=25)

    assert resolution.step == "page_scan"
    assert resolution.url == "https://www.walmart.com/ip/Widget-Large/222222"
    assert resolution.price == 24.99


@pytest.mark.asyncio
async def test_unknown_retailer_is_unresolved():
    resolver = DirectUrlResolver(None, None)
    candidate = Candidate(title="Widget", price=25.0, source="Bob's Store", link="https://bobs.example/widget")

    with pytest.raises(ResolutionFailure) as excinfo:
        await resolver.resolve(_scored(candidate))

    assert excinfo.value.retailer is None


@pytest.mark.asyncio
async def test_known_retailer_without_direct_url_names_the_retailer():
    resolver = DirectUrlResolver(None, None)
    candidate = Candidate(title="Widget", price=25.0, source="Walmart", link="https://www.walmart.com/search?q=widget")

    with pytest.raises(ResolutionFailure) as excinfo:
        await resolver.resolve(_scored(candidate))

    assert excinfo.value.retailer == "Walmart"


def test_parse_page_reads_canonical_and_json_ld():
    product = {
        "@context": "https://schema.org",
        "@type": "Product",
        "name": "Widget",
        "url": "https://www.target.com/p/widget/-/A-13572468",
        "offers": {"@type": "Offer", "price": "19.99"},
    }
    html = (
        '<html><head><link rel="canonical" href="/p/widget/-/A-13572468">'
        f'<script type="application/ld+json">{json.dumps(product)}</script>'
        "<script type=\"application/ld+json\">{not json</script></head></html>"
    )

    page = parse_page(html, "https://www.target.com/s?searchTerm=widget")

    assert page.canonical == "https://www.target.com/p/widget/-/A-13572468"
    json_ld = [link for link in page.links if link.origin == "json_ld"]
    assert json_ld[0].price == 19.99


@pytest.mark.asyncio
async def test_page_fetcher_caps_body_and_survives_errors():
    stub = SerpStub(pages={"https://www.walmart.com/big": "x" * 5000})
    fetcher = PageFetcher(stub.client(), max_bytes=1000)

    assert len(await fetcher.fetch("https://www.walmart.com/big")) == 1000
    assert await fetcher.fetch("https://www.walmart.com/missing") is None


def test_parse_page_tolerates_odd_json_ld_urls():
    products = [
        {"@type": "Product", "url": ["/p/mixer/-/A-12345678", "/p/other/-/A-87654321"], "offers": {"price": 289}},
        {"@type": "Product", "url": {"@id": "/p/broken"}, "offers": {"url": "/p/offer/-/A-24681357"}},
        {"@type": "Product", "url": 42},
    ]
    html = "".join(
        f'<script type="application/ld+json">{json.dumps(product)}</script>' for product in products
    )

    page = parse_page(html, "https://www.target.com/s?searchTerm=mixer")

    assert [link.url for link in page.links] == [
        "https://www.target.com/p/mixer/-/A-12345678",
        "https://www.target.com/p/offer/-/A-24681357",
    ]
    assert page.links[0].price == 289


@pytest.mark.asyncio
async def test_catalog_page_scan_reads_list_valued_json_ld_url():
    url = "https://www.target.com/s?searchTerm=mixer"
    product = {"@type": "Product", "url": ["/p/mixer/-/A-12345678"], "offers": {"price": "289.00"}}
    stub = SerpStub(pages={url: f'<script type="application/ld+json">{json.dumps(product)}</script>'})
    resolver = DirectUrlResolver(None, PageFetcher(stub.client()))
    candidate = Candidate(title="Stand Mixer", price=289.0, source="Target", link=url)

    resolution = await resolver.resolve(_scored(candidate), target_price=300)

    assert resolution.step == "page_scan"
    assert resolution.url == "https://www.target.com/p/mixer/-/A-12345678"

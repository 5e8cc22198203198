import logging
import math
import re

import httpx

from pricefinder.config import settings
from pricefinder.errors import (
    ConfigurationUnavailable,
    NetworkTimeout,
    ParseFailure,
    PricingError,
    RateLimited,
)
from pricefinder.schemas.product_search import Candidate, MerchantOffer
from pricefinder.services.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

PRICE_RE = re.compile(r"\$?\s*(\d{1,3}(?:,\d{3})+|\d+)(\.\d{1,2})?")
NO_RESULTS_MARKERS = ("hasn't returned any results", "no results")


def parse_price(value) -> float | None:
    """Parse "$1,299.99", 1299.99 or "1299" to a positive float; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        match = PRICE_RE.search(str(value))
        if not match:
            return None
        price = float(match.group(1).replace(",", "") + (match.group(2) or ""))
    if not math.isfinite(price) or price <= 0:
        return None
    return round(price, 2)


class ShoppingSearchClient:
    """SerpAPI calls: Google Shopping search, product detail offers and site-restricted web search."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        retry_policy: RetryPolicy | None = None,
        base_url: str | None = None,
    ):
        self.client = client
        self.api_key = settings.serpapi_api_key if api_key is None else api_key
        self.retry_policy = retry_policy or RetryPolicy()
        self.base_url = base_url or settings.serpapi_base_url

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def search(
        self,
        query: str,
        price_window: tuple[float, float] | None = None,
        excluded_sites: tuple[str, ...] = (),
        timeout: float | None = None,
        strategy: str | None = None,
    ) -> list[Candidate]:
        """Search Google Shopping and normalize the listings into candidates."""
        q = query
        if excluded_sites:
            q = f"{query} " + " ".join(f"-site:{site}" for site in excluded_sites)
        params = {
            "engine": "google_shopping",
            "q": q,
            "gl": settings.search_country,
            "hl": settings.search_language,
            "num": settings.results_per_query,
        }
        if price_window:
            low, high = price_window
            params["tbs"] = f"mr:1,price:1,ppr_min:{low:g},ppr_max:{high:g}"

        data = await self._get(params, timeout)
        items = list(data.get("shopping_results") or []) + list(data.get("inline_shopping_results") or [])
        results = []
        for item in items:
            candidate = self._to_candidate(item, strategy)
            if candidate is not None:
                results.append(candidate)

        logger.info("SerpAPI returned %d results for: %s", len(results), query)
        return results

    async def product_offers(self, product_id: str, timeout: float | None = None) -> list[MerchantOffer]:
        """Online sellers listed on the provider's product detail page."""
        params = {
            "engine": "google_product",
            "product_id": product_id,
            "offers": 1,
            "gl": settings.search_country,
            "hl": settings.search_language,
        }
        data = await self._get(params, timeout)
        sellers = (data.get("sellers_results") or {}).get("online_sellers") or []
        offers = []
        for seller in sellers:
            if not isinstance(seller, dict):
                continue
            link = seller.get("direct_link") or seller.get("link")
            if not link:
                continue
            offers.append(MerchantOffer(
                name=seller.get("name", ""),
                link=link,
                price=parse_price(seller.get("base_price") or seller.get("total_price")),
            ))
        return offers

    async def site_search(self, domain: str, title: str, timeout: float | None = None) -> list[str]:
        """Organic result links for `site:<domain> "<title>"`."""
        params = {
            "engine": "google",
            "q": f'site:{domain} "{title}"',
            "gl": settings.search_country,
            "hl": settings.search_language,
            "num": 10,
        }
        data = await self._get(params, timeout)
        return [r["link"] for r in data.get("organic_results") or [] if isinstance(r, dict) and r.get("link")]

    async def _get(self, params: dict, timeout: float | None) -> dict:
        if not self.api_key:
            raise ConfigurationUnavailable("SerpAPI key is not configured")
        params = {**params, "api_key": self.api_key}
        return await self.retry_policy.call(self._request, params, timeout)

    async def _request(self, params: dict, timeout: float | None) -> dict:
        try:
            resp = await self.client.get(
                self.base_url, params=params, timeout=timeout or settings.timeout_medium
            )
        except httpx.TimeoutException as exc:
            raise NetworkTimeout(f"SerpAPI timed out ({params.get('engine')})") from exc
        except httpx.TransportError as exc:
            raise NetworkTimeout(f"SerpAPI transport error: {exc}") from exc

        if resp.status_code == 429:
            raise RateLimited("SerpAPI rate limit reached")
        if resp.status_code in (401, 403):
            raise ConfigurationUnavailable(f"SerpAPI rejected the key ({resp.status_code})")
        if resp.status_code >= 500:
            raise NetworkTimeout(f"SerpAPI server error {resp.status_code}")
        if resp.status_code >= 400:
            raise PricingError(f"SerpAPI request failed with {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise ParseFailure("SerpAPI returned malformed JSON") from exc
        if not isinstance(data, dict):
            raise ParseFailure("SerpAPI returned an unexpected payload")

        error = data.get("error")
        if error:
            if any(marker in str(error).lower() for marker in NO_RESULTS_MARKERS):
                return {}
            raise ParseFailure(f"SerpAPI error: {error}")
        return data

    @staticmethod
    def _to_candidate(item, strategy: str | None) -> Candidate | None:
        if not isinstance(item, dict):
            return None
        title = (item.get("title") or "").strip()
        price = parse_price(item.get("extracted_price"))
        if price is None:
            price = parse_price(item.get("price"))
        if not title or price is None:
            return None

        merchants = []
        for offer in item.get("offers") or item.get("multiple_sources") or []:
            if isinstance(offer, dict) and offer.get("link"):
                merchants.append(MerchantOffer(
                    name=offer.get("name") or offer.get("source") or "",
                    link=offer["link"],
                    price=parse_price(offer.get("extracted_price") or offer.get("price")),
                ))

        return Candidate(
            title=title,
            price=price,
            source=(item.get("source") or "").strip(),
            link=item.get("link") or item.get("product_link"),
            product_id=str(item["product_id"]) if item.get("product_id") else None,
            merchants=merchants,
            thumbnail_url=item.get("thumbnail"),
            strategy=strategy,
        )
